"""巡检运行模型"""

from dataclasses import dataclass, field
from datetime import datetime

from team_sweeper.config.constants import AccountCheckStatus, SweepTrigger
from team_sweeper.models.account import GptAccount


def empty_summary() -> dict[AccountCheckStatus, int]:
    """各状态计数（覆盖全部状态）"""
    return {status: 0 for status in AccountCheckStatus}


@dataclass
class AccountSample:
    """一轮巡检的账号抽样"""

    total_eligible: int
    accounts: list[GptAccount]

    @property
    def truncated(self) -> bool:
        """是否因数量上限被截断"""
        return self.total_eligible > len(self.accounts)

    @property
    def skipped(self) -> int:
        """被跳过的账号数"""
        if not self.truncated:
            return 0
        return max(0, self.total_eligible - len(self.accounts))


@dataclass
class SweepReport:
    """一轮巡检的汇总报告"""

    range_days: int
    total_eligible: int
    checked_total: int
    trigger: SweepTrigger = SweepTrigger.SCHEDULED
    summary: dict[AccountCheckStatus, int] = field(default_factory=empty_summary)
    refreshed_count: int = 0
    truncated: bool = False
    skipped: int = 0
    started_at: datetime | None = None
    finished_at: datetime | None = None

    def to_log_dict(self) -> dict:
        """转换为日志输出用的字典"""
        return {
            "trigger": self.trigger.value,
            "rangeDays": self.range_days,
            "totalEligible": self.total_eligible,
            "checkedTotal": self.checked_total,
            "summary": {status.value: count for status, count in self.summary.items()},
            "refreshedCount": self.refreshed_count,
            "truncated": self.truncated,
            "skipped": self.skipped,
        }
