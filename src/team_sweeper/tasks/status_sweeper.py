"""账号状态巡检任务"""

import asyncio
import logging
from collections.abc import Callable

from telegram.ext import Application

from team_sweeper.config.constants import (
    SWEEPER_ALLOWED_RANGE_DAYS,
    SWEEPER_LABEL,
    SweepTrigger,
)
from team_sweeper.config.settings import Settings, get_settings
from team_sweeper.core.timezone import now, utc_now
from team_sweeper.models.account import GptAccount
from team_sweeper.models.check_result import AccountCheckResult
from team_sweeper.models.sweep import SweepReport
from team_sweeper.repositories.account_repository import AccountRepository
from team_sweeper.services.account_checker import AccountStatusChecker
from team_sweeper.utils.concurrency import clamp_concurrency, each_with_concurrency

logger = logging.getLogger(__name__)

INITIAL_JOB_NAME = "team_status_sweeper_initial"
INTERVAL_JOB_NAME = "team_status_sweeper_interval"


class StatusSweeper:
    """
    账号状态巡检协调器

    同一时间只允许一轮巡检：定时触发和管理员手动触发都走 run_once，
    巡检进行中再次触发会被直接丢弃（不排队）。
    """

    def __init__(
        self,
        settings: Settings | None = None,
        account_repo: AccountRepository | None = None,
        checker: AccountStatusChecker | None = None,
    ):
        self.settings = settings or get_settings()
        self.account_repo = account_repo or AccountRepository()
        self.checker = checker or AccountStatusChecker(account_repo=self.account_repo)
        self.last_report: SweepReport | None = None
        self._lock = asyncio.Lock()

    @property
    def running(self) -> bool:
        """是否有巡检正在进行"""
        return self._lock.locked()

    async def run_once(
        self,
        range_days: int | None = None,
        trigger: SweepTrigger = SweepTrigger.SCHEDULED,
    ) -> SweepReport | None:
        """
        执行一轮巡检

        Args:
            range_days: 时间窗口（天），不在 7/15/30 内时使用配置值
            trigger: 触发方式

        Returns:
            巡检报告；巡检进行中被跳过或本轮失败时返回 None
        """
        if self._lock.locked():
            logger.debug(f"{SWEEPER_LABEL} 上一轮巡检尚未结束，跳过本次触发 ({trigger.value})")
            return None

        async with self._lock:
            try:
                report = await self._sweep(range_days, trigger)
            except Exception as e:
                logger.error(f"{SWEEPER_LABEL} run failed: {e}", exc_info=True)
                return None

        self.last_report = report
        return report

    async def _sweep(self, range_days: int | None, trigger: SweepTrigger) -> SweepReport:
        if range_days not in SWEEPER_ALLOWED_RANGE_DAYS:
            range_days = self.settings.sweeper_range_days

        started_at = now()
        sample = await self.account_repo.load_sample(range_days, self.settings.sweeper_max_accounts)

        report = SweepReport(
            range_days=range_days,
            total_eligible=sample.total_eligible,
            checked_total=len(sample.accounts),
            trigger=trigger,
            truncated=sample.truncated,
            skipped=sample.skipped,
            started_at=started_at,
        )
        current = utc_now()

        async def check_one(account: GptAccount, _index: int):
            result = await self.checker.check(account, current)
            if result.status in report.summary:
                report.summary[result.status] += 1
            if result.refreshed:
                report.refreshed_count += 1

        await each_with_concurrency(
            sample.accounts,
            clamp_concurrency(self.settings.sweeper_concurrency),
            check_one,
        )

        report.finished_at = now()
        logger.info(f"{SWEEPER_LABEL} run completed: {report.to_log_dict()}")
        return report

    async def check_account(self, account_id: int) -> AccountCheckResult | None:
        """
        检查单个账号（管理员手动检查，不受巡检互斥限制）

        Returns:
            检查结果，账号不存在返回 None
        """
        account = await self.account_repo.get_by_id(account_id)
        if not account:
            return None
        return await self.checker.check(account, utc_now())


def register_status_sweeper(app: Application, sweeper: StatusSweeper) -> Callable[[], None]:
    """
    注册账号状态巡检任务

    首次巡检在 initial_delay_ms 后执行，之后每 interval_seconds 执行一次。

    Args:
        app: Bot 应用实例
        sweeper: 巡检协调器

    Returns:
        停止函数：移除两个定时任务（不会中断进行中的巡检）
    """
    settings = sweeper.settings

    if not settings.sweeper_enabled:
        logger.info(f"{SWEEPER_LABEL} disabled")
        return lambda: None

    async def sweep_job_callback(context):
        """巡检任务回调"""
        await sweeper.run_once(trigger=SweepTrigger.SCHEDULED)

    delay_seconds = settings.sweeper_initial_delay_ms / 1000
    interval = settings.sweeper_interval_seconds

    app.job_queue.run_once(
        sweep_job_callback,
        when=delay_seconds,
        name=INITIAL_JOB_NAME,
    )
    app.job_queue.run_repeating(
        sweep_job_callback,
        interval=interval,
        first=interval,
        name=INTERVAL_JOB_NAME,
    )

    logger.info(
        f"{SWEEPER_LABEL} started: "
        f"rangeDays={settings.sweeper_range_days}, intervalSeconds={interval}, "
        f"initialDelayMs={settings.sweeper_initial_delay_ms}, "
        f"concurrency={settings.sweeper_concurrency}, maxAccounts={settings.sweeper_max_accounts}"
    )

    def stop():
        # 首次任务执行后已被调度器移除，只移除仍在队列中的任务
        for name in (INITIAL_JOB_NAME, INTERVAL_JOB_NAME):
            for job in app.job_queue.get_jobs_by_name(name):
                job.schedule_removal()
        logger.info(f"{SWEEPER_LABEL} stopped")

    return stop
