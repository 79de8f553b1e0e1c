"""格式化工具"""

from team_sweeper.config.constants import STATUS_EMOJI, AccountCheckStatus, SweepTrigger
from team_sweeper.core.timezone import format_datetime
from team_sweeper.models.check_result import AccountCheckResult
from team_sweeper.models.sweep import SweepReport

STATUS_NAMES = {
    AccountCheckStatus.NORMAL: "正常",
    AccountCheckStatus.EXPIRED: "过期",
    AccountCheckStatus.BANNED: "封号",
    AccountCheckStatus.FAILED: "失败",
}


def format_sweep_report(report: SweepReport) -> str:
    """
    格式化巡检报告

    Args:
        report: 巡检报告

    Returns:
        格式化后的文本
    """
    trigger = "手动" if report.trigger == SweepTrigger.MANUAL else "定时"
    lines = [
        f"🔎 账号巡检报告（{trigger}）",
        "",
        f"📅 时间窗口: 近 {report.range_days} 天",
        f"📦 符合条件: {report.total_eligible} 个",
        f"🧪 本轮检查: {report.checked_total} 个",
    ]

    if report.truncated:
        lines.append(f"⏭️ 超出上限跳过: {report.skipped} 个")

    lines.append("")
    for status in AccountCheckStatus:
        lines.append(f"{STATUS_EMOJI[status]} {STATUS_NAMES[status]}: {report.summary.get(status, 0)}")
    lines.append(f"🔄 自动刷新 token: {report.refreshed_count}")

    if report.finished_at:
        lines.append("")
        lines.append(f"🕐 完成时间: {format_datetime(report.finished_at)}")

    return "\n".join(lines)


def format_check_result(result: AccountCheckResult) -> str:
    """格式化单个账号检查结果"""
    lines = [
        f"{STATUS_EMOJI[result.status]} {result.email or f'账号{result.id}'} • {STATUS_NAMES[result.status]}",
        f"🏷️ ID: {result.id}",
    ]
    if result.expire_at:
        lines.append(f"⌛ 到期时间: {result.expire_at}")
    if result.refreshed:
        lines.append("🔄 已使用 refresh token 刷新")
    if result.reason:
        lines.append(f"📝 {result.reason}")
    return "\n".join(lines)
