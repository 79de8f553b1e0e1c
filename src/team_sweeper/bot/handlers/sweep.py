"""巡检管理命令处理器"""

import logging

from telegram import Update
from telegram.ext import CommandHandler, ContextTypes

from team_sweeper.bot.decorators import require_admin
from team_sweeper.config.constants import SWEEPER_ALLOWED_RANGE_DAYS, SweepTrigger
from team_sweeper.tasks.scheduler import get_sweeper
from team_sweeper.tasks.status_sweeper import StatusSweeper
from team_sweeper.utils.formatter import format_check_result, format_sweep_report

logger = logging.getLogger(__name__)


def _parse_range_days(args: list[str] | None) -> int | None:
    """解析 /sweep 的时间窗口参数"""
    if not args:
        return None
    try:
        value = int(args[0])
    except ValueError:
        return None
    return value if value in SWEEPER_ALLOWED_RANGE_DAYS else None


async def _run_and_reply(
    sweeper: StatusSweeper,
    context: ContextTypes.DEFAULT_TYPE,
    chat_id: int,
    range_days: int | None,
):
    """后台执行巡检并回复结果"""
    report = await sweeper.run_once(range_days=range_days, trigger=SweepTrigger.MANUAL)
    if report is None:
        text = "⚠️ 巡检未完成：已有巡检在进行或本轮执行失败，请查看日志"
    else:
        text = format_sweep_report(report)
    await context.bot.send_message(chat_id=chat_id, text=text)


@require_admin
async def sweep_command(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """手动触发巡检: /sweep [7|15|30]"""
    sweeper = get_sweeper(context.application)
    if sweeper is None:
        await update.effective_message.reply_text("⚠️ 巡检任务尚未初始化")
        return

    if sweeper.running:
        await update.effective_message.reply_text("⏳ 巡检正在进行中，请稍后再试")
        return

    range_days = _parse_range_days(context.args)
    days_text = range_days or sweeper.settings.sweeper_range_days
    logger.info(f"管理员 {update.effective_user.id} 手动触发巡检: 近 {days_text} 天")

    await update.effective_message.reply_text(f"🔎 开始巡检近 {days_text} 天的账号，完成后通知")

    # 巡检耗时较长，放到后台执行，避免阻塞更新处理
    context.application.create_task(
        _run_and_reply(sweeper, context, update.effective_chat.id, range_days),
        update=update,
    )


@require_admin
async def sweep_status_command(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """查看巡检状态: /sweep_status"""
    sweeper = get_sweeper(context.application)
    if sweeper is None:
        await update.effective_message.reply_text("⚠️ 巡检任务尚未初始化")
        return

    state = "⏳ 巡检进行中" if sweeper.running else "💤 当前空闲"
    if sweeper.last_report is None:
        text = f"{state}\n\n暂无巡检记录"
    else:
        text = f"{state}\n\n{format_sweep_report(sweeper.last_report)}"

    await update.effective_message.reply_text(text)


@require_admin
async def check_account_command(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """检查单个账号: /check_account <id>"""
    sweeper = get_sweeper(context.application)
    if sweeper is None:
        await update.effective_message.reply_text("⚠️ 巡检任务尚未初始化")
        return

    try:
        account_id = int(context.args[0]) if context.args else None
    except ValueError:
        account_id = None

    if account_id is None:
        await update.effective_message.reply_text("用法: /check_account <账号ID>")
        return

    result = await sweeper.check_account(account_id)
    if result is None:
        await update.effective_message.reply_text(f"❌ 账号 {account_id} 不存在")
        return

    logger.info(f"管理员 {update.effective_user.id} 检查账号 {account_id}: {result.status.value}")
    await update.effective_message.reply_text(format_check_result(result))


sweep_handler = CommandHandler("sweep", sweep_command)
sweep_status_handler = CommandHandler("sweep_status", sweep_status_command)
check_account_handler = CommandHandler("check_account", check_account_command)
