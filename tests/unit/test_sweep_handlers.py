"""Tests for the admin sweep commands."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from team_sweeper.bot.handlers.sweep import (
    _parse_range_days,
    check_account_command,
    sweep_command,
    sweep_status_command,
)
from team_sweeper.config.constants import AccountCheckStatus, SweepTrigger
from team_sweeper.models.check_result import AccountCheckResult
from team_sweeper.models.sweep import SweepReport
from team_sweeper.tasks.scheduler import SWEEPER_KEY

ADMIN_ID = 1001


def _run(coro):
    """Run a coroutine synchronously for testing."""
    return asyncio.run(coro)


def _update(user_id=ADMIN_ID, chat_id=555):
    update = MagicMock()
    update.effective_user.id = user_id
    update.effective_chat.id = chat_id
    update.effective_message.reply_text = AsyncMock()
    return update


def _context(sweeper=None, args=None):
    context = MagicMock()
    context.args = args or []
    context.application.bot_data = {SWEEPER_KEY: sweeper} if sweeper else {}
    context.bot.send_message = AsyncMock()
    return context


def _sweeper(running=False, last_report=None):
    sweeper = MagicMock()
    sweeper.running = running
    sweeper.last_report = last_report
    sweeper.settings.sweeper_range_days = 30
    sweeper.run_once = AsyncMock(return_value=None)
    sweeper.check_account = AsyncMock(return_value=None)
    return sweeper


def _replied(update):
    return update.effective_message.reply_text.call_args.args[0]


@pytest.mark.parametrize(
    "args, expected",
    [(None, None), ([], None), (["7"], 7), (["15"], 15), (["30"], 30), (["14"], None), (["abc"], None)],
)
def test_parse_range_days(args, expected):
    assert _parse_range_days(args) == expected


class TestAdminGuard:

    @pytest.mark.parametrize("handler", [sweep_command, sweep_status_command, check_account_command])
    def test_non_admin_is_rejected(self, handler):
        sweeper = _sweeper()
        update = _update(user_id=42)

        _run(handler(update, _context(sweeper, ["1"])))

        assert _replied(update) == "❌ 您没有权限使用此命令"
        sweeper.run_once.assert_not_awaited()
        sweeper.check_account.assert_not_awaited()


class TestSweepCommand:

    def test_not_initialized(self):
        update = _update()
        _run(sweep_command(update, _context()))
        assert _replied(update) == "⚠️ 巡检任务尚未初始化"

    def test_busy_sweeper_rejects_trigger(self):
        sweeper = _sweeper(running=True)
        update = _update()
        context = _context(sweeper)

        _run(sweep_command(update, context))

        assert _replied(update) == "⏳ 巡检正在进行中，请稍后再试"
        context.application.create_task.assert_not_called()

    def test_starts_background_sweep(self):
        sweeper = _sweeper()
        update = _update()
        context = _context(sweeper, ["7"])

        _run(sweep_command(update, context))

        assert _replied(update) == "🔎 开始巡检近 7 天的账号，完成后通知"
        context.application.create_task.assert_called_once()
        coro = context.application.create_task.call_args.args[0]
        assert context.application.create_task.call_args.kwargs["update"] is update
        coro.close()

    def test_background_sweep_sends_report(self):
        report = SweepReport(range_days=15, total_eligible=2, checked_total=2, trigger=SweepTrigger.MANUAL)
        sweeper = _sweeper()
        sweeper.run_once.return_value = report
        update = _update(chat_id=777)
        context = _context(sweeper, ["15"])

        _run(sweep_command(update, context))
        _run(context.application.create_task.call_args.args[0])

        sweeper.run_once.assert_awaited_once_with(range_days=15, trigger=SweepTrigger.MANUAL)
        kwargs = context.bot.send_message.call_args.kwargs
        assert kwargs["chat_id"] == 777
        assert "近 15 天" in kwargs["text"]

    def test_invalid_range_uses_configured_default(self):
        sweeper = _sweeper()
        update = _update()
        context = _context(sweeper, ["14"])

        _run(sweep_command(update, context))
        _run(context.application.create_task.call_args.args[0])

        assert _replied(update) == "🔎 开始巡检近 30 天的账号，完成后通知"
        sweeper.run_once.assert_awaited_once_with(range_days=None, trigger=SweepTrigger.MANUAL)
        assert "巡检未完成" in context.bot.send_message.call_args.kwargs["text"]


class TestSweepStatusCommand:

    def test_idle_without_history(self):
        update = _update()
        _run(sweep_status_command(update, _context(_sweeper())))
        assert _replied(update) == "💤 当前空闲\n\n暂无巡检记录"

    def test_running_with_last_report(self):
        report = SweepReport(range_days=30, total_eligible=1, checked_total=1)
        update = _update()
        _run(sweep_status_command(update, _context(_sweeper(running=True, last_report=report))))

        text = _replied(update)
        assert text.startswith("⏳ 巡检进行中")
        assert "账号巡检报告" in text


class TestCheckAccountCommand:

    @pytest.mark.parametrize("args", [[], ["abc"]])
    def test_usage(self, args):
        sweeper = _sweeper()
        update = _update()
        _run(check_account_command(update, _context(sweeper, args)))
        assert _replied(update) == "用法: /check_account <账号ID>"
        sweeper.check_account.assert_not_awaited()

    def test_missing_account(self):
        update = _update()
        _run(check_account_command(update, _context(_sweeper(), ["12"])))
        assert _replied(update) == "❌ 账号 12 不存在"

    def test_reports_result(self):
        sweeper = _sweeper()
        sweeper.check_account.return_value = AccountCheckResult(
            id=12,
            email="user12@team.test",
            created_at=None,
            expire_at=None,
            status=AccountCheckStatus.EXPIRED,
            reason="Token expired",
        )
        update = _update()

        _run(check_account_command(update, _context(sweeper, ["12"])))

        sweeper.check_account.assert_awaited_once_with(12)
        text = _replied(update)
        assert "user12@team.test" in text
        assert "过期" in text
        assert "Token expired" in text
