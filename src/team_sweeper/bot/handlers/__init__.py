"""Bot 处理器模块"""

from team_sweeper.bot.handlers.sweep import (
    check_account_handler,
    sweep_handler,
    sweep_status_handler,
)

__all__ = [
    "sweep_handler",
    "sweep_status_handler",
    "check_account_handler",
]
