"""工具函数模块"""

from team_sweeper.utils.concurrency import clamp_concurrency, each_with_concurrency
from team_sweeper.utils.expire_at import is_expire_at_passed, parse_expire_at
from team_sweeper.utils.formatter import format_check_result, format_sweep_report

__all__ = [
    "clamp_concurrency",
    "each_with_concurrency",
    "is_expire_at_passed",
    "parse_expire_at",
    "format_check_result",
    "format_sweep_report",
]
