"""数据模型模块"""

from team_sweeper.models.account import GptAccount
from team_sweeper.models.base import BaseEntity
from team_sweeper.models.check_result import AccountCheckResult, TokenPair
from team_sweeper.models.sweep import AccountSample, SweepReport

__all__ = [
    "BaseEntity",
    "GptAccount",
    "AccountCheckResult",
    "TokenPair",
    "AccountSample",
    "SweepReport",
]
