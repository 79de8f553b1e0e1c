"""数据访问层模块"""

from team_sweeper.repositories.account_repository import AccountRepository
from team_sweeper.repositories.base import BaseRepository

__all__ = [
    "BaseRepository",
    "AccountRepository",
]
