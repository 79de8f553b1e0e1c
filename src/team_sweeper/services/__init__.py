"""业务服务模块"""

from team_sweeper.services.account_checker import AccountStatusChecker
from team_sweeper.services.status_probe import StatusProber
from team_sweeper.services.token_refresh import TokenRefreshService

__all__ = [
    "AccountStatusChecker",
    "StatusProber",
    "TokenRefreshService",
]
