"""账号检查结果模型"""

from dataclasses import dataclass
from datetime import datetime

from team_sweeper.config.constants import AccountCheckStatus


@dataclass(frozen=True)
class TokenPair:
    """access token 与 refresh token"""

    access_token: str
    refresh_token: str | None


@dataclass
class AccountCheckResult:
    """单个账号的检查结果"""

    id: int
    email: str
    created_at: datetime
    expire_at: str | None
    status: AccountCheckStatus
    refreshed: bool = False
    reason: str | None = None
