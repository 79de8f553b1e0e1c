"""账号状态检查服务

检查顺序（命中即返回）：

1. 已标记封号 → banned，不发起网络请求
2. expire_at 已过期 → expired，不发起网络请求
3. 探测：成功 → normal；封号 → 标记封号后 banned；401 → 尝试刷新；其他 → failed
4. 刷新：只刷新一次、只复检一次，复检结果直接作为最终状态
"""

import logging
from datetime import datetime

from team_sweeper.config.constants import SWEEPER_LABEL, AccountCheckStatus
from team_sweeper.core.exceptions import (
    ProbeDeactivatedError,
    ProbeError,
    ProbeUnauthorizedError,
)
from team_sweeper.core.timezone import utc_now
from team_sweeper.models.account import GptAccount
from team_sweeper.models.check_result import AccountCheckResult, TokenPair
from team_sweeper.repositories.account_repository import AccountRepository
from team_sweeper.services.status_probe import StatusProber
from team_sweeper.services.token_refresh import TokenRefreshService
from team_sweeper.utils.expire_at import is_expire_at_passed

logger = logging.getLogger(__name__)

REASON_EXPIRE_AT_PASSED = "expireAt 已过期"
REASON_NO_REFRESH_TOKEN = "Token 已过期或无效（未配置 refresh token）"
REASON_CHECK_FAILED = "检查失败"
REASON_REFRESH_FAILED = "Token 已过期，refresh token 刷新失败"
REASON_REFRESHED = "Token 已过期，已使用 refresh token 自动刷新"
REASON_STILL_INVALID = "Token 已过期，已尝试刷新但仍无效"
REASON_RECHECK_FAILED = "Token 已过期，已刷新但校验失败"


class AccountStatusChecker:
    """账号状态检查器"""

    def __init__(
        self,
        account_repo: AccountRepository | None = None,
        prober: StatusProber | None = None,
        refresh_service: TokenRefreshService | None = None,
    ):
        self.account_repo = account_repo or AccountRepository()
        self.prober = prober or StatusProber()
        self.refresh_service = refresh_service or TokenRefreshService()

    async def check(self, account: GptAccount, current: datetime | None = None) -> AccountCheckResult:
        """
        检查单个账号状态

        Args:
            account: 账号模型
            current: 参考时间（用于判断 expire_at），默认当前时间

        Returns:
            检查结果（各种失败都会转换为结果状态，不抛出异常）
        """
        current = current or utc_now()

        if account.is_banned:
            return self._result(account, AccountCheckStatus.BANNED)

        if is_expire_at_passed(account.expire_at, current):
            return self._result(account, AccountCheckStatus.EXPIRED, reason=REASON_EXPIRE_AT_PASSED)

        try:
            await self.prober.probe(account)
        except ProbeDeactivatedError as e:
            await self._mark_banned(account)
            return self._result(account, AccountCheckStatus.BANNED, reason=e.message or None)
        except ProbeUnauthorizedError as e:
            if not (account.refresh_token or "").strip():
                return self._result(
                    account,
                    AccountCheckStatus.EXPIRED,
                    reason=e.message or REASON_NO_REFRESH_TOKEN,
                )
            return await self._refresh_and_recheck(account)
        except ProbeError as e:
            return self._result(account, AccountCheckStatus.FAILED, reason=e.message or REASON_CHECK_FAILED)
        except Exception as e:
            logger.error(f"{SWEEPER_LABEL} 账号 {account.id} 探测异常: {e}", exc_info=True)
            return self._result(account, AccountCheckStatus.FAILED, reason=str(e) or REASON_CHECK_FAILED)

        return self._result(account, AccountCheckStatus.NORMAL)

    async def _refresh_and_recheck(self, account: GptAccount) -> AccountCheckResult:
        """使用 refresh token 刷新后复检一次"""
        try:
            tokens = await self.refresh_service.refresh(account.refresh_token)
        except Exception as e:
            message = str(e)
            reason = f"{REASON_REFRESH_FAILED}：{message}" if message else REASON_REFRESH_FAILED
            logger.debug(f"{SWEEPER_LABEL} 账号 {account.id} 刷新 token 失败: {message}")
            return self._result(account, AccountCheckStatus.EXPIRED, reason=reason)

        persisted = await self._persist_tokens(account, tokens)

        try:
            await self.prober.probe(account, persisted or tokens)
        except ProbeDeactivatedError as e:
            await self._mark_banned(account, after_refresh=True)
            return self._result(account, AccountCheckStatus.BANNED, refreshed=True, reason=e.message or None)
        except ProbeUnauthorizedError as e:
            return self._result(
                account,
                AccountCheckStatus.EXPIRED,
                refreshed=True,
                reason=e.message or REASON_STILL_INVALID,
            )
        except ProbeError as e:
            return self._result(
                account,
                AccountCheckStatus.FAILED,
                refreshed=True,
                reason=e.message or REASON_RECHECK_FAILED,
            )
        except Exception as e:
            logger.error(f"{SWEEPER_LABEL} 账号 {account.id} 刷新后复检异常: {e}", exc_info=True)
            return self._result(
                account,
                AccountCheckStatus.FAILED,
                refreshed=True,
                reason=str(e) or REASON_RECHECK_FAILED,
            )

        logger.info(f"{SWEEPER_LABEL} 账号 {account.id} ({account.email}) 已使用 refresh token 刷新")
        return self._result(account, AccountCheckStatus.NORMAL, refreshed=True, reason=REASON_REFRESHED)

    async def _mark_banned(self, account: GptAccount, after_refresh: bool = False) -> None:
        """标记封号（失败只记录警告，不影响检查结果）"""
        try:
            await self.account_repo.mark_banned(account.id)
        except Exception as e:
            suffix = " after refresh" if after_refresh else ""
            logger.warning(f"{SWEEPER_LABEL} mark banned failed{suffix}: 账号 {account.id} - {e}")

    async def _persist_tokens(self, account: GptAccount, tokens: TokenPair) -> TokenPair | None:
        """保存刷新后的 token（失败只记录警告）"""
        try:
            return await self.account_repo.update_tokens(account.id, tokens)
        except Exception as e:
            logger.warning(f"{SWEEPER_LABEL} persist tokens failed: 账号 {account.id} - {e}")
            return None

    @staticmethod
    def _result(
        account: GptAccount,
        status: AccountCheckStatus,
        refreshed: bool = False,
        reason: str | None = None,
    ) -> AccountCheckResult:
        return AccountCheckResult(
            id=account.id,
            email=account.email,
            created_at=account.created_at,
            expire_at=account.expire_at or None,
            status=status,
            refreshed=refreshed,
            reason=reason,
        )
