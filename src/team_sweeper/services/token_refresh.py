"""Token 刷新服务"""

import logging

from curl_cffi.requests import AsyncSession, errors

from team_sweeper.config.constants import (
    OPENAI_CLIENT_ID,
    OPENAI_OAUTH_SCOPE,
    OPENAI_TOKEN_URL,
    REFRESH_TIMEOUT,
)
from team_sweeper.config.settings import get_settings
from team_sweeper.core.exceptions import (
    InvalidInputError,
    UpstreamRejectedError,
    UpstreamUnreachableError,
)
from team_sweeper.models.check_result import TokenPair

logger = logging.getLogger(__name__)


def _rejected_message(data: object) -> str:
    """提取 OAuth 错误信息"""
    if isinstance(data, dict):
        error = data.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if data.get("error_description"):
            return str(data["error_description"])
        if isinstance(error, str) and error:
            return error
    return "刷新 token 失败"


class TokenRefreshService:
    """使用 refresh token 换取新的 access token"""

    def __init__(self):
        self.settings = get_settings()

    async def refresh(self, refresh_token: str | None) -> TokenPair:
        """
        刷新 access token

        Args:
            refresh_token: 账号保存的 refresh token

        Returns:
            新的 token；上游未轮换 refresh token 时沿用传入值

        Raises:
            InvalidInputError: 未配置 refresh token
            UpstreamRejectedError: 上游拒绝或未返回有效凭证
            UpstreamUnreachableError: 网络错误
        """
        normalized = (refresh_token or "").strip()
        if not normalized:
            raise InvalidInputError("该账号未配置 refresh token")

        form_data = {
            "grant_type": "refresh_token",
            "client_id": OPENAI_CLIENT_ID,
            "refresh_token": normalized,
            "scope": OPENAI_OAUTH_SCOPE,
        }
        proxy_kwargs = self.settings.curl_proxy or {}

        async with AsyncSession(impersonate=self.settings.impersonate_browser, **proxy_kwargs) as session:
            try:
                response = await session.post(
                    OPENAI_TOKEN_URL,
                    data=form_data,
                    headers={"Content-Type": "application/x-www-form-urlencoded"},
                    timeout=REFRESH_TIMEOUT,
                )
            except errors.RequestsError as e:
                logger.warning(f"刷新 token 网络错误: {e}")
                raise UpstreamUnreachableError(str(e) or "刷新 token 网络错误") from e

        try:
            data = response.json()
        except ValueError:
            data = None

        if response.status_code != 200:
            message = _rejected_message(data)
            logger.debug(f"刷新 token 被拒绝: HTTP {response.status_code} - {message}")
            raise UpstreamRejectedError(message)

        access_token = data.get("access_token") if isinstance(data, dict) else None
        if not access_token:
            raise UpstreamRejectedError("刷新 token 失败，未返回有效凭证")

        return TokenPair(
            access_token=access_token,
            refresh_token=data.get("refresh_token") or normalized,
        )
