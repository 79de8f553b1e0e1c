"""ChatGPT 站点适配器"""

import logging

from curl_cffi.requests import AsyncSession, errors

from team_sweeper.config.constants import CHATGPT_API_BASE, DEFAULT_HTTP_HEADERS, PROBE_TIMEOUT
from team_sweeper.config.settings import get_settings
from team_sweeper.core.exceptions import classify_probe_error
from team_sweeper.models.account import GptAccount

logger = logging.getLogger(__name__)


def extract_error_message(data: object, status_code: int) -> str:
    """
    从上游错误响应中提取错误信息

    兼容 {"detail": "..."}、{"detail": {"code": ..., "message": ...}}、
    {"error": {"code": ..., "message": ...}} 等格式。
    """
    if isinstance(data, dict):
        for key in ("detail", "error"):
            value = data.get(key)
            if isinstance(value, str) and value:
                return value
            if isinstance(value, dict):
                message = value.get("message") or ""
                code = value.get("code") or ""
                if code and message and code not in message:
                    return f"{code}: {message}"
                if message or code:
                    return str(message or code)
        if isinstance(data.get("message"), str) and data["message"]:
            return data["message"]
    return f"HTTP {status_code}"


class ChatGPTAdapter:
    """ChatGPT 站点适配器"""

    def __init__(self):
        self.settings = get_settings()

    def _build_headers(self, account: GptAccount) -> dict[str, str]:
        headers = DEFAULT_HTTP_HEADERS.copy()
        headers.update({
            "Authorization": f"Bearer {account.access_token}",
            "origin": "https://chatgpt.com",
            "referer": "https://chatgpt.com/",
        })
        if account.chatgpt_account_id:
            headers["chatgpt-account-id"] = account.chatgpt_account_id
        if account.oai_device_id:
            headers["oai-device-id"] = account.oai_device_id
        return headers

    async def list_users(
        self,
        account: GptAccount,
        offset: int = 0,
        limit: int = 1,
        query: str = "",
    ) -> dict:
        """
        获取 Team 成员列表

        Args:
            account: 账号模型（使用其 access token）
            offset: 偏移量
            limit: 数量
            query: 搜索关键字

        Returns:
            上游返回的成员列表数据

        Raises:
            ProbeError: 请求失败，已按封号 / 401 / 其他归类
        """
        url = f"{CHATGPT_API_BASE}/accounts/{account.chatgpt_account_id}/users"
        params = {"offset": offset, "limit": limit, "query": query}
        proxy_kwargs = self.settings.curl_proxy or {}

        async with AsyncSession(impersonate=self.settings.impersonate_browser, **proxy_kwargs) as session:
            try:
                response = await session.get(
                    url,
                    params=params,
                    headers=self._build_headers(account),
                    timeout=PROBE_TIMEOUT,
                )
            except errors.RequestsError as e:
                logger.debug(f"ChatGPT 成员列表请求异常: 账号 {account.id} - {e}")
                raise classify_probe_error(str(e) or "网络错误", None) from e

        logger.debug(f"ChatGPT 成员列表响应: 账号 {account.id} status={response.status_code}")

        try:
            data = response.json()
        except ValueError:
            data = None

        if response.status_code != 200:
            message = extract_error_message(data, response.status_code)
            raise classify_probe_error(message, response.status_code, response.text)

        return data if isinstance(data, dict) else {}
