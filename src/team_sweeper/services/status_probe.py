"""账号状态探测服务"""

import dataclasses

from team_sweeper.models.account import GptAccount
from team_sweeper.models.check_result import TokenPair
from team_sweeper.sites.chatgpt import ChatGPTAdapter


class StatusProber:
    """账号状态探测：用最小的只读请求验证 access token 是否可用"""

    def __init__(self, adapter: ChatGPTAdapter | None = None):
        self.adapter = adapter or ChatGPTAdapter()

    async def probe(self, account: GptAccount, tokens: TokenPair | None = None) -> None:
        """
        探测账号状态

        Args:
            account: 账号模型
            tokens: 刷新后的 token（可选，传入时替换账号当前凭证）

        Raises:
            ProbeError: 探测失败
        """
        if tokens is not None:
            account = dataclasses.replace(
                account,
                access_token=tokens.access_token or account.access_token,
                refresh_token=tokens.refresh_token or account.refresh_token,
            )

        await self.adapter.list_users(account, offset=0, limit=1, query="")
