"""账号数据模型"""

from dataclasses import dataclass

from team_sweeper.models.base import BaseEntity


@dataclass
class GptAccount(BaseEntity):
    """ChatGPT Team 账号模型"""

    email: str
    access_token: str
    refresh_token: str | None
    chatgpt_account_id: str
    oai_device_id: str
    expire_at: str | None  # 本地时间字符串，格式不固定，可能为空
    is_banned: bool
