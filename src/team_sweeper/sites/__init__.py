"""站点适配器模块"""

from team_sweeper.sites.chatgpt import ChatGPTAdapter

__all__ = [
    "ChatGPTAdapter",
]
