"""常量定义模块"""

from datetime import timedelta, timezone
from enum import Enum
from typing import Final


# ==================== HTTP 请求配置 ====================
DEFAULT_HTTP_HEADERS: Final[dict[str, str]] = {
    "User-Agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/136.0.0.0 Safari/537.36",
    "accept": "*/*",
    "accept-language": "zh-CN,zh;q=0.9,en;q=0.8",
}


# ==================== 请求超时配置 ====================
PROBE_TIMEOUT: Final[int] = 30  # 状态探测超时 30 秒
REFRESH_TIMEOUT: Final[int] = 60  # 刷新 token 超时 60 秒


# ==================== OpenAI / ChatGPT 配置 ====================
OPENAI_CLIENT_ID: Final[str] = "app_EMoamEEZ73f0CkXaXp7hrann"
OPENAI_TOKEN_URL: Final[str] = "https://auth.openai.com/oauth/token"
OPENAI_OAUTH_SCOPE: Final[str] = "openid profile email"
CHATGPT_API_BASE: Final[str] = "https://chatgpt.com/backend-api"

# 上游返回以下任一标记时视为账号已被封禁
DEACTIVATION_MARKERS: Final[tuple[str, ...]] = (
    "account_deactivated",
    "已自动标记为封号",
)


# ==================== 服务时区 ====================
# expire_at 按服务运营时区（固定 UTC+8）解释，不依赖宿主机时区
SERVICE_TZ: Final[timezone] = timezone(timedelta(hours=8), "UTC+08:00")


# ==================== 巡检配置 ====================
SWEEPER_LABEL: Final[str] = "[TeamStatusSweeper]"
SWEEPER_ALLOWED_RANGE_DAYS: Final[frozenset[int]] = frozenset({7, 15, 30})
SWEEPER_DEFAULT_RANGE_DAYS: Final[int] = 30
SWEEPER_MAX_CONCURRENCY: Final[int] = 10


# ==================== 账号检查状态 ====================
class AccountCheckStatus(str, Enum):
    """账号检查状态枚举"""
    NORMAL = "normal"
    EXPIRED = "expired"
    BANNED = "banned"
    FAILED = "failed"


# ==================== 巡检触发方式 ====================
class SweepTrigger(str, Enum):
    """巡检触发方式枚举"""
    SCHEDULED = "scheduled"  # 定时触发
    MANUAL = "manual"  # 管理员手动触发


# ==================== 状态 Emoji 映射 ====================
STATUS_EMOJI: Final[dict[AccountCheckStatus, str]] = {
    AccountCheckStatus.NORMAL: "✅",
    AccountCheckStatus.EXPIRED: "⌛",
    AccountCheckStatus.BANNED: "🚫",
    AccountCheckStatus.FAILED: "⚠️",
}
