"""配置管理模块"""

import logging
from typing import Any, List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from team_sweeper.config.constants import (
    SWEEPER_ALLOWED_RANGE_DAYS,
    SWEEPER_DEFAULT_RANGE_DAYS,
)


def _to_int(value: Any, fallback: int) -> int:
    """宽松解析整数，无法解析时返回默认值"""
    if isinstance(value, bool):
        return fallback
    if isinstance(value, int):
        return value
    try:
        return int(str(value if value is not None else "").strip())
    except ValueError:
        return fallback


class Settings(BaseSettings):
    """应用配置类"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # ==================== Bot 配置 ====================
    bot_token: str = Field(..., description="Telegram Bot Token")
    admin_ids_str: str = Field(default="", alias="ADMIN_IDS", description="管理员 ID 列表（逗号分隔）")

    # ==================== 数据库配置 ====================
    database_url: str = Field(..., description="PostgreSQL 连接字符串")

    # ==================== 运行时配置 ====================
    timezone: str = Field(default="Asia/Shanghai", description="时区配置")
    impersonate_browser: str = Field(default="chrome136", description="curl_cffi 模拟浏览器版本")

    # ==================== SOCKS5 代理配置 ====================
    socks5_proxy: str = Field(default="", alias="SOCKS5_PROXY", description="SOCKS5 代理地址")

    # ==================== 日志配置 ====================
    log_level_str: str = Field(default="INFO", alias="LOG_LEVEL", description="日志级别: DEBUG, INFO, WARNING, ERROR")

    # ==================== 账号状态巡检配置 ====================
    sweeper_enabled: bool = Field(
        default=False,
        alias="TEAM_STATUS_SWEEPER_ENABLED",
        description="是否启用账号状态巡检",
    )
    sweeper_interval_seconds: int = Field(
        default=1800,
        alias="TEAM_STATUS_SWEEPER_INTERVAL_SECONDS",
        description="巡检间隔（秒，最小 60）",
    )
    sweeper_initial_delay_ms: int = Field(
        default=20000,
        alias="TEAM_STATUS_SWEEPER_INITIAL_DELAY_MS",
        description="首次巡检延迟（毫秒，最小 1000）",
    )
    sweeper_max_accounts: int = Field(
        default=300,
        alias="TEAM_STATUS_SWEEPER_MAX_ACCOUNTS",
        description="每轮最多检查账号数（最小 10）",
    )
    sweeper_concurrency: int = Field(
        default=3,
        alias="TEAM_STATUS_SWEEPER_CONCURRENCY",
        description="巡检并发数（1-10）",
    )
    sweeper_range_days: int = Field(
        default=SWEEPER_DEFAULT_RANGE_DAYS,
        alias="TEAM_STATUS_SWEEPER_RANGE_DAYS",
        description="巡检时间窗口（天，仅支持 7/15/30）",
    )

    @field_validator("log_level_str")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """验证日志级别"""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"log_level must be one of {valid_levels}, got '{v}'")
        return v_upper

    @field_validator("sweeper_enabled", mode="before")
    @classmethod
    def parse_enabled(cls, v: Any) -> bool:
        """解析启用开关（0/false/off 视为关闭，其余值均视为开启）"""
        if isinstance(v, bool):
            return v
        raw = str(v if v is not None else "false").strip().lower()
        return raw not in ("0", "false", "off")

    @field_validator("sweeper_interval_seconds", mode="before")
    @classmethod
    def floor_interval(cls, v: Any) -> int:
        return max(60, _to_int(v, 1800))

    @field_validator("sweeper_initial_delay_ms", mode="before")
    @classmethod
    def floor_initial_delay(cls, v: Any) -> int:
        return max(1000, _to_int(v, 20000))

    @field_validator("sweeper_max_accounts", mode="before")
    @classmethod
    def floor_max_accounts(cls, v: Any) -> int:
        return max(10, _to_int(v, 300))

    @field_validator("sweeper_concurrency", mode="before")
    @classmethod
    def clamp_concurrency(cls, v: Any) -> int:
        return max(1, min(10, _to_int(v, 3)))

    @field_validator("sweeper_range_days", mode="before")
    @classmethod
    def allow_listed_range_days(cls, v: Any) -> int:
        """时间窗口不在允许列表内时回退到默认值"""
        value = _to_int(v, SWEEPER_DEFAULT_RANGE_DAYS)
        if value not in SWEEPER_ALLOWED_RANGE_DAYS:
            return SWEEPER_DEFAULT_RANGE_DAYS
        return value

    @property
    def log_level(self) -> int:
        """获取日志级别常量"""
        return getattr(logging, self.log_level_str)

    @property
    def admin_ids(self) -> List[int]:
        """管理员 ID 列表"""
        return self._parse_ids(self.admin_ids_str)

    @staticmethod
    def _parse_ids(value: str) -> List[int]:
        """解析 ID 列表"""
        if not value or not value.strip():
            return []
        return [int(x.strip()) for x in value.split(",") if x.strip()]

    @property
    def curl_proxy(self) -> dict | None:
        """
        获取用于 curl_cffi 的代理配置

        使用 socks5h:// 协议（对应 curl 的 --socks5-hostname），
        让代理服务器进行 DNS 解析。

        Returns:
            代理配置字典，未配置时返回 None
        """
        if not self.socks5_proxy:
            return None

        proxy_url = self.socks5_proxy
        if proxy_url.startswith("socks5://"):
            proxy_url = proxy_url.replace("socks5://", "socks5h://", 1)

        return {"proxies": {"http": proxy_url, "https": proxy_url}}


# 全局配置实例
_settings: Settings | None = None


def get_settings() -> Settings:
    """获取配置实例（单例模式）"""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
