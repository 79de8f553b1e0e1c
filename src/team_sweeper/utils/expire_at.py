"""expire_at 时间解析工具"""

import re
from datetime import datetime, timedelta, timezone

from team_sweeper.config.constants import SERVICE_TZ

# 兼容 2025/1/2 3:04、2025-01-02T03:04:05 等格式
EXPIRE_AT_PATTERN = re.compile(
    r"^(\d{4})[/-](\d{1,2})[/-](\d{1,2})[ T](\d{1,2}):(\d{2})(?::(\d{2}))?$"
)


def parse_expire_at(value: str | None) -> datetime | None:
    """
    解析 expire_at 字符串

    按 UTC+8 解释墙上时间，任何解析或校验失败都返回 None（视为未知，不算过期）。

    Args:
        value: 时间字符串

    Returns:
        带时区的 datetime，失败返回 None
    """
    raw = str(value if value is not None else "").strip()
    if not raw:
        return None

    match = EXPIRE_AT_PATTERN.match(raw)
    if not match:
        return None

    year, month, day, hour, minute = (int(part) for part in match.groups()[:5])
    second = int(match.group(6)) if match.group(6) is not None else 0

    if not 1 <= month <= 12:
        return None
    if not 1 <= day <= 31:
        return None
    if not 0 <= hour <= 23:
        return None
    if not 0 <= minute <= 59:
        return None
    if not 0 <= second <= 59:
        return None

    # 超出当月天数时顺延到下月（2 月 31 日 → 3 月 3 日）
    first_of_month = datetime(year, month, 1, hour, minute, second, tzinfo=SERVICE_TZ)
    return first_of_month + timedelta(days=day - 1)


def is_expire_at_passed(value: str | None, current: datetime) -> bool:
    """
    判断 expire_at 是否已过期

    Args:
        value: expire_at 字符串
        current: 参考时间（naive 视为 UTC）

    Returns:
        能解析且严格早于参考时间时返回 True
    """
    expire_at = parse_expire_at(value)
    if expire_at is None:
        return False
    if current.tzinfo is None:
        current = current.replace(tzinfo=timezone.utc)
    return expire_at < current
