"""异常定义模块

巡检过程中的错误分为两类：

- 刷新 token 相关：InvalidInputError / UpstreamRejectedError / UpstreamUnreachableError
- 状态探测相关：ProbeError 的三个子类，分别对应封号、未授权（401）和其他失败

账号检查器按异常类型分支，每个分支都转换为确定的检查结果，不向外抛出。
"""

from team_sweeper.config.constants import DEACTIVATION_MARKERS


class SweeperError(Exception):
    """巡检错误基类"""

    default_status: int | None = None

    def __init__(self, message: str = "", status: int | None = None):
        super().__init__(message)
        self.message = message
        self.status = status if status is not None else self.default_status

    def __str__(self) -> str:
        return self.message


class InvalidInputError(SweeperError):
    """输入无效（如未配置 refresh token）"""

    default_status = 400


class UpstreamRejectedError(SweeperError):
    """上游拒绝请求或返回内容无效"""

    default_status = 502


class UpstreamUnreachableError(SweeperError):
    """无法连接上游（未收到响应）"""

    default_status = 503


class ProbeError(SweeperError):
    """状态探测失败基类，status 为上游 HTTP 状态码（网络错误时为 None）"""


class ProbeDeactivatedError(ProbeError):
    """上游提示账号已被停用"""


class ProbeUnauthorizedError(ProbeError):
    """上游返回 401，access token 已失效"""

    default_status = 401


class ProbeFailedError(ProbeError):
    """其他探测失败"""


def is_deactivation_signal(*texts: str | None) -> bool:
    """判断文本中是否包含封号标记"""
    for text in texts:
        if text and any(marker in text for marker in DEACTIVATION_MARKERS):
            return True
    return False


def classify_probe_error(
    message: str,
    status: int | None = None,
    body: str | None = None,
) -> ProbeError:
    """
    将上游错误归类为具体的探测异常

    封号标记优先于 HTTP 状态码判断。

    Args:
        message: 上游错误信息
        status: HTTP 状态码
        body: 原始响应内容

    Returns:
        归类后的探测异常
    """
    if is_deactivation_signal(message, body):
        return ProbeDeactivatedError(message, status)
    if status == 401:
        return ProbeUnauthorizedError(message, status)
    return ProbeFailedError(message, status)
