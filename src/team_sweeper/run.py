"""巡检服务启动入口"""

import logging
import sys
import time
from datetime import datetime

from team_sweeper.config.settings import get_settings
from team_sweeper.core.timezone import get_timezone


class Colors:
    """ANSI 颜色代码"""
    RESET = "\033[0m"
    BOLD = "\033[1m"


# 日志级别颜色映射
LOG_COLORS = {
    logging.DEBUG: "\033[38;5;245m",      # 灰色
    logging.INFO: "\033[38;5;79m",        # 青绿色
    logging.WARNING: "\033[38;5;221m",    # 柔和橙黄
    logging.ERROR: "\033[38;5;203m",      # 柔和红
    logging.CRITICAL: "\033[1;38;5;203m", # 粗体柔和红
}

# 日志级别名称映射（对齐到 5 个字符）
LOG_LEVEL_NAMES = {
    logging.DEBUG: "DEBUG",
    logging.INFO: "INFO ",
    logging.WARNING: "WARN ",
    logging.ERROR: "ERROR",
    logging.CRITICAL: "CRIT ",
}


class ColorFormatter(logging.Formatter):
    """带颜色和对齐的日志格式化器"""

    def __init__(self, *args, tz=None, **kwargs):
        super().__init__(*args, **kwargs)
        self.tz = tz

    def formatTime(self, record, datefmt=None):
        """使用配置时区的时间格式化器"""
        dt = datetime.fromtimestamp(record.created, tz=self.tz)
        ct = dt.replace(tzinfo=None).timetuple()

        if datefmt:
            return time.strftime(datefmt, ct)
        return time.strftime(self.default_time_format, ct)[:19]

    def format(self, record):
        """格式化日志记录，添加颜色"""
        level_color = LOG_COLORS.get(record.levelno, "")
        record.levelname = LOG_LEVEL_NAMES.get(record.levelno, record.levelname)

        result = super().format(record)

        if level_color:
            result = f"{level_color}{result}{Colors.RESET}"
        return result


def setup_logging():
    """按配置的日志级别初始化日志"""
    settings = get_settings()

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    for handler in logging.root.handlers:
        handler.setFormatter(ColorFormatter(
            fmt="%(asctime)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
            tz=get_timezone(),
        ))

    # 隐藏冗余的日志（始终设置为 WARNING）
    logging.getLogger("apscheduler.executors.default").setLevel(logging.WARNING)
    logging.getLogger("apscheduler.scheduler").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    # 隐藏 DEBUG 级别的库日志（保持输出简洁）
    logging.getLogger("asyncio").setLevel(logging.INFO)
    logging.getLogger("telegram").setLevel(logging.INFO)
    logging.getLogger("telegram.ext").setLevel(logging.INFO)


def main():
    """启动巡检服务"""
    setup_logging()

    from team_sweeper.bot.app import create_app

    logger = logging.getLogger(__name__)
    logger.info("正在启动巡检服务...")
    app = create_app()
    logger.info("Bot 应用已创建，开始轮询...")
    app.run_polling()


if __name__ == "__main__":
    main()
