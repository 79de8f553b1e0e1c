"""任务调度器"""

import logging

from telegram.ext import Application

from team_sweeper.tasks.status_sweeper import StatusSweeper, register_status_sweeper

logger = logging.getLogger(__name__)

SWEEPER_KEY = "status_sweeper"
STOP_SWEEPER_KEY = "stop_status_sweeper"


async def register_jobs(app: Application):
    """
    注册所有定时任务

    巡检协调器保存在 bot_data 中，供管理员命令复用同一把互斥锁。

    Args:
        app: Bot 应用实例
    """
    sweeper = StatusSweeper()
    app.bot_data[SWEEPER_KEY] = sweeper

    # 注册账号状态巡检任务
    app.bot_data[STOP_SWEEPER_KEY] = register_status_sweeper(app, sweeper)

    logger.info("所有定时任务已注册")


async def stop_jobs(app: Application):
    """停止所有定时任务"""
    stop = app.bot_data.pop(STOP_SWEEPER_KEY, None)
    if stop:
        stop()


def get_sweeper(app: Application) -> StatusSweeper | None:
    """获取巡检协调器"""
    return app.bot_data.get(SWEEPER_KEY)
