"""Bot 应用实例"""

import logging

from telegram.ext import Application

from team_sweeper.bot.handlers.sweep import (
    check_account_handler,
    sweep_handler,
    sweep_status_handler,
)
from team_sweeper.config.settings import get_settings
from team_sweeper.core.database import check_and_init_database, close_pool
from team_sweeper.tasks.scheduler import register_jobs, stop_jobs

logger = logging.getLogger(__name__)


def create_app() -> Application:
    """创建 Bot 应用实例"""
    settings = get_settings()

    app = Application.builder().token(settings.bot_token).build()

    # 注册管理命令
    app.add_handler(sweep_handler)
    app.add_handler(sweep_status_handler)
    app.add_handler(check_account_handler)

    # 注册错误处理器
    app.add_error_handler(error_handler)

    # post_init 回调：在应用初始化后注册定时任务
    async def post_init(application: Application) -> None:
        # 检查并初始化数据库表
        await check_and_init_database()
        await register_jobs(application)

    # post_shutdown 回调：停止定时任务并关闭连接池
    async def post_shutdown(application: Application) -> None:
        await stop_jobs(application)
        await close_pool()

    app.post_init = post_init
    app.post_shutdown = post_shutdown

    logger.info("Bot 应用创建成功")

    return app


async def error_handler(update: object, context) -> None:
    """错误处理器"""
    logger.error(f"处理更新时发生异常: {context.error}", exc_info=context.error)
