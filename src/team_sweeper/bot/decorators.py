"""Bot handler decorators"""

import logging
from functools import wraps

from telegram import Update
from telegram.ext import ContextTypes

from team_sweeper.config.settings import get_settings

logger = logging.getLogger(__name__)


def require_admin(func):
    """
    Decorator: Validate admin permission before running handler

    Example:
        @require_admin
        async def admin_handler(update: Update, context: ContextTypes.DEFAULT_TYPE):
            # Admin permission is guaranteed here
            pass
    """
    @wraps(func)
    async def wrapper(update: Update, context: ContextTypes.DEFAULT_TYPE, *args, **kwargs):
        user = update.effective_user
        user_id = user.id if user else None

        if user_id is None or user_id not in get_settings().admin_ids:
            logger.warning(f"用户 {user_id} 尝试在无权限情况下使用管理命令")
            if update.effective_message:
                await update.effective_message.reply_text("❌ 您没有权限使用此命令")
            return None

        return await func(update, context, *args, **kwargs)
    return wrapper
