"""数据库连接池管理"""

import logging
from typing import Optional

import asyncpg
from asyncpg import Pool

from team_sweeper.config.settings import get_settings

logger = logging.getLogger(__name__)

_pool: Optional[Pool] = None


async def _init_connection(conn):
    """初始化数据库连接（设置时区）"""
    settings = get_settings()
    # 设置数据库会话时区，使 NOW() 返回配置时区的时间
    await conn.execute(f"SET TIME ZONE '{settings.timezone}';")


async def get_pool() -> Pool:
    """获取数据库连接池（单例模式）"""
    global _pool
    if _pool is None:
        settings = get_settings()
        _pool = await asyncpg.create_pool(
            settings.database_url,
            min_size=2,
            max_size=20,
            command_timeout=60,
            init=_init_connection,
        )
    return _pool


async def close_pool():
    """关闭数据库连接池"""
    global _pool
    if _pool:
        await _pool.close()
        _pool = None


class DatabaseConnection:
    """数据库连接上下文管理器"""

    def __init__(self):
        self._conn = None
        self._pool = None
        self._acquire_context = None

    async def __aenter__(self):
        self._pool = await get_pool()
        # acquire() 返回上下文管理器，需要通过 __aenter__ 获取实际连接
        self._acquire_context = self._pool.acquire()
        self._conn = await self._acquire_context.__aenter__()
        return self._conn

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if self._acquire_context:
            await self._acquire_context.__aexit__(exc_type, exc_val, exc_tb)
            self._acquire_context = None
            self._conn = None


# ==================== 数据库自动初始化 ====================

_INIT_SQL_TABLES = """
-- 账号表
CREATE TABLE IF NOT EXISTS gpt_accounts (
    id BIGSERIAL PRIMARY KEY,
    email VARCHAR(255) NOT NULL DEFAULT '',
    token TEXT NOT NULL DEFAULT '',
    refresh_token TEXT,
    chatgpt_account_id VARCHAR(255) NOT NULL DEFAULT '',
    oai_device_id VARCHAR(255) NOT NULL DEFAULT '',
    expire_at VARCHAR(64),
    is_open BOOLEAN NOT NULL DEFAULT TRUE,
    is_banned BOOLEAN NOT NULL DEFAULT FALSE,
    ban_processed BOOLEAN NOT NULL DEFAULT FALSE,
    created_at TIMESTAMP NOT NULL DEFAULT NOW(),
    updated_at TIMESTAMP NOT NULL DEFAULT NOW()
);

-- 巡检按创建时间倒序抽样
CREATE INDEX IF NOT EXISTS idx_gpt_accounts_created_at ON gpt_accounts(created_at DESC);
CREATE INDEX IF NOT EXISTS idx_gpt_accounts_is_banned ON gpt_accounts(is_banned);
"""

# 旧版本表结构缺少的字段
_MIGRATION_COLUMNS = {
    "is_open": "BOOLEAN NOT NULL DEFAULT TRUE",
    "is_banned": "BOOLEAN NOT NULL DEFAULT FALSE",
    "ban_processed": "BOOLEAN NOT NULL DEFAULT FALSE",
    "refresh_token": "TEXT",
}


async def init_database():
    """Initialize database tables if they don't exist"""
    settings = get_settings()

    try:
        conn = await asyncpg.connect(settings.database_url)

        try:
            await conn.execute(f"SET TIME ZONE '{settings.timezone}';")
            await conn.execute(_INIT_SQL_TABLES)
            logger.info("数据库表初始化成功")
        finally:
            await conn.close()

    except Exception as e:
        logger.error(f"数据库初始化失败: {e}", exc_info=True)
        raise


async def check_and_init_database():
    """Check if tables exist, initialize if not"""
    settings = get_settings()

    conn = await asyncpg.connect(settings.database_url)
    try:
        exists = await conn.fetchval(
            "SELECT EXISTS (SELECT FROM information_schema.tables WHERE table_name = 'gpt_accounts')"
        )
    finally:
        await conn.close()

    if not exists:
        logger.warning("数据库表不存在，正在初始化...")
        await init_database()
        return

    logger.debug("数据库表已存在")
    conn = await asyncpg.connect(settings.database_url)
    try:
        for column, definition in _MIGRATION_COLUMNS.items():
            column_exists = await conn.fetchval(
                """SELECT EXISTS (
                    SELECT 1 FROM information_schema.columns
                    WHERE table_name = 'gpt_accounts' AND column_name = $1
                )""",
                column,
            )
            if not column_exists:
                await conn.execute(
                    f"ALTER TABLE gpt_accounts ADD COLUMN {column} {definition}"
                )
                logger.info(f"数据库迁移成功: 添加 gpt_accounts.{column} 字段")
    finally:
        await conn.close()
