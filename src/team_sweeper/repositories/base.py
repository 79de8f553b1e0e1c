"""Repository base class"""

import asyncio
import logging
from abc import ABC

from team_sweeper.core.database import DatabaseConnection

logger = logging.getLogger(__name__)


class BaseRepository(ABC):
    """Repository base class"""

    # 使用任务本地存储隔离每个任务的连接上下文
    _contexts = {}

    async def _get_connection(self):
        """Get database connection"""
        # 使用当前任务 ID 作为 key，巡检并发检查时每个 worker 各自持有连接
        task_id = id(asyncio.current_task())

        if task_id not in self._contexts:
            self._contexts[task_id] = DatabaseConnection()

        db_context = self._contexts[task_id]
        try:
            return await db_context.__aenter__()
        except BaseException:
            # 未取得连接时调用方不会释放，这里移除上下文
            self._contexts.pop(task_id, None)
            raise

    async def _release_connection(self, _conn=None):
        """
        Release database connection (with exception safety)

        Args:
            _conn: Unused, kept for symmetry with _get_connection
        """
        task_id = id(asyncio.current_task())

        if task_id in self._contexts:
            try:
                await self._contexts[task_id].__aexit__(None, None, None)
            except Exception as e:
                logger.warning(f"Error releasing database connection: {e}")
            finally:
                del self._contexts[task_id]
