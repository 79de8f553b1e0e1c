"""Account data access layer"""

from datetime import timedelta

from team_sweeper.core.timezone import now
from team_sweeper.models.account import GptAccount
from team_sweeper.models.check_result import TokenPair
from team_sweeper.models.sweep import AccountSample
from team_sweeper.repositories.base import BaseRepository

_ACCOUNT_COLUMNS = """
    id,
    email,
    token,
    refresh_token,
    chatgpt_account_id,
    oai_device_id,
    expire_at,
    COALESCE(is_banned, FALSE) AS is_banned,
    created_at,
    updated_at
"""


class AccountRepository(BaseRepository):
    """Account Repository"""

    async def load_sample(self, range_days: int, limit: int) -> AccountSample:
        """
        加载巡检抽样

        只选择时间窗口内创建且未封禁的账号，按创建时间倒序，最多 limit 个。

        Args:
            range_days: 时间窗口（天）
            limit: 抽样上限

        Returns:
            抽样结果，total_eligible 为截断前的符合条件总数
        """
        threshold = now() - timedelta(days=range_days)

        conn = await self._get_connection()
        try:
            total_eligible = await conn.fetchval(
                """
                SELECT COUNT(*) FROM gpt_accounts
                WHERE created_at >= $1 AND COALESCE(is_banned, FALSE) = FALSE
                """,
                threshold,
            )
            records = await conn.fetch(
                f"""
                SELECT {_ACCOUNT_COLUMNS}
                FROM gpt_accounts
                WHERE created_at >= $1
                  AND COALESCE(is_banned, FALSE) = FALSE
                ORDER BY created_at DESC
                LIMIT $2
                """,
                threshold,
                limit,
            )
        finally:
            await self._release_connection(conn)

        return AccountSample(
            total_eligible=int(total_eligible or 0),
            accounts=[self._to_model(record) for record in records],
        )

    async def get_by_id(self, account_id: int) -> GptAccount | None:
        """根据 ID 获取账号"""
        conn = await self._get_connection()
        try:
            record = await conn.fetchrow(
                f"SELECT {_ACCOUNT_COLUMNS} FROM gpt_accounts WHERE id = $1",
                account_id,
            )
        finally:
            await self._release_connection(conn)

        if not record:
            return None
        return self._to_model(record)

    async def update_tokens(self, account_id: int, tokens: TokenPair | None) -> TokenPair | None:
        """
        持久化刷新后的 token

        access token 为空时不做任何操作；refresh token 为空时写入 NULL。

        Returns:
            实际写入的 token，未写入返回 None
        """
        if not tokens or not tokens.access_token:
            return None

        next_refresh_token = (tokens.refresh_token or "").strip() or None

        conn = await self._get_connection()
        try:
            await conn.execute(
                """
                UPDATE gpt_accounts
                SET token = $1, refresh_token = $2, updated_at = $3
                WHERE id = $4
                """,
                tokens.access_token,
                next_refresh_token,
                now(),
                account_id,
            )
        finally:
            await self._release_connection(conn)

        return TokenPair(access_token=tokens.access_token, refresh_token=next_refresh_token)

    async def mark_banned(self, account_id: int) -> None:
        """标记账号为封禁（关闭可用、待处理封号）"""
        conn = await self._get_connection()
        try:
            await conn.execute(
                """
                UPDATE gpt_accounts
                SET is_open = FALSE,
                    is_banned = TRUE,
                    ban_processed = FALSE,
                    updated_at = $1
                WHERE id = $2
                """,
                now(),
                account_id,
            )
        finally:
            await self._release_connection(conn)

    @staticmethod
    def _to_model(record) -> GptAccount:
        """数据库记录转换为模型"""
        return GptAccount(
            id=int(record["id"]),
            email=str(record["email"] or ""),
            access_token=record["token"] or "",
            refresh_token=record["refresh_token"] or None,
            chatgpt_account_id=record["chatgpt_account_id"] or "",
            oai_device_id=record["oai_device_id"] or "",
            expire_at=record["expire_at"] or None,
            is_banned=bool(record["is_banned"]),
            created_at=record["created_at"],
            updated_at=record["updated_at"],
        )
