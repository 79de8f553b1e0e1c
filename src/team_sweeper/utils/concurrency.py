"""并发执行工具"""

import asyncio
from collections.abc import Awaitable, Callable, Sequence
from typing import TypeVar

from team_sweeper.config.constants import SWEEPER_MAX_CONCURRENCY

T = TypeVar("T")


def clamp_concurrency(concurrency: int | None) -> int:
    """并发数限制在 [1, 10]"""
    try:
        value = int(concurrency or 1)
    except (TypeError, ValueError):
        value = 1
    return max(1, min(SWEEPER_MAX_CONCURRENCY, value))


async def each_with_concurrency(
    items: Sequence[T],
    concurrency: int,
    fn: Callable[[T, int], Awaitable[object]],
) -> None:
    """
    以固定并发上限依次处理所有元素

    多个 worker 共享同一个游标，按输入顺序领取元素，每个元素只处理一次；
    同时在执行中的 fn 不超过 concurrency 个，完成顺序不保证。

    Args:
        items: 待处理元素
        concurrency: 并发上限（会被限制在 1-10）
        fn: 处理函数 fn(item, index)
    """
    items = list(items or [])
    if not items:
        return

    limit = clamp_concurrency(concurrency)
    cursor = 0

    async def worker():
        nonlocal cursor
        while True:
            index = cursor
            if index >= len(items):
                break
            cursor += 1
            await fn(items[index], index)

    await asyncio.gather(*(worker() for _ in range(min(limit, len(items)))))
