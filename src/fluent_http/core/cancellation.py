"""协作式取消

取消令牌在调用链中显式传递，网络等待点与令牌竞争，
令牌先触发时中止等待并抛出 RequestCancelledError。
"""

import asyncio
import inspect
from contextlib import suppress
from typing import Awaitable, Optional, TypeVar

from fluent_http.core.exceptions import RequestCancelledError

T = TypeVar("T")


class CancellationToken:
    """取消令牌"""

    def __init__(self) -> None:
        self._event = asyncio.Event()
        self._timer: Optional[asyncio.TimerHandle] = None

    @property
    def is_cancelled(self) -> bool:
        """是否已取消"""
        return self._event.is_set()

    def cancel(self) -> None:
        """触发取消（幂等）"""
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        self._event.set()

    def cancel_after(self, delay: float) -> None:
        """在当前事件循环上延迟触发取消

        Args:
            delay: 延迟时间（秒）
        """
        if delay <= 0:
            self.cancel()
            return
        if self._timer is not None:
            self._timer.cancel()
        loop = asyncio.get_running_loop()
        self._timer = loop.call_later(delay, self.cancel)

    def raise_if_cancelled(self, url: str | None = None) -> None:
        """已取消时抛出 RequestCancelledError"""
        if self.is_cancelled:
            raise RequestCancelledError("Operation was cancelled", url=url)

    async def wait(self) -> None:
        """等待直到被取消"""
        await self._event.wait()


async def run_cancellable(
    awaitable: Awaitable[T],
    token: Optional[CancellationToken],
    url: str | None = None,
) -> T:
    """在取消令牌的监督下等待一个操作

    Args:
        awaitable: 待等待的协程或 Future
        token: 取消令牌（可选，为 None 时直接等待）
        url: 用于错误信息的请求地址（可选）

    Returns:
        操作结果

    Raises:
        RequestCancelledError: 令牌在操作完成前被触发
    """
    if token is None:
        return await awaitable

    if token.is_cancelled:
        if inspect.iscoroutine(awaitable):
            awaitable.close()
        token.raise_if_cancelled(url)

    task = asyncio.ensure_future(awaitable)
    waiter = asyncio.ensure_future(token.wait())
    try:
        await asyncio.wait({task, waiter}, return_when=asyncio.FIRST_COMPLETED)
    except asyncio.CancelledError:
        task.cancel()
        raise
    finally:
        waiter.cancel()

    # 同时完成时优先返回操作结果
    if task.done():
        return task.result()

    task.cancel()
    with suppress(asyncio.CancelledError):
        await task
    raise RequestCancelledError("Operation was cancelled", url=url)
