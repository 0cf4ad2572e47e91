"""核心接口定义

使用 Protocol 定义接口，支持鸭子类型和依赖注入。
"""

from typing import Any, Protocol, runtime_checkable

import httpx


@runtime_checkable
class AsyncTransport(Protocol):
    """可复用的异步 HTTP 传输接口（httpx.AsyncClient 满足此接口）"""

    headers: httpx.Headers
    timeout: httpx.Timeout

    def build_request(self, method: str, url: Any, **kwargs: Any) -> httpx.Request:
        """构建请求，合并传输层默认头"""
        ...

    async def send(self, request: httpx.Request, *, stream: bool = False) -> httpx.Response:
        """发送请求并返回响应"""
        ...

    async def aclose(self) -> None:
        """关闭传输"""
        ...
