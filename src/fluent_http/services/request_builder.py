"""请求构建服务

提供可链式配置的单次 HTTP 请求构建器：累积请求头、请求体、超时与
User-Agent，执行时构建新的请求并交给 httpx 传输层发送，返回原始字节
或按 JSON 反序列化后的值。

构建器不是线程安全的，一个实例同一时间只应由一个调用方使用。
"""

import logging
from datetime import timedelta
from typing import Any, Optional, Union

import httpx

from fluent_http.config.settings import TransportConfig
from fluent_http.core.cancellation import CancellationToken, run_cancellable
from fluent_http.core.exceptions import PayloadSerializationError, RequestTimeoutError
from fluent_http.core.interfaces import AsyncTransport
from fluent_http.core.models import (
    BytesPayload,
    HttpMethod,
    JsonPayload,
    Payload,
    TextPayload,
    normalize_method,
    payload_from_value,
)
from fluent_http.utils import json_codec

_NO_CONTENT_STATUSES = {204, 205, 304}


class RequestBuilder:
    """链式 HTTP 请求构建器"""

    def __init__(
        self,
        url: Union[str, httpx.URL],
        client: Optional[AsyncTransport] = None,
        config: Optional[TransportConfig] = None,
    ):
        """初始化构建器

        Args:
            url: 目标地址，构造后不可修改
            client: 可选的传输实例（如 httpx.AsyncClient），不传时首次执行惰性创建
            config: 惰性创建传输时使用的配置（可选）
        """
        self._url = httpx.URL(url)
        self._client = client
        self._owns_client = False
        self._config = config

        self._headers: dict[str, Any] = {}
        self._payload: Optional[Payload] = None
        self._timeout: Optional[float] = None
        self._user_agent: Optional[str] = None

        # 最近一次执行的请求与响应
        self.request: Optional[httpx.Request] = None
        self.response: Optional[httpx.Response] = None

    @classmethod
    def create(
        cls,
        url: Union[str, httpx.URL],
        client: Optional[AsyncTransport] = None,
        config: Optional[TransportConfig] = None,
    ) -> "RequestBuilder":
        """创建绑定到固定地址的构建器"""
        return cls(url, client=client, config=config)

    @property
    def url(self) -> httpx.URL:
        return self._url

    @property
    def client(self) -> Optional[AsyncTransport]:
        return self._client

    @property
    def headers(self) -> dict[str, Any]:
        return dict(self._headers)

    @property
    def payload(self) -> Optional[Payload]:
        return self._payload

    @property
    def timeout(self) -> Optional[float]:
        return self._timeout

    @property
    def user_agent(self) -> Optional[str]:
        return self._user_agent

    # 配置

    def add_header(self, name: str, value: Any = None) -> "RequestBuilder":
        """添加请求头，已存在同名请求头时忽略

        Args:
            name: 请求头名称（按原样比较）
            value: 请求头的值，构建请求时转换为文本
        """
        self._headers.setdefault(name, value)
        return self

    def add_payload(
        self,
        payload: Any,
        content_type: Optional[str] = None,
        encoding: Optional[str] = None,
    ) -> "RequestBuilder":
        """设置请求体，整体替换之前的请求体、Content-Type 和编码

        Args:
            payload: str 按文本发送，bytes 原样发送，None 清除请求体，其余值执行时编码为 JSON
            content_type: Content-Type 头的值（可选）
            encoding: 文本编码，仅对 str 请求体有效（可选，默认 utf-8）
        """
        self._payload = payload_from_value(payload, content_type, encoding)
        return self

    def set_timeout(self, timeout: Union[float, timedelta]) -> "RequestBuilder":
        """设置超时

        注意：超时在执行时写入传输实例，会影响之后复用同一传输的所有请求。

        Args:
            timeout: 秒数或 timedelta，必须大于 0（NaN 同样拒绝）
        """
        seconds = timeout.total_seconds() if isinstance(timeout, timedelta) else float(timeout)
        if not seconds > 0:
            raise ValueError(f"Timeout must be positive: {timeout}")
        self._timeout = seconds
        return self

    def set_user_agent(self, user_agent: str) -> "RequestBuilder":
        """设置 User-Agent，执行时追加到传输层默认 User-Agent 之后"""
        self._user_agent = user_agent
        return self

    # 执行

    async def execute(
        self,
        method: Union[HttpMethod, str],
        token: Optional[CancellationToken] = None,
    ) -> Optional[bytes]:
        """执行请求

        Args:
            method: HTTP 方法
            token: 取消令牌（可选）

        Returns:
            响应体字节；响应不携带内容时返回 None

        Raises:
            RequestCancelledError: 令牌在请求完成前被触发
            RequestTimeoutError: 传输层超时
            PayloadSerializationError: 请求体无法编码（JSON 序列化失败或文本含编码无法表示的字符）
            httpx.TransportError: 网络错误（原样抛出）
        """
        method = normalize_method(method)
        url = str(self._url)
        client = self._ensure_client()

        self.request = None
        self.response = None

        headers = self._build_headers()
        content, content_type = await self._encode_payload(token)
        if content_type is not None:
            _replace_header(headers, "Content-Type", content_type)

        # 请求体编码成功后才修改共享的传输实例
        if self._timeout is not None:
            self._apply_timeout(client, self._timeout)
        if self._user_agent is not None:
            self._apply_user_agent(client, self._user_agent)

        self.request = client.build_request(method, self._url, headers=headers, content=content)
        logging.debug(f"Sending {method} {url}")

        try:
            response = await run_cancellable(client.send(self.request, stream=True), token, url)
        except httpx.TimeoutException as e:
            raise self._timeout_error(client, e) from e

        try:
            body = await run_cancellable(response.aread(), token, url)
        except httpx.TimeoutException as e:
            raise self._timeout_error(client, e) from e
        finally:
            await response.aclose()
        self.response = response

        logging.debug(f"{method} {url} -> {response.status_code} ({len(body)} bytes)")

        if _has_no_content(response):
            return None
        return body

    async def execute_as(
        self,
        method: Union[HttpMethod, str],
        response_type: Any = Any,
        token: Optional[CancellationToken] = None,
    ) -> Any:
        """执行请求并把响应体按 JSON 反序列化

        字段名匹配忽略大小写。响应体缺失或为空时直接返回 None。

        Args:
            method: HTTP 方法
            response_type: 目标类型（pydantic 可校验的任意类型），默认返回原始 JSON 结构
            token: 取消令牌（可选）

        Raises:
            ResponseDeserializationError: 响应体不是合法 JSON 或与目标类型不匹配
        """
        body = await self.execute(method, token)
        if not body:
            return None
        return json_codec.loads(body, response_type)

    async def get(self, response_type: Any = Any, token: Optional[CancellationToken] = None) -> Any:
        return await self.execute_as(HttpMethod.GET, response_type, token)

    async def post(self, response_type: Any = Any, token: Optional[CancellationToken] = None) -> Any:
        return await self.execute_as(HttpMethod.POST, response_type, token)

    async def put(self, response_type: Any = Any, token: Optional[CancellationToken] = None) -> Any:
        return await self.execute_as(HttpMethod.PUT, response_type, token)

    async def patch(self, response_type: Any = Any, token: Optional[CancellationToken] = None) -> Any:
        return await self.execute_as(HttpMethod.PATCH, response_type, token)

    async def delete(self, response_type: Any = Any, token: Optional[CancellationToken] = None) -> Any:
        return await self.execute_as(HttpMethod.DELETE, response_type, token)

    # 资源

    async def aclose(self) -> None:
        """关闭由构建器自行创建的传输；外部传入的传输保持打开"""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None
            self._owns_client = False

    async def __aenter__(self) -> "RequestBuilder":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    # 内部

    def _ensure_client(self) -> AsyncTransport:
        """首次使用时创建传输，之后复用"""
        if self._client is None:
            config = self._config or TransportConfig()
            self._client = httpx.AsyncClient(**config.client_kwargs())
            self._owns_client = True
            logging.debug(f"Created transport for {self._url}")
        return self._client

    def _apply_timeout(self, client: AsyncTransport, timeout: float) -> None:
        # 超时作用于整个传输实例
        client.timeout = httpx.Timeout(timeout)
        logging.debug(f"Transport timeout set to {timeout}s")

    def _apply_user_agent(self, client: AsyncTransport, user_agent: str) -> None:
        # 只追加传输层 User-Agent 中尚未出现的产品标记
        current = client.headers.get("User-Agent") or ""
        tokens = current.split()
        added = [t for t in user_agent.split() if t not in tokens]
        if added:
            client.headers["User-Agent"] = " ".join(tokens + added)
        logging.debug(f"Transport User-Agent: {client.headers.get('User-Agent')}")

    def _build_headers(self) -> list[tuple[str, bytes]]:
        """按原样写入所有请求头，不校验值格式"""
        headers = []
        for name, value in self._headers.items():
            text = "" if value is None else str(value)
            headers.append((name, text.encode("utf-8")))
        return headers

    async def _encode_payload(
        self, token: Optional[CancellationToken]
    ) -> tuple[Optional[bytes], Optional[str]]:
        """按请求体变体编码，返回 (请求体字节, Content-Type)"""
        match self._payload:
            case None:
                return None, None
            case TextPayload(text=text, content_type=content_type, encoding=encoding):
                charset = encoding or "utf-8"
                media_type = content_type or "text/plain"
                try:
                    body = text.encode(charset)
                except UnicodeEncodeError as e:
                    raise PayloadSerializationError(
                        f"Cannot encode text payload as {charset}: {e}",
                        payload_type=str,
                        url=str(self._url),
                    ) from e
                return body, f"{media_type}; charset={charset}"
            case BytesPayload(data=data, content_type=content_type):
                return data, content_type
            case JsonPayload(value=value, content_type=content_type):
                body = await run_cancellable(
                    json_codec.dumps_async(value), token, str(self._url)
                )
                return body, content_type

    def _timeout_error(self, client: AsyncTransport, exc: Exception) -> RequestTimeoutError:
        timeout = client.timeout.read if isinstance(client.timeout, httpx.Timeout) else None
        return RequestTimeoutError(
            f"Request timed out: {exc}", timeout=timeout, url=str(self._url)
        )


def _replace_header(headers: list[tuple[str, bytes]], name: str, value: str) -> None:
    lowered = name.lower()
    headers[:] = [(k, v) for k, v in headers if k.lower() != lowered]
    headers.append((name, value.encode("utf-8")))


def _has_no_content(response: httpx.Response) -> bool:
    """响应是否不携带内容（区别于长度为 0 的响应体）"""
    if response.request.method == "HEAD":
        return True
    if response.status_code < 200 or response.status_code in _NO_CONTENT_STATUSES:
        return True
    return response.headers.get("Content-Length") == "0"


def create(
    url: Union[str, httpx.URL],
    client: Optional[AsyncTransport] = None,
    config: Optional[TransportConfig] = None,
) -> RequestBuilder:
    """创建请求构建器"""
    return RequestBuilder.create(url, client=client, config=config)
