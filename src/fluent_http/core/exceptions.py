"""自定义异常类"""

from typing import Any, Optional


class FluentHttpError(Exception):
    """请求构建器基础异常"""

    def __init__(self, message: str, url: str | None = None):
        self.url = url
        self.message = message
        super().__init__(f"[{url}] {message}" if url else message)


class RequestCancelledError(FluentHttpError):
    """请求被取消令牌中止"""


class RequestTimeoutError(RequestCancelledError):
    """传输层超时（视为取消的一种）"""

    def __init__(
        self,
        message: str,
        timeout: Optional[float] = None,
        url: str | None = None,
    ):
        self.timeout = timeout
        super().__init__(message, url)


class PayloadSerializationError(FluentHttpError):
    """请求体无法序列化为 JSON"""

    def __init__(
        self,
        message: str,
        payload_type: Optional[type] = None,
        url: str | None = None,
    ):
        self.payload_type = payload_type
        super().__init__(message, url)


class ResponseDeserializationError(FluentHttpError):
    """响应体无法反序列化为目标类型"""

    def __init__(
        self,
        message: str,
        target_type: Any = None,
        url: str | None = None,
    ):
        self.target_type = target_type
        super().__init__(message, url)
