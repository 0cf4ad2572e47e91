"""核心数据模型

纯数据模型，不包含网络逻辑。
"""

import codecs
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Union


class HttpMethod(str, Enum):
    """常用 HTTP 方法枚举"""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"


def normalize_method(method: Union[HttpMethod, str]) -> str:
    """规范化 HTTP 方法名

    Args:
        method: HttpMethod 枚举或任意方法名（允许自定义方法）

    Returns:
        大写的方法名

    Raises:
        ValueError: 方法名为空或包含空白字符
    """
    if isinstance(method, HttpMethod):
        return method.value

    token = str(method).strip().upper()
    if not token or any(ch.isspace() for ch in token):
        raise ValueError(f"Invalid HTTP method: {method!r}")
    return token


@dataclass(frozen=True)
class TextPayload:
    """文本请求体"""

    text: str
    content_type: Optional[str] = None
    encoding: Optional[str] = None


@dataclass(frozen=True)
class BytesPayload:
    """原始字节请求体"""

    data: bytes
    content_type: Optional[str] = None


@dataclass(frozen=True)
class JsonPayload:
    """执行时序列化为 JSON 的结构化请求体"""

    value: Any
    content_type: Optional[str] = None


Payload = Union[TextPayload, BytesPayload, JsonPayload]

_PAYLOAD_TYPES = (TextPayload, BytesPayload, JsonPayload)


def _check_encoding(encoding: Optional[str]) -> Optional[str]:
    if encoding is None:
        return None
    try:
        codecs.lookup(encoding)
    except LookupError as e:
        raise ValueError(f"Unknown text encoding: {encoding}") from e
    return encoding


def payload_from_value(
    value: Any,
    content_type: Optional[str] = None,
    encoding: Optional[str] = None,
) -> Optional[Payload]:
    """按运行时类型把任意值映射为请求体变体

    str 为文本，bytes/bytearray/memoryview 为原始字节，None 表示没有请求体，
    其余在执行时编码为 JSON。已构建的变体原样返回。

    Args:
        value: 请求体
        content_type: Content-Type 头的值（可选）
        encoding: 文本编码，仅对文本请求体有效（可选）

    Returns:
        请求体变体；值为 None 时返回 None

    Raises:
        ValueError: 参数组合无效或编码未知
    """
    if isinstance(value, _PAYLOAD_TYPES):
        if content_type is not None or encoding is not None:
            raise ValueError(
                "content_type and encoding must be set on the payload itself"
            )
        if isinstance(value, TextPayload):
            _check_encoding(value.encoding)
        return value

    if value is None:
        return None

    if isinstance(value, str):
        return TextPayload(value, content_type, _check_encoding(encoding))

    if encoding is not None:
        raise ValueError("encoding only applies to text payloads")

    if isinstance(value, (bytes, bytearray, memoryview)):
        return BytesPayload(bytes(value), content_type)

    return JsonPayload(value, content_type)
