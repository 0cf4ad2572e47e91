"""JSON 编解码工具

请求体使用 pydantic_core 序列化；响应体解析后按目标类型的字段名
（忽略大小写）重新映射键，再交给 pydantic.TypeAdapter 校验。
"""

import asyncio
import dataclasses
import types
from collections.abc import Mapping, Sequence
from functools import lru_cache
from typing import (
    Annotated,
    Any,
    Union,
    get_args,
    get_origin,
    get_type_hints,
)

from pydantic import BaseModel, TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError, from_json, to_json
from typing_extensions import is_typeddict

from fluent_http.core.exceptions import (
    PayloadSerializationError,
    ResponseDeserializationError,
)

_NONE_TYPE = type(None)
_UNION_TYPES = (Union, types.UnionType)


def dumps(value: Any) -> bytes:
    """把任意值序列化为 JSON 字节

    Raises:
        PayloadSerializationError: 值无法编码
    """
    try:
        return to_json(value)
    except (PydanticSerializationError, TypeError, ValueError) as e:
        raise PayloadSerializationError(
            f"Cannot serialize {type(value).__name__} to JSON: {e}",
            payload_type=type(value),
        ) from e


async def dumps_async(value: Any) -> bytes:
    """在工作线程中序列化，避免阻塞事件循环"""
    return await asyncio.to_thread(dumps, value)


def loads(data: bytes, target: Any = Any) -> Any:
    """把 JSON 字节反序列化为目标类型

    Args:
        data: JSON 字节
        target: 目标类型，默认返回原始 JSON 结构

    Returns:
        目标类型的值；JSON 为 null 时返回 None

    Raises:
        ResponseDeserializationError: 不是合法 JSON 或与目标类型不匹配
    """
    try:
        raw = from_json(data)
    except ValueError as e:
        raise ResponseDeserializationError(
            f"Response body is not valid JSON: {e}", target_type=target
        ) from e

    if raw is None:
        return None

    try:
        return _adapter(target).validate_python(match_field_names(raw, target))
    except ValidationError as e:
        raise ResponseDeserializationError(
            f"Response body does not match {_type_name(target)}: {e}",
            target_type=target,
        ) from e


def match_field_names(value: Any, target: Any) -> Any:
    """按目标类型的字段名（忽略大小写）递归重写 JSON 对象的键"""
    origin = get_origin(target)

    if origin is Annotated:
        return match_field_names(value, get_args(target)[0])

    if origin in _UNION_TYPES:
        for arg in get_args(target):
            if arg is not _NONE_TYPE and _is_remappable(arg):
                return match_field_names(value, arg)
        return value

    if isinstance(value, list):
        if origin is tuple:
            args = get_args(target)
            if len(args) == 2 and args[1] is Ellipsis:
                return [match_field_names(v, args[0]) for v in value]
            if len(args) == len(value):
                return [match_field_names(v, a) for v, a in zip(value, args)]
            return value
        if _is_collection(origin):
            args = get_args(target)
            if args:
                return [match_field_names(v, args[0]) for v in value]
        return value

    if not isinstance(value, dict):
        return value

    if _is_mapping(origin):
        args = get_args(target)
        if len(args) == 2:
            return {k: match_field_names(v, args[1]) for k, v in value.items()}
        return value

    fields = _field_lookup(target)
    if not fields:
        return value

    result: dict[str, Any] = {}
    for key, item in value.items():
        match = fields.get(key.lower())
        if match is None:
            result[key] = item
            continue
        name, field_type = match
        # 精确匹配优先；否则第一个忽略大小写的匹配生效
        if key != name and (name in value or name in result):
            continue
        result[name] = match_field_names(item, field_type)
    return result


def _is_collection(origin: Any) -> bool:
    if origin is None or not isinstance(origin, type):
        return False
    return issubclass(origin, (Sequence, set, frozenset)) and not issubclass(
        origin, (str, bytes)
    )


def _is_mapping(origin: Any) -> bool:
    return isinstance(origin, type) and issubclass(origin, Mapping)


def _is_remappable(target: Any) -> bool:
    origin = get_origin(target)
    if origin is not None:
        return _is_collection(origin) or _is_mapping(origin) or origin is Annotated
    return bool(_field_lookup(target))


@lru_cache(maxsize=256)
def _field_lookup(target: Any) -> dict[str, tuple[str, Any]]:
    """小写名 -> (JSON 中应使用的键, 字段类型)"""
    if not isinstance(target, type):
        return {}

    if issubclass(target, BaseModel):
        lookup = {}
        for name, info in target.model_fields.items():
            key = info.alias or name
            lookup[key.lower()] = (key, info.annotation)
            lookup.setdefault(name.lower(), (key, info.annotation))
        return lookup

    if dataclasses.is_dataclass(target):
        hints = get_type_hints(target, include_extras=True)
        return {
            f.name.lower(): (f.name, hints.get(f.name, Any))
            for f in dataclasses.fields(target)
        }

    if is_typeddict(target):
        hints = get_type_hints(target, include_extras=True)
        return {name.lower(): (name, tp) for name, tp in hints.items()}

    return {}


@lru_cache(maxsize=256)
def _adapter(target: Any) -> TypeAdapter:
    return TypeAdapter(target)


def _type_name(target: Any) -> str:
    return getattr(target, "__name__", None) or repr(target)
