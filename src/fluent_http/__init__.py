"""Fluent builder for single HTTP requests on top of httpx."""

from .core.cancellation import CancellationToken, run_cancellable
from .core.exceptions import (
    FluentHttpError,
    PayloadSerializationError,
    RequestCancelledError,
    RequestTimeoutError,
    ResponseDeserializationError,
)
from .core.models import (
    BytesPayload,
    HttpMethod,
    JsonPayload,
    Payload,
    TextPayload,
)
from .config.settings import Config, LoggingConfig, TransportConfig
from .services.request_builder import RequestBuilder, create
from .utils.logging_config import setup_logging

__all__ = [
    # Builder
    "RequestBuilder",
    "create",
    # Cancellation
    "CancellationToken",
    "run_cancellable",
    # Models
    "HttpMethod",
    "Payload",
    "TextPayload",
    "BytesPayload",
    "JsonPayload",
    # Errors
    "FluentHttpError",
    "RequestCancelledError",
    "RequestTimeoutError",
    "PayloadSerializationError",
    "ResponseDeserializationError",
    # Configuration
    "Config",
    "TransportConfig",
    "LoggingConfig",
    "setup_logging",
]
