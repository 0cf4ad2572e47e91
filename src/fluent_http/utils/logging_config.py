"""日志配置模块

为使用请求构建器的应用提供控制台日志配置。
"""

import logging
from typing import Optional

from fluent_http.config.settings import LoggingConfig

_TRANSPORT_LOGGERS = ("httpx", "httpcore")


def setup_logging(
    level: Optional[str] = None,
    quiet_transport: Optional[bool] = None,
) -> logging.Logger:
    """配置日志系统

    Args:
        level: 日志级别（DEBUG, INFO, WARNING, ERROR, CRITICAL），默认取 LoggingConfig
        quiet_transport: 是否把 httpx/httpcore 日志限制在 WARNING 以上，默认取 LoggingConfig

    Returns:
        根日志记录器
    """
    config = LoggingConfig()
    if level is None:
        level = config.level
    if quiet_transport is None:
        quiet_transport = config.quiet_transport

    # 获取日志级别
    log_level = getattr(logging, level.upper(), logging.INFO)

    # 创建根日志记录器
    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # 清除现有的处理器
    root_logger.handlers.clear()

    # 日志格式
    formatter = logging.Formatter(
        fmt="%(asctime)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    # 控制台处理器
    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    transport_level = logging.WARNING if quiet_transport else logging.NOTSET
    for name in _TRANSPORT_LOGGERS:
        logging.getLogger(name).setLevel(transport_level)

    return root_logger
