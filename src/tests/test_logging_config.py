"""日志配置单元测试"""

import logging

from fluent_http.utils.logging_config import setup_logging


class TestSetupLogging:
    """setup_logging 测试类"""

    def test_sets_level_and_single_handler(self):
        """测试设置级别并只保留一个控制台处理器"""
        logger = setup_logging(level="debug")
        setup_logging(level="debug")
        assert logger is logging.getLogger()
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1

    def test_quiet_transport(self):
        """测试屏蔽 httpx/httpcore 日志"""
        setup_logging(level="INFO", quiet_transport=True)
        assert logging.getLogger("httpx").level == logging.WARNING
        assert logging.getLogger("httpcore").level == logging.WARNING

        setup_logging(level="INFO", quiet_transport=False)
        assert logging.getLogger("httpx").level == logging.NOTSET

    def test_defaults_from_environment(self, monkeypatch):
        """测试未传参数时读取 LoggingConfig"""
        monkeypatch.setenv("FLUENT_HTTP_LOG_LEVEL", "ERROR")
        logger = setup_logging()
        assert logger.level == logging.ERROR
