"""配置模块单元测试"""

import pytest
from pydantic import ValidationError

from fluent_http.config.settings import Config, LoggingConfig, TransportConfig


class TestTransportConfig:
    """TransportConfig 测试类"""

    def test_default_values(self):
        """测试默认值"""
        config = TransportConfig()
        assert config.timeout == 100.0
        assert config.verify_ssl is True
        assert config.follow_redirects is False
        assert config.trust_env is True
        assert config.default_user_agent is None

    def test_timeout_validation(self):
        """测试 timeout 字段验证"""
        # 有效值
        config = TransportConfig(timeout=5)
        assert config.timeout == 5

        # 无效值（不大于 0）
        with pytest.raises(ValidationError):
            TransportConfig(timeout=0)

        # 无效值（大于 3600）
        with pytest.raises(ValidationError):
            TransportConfig(timeout=3601)

    def test_client_kwargs(self):
        """测试生成 httpx.AsyncClient 参数"""
        config = TransportConfig(timeout=10, verify_ssl=False, trust_env=False)
        kwargs = config.client_kwargs()
        assert kwargs == {
            "timeout": 10,
            "verify": False,
            "follow_redirects": False,
            "trust_env": False,
        }

    def test_client_kwargs_with_user_agent(self):
        """测试默认 User-Agent 写入默认请求头"""
        config = TransportConfig(default_user_agent="fluent-http/0.1")
        assert config.client_kwargs()["headers"] == {"User-Agent": "fluent-http/0.1"}


class TestLoggingConfig:
    """LoggingConfig 测试类"""

    def test_default_values(self):
        """测试默认值"""
        config = LoggingConfig()
        assert config.level == "INFO"
        assert config.quiet_transport is True

    def test_level_normalized(self):
        """测试日志级别统一为大写"""
        config = LoggingConfig(level="debug")
        assert config.level == "DEBUG"

    def test_invalid_level(self):
        """测试无效日志级别"""
        with pytest.raises(ValidationError):
            LoggingConfig(level="verbose")


class TestConfig:
    """Config 测试类"""

    def test_default_config(self):
        """测试默认配置"""
        config = Config()
        assert isinstance(config.transport, TransportConfig)
        assert isinstance(config.logging, LoggingConfig)


class TestEnvironmentVariables:
    """环境变量测试类"""

    def test_transport_env_prefix(self, monkeypatch):
        """测试 FLUENT_HTTP_ 前缀的环境变量"""
        monkeypatch.setenv("FLUENT_HTTP_TIMEOUT", "12.5")
        monkeypatch.setenv("FLUENT_HTTP_VERIFY_SSL", "false")
        config = TransportConfig()
        assert config.timeout == 12.5
        assert config.verify_ssl is False

    def test_logging_env_prefix(self, monkeypatch):
        """测试 FLUENT_HTTP_LOG_ 前缀的环境变量"""
        monkeypatch.setenv("FLUENT_HTTP_LOG_LEVEL", "warning")
        monkeypatch.setenv("FLUENT_HTTP_LOG_QUIET_TRANSPORT", "false")
        config = LoggingConfig()
        assert config.level == "WARNING"
        assert config.quiet_transport is False
