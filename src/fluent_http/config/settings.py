"""配置管理模块 - 使用 Pydantic

集中管理传输层与日志的默认配置，支持环境变量、.env 文件和配置验证。
"""

from typing import Any, Optional
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class TransportConfig(BaseSettings):
    """传输层配置（用于惰性创建的 httpx.AsyncClient）"""

    model_config = SettingsConfigDict(
        env_prefix="FLUENT_HTTP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # 默认超时（秒），可被 set_timeout 覆盖
    timeout: float = Field(
        default=100.0, gt=0, le=3600, description="默认请求超时时间（秒）"
    )

    # SSL 验证
    verify_ssl: bool = Field(default=True, description="是否验证 SSL 证书")

    # 重定向交给传输层处理，默认不跟随
    follow_redirects: bool = Field(default=False, description="是否跟随重定向")

    trust_env: bool = Field(
        default=True, description="是否读取代理等环境变量（HTTP_PROXY 等）"
    )

    default_user_agent: Optional[str] = Field(
        default=None, description="传输层默认 User-Agent（为空时使用 httpx 默认值）"
    )

    def client_kwargs(self) -> dict[str, Any]:
        """生成 httpx.AsyncClient 的构造参数"""
        kwargs: dict[str, Any] = {
            "timeout": self.timeout,
            "verify": self.verify_ssl,
            "follow_redirects": self.follow_redirects,
            "trust_env": self.trust_env,
        }
        if self.default_user_agent:
            kwargs["headers"] = {"User-Agent": self.default_user_agent}
        return kwargs


class LoggingConfig(BaseSettings):
    """日志配置"""

    model_config = SettingsConfigDict(
        env_prefix="FLUENT_HTTP_LOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    level: str = Field(default="INFO", description="日志级别")

    # 屏蔽 httpx/httpcore 的 INFO 请求日志
    quiet_transport: bool = Field(
        default=True, description="是否把 httpx/httpcore 日志限制在 WARNING 以上"
    )

    @field_validator("level", mode="before")
    @classmethod
    def normalize_level(cls, v: str) -> str:
        """日志级别统一为大写并校验"""
        level = str(v).strip().upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"Unsupported log level: {v}")
        return level


class Config(BaseSettings):
    """全局配置"""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    transport: TransportConfig = Field(default_factory=TransportConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

