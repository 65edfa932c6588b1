"""
运行配置
"""
import os
from dataclasses import dataclass, replace
from typing import Optional

DEFAULT_CONFIG_FILE = os.path.join("~", ".checkssl")
DEFAULT_TIMEOUT = 5.0
DEFAULT_PORT = 443
DEFAULT_WORKERS = 10
DEFAULT_RETRIES = 0
DEFAULT_LOG_LEVEL = "WARNING"


def _env_number(name: str, default, cast):
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return cast(value)
    except ValueError:
        # 保留原始字符串，由 ConfigValidator 报告
        return value


@dataclass
class Settings:
    """checkssl 运行配置"""
    config_file: str = DEFAULT_CONFIG_FILE
    timeout: float = DEFAULT_TIMEOUT
    port: int = DEFAULT_PORT
    workers: int = DEFAULT_WORKERS
    retries: int = DEFAULT_RETRIES
    log_level: str = DEFAULT_LOG_LEVEL

    @property
    def config_path(self) -> str:
        return os.path.abspath(os.path.expanduser(self.config_file))

    @classmethod
    def from_env(cls) -> "Settings":
        """
        从环境变量读取配置

        支持的环境变量：CHECKSSL_CONFIG、CHECKSSL_TIMEOUT、CHECKSSL_PORT、
        CHECKSSL_WORKERS、CHECKSSL_RETRIES、LOG_LEVEL

        Returns:
            Settings: 配置对象
        """
        return cls(
            config_file=os.getenv('CHECKSSL_CONFIG') or DEFAULT_CONFIG_FILE,
            timeout=_env_number('CHECKSSL_TIMEOUT', DEFAULT_TIMEOUT, float),
            port=_env_number('CHECKSSL_PORT', DEFAULT_PORT, int),
            workers=_env_number('CHECKSSL_WORKERS', DEFAULT_WORKERS, int),
            retries=_env_number('CHECKSSL_RETRIES', DEFAULT_RETRIES, int),
            log_level=os.getenv('LOG_LEVEL') or DEFAULT_LOG_LEVEL,
        )

    def override(self, **options: Optional[object]) -> "Settings":
        """用命令行参数覆盖配置（值为 None 的参数忽略）"""
        changes = {key: value for key, value in options.items() if value is not None}
        return replace(self, **changes)
