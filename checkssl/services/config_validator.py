"""
配置验证服务
"""
import os
import logging
from typing import Dict, Any

from ..settings import Settings

VALID_LOG_LEVELS = {'DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'}
MAX_WORKERS = 64


class ConfigValidator:
    """配置验证器"""

    def __init__(self):
        """初始化配置验证器"""
        self.logger = logging.getLogger(__name__)

    def validate(self, settings: Settings) -> Dict[str, Any]:
        """
        验证所有配置

        Args:
            settings: 运行配置

        Returns:
            Dict[str, Any]: 验证结果
        """
        validation_result = {
            'is_valid': True,
            'errors': [],
            'warnings': [],
            'configurations': {}
        }

        for name, check in (
            ('network', self.validate_network_configuration),
            ('logging', self.validate_logging_configuration),
            ('domains', self.validate_domains_configuration),
        ):
            section = check(settings)
            validation_result['configurations'][name] = section
            validation_result['errors'].extend(section['errors'])
            validation_result['warnings'].extend(section['warnings'])

        validation_result['is_valid'] = not validation_result['errors']

        for warning in validation_result['warnings']:
            self.logger.info(f"配置警告: {warning}")

        return validation_result

    def validate_network_configuration(self, settings: Settings) -> Dict[str, Any]:
        """
        验证网络相关配置（超时、端口、并发数、重试次数）

        Returns:
            Dict[str, Any]: 网络配置验证结果
        """
        result = {'errors': [], 'warnings': []}

        if not self._is_number(settings.timeout) or settings.timeout <= 0:
            result['errors'].append(f"Invalid timeout: {settings.timeout} (must be a positive number)")
        elif settings.timeout > 60:
            result['warnings'].append(f"Timeout is very long: {settings.timeout}s")

        if not self._is_int(settings.port) or not 1 <= settings.port <= 65535:
            result['errors'].append(f"Invalid port: {settings.port} (must be between 1 and 65535)")

        if not self._is_int(settings.workers) or not 1 <= settings.workers <= MAX_WORKERS:
            result['errors'].append(f"Invalid workers: {settings.workers} (must be between 1 and {MAX_WORKERS})")

        if not self._is_int(settings.retries) or settings.retries < 0:
            result['errors'].append(f"Invalid retries: {settings.retries} (must be zero or more)")

        return result

    def validate_logging_configuration(self, settings: Settings) -> Dict[str, Any]:
        result = {'errors': [], 'warnings': []}

        if not isinstance(settings.log_level, str) or settings.log_level.upper() not in VALID_LOG_LEVELS:
            result['errors'].append(
                f"Invalid log level: {settings.log_level} "
                f"(choose from {', '.join(sorted(VALID_LOG_LEVELS))})"
            )

        return result

    def validate_domains_configuration(self, settings: Settings) -> Dict[str, Any]:
        """
        验证默认域名文件

        文件不存在只是警告，运行时会回退到默认域名。

        Returns:
            Dict[str, Any]: 域名文件验证结果
        """
        result = {'errors': [], 'warnings': [], 'config_path': settings.config_path, 'exists': False}

        path = settings.config_path
        if os.path.isdir(path):
            result['errors'].append(f"Domain file {path} is a directory")
        elif os.path.exists(path):
            result['exists'] = True
            if not os.access(path, os.R_OK):
                result['warnings'].append(f"Domain file {path} is not readable")
        else:
            result['warnings'].append(f"Domain file {path} does not exist")

        return result

    def get_configuration_summary(self, settings: Settings) -> str:
        """
        获取配置摘要

        Returns:
            str: 配置摘要文本
        """
        validation_result = self.validate(settings)

        lines = [
            "Configuration summary",
            "=" * 30
        ]

        if validation_result['is_valid']:
            lines.append("✅ Configuration is valid")
        else:
            lines.append("❌ Configuration is invalid")

        if validation_result['errors']:
            lines.append("\nErrors:")
            for error in validation_result['errors']:
                lines.append(f"  • {error}")

        if validation_result['warnings']:
            lines.append("\nWarnings:")
            for warning in validation_result['warnings']:
                lines.append(f"  • {warning}")

        lines.append("\nSettings:")
        lines.append(f"  config_file: {settings.config_path}")
        lines.append(f"  timeout: {settings.timeout}")
        lines.append(f"  port: {settings.port}")
        lines.append(f"  workers: {settings.workers}")
        lines.append(f"  retries: {settings.retries}")
        lines.append(f"  log_level: {settings.log_level}")

        return "\n".join(lines)

    @staticmethod
    def _is_int(value) -> bool:
        return isinstance(value, int) and not isinstance(value, bool)

    @staticmethod
    def _is_number(value) -> bool:
        return isinstance(value, (int, float)) and not isinstance(value, bool)
