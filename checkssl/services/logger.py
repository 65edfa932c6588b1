"""
日志服务

所有日志都写到 stderr，stdout 只输出结果表格。
"""
import os
import re
import logging
import traceback
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from ..interfaces import LoggerServiceInterface
from ..models import DomainResult, Tier

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

# 摘要中最多列出的错误数量
MAX_SUMMARY_ERRORS = 5

_SENSITIVE_KEY = re.compile(r'(?:^|_)(?:password|secret|token|key|credential)$', re.IGNORECASE)


def configure_logger(name: str, level_name: str) -> logging.Logger:
    """
    配置命名日志器：单个 stderr 处理器，不向根日志器传播

    Args:
        name: 日志器名称
        level_name: 日志级别名称（大小写不敏感）

    Returns:
        logging.Logger: 配置好的日志器
    """
    logger = logging.getLogger(name)
    level = logging.getLevelName(str(level_name).upper())
    if not isinstance(level, int):
        level = logging.WARNING

    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
        logger.addHandler(handler)

    logger.setLevel(level)
    for handler in logger.handlers:
        handler.setLevel(level)
    logger.propagate = False

    return logger


def mask_sensitive(config: Dict[str, Any]) -> Dict[str, Any]:
    """
    隐藏配置中的敏感值（只保留前三个字符）

    Args:
        config: 原始配置

    Returns:
        Dict[str, Any]: 可安全记录的配置
    """
    masked = {}
    for key, value in config.items():
        if _SENSITIVE_KEY.search(key) and isinstance(value, str) and value:
            value = f"{value[:3]}***" if len(value) > 3 else "***"
        masked[key] = value
    return masked


@dataclass
class RunStats:
    """单次检查的统计数据"""
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None
    total_domains: int = 0
    valid: int = 0
    unparseable: int = 0
    failed: int = 0
    errors: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def checked(self) -> int:
        """拿到结果的域名数量（包括无法解析的结果）"""
        return self.valid + self.unparseable

    @property
    def duration(self) -> float:
        if self.started_at and self.finished_at:
            return (self.finished_at - self.started_at).total_seconds()
        return 0.0


class LoggerService(LoggerServiceInterface):
    """检查过程的日志记录与统计"""

    def __init__(self, logger_name: str = "checkssl", log_level: Optional[str] = None):
        """
        Args:
            logger_name: 日志器名称
            log_level: 日志级别，为 None 时读取 LOG_LEVEL 环境变量
        """
        self.logger_name = logger_name
        self.log_level = log_level or os.getenv('LOG_LEVEL', 'WARNING')
        self.logger = configure_logger(logger_name, self.log_level)
        self.stats = RunStats()

    def log_check_start(self, domain_count: int):
        self.stats.started_at = datetime.now(timezone.utc)
        self.stats.total_domains = domain_count

        self.logger.info(f"开始SSL证书检查，共 {domain_count} 个域名")

    def log_domain_result(self, result: DomainResult):
        """
        按结果分层计数并记录

        Args:
            result: 单个域名的检查结果
        """
        tier = result.tier

        if tier is Tier.ERROR_MARKER:
            self.stats.failed += 1
            self.logger.info(f"证书检查失败 - 域名: {result.domain}")
        elif tier is Tier.INVALID:
            self.stats.unparseable += 1
            self.logger.warning(f"无法解析过期时间 - 域名: {result.domain}, 结果: {result.result!r}")
        else:
            self.stats.valid += 1
            self.logger.info(f"证书正常 - 域名: {result.domain}, 过期时间: {result.result}")

    def log_error(self, domain: str, error: Exception):
        """
        记录检查过程中的意外错误（堆栈只在 DEBUG 级别输出）

        Args:
            domain: 出错时正在检查的域名
            error: 异常对象
        """
        self.stats.errors.append({
            'domain': domain,
            'error_type': type(error).__name__,
            'error_message': str(error),
            'timestamp': datetime.now(timezone.utc).isoformat()
        })

        self.logger.error(f"域名 {domain} 检查时发生错误: {type(error).__name__}: {error}")
        if self.logger.isEnabledFor(logging.DEBUG):
            stack = ''.join(traceback.format_exception(type(error), error, error.__traceback__))
            self.logger.debug(f"错误堆栈:\n{stack}")

    def log_check_end(self):
        self.stats.finished_at = datetime.now(timezone.utc)

        self.logger.info(
            f"SSL证书检查完成，用时 {self.stats.duration:.2f} 秒: "
            f"有效 {self.stats.valid} 个, 无法解析 {self.stats.unparseable} 个, 失败 {self.stats.failed} 个"
        )

    def log_configuration_info(self, config: Dict[str, Any]):
        """在 DEBUG 级别记录生效的配置"""
        for key, value in mask_sensitive(config).items():
            self.logger.debug(f"配置 {key} = {value}")

    def get_execution_summary(self) -> Dict[str, Any]:
        """
        获取执行摘要

        Returns:
            Dict[str, Any]: 执行摘要信息
        """
        stats = self.stats
        return {
            'start_time': stats.started_at.isoformat() if stats.started_at else None,
            'end_time': stats.finished_at.isoformat() if stats.finished_at else None,
            'duration_seconds': stats.duration,
            'total_domains': stats.total_domains,
            'successful_checks': stats.checked,
            'failed_checks': stats.failed,
            'unparseable_results': stats.unparseable,
            'success_rate': stats.checked / stats.total_domains if stats.total_domains else 0,
            'error_count': len(stats.errors),
            'errors': list(stats.errors)
        }

    def log_execution_summary(self):
        summary = self.get_execution_summary()

        self.logger.info(
            f"执行摘要: 共 {summary['total_domains']} 个域名, "
            f"成功 {summary['successful_checks']} 个, 失败 {summary['failed_checks']} 个, "
            f"成功率 {summary['success_rate']:.1%}, 用时 {summary['duration_seconds']:.2f} 秒"
        )

        shown = summary['errors'][:MAX_SUMMARY_ERRORS]
        for error in shown:
            self.logger.info(f"  {error['domain']} - {error['error_type']}: {error['error_message']}")
        if summary['error_count'] > len(shown):
            self.logger.info(f"  另有 {summary['error_count'] - len(shown)} 个错误未列出")

    def reset_stats(self):
        self.stats = RunStats()
