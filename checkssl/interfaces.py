"""
服务接口定义
"""
from abc import ABC, abstractmethod
from typing import List, Optional, Tuple

from .models import DomainResult


class DomainConfigManagerInterface(ABC):
    """域名配置管理器接口"""

    @abstractmethod
    def collect_domains(self, domains: List[str], files: List[str]) -> Tuple[List[str], List[str]]:
        """收集域名列表，返回 (域名, 错误信息)"""
        pass

    @abstractmethod
    def validate_domain(self, domain: str) -> bool:
        """验证域名格式"""
        pass


class SSLCertificateCheckerInterface(ABC):
    """SSL证书检查器接口"""

    @abstractmethod
    def check_certificate(self, domain: str) -> Tuple[DomainResult, Optional[str]]:
        """检查单个域名的SSL证书"""
        pass


class LoggerServiceInterface(ABC):
    """日志服务接口"""

    @abstractmethod
    def log_check_start(self, domain_count: int):
        """记录检查开始"""
        pass

    @abstractmethod
    def log_domain_result(self, result: DomainResult):
        """记录单个域名的检查结果"""
        pass

    @abstractmethod
    def log_error(self, domain: str, error: Exception):
        """记录错误信息"""
        pass
