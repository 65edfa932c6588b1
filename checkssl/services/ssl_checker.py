"""
SSL证书检查服务
"""
import ssl
import socket
import concurrent.futures as cf
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple
import logging

from ..exceptions import CertificateCheckError, CertificateExpiredError
from ..interfaces import SSLCertificateCheckerInterface
from ..models import DomainResult
from .error_handler import NetworkErrorHandler
from .result_classifier import make_domain_result

# 检查失败时表格中显示的结果
ERROR_RESULT = "   Error  "

DATE_FORMAT = "%d.%m.%Y"

# 证书时间格式：'Dec 31 23:59:59 2024 GMT'
CERT_TIME_FORMAT = "%b %d %H:%M:%S %Y %Z"


class SSLCertificateChecker(SSLCertificateCheckerInterface):
    """SSL证书检查器实现"""

    def __init__(self, timeout: float = 5, port: int = 443, retries: int = 0):
        """
        初始化SSL证书检查器

        Args:
            timeout: 连接超时时间（秒）
            port: SSL端口，默认443
            retries: 网络错误的重试次数
        """
        self.timeout = timeout
        self.port = port
        self.logger = logging.getLogger(__name__)
        self.error_handler = NetworkErrorHandler(max_retries=retries, base_delay=1.0)
        self.error_log: List[Dict[str, Any]] = []

    def get_certificate(self, domain: str) -> str:
        """
        获取证书过期日期

        Args:
            domain: 要检查的域名

        Returns:
            str: 本地时间的过期日期，格式为 dd.mm.yyyy

        Raises:
            CertificateCheckError: 连接失败、证书缺失或证书已过期
        """
        if not isinstance(domain, str) or not domain.strip():
            raise CertificateCheckError("Domain must be a non-empty string", domain)

        try:
            cert = self.error_handler.with_retry(self._get_ssl_certificate, domain)
        except socket.timeout as e:
            raise CertificateCheckError(f"Request timeout for {domain}", domain) from e
        except (OSError, ValueError) as e:
            raise CertificateCheckError(f"Connection failed for {domain}: {e}", domain) from e

        if not cert or not cert.get('notAfter'):
            raise CertificateCheckError(f"No valid certificate found for {domain}", domain)

        try:
            expiry_date = self._parse_expiry_date(cert)
        except ValueError as e:
            raise CertificateCheckError(f"Failed to process certificate for {domain}: {e}", domain) from e

        if expiry_date < datetime.now(timezone.utc):
            raise CertificateExpiredError(f"Certificate for {domain} has already expired", domain)

        # 转换为本地时间后格式化
        return expiry_date.astimezone().strftime(DATE_FORMAT)

    def check_certificate(self, domain: str) -> Tuple[DomainResult, Optional[str]]:
        """
        检查单个域名的SSL证书

        Args:
            domain: 要检查的域名

        Returns:
            Tuple[DomainResult, Optional[str]]: (检查结果, 错误信息)
        """
        try:
            expiry = self.get_certificate(domain)
        except CertificateCheckError as e:
            cause = e.__cause__ or e
            self.error_log.append(self.error_handler.handle_ssl_connection_error(domain, cause))
            return make_domain_result(domain, ERROR_RESULT), f"{domain}: {e}"

        self.logger.debug(f"域名 {domain} 证书过期时间: {expiry}")
        return make_domain_result(domain, expiry), None

    def check_certificates(self, domains: List[str], workers: int = 10) -> Tuple[List[DomainResult], List[str]]:
        """
        并发检查多个域名

        所有结果都返回后才交给排序，结果顺序与输入顺序一致。

        Args:
            domains: 域名列表
            workers: 并发线程数

        Returns:
            Tuple[List[DomainResult], List[str]]: (检查结果, 错误信息)
        """
        if not domains:
            return [], []

        with cf.ThreadPoolExecutor(max_workers=max(1, min(workers, len(domains)))) as executor:
            outcomes = list(executor.map(self.check_certificate, domains))

        results = [result for result, _ in outcomes]
        errors = [error for _, error in outcomes if error]
        return results, errors

    def _get_ssl_certificate(self, domain: str) -> dict:
        """
        通过已验证的TLS握手获取证书

        Args:
            domain: 域名

        Returns:
            dict: SSL证书信息
        """
        context = ssl.create_default_context()

        with socket.create_connection((domain, self.port), timeout=self.timeout) as sock:
            with context.wrap_socket(sock, server_hostname=domain) as ssock:
                return ssock.getpeercert()

    def _parse_expiry_date(self, cert: dict) -> datetime:
        """
        解析证书过期时间

        Args:
            cert: SSL证书信息

        Returns:
            datetime: 过期时间（UTC）
        """
        expiry_date = datetime.strptime(cert['notAfter'], CERT_TIME_FORMAT)
        return expiry_date.replace(tzinfo=timezone.utc)
