"""
网络错误处理服务
"""
import socket
import ssl
import time
import logging
from collections import Counter
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List

from ..exceptions import CertificateCheckError

# 证书校验失败、证书本身的问题重试也不会成功
NON_RETRYABLE_ERRORS = (ssl.CertificateError, CertificateCheckError, ValueError, TypeError)

RETRYABLE_ERRORS = (socket.timeout, socket.gaierror, ConnectionError, OSError)

RETRYABLE_MESSAGES = (
    'timeout',
    'timed out',
    'connection refused',
    'connection reset',
    'network is unreachable',
    'no route to host',
    'temporary failure',
    'name resolution failed',
)

DEFAULT_ACTION = "Check network connectivity and server status"


def _suggested_action(error: Exception) -> str:
    message = str(error).lower()

    if isinstance(error, socket.timeout) or 'timeout' in message:
        return "Check network connectivity or increase the timeout"
    if isinstance(error, socket.gaierror):
        return "Check that the domain is spelled correctly and DNS is reachable"
    if isinstance(error, ConnectionRefusedError):
        return "Check that the server is running and the port is correct"
    if isinstance(error, ssl.CertificateError) or 'certificate verify failed' in message:
        return "Certificate verification failed: check for self-signed or incomplete chains"
    if isinstance(error, ssl.SSLError):
        if 'handshake failure' in message:
            return "TLS handshake failed: check protocol version compatibility"
        return "Check the server's TLS configuration"
    if 'already expired' in message:
        return "Renew the certificate"
    if 'network is unreachable' in message:
        return "Network is unreachable: check connectivity and routing"
    if 'no route to host' in message:
        return "No route to host: check firewall and network configuration"
    return DEFAULT_ACTION


class NetworkErrorHandler:
    """连接失败的重试与错误信息整理"""

    def __init__(self, max_retries: int = 0, base_delay: float = 1.0):
        """
        Args:
            max_retries: 最大重试次数，0 表示不重试
            base_delay: 第一次重试前的等待时间（秒），之后每次翻倍
        """
        self.max_retries = max_retries
        self.base_delay = base_delay
        self.logger = logging.getLogger(__name__)

    def is_retryable(self, error: Exception) -> bool:
        """
        判断错误是否值得重试

        先按异常类型判断，类型无法确定时再看错误消息。

        Args:
            error: 异常对象

        Returns:
            bool: 是否可重试
        """
        if isinstance(error, NON_RETRYABLE_ERRORS):
            return False
        if isinstance(error, RETRYABLE_ERRORS):
            return True

        message = str(error).lower()
        return any(fragment in message for fragment in RETRYABLE_MESSAGES)

    def with_retry(self, func: Callable, *args, **kwargs) -> Any:
        """
        执行函数，遇到可重试的错误时按指数退避重试

        Returns:
            Any: 函数的返回值

        Raises:
            Exception: 不可重试的错误，或最后一次尝试的错误
        """
        attempts = self.max_retries + 1

        for attempt in range(1, attempts + 1):
            try:
                return func(*args, **kwargs)
            except Exception as e:
                if attempt == attempts or not self.is_retryable(e):
                    if attempt > 1:
                        self.logger.error(f"重试 {attempt - 1} 次后仍然失败: {type(e).__name__}: {e}")
                    raise

                delay = self.base_delay * 2 ** (attempt - 1)
                self.logger.warning(
                    f"第 {attempt}/{attempts} 次尝试失败: {type(e).__name__}: {e}，{delay:.1f}秒后重试"
                )
                time.sleep(delay)

    def handle_ssl_connection_error(self, domain: str, error: Exception) -> Dict[str, Any]:
        """
        整理单个域名的连接错误

        Args:
            domain: 域名
            error: 异常对象

        Returns:
            Dict[str, Any]: 错误类型、是否可重试以及建议的处理方式
        """
        retryable = self.is_retryable(error)
        error_info = {
            'domain': domain,
            'error_type': type(error).__name__,
            'error_message': str(error),
            'is_retryable': retryable,
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'suggested_action': _suggested_action(error)
        }

        log = self.logger.warning if retryable else self.logger.error
        log(f"域名 {domain} SSL连接错误（{'可重试' if retryable else '不可重试'}）: {error}")

        return error_info

    def get_error_statistics(self, error_list: List[Dict[str, Any]]) -> Dict[str, Any]:
        """
        按错误类型汇总

        Args:
            error_list: handle_ssl_connection_error 返回的错误信息列表

        Returns:
            Dict[str, Any]: 错误统计
        """
        types = Counter(info.get('error_type', 'Unknown') for info in error_list)
        retryable = sum(1 for info in error_list if info.get('is_retryable'))
        most_common = types.most_common(1)

        return {
            'total_errors': len(error_list),
            'retryable_errors': retryable,
            'non_retryable_errors': len(error_list) - retryable,
            'error_types': dict(types),
            'most_common_error': most_common[0][0] if most_common else None,
            'most_common_error_count': most_common[0][1] if most_common else 0
        }
