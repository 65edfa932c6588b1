"""
域名列表的读取、清理与校验
"""
import os
import re
from typing import List, Tuple
import logging

from ..interfaces import DomainConfigManagerInterface
from ..settings import DEFAULT_CONFIG_FILE

MAX_DOMAIN_LENGTH = 253

INVALID_DOMAIN = "Invalid domain"

# 标签不以连字符开头或结尾，顶级域至少两个字母；长度只由 MAX_DOMAIN_LENGTH 限制
DOMAIN_PATTERN = re.compile(r'^(?:[a-z0-9](?:[a-z0-9-]*[a-z0-9])?\.)+[a-z]{2,}$')

# "https://host:443/path" -> "host"
_URL_PARTS = re.compile(r'^(?:[a-z][a-z0-9+.-]*://)?(?P<host>[^/:]*)', re.IGNORECASE)

COMMENT_PREFIX = '#'


class DomainConfigManager(DomainConfigManagerInterface):
    """从命令行参数、域名文件和默认文件收集要检查的域名"""

    def __init__(self, config_file: str = DEFAULT_CONFIG_FILE):
        """
        Args:
            config_file: 没有指定 -d/-f 时读取的默认域名文件
        """
        self.config_file = config_file
        self.logger = logging.getLogger(__name__)

    @property
    def config_path(self) -> str:
        return os.path.abspath(os.path.expanduser(self.config_file))

    def validate_domain(self, domain: str) -> bool:
        """
        校验域名（不区分大小写，忽略首尾空白）

        Args:
            domain: 待校验的域名

        Returns:
            bool: 是否为合法域名
        """
        if not isinstance(domain, str):
            return False

        candidate = domain.strip().lower()
        return 0 < len(candidate) <= MAX_DOMAIN_LENGTH and DOMAIN_PATTERN.fullmatch(candidate) is not None

    def clean_domain(self, domain: str) -> str:
        """
        去掉协议、端口和路径，只保留主机名（小写）

        "www." 前缀保留，它可能对应不同的证书。
        """
        if not isinstance(domain, str):
            return ""

        return _URL_PARTS.match(domain.strip()).group('host').strip().lower()

    def parse_domain_lines(self, content: str) -> Tuple[List[str], List[str]]:
        """
        解析域名文件内容

        每行一个域名，"#" 之后为注释，空行忽略。

        Args:
            content: 文件内容

        Returns:
            Tuple[List[str], List[str]]: (有效域名, 错误信息)
        """
        domains = []
        errors = []

        for line in content.splitlines():
            entry = line.partition(COMMENT_PREFIX)[0].strip()
            if not entry:
                continue

            host = self.clean_domain(entry)
            if not self.validate_domain(host):
                errors.append(f"{INVALID_DOMAIN}: {entry}")
                self.logger.warning(f"跳过无效域名: {entry}")
                continue
            domains.append(host)

        return domains, errors

    def read_domains_from_file(self, file_path: str) -> Tuple[List[str], List[str]]:
        """
        从文件读取域名列表

        Args:
            file_path: 文件路径

        Returns:
            Tuple[List[str], List[str]]: (有效域名, 错误信息)
        """
        path = os.path.abspath(os.path.expanduser(file_path))

        if not os.path.exists(path):
            return [], [f"File {path} does not exist"]

        try:
            with open(path, encoding='utf-8') as handle:
                content = handle.read()
        except (OSError, UnicodeDecodeError) as e:
            self.logger.error(f"读取域名文件 {path} 时发生错误: {str(e)}")
            return [], [f"Failed to read file {path}: {e}"]

        domains, errors = self.parse_domain_lines(content)
        self.logger.info(f"从 {path} 加载了 {len(domains)} 个域名")
        return domains, errors

    def collect_domains(self, domains: List[str], files: List[str]) -> Tuple[List[str], List[str]]:
        """
        合并命令行域名与文件中的域名，去除重复项（保留首次出现的顺序）

        Args:
            domains: 通过 -d 传入的域名
            files: 通过 -f 传入的文件路径

        Returns:
            Tuple[List[str], List[str]]: (域名列表, 错误信息)
        """
        collected = []
        errors = []

        for domain in domains:
            cleaned = self.clean_domain(domain)
            if self.validate_domain(cleaned):
                collected.append(cleaned)
            else:
                errors.append(f"{INVALID_DOMAIN}: {domain}")

        for file_path in files:
            file_domains, file_errors = self.read_domains_from_file(file_path)
            collected.extend(file_domains)
            errors.extend(file_errors)

        return list(dict.fromkeys(collected)), errors

    def load_default_domains(self) -> Tuple[List[str], List[str]]:
        """
        读取默认域名文件（不存在时返回空列表）

        Returns:
            Tuple[List[str], List[str]]: (域名列表, 错误信息)
        """
        if not os.path.exists(self.config_path):
            self.logger.debug(f"默认域名文件 {self.config_path} 不存在")
            return [], []

        domains, errors = self.read_domains_from_file(self.config_path)
        return list(dict.fromkeys(domains)), errors
