"""
检查结果分类服务
"""
import logging
from collections.abc import Mapping
from typing import Iterable, List, Tuple

from ..models import (
    Classification, DomainResult, Expiry, RawError, RawUnparseable, Tier
)
from .date_parser import try_parse_date

# 结果字符串中包含此子串即视为错误标记（区分大小写）
ERROR_MARKER = "Error"

MALFORMED_ENTRY = "Malformed result entry"

logger = logging.getLogger(__name__)


def _as_text(value) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def make_domain_result(domain: str, result) -> DomainResult:
    """
    根据原始结果字符串构造带标签的检查结果

    包含 "Error" 的字符串直接作为错误标记，不做日期解析。

    Args:
        domain: 域名
        result: 原始结果字符串

    Returns:
        DomainResult: 检查结果
    """
    text = _as_text(result)

    if isinstance(result, str) and ERROR_MARKER in result:
        return DomainResult(domain=domain, outcome=RawError(marker=text))

    parsed, reason = try_parse_date(result)
    if parsed is None:
        return DomainResult(domain=domain, outcome=RawUnparseable(raw=text, reason=reason))

    return DomainResult(domain=domain, outcome=Expiry(raw=text, date=parsed))


def to_domain_result(entry) -> DomainResult:
    """
    在边界处校验外部数据并转换为 DomainResult

    接受 DomainResult、带 domain/result 键的映射，或 (domain, result) 二元组。
    其他结构的条目归入无法解析层，不会中断整批处理；映射中的 domain 会被保留。
    """
    if isinstance(entry, DomainResult):
        return entry

    if isinstance(entry, Mapping) and 'domain' in entry and 'result' in entry:
        return make_domain_result(_as_text(entry['domain']), entry['result'])

    if isinstance(entry, tuple) and len(entry) == 2:
        domain, result = entry
        return make_domain_result(_as_text(domain), result)

    domain = _as_text(entry.get('domain')) if isinstance(entry, Mapping) else ""
    return DomainResult(
        domain=domain,
        outcome=RawUnparseable(raw="", reason=f"{MALFORMED_ENTRY}: {entry!r}")
    )


def classify(result: DomainResult) -> Classification:
    """
    将检查结果归入排序分层

    Args:
        result: 检查结果

    Returns:
        Classification: 分层及诊断信息
    """
    outcome = result.outcome

    if isinstance(outcome, Expiry):
        return Classification(result=result, tier=Tier.VALID, date=outcome.date)

    if isinstance(outcome, RawError):
        return Classification(result=result, tier=Tier.ERROR_MARKER)

    diagnostic = f"{result.domain}: {outcome.reason or 'Invalid date format'}"
    return Classification(result=result, tier=Tier.INVALID, diagnostic=diagnostic)


def classify_batch(entries: Iterable) -> Tuple[List[Classification], List[str]]:
    """
    对一批结果进行分类

    Returns:
        tuple: (分类列表, 诊断信息列表)
    """
    classifications = [classify(to_domain_result(entry)) for entry in entries]
    diagnostics = [c.diagnostic for c in classifications if c.diagnostic]

    for message in diagnostics:
        logger.debug(f"无法解析的结果: {message}")

    return classifications, diagnostics
