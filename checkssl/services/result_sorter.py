"""
检查结果排序服务
"""
from collections.abc import Mapping, Sequence
from typing import List, Union

from ..exceptions import InvalidInputError
from ..models import Classification, DomainResult, SortDirection, SortReport, Tier
from .result_classifier import classify_batch


def _resolve_direction(direction: Union[SortDirection, str]) -> SortDirection:
    if isinstance(direction, SortDirection):
        return direction
    try:
        return SortDirection(direction)
    except ValueError:
        raise InvalidInputError(f"Unknown sort direction: {direction!r}") from None


def _ensure_sequence(results) -> None:
    if isinstance(results, (str, bytes, bytearray, Mapping)) or not isinstance(results, Sequence):
        raise InvalidInputError("Results must be a list")


def sort_report(results, direction: Union[SortDirection, str] = SortDirection.ASCENDING) -> SortReport:
    """
    按过期日期对检查结果排序，并返回诊断信息

    排序规则：
      1. 有效日期 < 无法解析 < 错误标记，与方向无关
      2. 有效日期层按日期排序，方向决定先早后晚或先晚后早
      3. 其余两层以及相同日期保持输入顺序（稳定排序）

    Args:
        results: 检查结果序列
        direction: 排序方向，"asc" 或 "desc"

    Returns:
        SortReport: 排序后的结果及诊断信息

    Raises:
        InvalidInputError: 输入不是序列、条目结构不正确或方向未知
    """
    _ensure_sequence(results)
    order = _resolve_direction(direction)
    sign = -1 if order is SortDirection.DESCENDING else 1

    classifications, diagnostics = classify_batch(results)

    def sort_key(classification: Classification):
        if classification.tier is Tier.VALID:
            return classification.tier, sign * classification.date.ordinal
        return classification.tier, 0

    ordered = sorted(classifications, key=sort_key)
    return SortReport(results=[c.result for c in ordered], diagnostics=diagnostics)


def sort_results(results, direction: Union[SortDirection, str] = SortDirection.ASCENDING) -> List[DomainResult]:
    """
    按过期日期对检查结果排序

    Args:
        results: 检查结果序列
        direction: 排序方向

    Returns:
        List[DomainResult]: 排序后的新列表，输入不会被修改
    """
    return sort_report(results, direction).results
