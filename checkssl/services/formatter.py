"""
结果表格格式化与输出
"""
from collections.abc import Mapping, Sequence
from typing import Iterable, List

import click

from ..exceptions import InvalidInputError
from .result_classifier import to_domain_result

MIN_COLUMN_WIDTH = 10

# "| "、" | "、" |" 加上结果列的常见宽度（10个字符），属于展示约定，不根据内容计算
SEPARATOR_OVERHEAD = 17

INFO_LINES = [
    "",
    "💡 Tip: Provide domains using -d option or create ~/.checkssl file",
    "   Example: checkssl -d example.com",
]


def longest_domain(domains: Iterable) -> int:
    """
    计算最长域名的长度（忽略非字符串）

    Args:
        domains: 域名列表

    Returns:
        int: 最长域名长度
    """
    return max((len(d) for d in domains if isinstance(d, str)), default=0)


def format_results(results, min_column_width: int) -> List[str]:
    """
    将排序后的结果格式化为表格行

    域名列宽度对整批结果只计算一次：
    max(min_column_width, 10, 最长域名长度)。

    Args:
        results: 排序后的检查结果
        min_column_width: 最小列宽

    Returns:
        List[str]: 表格行，例如 "| example.com | 01.01.2025 |"

    Raises:
        InvalidInputError: 输入不是序列
    """
    if isinstance(results, (str, bytes, bytearray, Mapping)) or not isinstance(results, Sequence):
        raise InvalidInputError("Results must be a list")

    rows = [to_domain_result(entry) for entry in results]
    width = max(min_column_width, MIN_COLUMN_WIDTH, longest_domain(row.domain for row in rows))

    return [f"| {row.domain.ljust(width)} | {row.result} |" for row in rows]


def separator(width: int) -> str:
    """生成表格边框行"""
    return "=" * (max(width, MIN_COLUMN_WIDTH) + SEPARATOR_OVERHEAD)


def print_table(lines: List[str], line: str) -> None:
    """
    打印表格

    Args:
        lines: 表格行
        line: 边框行
    """
    if not isinstance(lines, list):
        click.echo("Error: Invalid results format", err=True)
        return

    click.echo(line)
    for row in lines:
        click.echo(row)
    click.echo(line)


def print_errors(errors: List[str]) -> None:
    """打印错误列表（空列表时不输出）"""
    if not isinstance(errors, list) or not errors:
        return

    click.echo("")
    click.echo("❌ Errors encountered:")
    click.echo("")
    for error in errors:
        click.echo(f"   {error}")


def print_info() -> None:
    for line in INFO_LINES:
        click.echo(line)
