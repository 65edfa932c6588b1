"""
证书过期日期解析服务
"""
import re
from typing import List, Tuple

from ..exceptions import (
    DateParseError, MalformedFormatError, NonNumericComponentError, OutOfRangeError
)
from ..models import MAX_YEAR, MIN_YEAR, ParsedDate

# 按优先级排列：(分隔符, 各部分含义)
DATE_LAYOUTS: List[Tuple[str, Tuple[str, str, str]]] = [
    ('.', ('day', 'month', 'year')),    # dd.mm.yyyy
    ('/', ('month', 'day', 'year')),    # mm/dd/yyyy
]

_DIGITS = re.compile(r'[0-9]+')


def parse_date(raw) -> ParsedDate:
    """
    解析证书过期日期字符串

    分隔符决定格式：点号为日在前（dd.mm.yyyy），斜杠为月在前（mm/dd/yyyy）。
    只校验数值范围，不校验每月天数。

    Args:
        raw: 日期字符串，例如 "02.01.2025" 或 "02/01/2025"

    Returns:
        ParsedDate: 解析后的日期

    Raises:
        MalformedFormatError: 格式无法识别或不是三段
        NonNumericComponentError: 某一部分不是整数
        OutOfRangeError: 日、月、年超出范围
    """
    if not isinstance(raw, str):
        raise MalformedFormatError(f"Invalid date format: {raw!r}", raw)

    text = raw.strip()

    for sep, fields in DATE_LAYOUTS:
        if sep in text:
            break
    else:
        raise MalformedFormatError(f"Invalid date format: {raw!r}", raw)

    parts = text.split(sep)
    if len(parts) != 3:
        raise MalformedFormatError(f"Invalid date format: {raw!r}", raw)

    if not all(_DIGITS.fullmatch(part.strip()) for part in parts):
        raise NonNumericComponentError(f"Invalid date components: {raw!r}", raw)

    values = dict(zip(fields, (int(part) for part in parts)))
    day, month, year = values['day'], values['month'], values['year']

    if not (1 <= day <= 31 and 1 <= month <= 12 and MIN_YEAR <= year <= MAX_YEAR):
        raise OutOfRangeError(f"Date out of range: {raw!r}", raw)

    return ParsedDate(day=day, month=month, year=year)


def try_parse_date(raw):
    """
    解析日期，失败时不抛出异常

    Returns:
        tuple: (ParsedDate 或 None, 失败原因 或 None)
    """
    try:
        return parse_date(raw), None
    except DateParseError as e:
        return None, str(e)
