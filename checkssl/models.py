"""
数据模型定义
"""
from dataclasses import dataclass, field
from datetime import MAXYEAR, datetime, timedelta
from enum import Enum, IntEnum
from typing import Optional, List, Union

from .exceptions import OutOfRangeError

MIN_YEAR = 1000
MAX_YEAR = MAXYEAR


class Tier(IntEnum):
    """排序分层：有效日期 < 无法解析 < 错误标记"""
    VALID = 0
    INVALID = 1
    ERROR_MARKER = 2


class SortDirection(Enum):
    """排序方向（只影响有效日期层内部的顺序）"""
    ASCENDING = "asc"
    DESCENDING = "desc"


@dataclass(frozen=True)
class ParsedDate:
    """解析后的证书过期日期（无时区，午夜）"""
    day: int
    month: int
    year: int

    def __post_init__(self):
        if not (1 <= self.day <= 31 and 1 <= self.month <= 12 and MIN_YEAR <= self.year <= MAX_YEAR):
            raise OutOfRangeError(
                f"Date out of range: day={self.day}, month={self.month}, year={self.year}"
            )

    @property
    def instant(self) -> datetime:
        """
        转换为可比较的时间点

        日期不做日历校验，超出当月天数的部分顺延到下个月，
        例如 31.02.2025 等同于 2025-03-03。

        Returns:
            datetime: 午夜时间点
        """
        return datetime(self.year, self.month, 1) + timedelta(days=self.day - 1)

    @property
    def ordinal(self) -> int:
        return self.instant.toordinal()


@dataclass(frozen=True)
class Expiry:
    """检查成功，包含过期日期"""
    raw: str
    date: ParsedDate


@dataclass(frozen=True)
class RawError:
    """检查失败的标记字符串"""
    marker: str


@dataclass(frozen=True)
class RawUnparseable:
    """无法解析为日期的结果字符串"""
    raw: str
    reason: str = ""


Outcome = Union[Expiry, RawError, RawUnparseable]


@dataclass(frozen=True)
class DomainResult:
    """单个域名的检查结果"""
    domain: str
    outcome: Outcome

    @property
    def result(self) -> str:
        """表格中显示的原始结果文本"""
        if isinstance(self.outcome, RawError):
            return self.outcome.marker
        return self.outcome.raw

    @property
    def tier(self) -> Tier:
        if isinstance(self.outcome, Expiry):
            return Tier.VALID
        if isinstance(self.outcome, RawError):
            return Tier.ERROR_MARKER
        return Tier.INVALID


@dataclass(frozen=True)
class Classification:
    """分类结果"""
    result: DomainResult
    tier: Tier
    date: Optional[ParsedDate] = None
    diagnostic: Optional[str] = None


@dataclass
class SortReport:
    """排序结果及诊断信息"""
    results: List[DomainResult]
    diagnostics: List[str] = field(default_factory=list)


@dataclass
class CheckResult:
    """检查结果统计"""
    total_domains: int
    successful_checks: int
    failed_checks: int
    results: List[DomainResult]
    errors: List[str]
    execution_time: float
    used_default_domain: bool = False

    @property
    def success_rate(self) -> float:
        return self.successful_checks / self.total_domains if self.total_domains > 0 else 0
