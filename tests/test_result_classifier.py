"""
结果分类测试
"""
from checkssl.models import (
    DomainResult, Expiry, ParsedDate, RawError, RawUnparseable, Tier
)
from checkssl.services.result_classifier import (
    classify, classify_batch, make_domain_result, to_domain_result
)


class TestMakeDomainResult:
    """DomainResult 构造测试类"""

    def test_valid_date(self):
        """测试有效日期"""
        result = make_domain_result("example.com", "01.01.2025")

        assert result.outcome == Expiry(raw="01.01.2025", date=ParsedDate(1, 1, 2025))
        assert result.result == "01.01.2025"
        assert result.tier is Tier.VALID

    def test_error_marker(self):
        """测试错误标记（保留原始空白）"""
        result = make_domain_result("error.com", "   Error  ")

        assert result.outcome == RawError(marker="   Error  ")
        assert result.result == "   Error  "
        assert result.tier is Tier.ERROR_MARKER

    def test_error_marker_takes_priority(self):
        """测试包含 Error 的字符串不做日期解析"""
        result = make_domain_result("odd.com", "01.01.2025 Error")

        assert result.tier is Tier.ERROR_MARKER

    def test_error_marker_is_case_sensitive(self):
        """测试错误标记区分大小写"""
        result = make_domain_result("lower.com", "error")

        assert result.tier is Tier.INVALID

    def test_unparseable(self):
        """测试无法解析的日期"""
        result = make_domain_result("invalid-date.com", "32.01.2025")

        assert isinstance(result.outcome, RawUnparseable)
        assert result.result == "32.01.2025"
        assert "Date out of range" in result.outcome.reason
        assert result.tier is Tier.INVALID

    def test_non_string_result(self):
        """测试非字符串结果"""
        none_result = make_domain_result("none.com", None)
        number_result = make_domain_result("number.com", 42)

        assert none_result.tier is Tier.INVALID
        assert none_result.result == ""
        assert number_result.tier is Tier.INVALID
        assert number_result.result == "42"


class TestToDomainResult:
    """边界校验测试类"""

    def test_mapping(self):
        """测试字典输入"""
        result = to_domain_result({'domain': 'a.co', 'result': '01.01.2025'})

        assert result.domain == 'a.co'
        assert result.tier is Tier.VALID

    def test_tuple(self):
        """测试二元组输入"""
        result = to_domain_result(('a.co', '   Error  '))

        assert result.tier is Tier.ERROR_MARKER

    def test_domain_result_passthrough(self):
        """测试 DomainResult 直接返回"""
        original = make_domain_result('a.co', '01.01.2025')

        assert to_domain_result(original) is original

    def test_malformed_entries_become_unparseable(self):
        """测试结构不正确的条目归入无法解析层"""
        for entry in [None, 42, "a.co", ['a.co', '01.01.2025'], ('a.co',)]:
            result = to_domain_result(entry)

            assert result.domain == ""
            assert result.tier is Tier.INVALID
            assert isinstance(result.outcome, RawUnparseable)
            assert result.outcome.reason.startswith("Malformed result entry")

    def test_mapping_without_result_keeps_domain(self):
        """测试缺少 result 的映射保留域名"""
        result = to_domain_result({'domain': 'a.co'})

        assert result.domain == 'a.co'
        assert result.result == ""
        assert result.tier is Tier.INVALID

    def test_malformed_entry_has_diagnostic(self):
        """测试结构不正确的条目带诊断信息"""
        classification = classify(to_domain_result({'domain': 'x.com', 'date': '01.01.2025'}))

        assert classification.tier is Tier.INVALID
        assert classification.diagnostic.startswith("x.com: Malformed result entry")


class TestClassify:
    """分类测试类"""

    def test_valid(self):
        """测试有效分类"""
        classification = classify(make_domain_result("a.co", "02.01.2025"))

        assert classification.tier is Tier.VALID
        assert classification.date == ParsedDate(2, 1, 2025)
        assert classification.diagnostic is None

    def test_invalid_has_diagnostic(self):
        """测试无法解析的结果带诊断信息"""
        classification = classify(make_domain_result("bad.com", "not a date"))

        assert classification.tier is Tier.INVALID
        assert classification.date is None
        assert classification.diagnostic.startswith("bad.com: ")

    def test_error_marker(self):
        """测试错误标记分类"""
        classification = classify(DomainResult("e.com", RawError("   Error  ")))

        assert classification.tier is Tier.ERROR_MARKER
        assert classification.diagnostic is None

    def test_classify_batch_returns_diagnostics(self):
        """测试批量分类返回诊断信息而不是全局累积"""
        entries = [
            {'domain': 'a.com', 'result': '01.01.2026'},
            {'domain': 'b.com', 'result': '32.01.2025'},
            {'domain': 'c.com', 'result': '   Error  '},
            {'domain': 'd.com', 'result': '2025-01-01'},
        ]

        classifications, diagnostics = classify_batch(entries)

        assert [c.tier for c in classifications] == [
            Tier.VALID, Tier.INVALID, Tier.ERROR_MARKER, Tier.INVALID
        ]
        assert len(diagnostics) == 2
        assert diagnostics[0].startswith("b.com: ")
        assert diagnostics[1].startswith("d.com: ")

        # 再次调用不会累积之前的诊断信息
        _, again = classify_batch(entries[:1])
        assert again == []
