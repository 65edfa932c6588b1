"""
命令行入口测试
"""
import logging
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from checkssl.cli import DEFAULT_DOMAIN, CheckSSLApp, main
from checkssl.models import Tier
from checkssl.services.result_classifier import make_domain_result
from checkssl.services.ssl_checker import ERROR_RESULT, SSLCertificateChecker
from checkssl.settings import Settings

CHECK_CERTIFICATES = 'checkssl.cli.SSLCertificateChecker.check_certificates'


def fake_results(*pairs):
    return [make_domain_result(domain, result) for domain, result in pairs]


@pytest.fixture(autouse=True)
def fresh_logger():
    """每个测试使用新的日志处理器"""
    yield
    logging.getLogger("checkssl").handlers.clear()


class TestCheckSSLApp:
    """检查主类测试类"""

    def setup_method(self):
        """测试前准备"""
        self.settings = Settings(config_file="/nonexistent/.checkssl")

    def test_resolve_domains_from_options(self, tmp_path):
        """测试合并 -d 与 -f 的域名"""
        domain_file = tmp_path / "domains.txt"
        domain_file.write_text("test.org\n", encoding="utf-8")
        app = CheckSSLApp(self.settings)

        to_check, requested, errors = app.resolve_domains(["example.com"], [str(domain_file)])

        assert to_check == ["example.com", "test.org"]
        assert requested == to_check
        assert errors == []

    def test_resolve_domains_reads_default_file(self, tmp_path):
        """测试未指定域名时读取默认文件"""
        config_file = tmp_path / ".checkssl"
        config_file.write_text("example.com\n", encoding="utf-8")
        app = CheckSSLApp(Settings(config_file=str(config_file)))

        to_check, requested, errors = app.resolve_domains([], [])

        assert to_check == ["example.com"]
        assert requested == ["example.com"]

    def test_resolve_domains_falls_back(self):
        """测试没有任何域名时使用默认域名"""
        app = CheckSSLApp(self.settings)

        to_check, requested, errors = app.resolve_domains([], [])

        assert to_check == [DEFAULT_DOMAIN]
        assert requested == []
        assert errors == []

    def test_resolve_domains_skips_default_file_with_options(self, tmp_path):
        """测试指定了 -d 时不读取默认文件"""
        config_file = tmp_path / ".checkssl"
        config_file.write_text("example.com\n", encoding="utf-8")
        app = CheckSSLApp(Settings(config_file=str(config_file)))

        to_check, requested, errors = app.resolve_domains(["not a domain"], [])

        assert to_check == [DEFAULT_DOMAIN]
        assert errors == ["Invalid domain: not a domain"]

    @patch(CHECK_CERTIFICATES)
    def test_execute_sorts_results(self, mock_check):
        """测试执行检查并排序结果"""
        mock_check.return_value = (
            fake_results(("a.com", "01.01.2030"), ("down.com", ERROR_RESULT), ("b.com", "01.01.2029")),
            ["down.com: Request timeout for down.com"]
        )
        app = CheckSSLApp(self.settings)

        result = app.execute(["a.com", "down.com", "b.com"])

        assert [r.domain for r in result.results] == ["b.com", "a.com", "down.com"]
        assert result.total_domains == 3
        assert result.successful_checks == 2
        assert result.failed_checks == 1
        assert result.errors == ["down.com: Request timeout for down.com"]
        assert result.used_default_domain is False
        mock_check.assert_called_once_with(["a.com", "down.com", "b.com"], 10)

    @patch(CHECK_CERTIFICATES)
    def test_execute_descending(self, mock_check):
        """测试降序排序"""
        mock_check.return_value = (fake_results(("b.com", "01.01.2029"), ("a.com", "01.01.2030")), [])
        app = CheckSSLApp(self.settings)

        result = app.execute(["b.com", "a.com"], direction="desc")

        assert [r.domain for r in result.results] == ["a.com", "b.com"]
        assert all(r.tier is Tier.VALID for r in result.results)

    @patch(CHECK_CERTIFICATES)
    def test_execute_logs_and_reraises(self, mock_check):
        """测试检查过程中的意外错误"""
        mock_check.side_effect = RuntimeError("boom")
        app = CheckSSLApp(self.settings)

        with pytest.raises(RuntimeError):
            app.execute(["a.com"])

        assert app.logger_service.stats.errors[0]['error_message'] == "boom"


class TestMain:
    """命令行测试类"""

    def setup_method(self):
        """测试前准备"""
        self.runner = CliRunner()
        self.env = {'LOG_LEVEL': 'WARNING', 'CHECKSSL_CONFIG': '/nonexistent/.checkssl'}

    def invoke(self, args):
        return self.runner.invoke(main, args, env=self.env)

    def test_version(self):
        """测试版本输出"""
        result = self.invoke(["--version"])

        assert result.exit_code == 0
        assert "checkssl v1.0.0" in result.output

    def test_help(self):
        """测试帮助信息"""
        result = self.invoke(["-h"])

        assert result.exit_code == 0
        assert "--domain" in result.output
        assert "--suppress-errors" in result.output

    @patch(CHECK_CERTIFICATES)
    def test_table_output(self, mock_check):
        """测试表格输出"""
        mock_check.return_value = (fake_results(("example.com", "01.01.2030"), ("test.org", "01.01.2029")), [])

        result = self.invoke(["-d", "example.com", "-d", "test.org"])

        assert result.exit_code == 0
        assert result.output.splitlines() == [
            "=" * 28,
            "| test.org    | 01.01.2029 |",
            "| example.com | 01.01.2030 |",
            "=" * 28,
        ]

    @patch(CHECK_CERTIFICATES)
    def test_descending_order(self, mock_check):
        """测试 -o desc"""
        mock_check.return_value = (fake_results(("example.com", "01.01.2030"), ("test.org", "01.01.2029")), [])

        result = self.invoke(["-d", "example.com", "-d", "test.org", "-o", "desc"])

        assert result.exit_code == 0
        assert result.output.splitlines()[1] == "| example.com | 01.01.2030 |"

    @patch(CHECK_CERTIFICATES)
    def test_errors_printed(self, mock_check):
        """测试输出错误信息"""
        mock_check.return_value = (
            fake_results(("down.com", ERROR_RESULT)),
            ["down.com: Request timeout for down.com"]
        )

        result = self.invoke(["-d", "down.com"])

        assert result.exit_code == 0
        assert "|    Error   |" in result.output
        assert "❌ Errors encountered:" in result.output
        assert "   down.com: Request timeout for down.com" in result.output

    @patch(CHECK_CERTIFICATES)
    def test_suppress_errors(self, mock_check):
        """测试 -s 隐藏错误信息"""
        mock_check.return_value = (
            fake_results(("down.com", ERROR_RESULT)),
            ["down.com: Request timeout for down.com"]
        )

        result = self.invoke(["-d", "down.com", "-s"])

        assert result.exit_code == 0
        assert "Errors encountered" not in result.output

    @patch(CHECK_CERTIFICATES)
    def test_default_domain_prints_usage(self, mock_check):
        """测试没有域名时检查默认域名并输出用法"""
        mock_check.return_value = (fake_results((DEFAULT_DOMAIN, "01.01.2030")), [])

        result = self.invoke([])

        assert result.exit_code == 0
        assert "Usage:" in result.output
        assert "Example: checkssl -d google.com" in result.output
        assert "| google.com | 01.01.2030 |" in result.output
        assert "Tip: Provide domains using -d option or create ~/.checkssl file" in result.output
        mock_check.assert_called_once_with([DEFAULT_DOMAIN], 10)

    @patch(CHECK_CERTIFICATES)
    def test_options_override_environment(self, mock_check):
        """测试命令行参数覆盖环境变量"""
        mock_check.return_value = (fake_results(("example.com", "01.01.2030")), [])
        self.env['CHECKSSL_WORKERS'] = '2'

        with patch('checkssl.cli.SSLCertificateChecker', wraps=SSLCertificateChecker) as mock_cls:
            result = self.invoke(["-d", "example.com", "-t", "2.5", "-p", "8443"])

        assert result.exit_code == 0
        mock_cls.assert_called_once_with(timeout=2.5, port=8443, retries=0)
        mock_check.assert_called_once_with(["example.com"], 2)

    def test_invalid_configuration(self):
        """测试无效配置返回用法错误"""
        result = self.invoke(["-d", "example.com", "-t", "0"])

        assert result.exit_code == 2
        assert "Invalid timeout: 0.0 (must be a positive number)" in result.output

    def test_invalid_order(self):
        """测试无效排序方向"""
        result = self.invoke(["-d", "example.com", "-o", "sideways"])

        assert result.exit_code == 2

    def test_show_config(self):
        """测试 --show-config"""
        result = self.invoke(["--show-config"])

        assert result.exit_code == 0
        assert "✅ Configuration is valid" in result.output
        assert "Domain file /nonexistent/.checkssl does not exist" in result.output

    def test_show_config_invalid(self):
        """测试 --show-config 配置无效时的退出码"""
        result = self.invoke(["--show-config", "-w", "100"])

        assert result.exit_code == 2
        assert "❌ Configuration is invalid" in result.output

    @patch(CHECK_CERTIFICATES)
    def test_unexpected_error(self, mock_check):
        """测试意外错误的退出码"""
        mock_check.side_effect = RuntimeError("boom")

        result = self.invoke(["-d", "example.com"])

        assert result.exit_code == 1
        assert "Unexpected error: boom" in result.output
