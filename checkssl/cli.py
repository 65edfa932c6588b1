"""
命令行入口点
"""
from datetime import datetime, timezone
from typing import List, Sequence

import click

from .models import CheckResult, SortDirection, Tier
from .settings import Settings
from .services.config_validator import ConfigValidator, VALID_LOG_LEVELS
from .services.domain_config import DomainConfigManager
from .services.formatter import (
    format_results, longest_domain, print_errors, print_info, print_table, separator
)
from .services.logger import LoggerService
from .services.result_sorter import sort_report
from .services.ssl_checker import SSLCertificateChecker

__version__ = "1.0.0"

DEFAULT_DOMAIN = "google.com"

EXIT_SUCCESS = 0
EXIT_ERROR = 1


class CheckSSLApp:
    """证书过期检查主类"""

    def __init__(self, settings: Settings):
        """
        初始化检查器

        Args:
            settings: 运行配置
        """
        self.settings = settings
        self.logger_service = LoggerService(log_level=settings.log_level)
        self.domain_manager = DomainConfigManager(config_file=settings.config_file)
        self.ssl_checker = SSLCertificateChecker(
            timeout=settings.timeout,
            port=settings.port,
            retries=settings.retries
        )

        self.logger_service.log_configuration_info({
            'config_file': settings.config_path,
            'timeout': settings.timeout,
            'port': settings.port,
            'workers': settings.workers,
            'retries': settings.retries,
            'log_level': settings.log_level
        })

    def resolve_domains(self, domains: Sequence[str], files: Sequence[str]):
        """
        确定要检查的域名

        未指定 -d 和 -f 时读取默认域名文件；仍然没有域名时检查 google.com。

        Returns:
            tuple: (要检查的域名, 用户提供的域名, 错误信息)
        """
        requested, errors = self.domain_manager.collect_domains(list(domains), list(files))

        if not requested and not domains and not files:
            requested, default_errors = self.domain_manager.load_default_domains()
            errors.extend(default_errors)

        if not requested:
            self.logger_service.logger.info(f"没有找到要检查的域名，使用默认域名 {DEFAULT_DOMAIN}")

        return (requested or [DEFAULT_DOMAIN]), requested, errors

    def execute(self, domains: Sequence[str] = (), files: Sequence[str] = (),
                direction: str = SortDirection.ASCENDING.value) -> CheckResult:
        """
        执行证书检查

        Args:
            domains: 通过 -d 传入的域名
            files: 通过 -f 传入的文件
            direction: 排序方向

        Returns:
            CheckResult: 检查结果
        """
        start_time = datetime.now(timezone.utc)

        to_check, requested, errors = self.resolve_domains(domains, files)

        self.logger_service.log_check_start(len(to_check))

        try:
            results, check_errors = self.ssl_checker.check_certificates(to_check, self.settings.workers)
        except Exception as e:
            self.logger_service.log_error(", ".join(to_check), e)
            raise

        for result in results:
            self.logger_service.log_domain_result(result)

        report = sort_report(results, direction)
        for diagnostic in report.diagnostics:
            self.logger_service.logger.warning(f"无法解析的过期时间: {diagnostic}")

        self.logger_service.log_check_end()
        self.logger_service.logger.debug(
            f"错误统计: {self.ssl_checker.error_handler.get_error_statistics(self.ssl_checker.error_log)}"
        )
        self.logger_service.log_execution_summary()

        failed = len([r for r in report.results if r.tier is Tier.ERROR_MARKER])

        return CheckResult(
            total_domains=len(to_check),
            successful_checks=len(report.results) - failed,
            failed_checks=failed,
            results=report.results,
            errors=errors + check_errors,
            execution_time=(datetime.now(timezone.utc) - start_time).total_seconds(),
            used_default_domain=not requested
        )


def display_results(ctx: click.Context, result: CheckResult, suppress_errors: bool = False) -> None:
    """
    以表格形式输出结果

    Args:
        ctx: click 上下文
        result: 检查结果
        suppress_errors: 是否隐藏错误信息
    """
    if not result.results:
        print_usage(ctx)
        print_info()
        return

    width = longest_domain(r.domain for r in result.results)

    if result.used_default_domain:
        print_usage(ctx)

    print_table(format_results(result.results, width), separator(width))

    if result.errors and not suppress_errors:
        print_errors(result.errors)

    if result.used_default_domain:
        print_info()


def print_usage(ctx: click.Context) -> None:
    click.echo(ctx.get_usage())
    click.echo("Example: checkssl -d google.com")
    click.echo("")


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(
    __version__, "-v", "--version", prog_name="checkssl", message="%(prog)s v%(version)s"
)
@click.option("-d", "--domain", "domains", multiple=True, help="Check a specific domain (repeatable).")
@click.option("-f", "--file", "files", multiple=True, help="Read domains from a file (repeatable).")
@click.option("-s", "--suppress-errors", is_flag=True, help="Suppress error messages.")
@click.option(
    "-o", "--order",
    type=click.Choice([d.value for d in SortDirection]),
    default=SortDirection.ASCENDING.value,
    show_default=True,
    help="Sort direction of the expiry dates.",
)
@click.option("-t", "--timeout", type=float, default=None, help="Connection timeout in seconds [env: CHECKSSL_TIMEOUT].")
@click.option("-p", "--port", type=int, default=None, help="TLS port [env: CHECKSSL_PORT].")
@click.option("-w", "--workers", type=int, default=None, help="Concurrent checks [env: CHECKSSL_WORKERS].")
@click.option("-r", "--retries", type=int, default=None, help="Retries on network errors [env: CHECKSSL_RETRIES].")
@click.option(
    "-c", "--config", "config_file", default=None,
    help="Default domain file used when no -d/-f is given [env: CHECKSSL_CONFIG].",
)
@click.option(
    "--log-level",
    type=click.Choice(sorted(VALID_LOG_LEVELS), case_sensitive=False),
    default=None,
    help="Log level for stderr diagnostics [env: LOG_LEVEL].",
)
@click.option("--show-config", is_flag=True, help="Print the effective configuration and exit.")
@click.pass_context
def main(
    ctx: click.Context,
    domains: List[str],
    files: List[str],
    suppress_errors: bool,
    order: str,
    timeout,
    port,
    workers,
    retries,
    config_file,
    log_level,
    show_config: bool,
) -> None:
    """Check SSL certificate expiration dates for domains.

    If no -d or -f option is given, domains are read from ~/.checkssl.
    """
    settings = Settings.from_env().override(
        timeout=timeout,
        port=port,
        workers=workers,
        retries=retries,
        config_file=config_file,
        log_level=log_level,
    )

    validator = ConfigValidator()
    validation = validator.validate(settings)

    if show_config:
        click.echo(validator.get_configuration_summary(settings))
        ctx.exit(EXIT_SUCCESS if validation['is_valid'] else 2)

    if not validation['is_valid']:
        raise click.UsageError("; ".join(validation['errors']), ctx=ctx)

    try:
        app = CheckSSLApp(settings)
        result = app.execute(domains, files, order)
    except Exception as e:
        click.echo(f"Unexpected error: {e}", err=True)
        ctx.exit(EXIT_ERROR)

    display_results(ctx, result, suppress_errors)


if __name__ == "__main__":
    main()
