"""
nat_router/cli/app.py - 메인 CLI 엔트리포인트

Click 기반의 CLI 애플리케이션 진입점입니다. 모든 옵션은 환경 변수로도
지정할 수 있습니다.

Usage:
    $ nat-router --vpc-id vpc-0123 --cluster-id squid --ec2-election
    $ NAT_VPC_ID=vpc-0123 nat-router --once -l debug
    $ python -m nat_router --version

종료 코드:
    0: 정상 종료 (종료 신호 수신 또는 --once 완료)
    1: 설정 오류 (루프에 진입하지 않음)
"""

from __future__ import annotations

import logging
import signal
import threading

import click

from nat_router.aws import AwsFinder, AwsIdentifier, AwsRouter, build_session
from nat_router.core.config import (
    DEFAULT_CLUSTER_ID,
    DEFAULT_INTERVAL,
    DEFAULT_PORT,
    DEFAULT_PROBE_WORKERS,
    DEFAULT_REGION,
    DEFAULT_TIMEOUT,
    RouterConfig,
    get_version,
)
from nat_router.core.exceptions import ConfigError, format_error_for_user
from nat_router.router import ReconcileLoop, resolve_identity

from .console import LOG_LEVELS, print_error, setup_logging

logger = logging.getLogger(__name__)


def _install_signal_handlers(shutdown_event: threading.Event) -> None:
    """SIGTERM/SIGINT 수신 시 종료 이벤트 설정"""

    def _handler(signum, frame) -> None:
        logger.info(f"Received {signal.Signals(signum).name}, shutting down...")
        shutdown_event.set()

    try:
        signal.signal(signal.SIGTERM, _handler)
        signal.signal(signal.SIGINT, _handler)
    except ValueError as e:
        # 메인 스레드가 아니면 등록 불가
        logger.warning(f"Failed to register signal handlers: {e}")


@click.command(
    name="nat-router",
    context_settings={"help_option_names": ["-h", "--help"]},
    help="Manage AWS Nat Instance and private subnet routing tables",
)
@click.version_option(get_version(), "-v", "--version", prog_name="nat-router")
@click.option(
    "--log-level",
    "-l",
    default="error",
    show_default=True,
    envvar="LOG_LEVEL",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    help="Log level",
)
@click.option("--aws-access-key", default=None, help="Optional aws access key to use")
@click.option("--aws-secret-key", default=None, help="Optional aws secret key to use")
@click.option("--profile", default=None, envvar="AWS_PROFILE", help="Optional shared credentials profile")
@click.option("--region", "-r", default=DEFAULT_REGION, show_default=True, envvar="AWS_REGION", metavar="REGION", help="AWS region")
@click.option("--vpc-id", default="", envvar="NAT_VPC_ID", metavar="ID", help="Required ID of the VPC the NAT Instances live in")
@click.option(
    "--cluster-id",
    default=DEFAULT_CLUSTER_ID,
    show_default=True,
    envvar="NAT_CLUSTER_ID",
    metavar="ID",
    help="ID the NAT Instances are tagged with",
)
@click.option("--ec2-election", is_flag=True, envvar="NAT_EC2_ELECTION", help="Use EC2 metadata leader election")
@click.option("--public", is_flag=True, envvar="NAT_HC_PUBLIC", help="Use Public IPs for health checks")
@click.option("--port", "-p", default=DEFAULT_PORT, show_default=True, envvar="NAT_HC_PORT", type=int, metavar="PORT", help="PORT for TCP HealthChecks")
@click.option(
    "--timeout",
    default=DEFAULT_TIMEOUT,
    show_default=True,
    envvar="NAT_HC_TIMEOUT",
    type=float,
    metavar="SECONDS",
    help="Seconds before HealthChecks time out",
)
@click.option(
    "--interval",
    default=DEFAULT_INTERVAL,
    show_default=True,
    envvar="NAT_INTERVAL",
    type=float,
    metavar="SECONDS",
    help="Seconds between reconciliation cycles (>= 1)",
)
@click.option(
    "--workers",
    default=DEFAULT_PROBE_WORKERS,
    show_default=True,
    envvar="NAT_HC_WORKERS",
    type=int,
    help="Concurrent HealthChecks",
)
@click.option("--once", is_flag=True, help="Run a single reconciliation cycle and exit")
@click.pass_context
def cli(
    ctx: click.Context,
    log_level: str,
    aws_access_key: str | None,
    aws_secret_key: str | None,
    profile: str | None,
    region: str,
    vpc_id: str,
    cluster_id: str,
    ec2_election: bool,
    public: bool,
    port: int,
    timeout: float,
    interval: float,
    workers: int,
    once: bool,
) -> None:
    setup_logging(log_level)

    try:
        config = RouterConfig(
            vpc_id=vpc_id,
            cluster_id=cluster_id,
            region=region,
            interval=interval,
            port=port,
            timeout=timeout,
            use_public_ip=public,
            ec2_election=ec2_election,
            probe_workers=workers,
        )
        session = build_session(region, aws_access_key, aws_secret_key, profile)
        identity = resolve_identity(AwsIdentifier(), ec2_election) if ec2_election else None
    except ConfigError as e:
        print_error(format_error_for_user(e))
        click.echo(ctx.get_help(), err=True)
        ctx.exit(1)

    loop = ReconcileLoop(
        config,
        finder=AwsFinder.from_session(session, region),
        router=AwsRouter.from_session(session, region),
        identity=identity,
    )
    _install_signal_handlers(loop.shutdown_event)
    loop.run(max_cycles=1 if once else None)


def main() -> None:
    """Entry point for the nat-router CLI."""
    cli()


if __name__ == "__main__":
    main()
