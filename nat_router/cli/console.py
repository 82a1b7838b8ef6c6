"""
nat_router/cli/console.py - Rich 콘솔 및 로깅 설정

일관된 콘솔 출력과 루트 logger 설정을 위한 함수들
"""

import logging

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

# botocore 노이즈 로그 제한
NOISY_LOGGERS = (
    "botocore",
    "boto3",
    "urllib3",
)

LOG_LEVELS = ("panic", "fatal", "error", "warn", "warning", "info", "debug")

_LEVEL_MAP = {
    "panic": logging.CRITICAL,
    "fatal": logging.CRITICAL,
    "error": logging.ERROR,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
}

# 전역 콘솔 인스턴스 (에러 출력은 stderr)
console = Console(stderr=True, highlight=False, soft_wrap=True)

SYMBOL_ERROR = "✗"


def parse_log_level(level: str) -> int:
    """로그 레벨 문자열을 logging 레벨로 변환

    Raises:
        ValueError: 알 수 없는 레벨
    """
    try:
        return _LEVEL_MAP[level.lower()]
    except KeyError:
        raise ValueError(f"not a valid log level: {level!r}") from None


def setup_logging(level: str = "error") -> None:
    """루트 logger에 RichHandler 설치

    Args:
        level: 로그 레벨 (panic, fatal, error, warn, info, debug)
    """
    root = logging.getLogger()
    root.setLevel(parse_log_level(level))

    if not any(isinstance(h, RichHandler) for h in root.handlers):
        handler = RichHandler(console=console, rich_tracebacks=True, show_path=False)
        handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
        root.addHandler(handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(logging.WARNING, root.level))


def print_error(message: str) -> None:
    """에러 메시지 출력 (빨간색 X)"""
    console.print(f"[red]{SYMBOL_ERROR} {escape(message)}[/red]")
