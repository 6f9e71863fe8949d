"""
CLI 출력 유틸리티

stdout은 선택 결과 전용이므로, 사용자 메시지는 모두 stderr 콘솔로 출력합니다.
"""

import typer
from rich.console import Console
from rich.markup import escape


def _stderr_console() -> Console:
    # 호출 시점의 sys.stderr를 사용 (CliRunner 캡처 호환)
    return Console(stderr=True, highlight=False, soft_wrap=True)


def print_result(value: str) -> None:
    """선택 결과를 stdout에 한 줄로 출력"""
    typer.echo(value)


def print_error(message: str) -> None:
    """한 줄짜리 오류 메시지 출력"""
    single_line = escape(" ".join(message.split()))
    _stderr_console().print(f"[bold red]error:[/bold red] {single_line}", markup=True)


def print_cancelled(message: str) -> None:
    """사용자 취소 메시지 출력"""
    single_line = escape(" ".join(message.split()))
    _stderr_console().print(f"[yellow]cancelled:[/yellow] {single_line}", markup=True)
