"""
cargo-query CLI - Main Commands Router
단순 라우팅만 담당하는 메인 CLI 진입점

cargo는 `cargo query <type>` 입력을 `cargo-query query <type>` 으로 실행합니다.
"""

import typer
from typing_extensions import Annotated

from cargo_query import __version__
from cargo_query.cli.commands.query_command import query_command


# Main CLI App
app = typer.Typer(
    help="Fuzzy-select cargo build targets and profiles",
    context_settings={"help_option_names": ["-h", "--help"]},
    no_args_is_help=True,
    rich_markup_mode="rich",
)


def version_callback(value: bool) -> None:
    """
    Callback function for --version option.

    Raises:
        typer.Exit: Always exits after displaying version
    """
    if value:
        typer.echo(f"cargo-query {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool, typer.Option("--version", callback=version_callback, is_eager=True, help="Show version")
    ] = False,
) -> None:
    """
    cargo-query CLI - cargo 워크스페이스의 타겟과 프로파일을 대화형으로 선택합니다.
    """
    pass


app.command(
    "query",
    help="List candidates of TYPE and pick one with fuzzy matching",
)(query_command)


if __name__ == "__main__":
    app()
