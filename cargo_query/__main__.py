"""
cargo-query CLI - Main Entry Point

    python -m cargo_query query binaries
"""

from cargo_query.cli.main_commands import app


def main() -> None:
    """Typer app 실행"""
    app()


if __name__ == "__main__":
    main()
