"""
Query Command Implementation
워크스페이스 후보를 열거하고 fuzzy picker로 하나(또는 여러 개)를 선택하는 명령
"""

import logging
from pathlib import Path
from typing import List, Optional

import typer
from pydantic import ValidationError
from typing_extensions import Annotated

from cargo_query.cli.utils import print_cancelled, print_error, print_result
from cargo_query.exceptions import QueryError, SelectionCancelledError, UsageError
from cargo_query.query import CategoryRegistry, SelectionSession, run_query
from cargo_query.settings import BuildConfig, PickerConfig, load_query_config
from cargo_query.utils.logger import DEFAULT_LEVEL, log_sys, setup_log_level
from cargo_query.workspace import load_workspace

logger = logging.getLogger(__name__)


def build_session(picker_config: PickerConfig) -> SelectionSession:
    """기본 InquirerPy picker를 사용하는 선택 세션 생성"""
    return SelectionSession(picker_config=picker_config)


def _validation_message(error: ValidationError) -> str:
    first = error.errors()[0]
    return str(first["msg"]).removeprefix("Value error, ")


def query_command(
    query_type: Annotated[
        str,
        typer.Argument(
            metavar="TYPE",
            help="binaries, examples, tests, benches, features or profile (case-insensitive)",
        ),
    ],
    features: Annotated[
        Optional[List[str]],
        typer.Option("--features", "-F", help="Space or comma separated list of features to activate"),
    ] = None,
    all_features: Annotated[
        bool, typer.Option("--all-features", help="Activate all available features")
    ] = False,
    no_default_features: Annotated[
        bool, typer.Option("--no-default-features", help="Do not activate the `default` feature")
    ] = False,
    jobs: Annotated[
        Optional[int], typer.Option("--jobs", "-j", help="Number of parallel jobs")
    ] = None,
    message_format: Annotated[
        Optional[List[str]], typer.Option("--message-format", help="Error format")
    ] = None,
    profile: Annotated[
        Optional[str], typer.Option("--profile", help="Build artifacts with the specified profile")
    ] = None,
    release: Annotated[
        bool, typer.Option("--release", "-r", help="Build artifacts in release mode")
    ] = False,
    target: Annotated[
        Optional[List[str]], typer.Option("--target", help="Build for the target triple")
    ] = None,
    manifest_path: Annotated[
        Optional[Path], typer.Option("--manifest-path", help="Path to Cargo.toml")
    ] = None,
    package: Annotated[
        Optional[List[str]], typer.Option("--package", "-p", help="Package(s) to list targets from")
    ] = None,
    dispatch: Annotated[
        bool,
        typer.Option("--dispatch", help="Print the cargo arguments that build the selection"),
    ] = False,
    height: Annotated[
        Optional[str], typer.Option("--height", help='Picker height: "40%", "auto" or a line count')
    ] = None,
    config_path: Annotated[
        Optional[Path], typer.Option("--config", help="cargo-query config file")
    ] = None,
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Show debug logs on stderr")
    ] = False,
    quiet: Annotated[
        bool, typer.Option("--quiet", "-q", help="Only show errors on stderr")
    ] = False,
) -> None:
    """
    워크스페이스 후보 목록에서 fuzzy 매칭으로 선택합니다.

    선택 결과만 stdout에 출력하므로 셸에서 그대로 캡처할 수 있습니다.
    features 는 여러 개를 선택할 수 있으며 쉼표로 연결해 출력합니다.

    Examples:
        cargo query binaries
        cargo run --bin "$(cargo query binaries)"
        cargo query profile --release
        cargo query tests --dispatch -p my-crate

    Raises:
        typer.Exit: 취소(130), 사용법 오류(2), UI 오류(3), 워크스페이스 오류(101)
    """
    if verbose:
        setup_log_level(logging.DEBUG)
    elif quiet:
        setup_log_level(logging.ERROR)
    else:
        setup_log_level(DEFAULT_LEVEL)

    try:
        # 1. 카테고리 해석 (features 는 워크스페이스 로드 전에 실패)
        category = CategoryRegistry.parse(query_type)
        CategoryRegistry.source_for(category)

        # 2. 빌드 설정 구성
        try:
            build_config = BuildConfig(
                features=features or [],
                all_features=all_features,
                no_default_features=no_default_features,
                jobs=jobs,
                message_format=message_format or [],
                profile=profile,
                release=release,
                target=target or [],
                manifest_path=manifest_path,
                packages=package or [],
            )
        except ValidationError as e:
            raise UsageError(_validation_message(e)) from e

        # 3. 워크스페이스 및 cargo-query 설정 로드
        workspace = load_workspace(build_config)
        query_config = load_query_config(config_path, workspace.workspace_root)
        if not (verbose or quiet):
            setup_log_level(query_config.logging.level)

        picker_config = query_config.picker
        if height is not None:
            try:
                picker_config = PickerConfig.model_validate(
                    {**picker_config.model_dump(), "height": height}
                )
            except ValidationError as e:
                raise UsageError(_validation_message(e)) from e

        log_sys(f"query {category.value} in {workspace.workspace_root}")

        # 4. enumerate -> select -> map
        result = run_query(
            category,
            workspace,
            build_config,
            session=build_session(picker_config),
            dispatch=dispatch,
        )

        print_result(" ".join(result.cargo_args()) if dispatch else result)

    except SelectionCancelledError as e:
        print_cancelled(str(e))
        raise typer.Exit(code=e.exit_code)
    except QueryError as e:
        logger.debug("query failed", exc_info=True)
        print_error(str(e))
        raise typer.Exit(code=e.exit_code)
    except Exception as e:
        logger.debug("unexpected error while running query", exc_info=True)
        print_error(str(e) or type(e).__name__)
        raise typer.Exit(code=1)
