"""
Workspace Loader
`cargo metadata`를 실행하여 워크스페이스 메타데이터를 로드합니다.
"""

import json
import logging
import os
import subprocess
from typing import List, Optional

from pydantic import ValidationError

from cargo_query.exceptions import WorkspaceError
from cargo_query.settings.config import BuildConfig
from cargo_query.utils.logger import log_ws
from cargo_query.workspace.models import WorkspaceMetadata

logger = logging.getLogger(__name__)


def cargo_executable() -> str:
    """cargo 실행 파일 경로. cargo가 서브커맨드를 실행할 때 설정하는 $CARGO를 우선합니다."""
    return os.environ.get("CARGO", "cargo")


def build_metadata_command(build_config: BuildConfig) -> List[str]:
    """
    `cargo metadata` 명령 인자를 구성합니다.

    feature 관련 플래그는 그대로 전달합니다. 나머지 빌드 설정(jobs, message format,
    target triple)은 메타데이터 조회에 영향이 없으므로 전달하지 않습니다.
    """
    cmd = [cargo_executable(), "metadata", "--format-version", "1", "--no-deps"]
    if build_config.manifest_path:
        cmd += ["--manifest-path", str(build_config.manifest_path)]
    if build_config.features:
        cmd += ["--features", ",".join(build_config.features)]
    if build_config.all_features:
        cmd.append("--all-features")
    if build_config.no_default_features:
        cmd.append("--no-default-features")
    return cmd


def parse_metadata(raw: str) -> WorkspaceMetadata:
    """
    `cargo metadata` JSON 출력을 모델로 변환합니다.

    Raises:
        WorkspaceError: JSON이 아니거나 필수 필드가 없는 경우
    """
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise WorkspaceError("cargo metadata returned invalid JSON", original_error=e) from e
    try:
        return WorkspaceMetadata.model_validate(data)
    except ValidationError as e:
        raise WorkspaceError(
            f"unexpected cargo metadata format: {e.error_count()} validation error(s)",
            original_error=e,
        ) from e


def load_workspace(build_config: BuildConfig, cwd: Optional[str] = None) -> WorkspaceMetadata:
    """
    워크스페이스 메타데이터를 로드합니다.

    Args:
        build_config: manifest 경로와 feature 선택을 포함한 빌드 설정
        cwd: cargo를 실행할 작업 디렉토리 (기본: 현재 디렉토리)

    Returns:
        WorkspaceMetadata

    Raises:
        WorkspaceError: cargo를 찾을 수 없거나 실행이 실패한 경우
    """
    cmd = build_metadata_command(build_config)
    log_ws(f"running: {' '.join(cmd)}")

    try:
        result = subprocess.run(cmd, capture_output=True, text=True, cwd=cwd)
    except FileNotFoundError as e:
        raise WorkspaceError(f"cargo executable not found: {cmd[0]}", original_error=e) from e

    if result.returncode != 0:
        stderr_lines = [line for line in result.stderr.strip().splitlines() if line.strip()]
        detail = stderr_lines[-1] if stderr_lines else f"exit status {result.returncode}"
        logger.debug(result.stderr)
        raise WorkspaceError(f"cargo metadata failed: {detail}")

    workspace = parse_metadata(result.stdout)
    log_ws(
        f"loaded workspace {workspace.workspace_root} "
        f"({len(workspace.workspace_members)} member(s))"
    )
    return workspace
