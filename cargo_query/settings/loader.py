"""
Settings Loader
.cargo-query.yaml 로드 및 환경변수 치환
"""

import logging
import os
import re
from pathlib import Path
from typing import Any, Optional, Union

import yaml
from pydantic import ValidationError

from cargo_query.exceptions import WorkspaceError
from cargo_query.settings.config import QueryConfig

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = ".cargo-query.yaml"
CONFIG_ENV_VAR = "CARGO_QUERY_CONFIG"

_ENV_PATTERN = r"\$\{([^}]+)\}"


def _lookup(expr: str, fallback: str) -> str:
    if ":" in expr:
        var_name, default_value = expr.split(":", 1)
        return os.environ.get(var_name.strip(), default_value.strip())
    return os.environ.get(expr.strip(), fallback)


def resolve_env_variables(data: Any) -> Any:
    """
    환경변수 치환 - ${VAR:default} 패턴 지원

    Args:
        data: 환경변수를 치환할 데이터 (문자열, 딕셔너리, 리스트 등)

    Returns:
        환경변수가 치환된 데이터

    Examples:
        "${PICKER_HEIGHT:40%}" -> "40%" (환경변수 없을 때)
        "${MAX_HEIGHT:15}" -> 15 (정수로 변환)
        "${BORDER:false}" -> False (불린으로 변환)
    """
    if isinstance(data, str):
        full_match = re.fullmatch(_ENV_PATTERN, data)

        if full_match:
            # 전체가 환경변수인 경우 - 타입 변환 시도
            result = _lookup(full_match.group(1), data)
            if result == "":
                return ""
            if result.lower() in ("true", "false"):
                return result.lower() == "true"
            try:
                if "." not in result and "e" not in result.lower():
                    return int(result)
                return float(result)
            except ValueError:
                return result

        # 부분적으로 환경변수가 포함된 경우 - 문자열로만 치환
        return re.sub(_ENV_PATTERN, lambda m: _lookup(m.group(1), m.group(0)), data)

    elif isinstance(data, dict):
        return {k: resolve_env_variables(v) for k, v in data.items()}

    elif isinstance(data, list):
        return [resolve_env_variables(item) for item in data]

    return data


def find_config_file(
    explicit_path: Optional[Union[str, Path]] = None,
    workspace_root: Optional[Union[str, Path]] = None,
) -> Optional[Path]:
    """
    설정 파일 위치를 결정합니다.

    우선순위: 명시 경로 > $CARGO_QUERY_CONFIG > <workspace_root>/.cargo-query.yaml

    Raises:
        WorkspaceError: 명시된 파일(인자 또는 환경변수)이 존재하지 않을 때
    """
    explicit = explicit_path or os.environ.get(CONFIG_ENV_VAR)
    if explicit:
        path = Path(explicit)
        if not path.is_file():
            raise WorkspaceError(f"config file not found: {path}")
        return path

    if workspace_root is not None:
        candidate = Path(workspace_root) / CONFIG_FILE_NAME
        if candidate.is_file():
            return candidate
    return None


def load_query_config(
    explicit_path: Optional[Union[str, Path]] = None,
    workspace_root: Optional[Union[str, Path]] = None,
) -> QueryConfig:
    """
    QueryConfig 로드. 설정 파일이 없으면 기본값을 반환합니다.

    Raises:
        WorkspaceError: YAML 파싱 또는 검증 실패 시
    """
    path = find_config_file(explicit_path, workspace_root)
    if path is None:
        logger.debug("no query config file found, using defaults")
        return QueryConfig()

    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
    except (yaml.YAMLError, UnicodeDecodeError) as e:
        raise WorkspaceError(f"failed to parse {path}: {e}", original_error=e) from e

    if not isinstance(raw, dict):
        raise WorkspaceError(f"{path} must contain a mapping at the top level")

    try:
        config = QueryConfig.model_validate(resolve_env_variables(raw))
    except ValidationError as e:
        first = e.errors()[0]
        location = ".".join(str(part) for part in first["loc"])
        raise WorkspaceError(f"invalid config {path}: {location}: {first['msg']}", original_error=e) from e

    logger.debug(f"loaded query config from {path}")
    return config
