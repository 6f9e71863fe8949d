"""
Build Profile Resolution
워크스페이스에서 사용 가능한 빌드 프로파일 목록을 해석합니다.

프로파일 출처:
    - 기본 제공 프로파일: dev, release, test, bench, doc
    - 워크스페이스 루트 Cargo.toml 의 [profile.*]
    - 워크스페이스 루트 .cargo/config.toml (또는 .cargo/config) 의 [profile.*]
"""

import tomllib
from pathlib import Path
from typing import Any, Dict, List, Optional

from cargo_query.exceptions import WorkspaceError
from cargo_query.utils.logger import log_ws
from cargo_query.workspace.models import WorkspaceMetadata

# 기본 제공 프로파일과 상속 관계
PREDEFINED_PROFILES: Dict[str, Optional[str]] = {
    "dev": None,
    "release": None,
    "test": "dev",
    "bench": "release",
    "doc": "dev",
}

CONFIG_FILE_NAMES = ("config.toml", "config")


def _read_profile_tables(path: Path) -> Dict[str, Dict[str, Any]]:
    """TOML 파일에서 [profile.*] 테이블을 읽습니다. 파일이 없으면 빈 딕셔너리."""
    if not path.is_file():
        return {}
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except (tomllib.TOMLDecodeError, OSError) as e:
        raise WorkspaceError(f"failed to parse {path}: {e}", original_error=e) from e

    profiles = data.get("profile", {})
    if not isinstance(profiles, dict):
        raise WorkspaceError(f"`profile` in {path} must be a table")
    return {name: table for name, table in profiles.items() if isinstance(table, dict)}


class Profiles:
    """
    프로파일 해석 컨텍스트.

    requested_profile 이 정의되어 있지 않으면 생성 시점에 실패합니다.
    """

    def __init__(self, workspace: WorkspaceMetadata, requested_profile: str):
        self.requested_profile = requested_profile
        self._inherits: Dict[str, Optional[str]] = dict(PREDEFINED_PROFILES)

        tables: Dict[str, Dict[str, Any]] = {}
        config_dir = workspace.root_path / ".cargo"
        for name in CONFIG_FILE_NAMES:
            config_path = config_dir / name
            if config_path.is_file():
                tables.update(_read_profile_tables(config_path))
                break
        # manifest 정의가 config 정의보다 나중에 병합됨 (이름 목록에만 영향)
        tables.update(_read_profile_tables(workspace.root_manifest))

        for name, table in tables.items():
            if name in PREDEFINED_PROFILES:
                continue
            inherits = table.get("inherits")
            if inherits is None or inherits == "":
                raise WorkspaceError(
                    f"profile `{name}` is missing an `inherits` directive "
                    "(`inherits` is required for all profiles except `dev` or `release`)"
                )
            if not isinstance(inherits, str):
                raise WorkspaceError(f"profile `{name}`: `inherits` must be a string")
            self._inherits[name] = inherits

        self._validate_inheritance()

        if requested_profile not in self._inherits:
            raise WorkspaceError(f"profile `{requested_profile}` is not defined")

        log_ws(f"resolved {len(self._inherits)} profile(s), requested `{requested_profile}`")

    def _validate_inheritance(self) -> None:
        for name in self._inherits:
            seen = [name]
            parent = self._inherits[name]
            while parent is not None:
                if parent not in self._inherits:
                    raise WorkspaceError(
                        f"profile `{seen[-1]}` inherits from `{parent}`, "
                        "but that profile is not defined"
                    )
                if parent in seen:
                    chain = " -> ".join(seen + [parent])
                    raise WorkspaceError(f"profile inheritance loop detected: {chain}")
                seen.append(parent)
                parent = self._inherits[parent]

    def inherits_from(self, name: str) -> Optional[str]:
        return self._inherits[name]

    def list_all(self) -> List[str]:
        """정의된 모든 프로파일 이름 (정렬, 중복 없음)"""
        return sorted(self._inherits)
