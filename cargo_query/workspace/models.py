"""
Workspace Metadata Models
`cargo metadata --format-version 1` 출력 중 cargo-query가 사용하는 부분만 모델링
"""

from pathlib import Path
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Target(BaseModel):
    """패키지 내부의 빌드 단위 (bin, lib, example, test, bench 등)"""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: str = Field(..., description="타겟 이름")
    kind: List[str] = Field(..., description="타겟 종류 (예: ['bin'], ['example'])")
    crate_types: List[str] = Field(default_factory=list, description="크레이트 타입")
    src_path: Optional[str] = Field(None, description="타겟 소스 경로")
    required_features: List[str] = Field(
        default_factory=list, alias="required-features", description="빌드에 필요한 feature"
    )

    def is_bin(self) -> bool:
        return self.kind == ["bin"]

    def is_example(self) -> bool:
        return "example" in self.kind

    def is_test(self) -> bool:
        # 통합 테스트 타겟만 해당 (lib/bin 내부 단위 테스트 제외)
        return self.kind == ["test"]

    def is_bench(self) -> bool:
        return self.kind == ["bench"]


class Package(BaseModel):
    """워크스페이스에 포함된 패키지"""

    model_config = ConfigDict(extra="ignore")

    id: str
    name: str
    version: str = "0.0.0"
    manifest_path: Optional[str] = None
    targets: List[Target] = Field(default_factory=list)
    features: Dict[str, List[str]] = Field(default_factory=dict)


class WorkspaceMetadata(BaseModel):
    """
    cargo 워크스페이스 메타데이터.

    한 번의 실행 동안 읽기 전용으로 취급합니다.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    packages: List[Package] = Field(default_factory=list)
    workspace_members: List[str] = Field(default_factory=list)
    workspace_default_members: Optional[List[str]] = Field(
        None, description="cargo 1.71 이상에서만 제공"
    )
    workspace_root: str
    target_directory: Optional[str] = None

    @property
    def root_path(self) -> Path:
        return Path(self.workspace_root)

    @property
    def root_manifest(self) -> Path:
        return self.root_path / "Cargo.toml"

    def members(self) -> List[Package]:
        """워크스페이스 멤버 패키지 (메타데이터 순서 유지)"""
        by_id = {package.id: package for package in self.packages}
        return [by_id[member_id] for member_id in self.workspace_members if member_id in by_id]

    def default_members(self) -> List[Package]:
        """
        인자 없이 빌드할 때 선택되는 패키지.

        default members 정보가 없거나 비어 있으면 전체 멤버를 반환합니다.
        """
        if not self.workspace_default_members:
            return self.members()
        by_id = {package.id: package for package in self.packages}
        return [by_id[member_id] for member_id in self.workspace_default_members if member_id in by_id]

    def find_packages(self, names: List[str]) -> List[Package]:
        """
        이름으로 멤버 패키지를 찾습니다. 결과는 워크스페이스 순서를 따릅니다.

        Raises:
            KeyError: 워크스페이스에 없는 패키지 이름이 포함된 경우
        """
        members = self.members()
        known = {package.name for package in members}
        missing = [name for name in names if name not in known]
        if missing:
            raise KeyError(", ".join(missing))
        wanted = set(names)
        return [package for package in members if package.name in wanted]
