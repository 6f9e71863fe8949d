"""
Target Catalog
카테고리별 후보 문자열 목록을 워크스페이스 메타데이터에서 열거합니다.
"""

from typing import Iterable, List

from cargo_query.exceptions import WorkspaceError
from cargo_query.query.categories import CandidateSource, CategoryRegistry, QueryCategory
from cargo_query.settings.config import BuildConfig
from cargo_query.utils.logger import log_catalog
from cargo_query.workspace.models import Package, WorkspaceMetadata
from cargo_query.workspace.profiles import Profiles


def _unique(names: Iterable[str]) -> List[str]:
    """첫 등장 순서를 유지하면서 중복 제거"""
    seen = set()
    result = []
    for name in names:
        if name not in seen:
            seen.add(name)
            result.append(name)
    return result


class TargetCatalog:
    """후보 목록 열거기"""

    def enumerate(
        self,
        category: QueryCategory,
        workspace: WorkspaceMetadata,
        build_config: BuildConfig,
    ) -> List[str]:
        """
        카테고리의 후보 목록을 반환합니다.

        타겟 카테고리는 워크스페이스 열거 순서를 유지하고, 이름만 반환합니다.
        일치하는 타겟이 없으면 빈 목록을 반환합니다.

        Args:
            category: 쿼리 카테고리
            workspace: 워크스페이스 메타데이터
            build_config: 요청 프로파일, 패키지 선택을 포함한 빌드 설정

        Returns:
            중복 없는 후보 이름 목록

        Raises:
            UnsupportedCategoryError: features 카테고리
            WorkspaceError: 알 수 없는 패키지 또는 프로파일
        """
        source = CategoryRegistry.source_for(category)
        if source is CandidateSource.PROFILES:
            candidates = self.available_profiles(workspace, build_config)
        else:
            candidates = self.available_targets(category, workspace, build_config)

        log_catalog(f"{len(candidates)} candidate(s)", category=category.value)
        return candidates

    def available_targets(
        self,
        category: QueryCategory,
        workspace: WorkspaceMetadata,
        build_config: BuildConfig,
    ) -> List[str]:
        predicate = CategoryRegistry.predicate_for(category)
        names = (
            target.name
            for package in self.selected_packages(workspace, build_config)
            for target in package.targets
            if predicate(target)
        )
        return _unique(names)

    def available_profiles(self, workspace: WorkspaceMetadata, build_config: BuildConfig) -> List[str]:
        profiles = Profiles(workspace, build_config.requested_profile)
        return _unique(profiles.list_all())

    @staticmethod
    def selected_packages(workspace: WorkspaceMetadata, build_config: BuildConfig) -> List[Package]:
        if not build_config.packages:
            return workspace.default_members()
        try:
            return workspace.find_packages(build_config.packages)
        except KeyError as e:
            raise WorkspaceError(
                f"package(s) `{e.args[0]}` not found in workspace `{workspace.workspace_root}`"
            ) from e
