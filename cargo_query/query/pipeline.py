"""
Query Pipeline
enumerate -> select -> map 한 사이클 실행
"""

from typing import Optional, Union

from cargo_query.query.catalog import TargetCatalog
from cargo_query.query.categories import CategoryRegistry, QueryCategory
from cargo_query.query.mapper import BuildDispatch, ResultMapper
from cargo_query.query.session import SelectionSession
from cargo_query.settings.config import BuildConfig
from cargo_query.utils.logger import log_query
from cargo_query.workspace.models import WorkspaceMetadata

QueryResult = Union[str, BuildDispatch]


def run_query(
    category: QueryCategory,
    workspace: WorkspaceMetadata,
    build_config: BuildConfig,
    session: SelectionSession,
    dispatch: bool = False,
    viewport: Optional[str] = None,
    catalog: Optional[TargetCatalog] = None,
    mapper: Optional[ResultMapper] = None,
) -> QueryResult:
    """
    카테고리 후보를 열거하고, 대화형으로 선택받아, 결과로 변환합니다.

    카테고리 해석 오류는 picker를 띄우기 전에 발생합니다.

    Args:
        category: 쿼리 카테고리
        workspace: 워크스페이스 메타데이터
        build_config: 빌드 설정
        session: 선택 세션
        dispatch: True면 BuildDispatch, False면 출력 문자열 반환
        viewport: picker 높이 힌트
        catalog: 후보 열거기 (테스트용)
        mapper: 결과 변환기 (테스트용)

    Returns:
        출력 문자열 또는 BuildDispatch
    """
    catalog = catalog or TargetCatalog()
    mapper = mapper or ResultMapper()

    spec = CategoryRegistry.resolve(category)
    if dispatch:
        # build mode가 없으면 선택 전에 실패
        CategoryRegistry.build_mode_for(category)
    log_query(f"multi={spec.allows_multi}, build_mode={spec.build_mode}", category=category.value)

    candidates = catalog.enumerate(category, workspace, build_config)
    outcome = session.run(
        candidates,
        allows_multi=spec.allows_multi,
        prompt_label=session.picker_config.render_prompt(category.value),
        viewport=viewport,
    )

    if dispatch:
        return mapper.dispatch(outcome, category)
    return mapper.format(outcome, category)
