"""
Category Registry
쿼리 카테고리별 동작(멤버십 predicate, 선택 개수, build mode)을 한 곳에서 정의합니다.

카테고리를 추가하려면 CATEGORY_TABLE에 항목 하나를 추가합니다.
지원하지 않는 속성은 None으로 명시하며, 조회 시 UnsupportedCategoryError가 발생합니다.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Optional

from cargo_query.exceptions import UnknownCategoryError, UnsupportedCategoryError
from cargo_query.workspace.models import Target

TargetPredicate = Callable[[Target], bool]


class QueryCategory(Enum):
    """쿼리 카테고리"""
    BINARIES = "binaries"
    EXAMPLES = "examples"
    TESTS = "tests"
    BENCHES = "benches"
    FEATURES = "features"
    PROFILE = "profile"


class BuildMode(Enum):
    """카테고리가 암시하는 빌드 동작. 값은 전달할 cargo 서브커맨드입니다."""
    BUILD = "build"
    TEST = "test"
    BENCH = "bench"


class CandidateSource(Enum):
    """후보 목록을 가져오는 곳"""
    TARGETS = "targets"
    PROFILES = "profiles"


@dataclass(frozen=True)
class CategorySpec:
    """
    카테고리 하나의 동작 정의.

    Attributes:
        source: 후보 출처 (None: 열거 방식 미정)
        predicate: 워크스페이스 타겟의 소속 여부 판정 함수 (None: 타겟 기반 아님)
        allows_multi: 여러 항목 선택 허용 여부
        build_mode: 선택 결과를 빌드할 때의 동작 (None: 정의되지 않음)
        target_flag: build_mode와 함께 전달할 cargo 선택 플래그 (예: "--bin")
    """
    source: Optional[CandidateSource]
    predicate: Optional[TargetPredicate]
    allows_multi: bool
    build_mode: Optional[BuildMode]
    target_flag: Optional[str]


_TARGETS = CandidateSource.TARGETS
_PROFILES = CandidateSource.PROFILES

CATEGORY_TABLE: Dict[QueryCategory, CategorySpec] = {
    QueryCategory.BINARIES: CategorySpec(_TARGETS, Target.is_bin, False, BuildMode.BUILD, "--bin"),
    QueryCategory.EXAMPLES: CategorySpec(_TARGETS, Target.is_example, False, BuildMode.BUILD, "--example"),
    QueryCategory.TESTS: CategorySpec(_TARGETS, Target.is_test, False, BuildMode.TEST, "--test"),
    QueryCategory.BENCHES: CategorySpec(_TARGETS, Target.is_bench, False, BuildMode.BENCH, "--bench"),
    # TODO: feature 후보 출처(워크스페이스 manifest의 [features])가 정해지면 source 지정
    QueryCategory.FEATURES: CategorySpec(None, None, True, None, "--features"),
    QueryCategory.PROFILE: CategorySpec(_PROFILES, None, False, BuildMode.BUILD, "--profile"),
}

# 하위 호환 토큰
CATEGORY_ALIASES: Dict[str, QueryCategory] = {
    "profiles": QueryCategory.PROFILE,
}


class CategoryRegistry:
    """쿼리 카테고리 조회 클래스. 상태와 I/O가 없습니다."""

    table: Dict[QueryCategory, CategorySpec] = CATEGORY_TABLE

    @classmethod
    def parse(cls, token: str) -> QueryCategory:
        """
        사용자 입력 토큰을 카테고리로 변환합니다 (대소문자 무시).

        Raises:
            UnknownCategoryError: 정의되지 않은 토큰인 경우
        """
        normalized = token.strip().lower()
        if normalized in CATEGORY_ALIASES:
            return CATEGORY_ALIASES[normalized]
        try:
            return QueryCategory(normalized)
        except ValueError:
            raise UnknownCategoryError(
                f"unknown query type `{token}`. Available: {', '.join(cls.tokens())}"
            ) from None

    @classmethod
    def tokens(cls) -> List[str]:
        return [category.value for category in cls.table]

    @classmethod
    def resolve(cls, category: QueryCategory) -> CategorySpec:
        return cls.table[category]

    @classmethod
    def source_for(cls, category: QueryCategory) -> CandidateSource:
        """
        Raises:
            UnsupportedCategoryError: 후보 열거 방식이 정해지지 않은 경우 (features)
        """
        source = cls.resolve(category).source
        if source is None:
            raise UnsupportedCategoryError(
                "listing candidates is not implemented yet", category=category.value
            )
        return source

    @classmethod
    def predicate_for(cls, category: QueryCategory) -> TargetPredicate:
        """
        Raises:
            UnsupportedCategoryError: 타겟 기반 카테고리가 아닌 경우 (features, profile)
        """
        predicate = cls.resolve(category).predicate
        if predicate is None:
            raise UnsupportedCategoryError(
                "build targets cannot be filtered by this category", category=category.value
            )
        return predicate

    @classmethod
    def allows_multi(cls, category: QueryCategory) -> bool:
        return cls.resolve(category).allows_multi

    @classmethod
    def build_mode_for(cls, category: QueryCategory) -> BuildMode:
        """
        Raises:
            UnsupportedCategoryError: build mode가 정의되지 않은 경우 (features)
        """
        mode = cls.resolve(category).build_mode
        if mode is None:
            raise UnsupportedCategoryError("no build mode is defined", category=category.value)
        return mode
