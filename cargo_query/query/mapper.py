"""
Result Mapper
선택 결과를 호출자가 사용할 값(출력 문자열 또는 빌드 dispatch)으로 변환합니다.
"""

from dataclasses import dataclass
from typing import List

from cargo_query.exceptions import InvariantViolationError, SelectionCancelledError
from cargo_query.query.categories import BuildMode, CategoryRegistry, QueryCategory
from cargo_query.query.session import Aborted, Accepted, SelectionOutcome
from cargo_query.utils.logger import log_query

MULTI_SEPARATOR = ","


@dataclass(frozen=True)
class BuildDispatch:
    """후속 컴파일 호출에 전달할 (build mode, 타겟 이름) 쌍"""
    mode: BuildMode
    target: str
    category: QueryCategory

    def cargo_args(self) -> List[str]:
        """
        cargo 호출 인자.

        test / bench 는 컴파일만 수행하도록 --no-run 을 붙입니다.
        """
        args = [self.mode.value]
        if self.mode in (BuildMode.TEST, BuildMode.BENCH):
            args.append("--no-run")
        flag = CategoryRegistry.resolve(self.category).target_flag
        args += [flag, self.target]
        return args


class ResultMapper:
    """SelectionOutcome -> QueryResult 변환"""

    @staticmethod
    def _chosen(outcome: SelectionOutcome, category: QueryCategory) -> tuple:
        if isinstance(outcome, Aborted):
            raise SelectionCancelledError("aborted without selecting anything", category=category.value)
        if not isinstance(outcome, Accepted):
            raise InvariantViolationError(f"unexpected selection outcome: {outcome!r}")
        if not CategoryRegistry.allows_multi(category) and len(outcome.chosen) != 1:
            raise InvariantViolationError(
                f"expected exactly one selection, got {len(outcome.chosen)}", category=category.value
            )
        return outcome.chosen

    def format(self, outcome: SelectionOutcome, category: QueryCategory) -> str:
        """
        출력용 문자열로 변환합니다.

        Raises:
            SelectionCancelledError: 사용자가 중단한 경우
            InvariantViolationError: 단일 선택 카테고리에 여러 항목이 선택된 경우
        """
        chosen = self._chosen(outcome, category)
        result = MULTI_SEPARATOR.join(chosen)
        log_query(f"selected {result!r}", category=category.value)
        return result

    def dispatch(self, outcome: SelectionOutcome, category: QueryCategory) -> BuildDispatch:
        """
        선택 결과를 카테고리의 build mode와 묶습니다.

        Raises:
            UnsupportedCategoryError: build mode가 정의되지 않은 카테고리 (features)
        """
        mode = CategoryRegistry.build_mode_for(category)
        chosen = self._chosen(outcome, category)
        if len(chosen) != 1:
            raise InvariantViolationError(
                f"cannot dispatch {len(chosen)} selections", category=category.value
            )
        return BuildDispatch(mode=mode, target=chosen[0], category=category)
