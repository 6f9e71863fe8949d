"""
Query Errors
cargo-query 실행 중 발생하는 오류 분류

각 오류는 CLI가 그대로 사용할 수 있는 종료 코드(exit_code)를 가집니다.
"""

from typing import Optional


class QueryError(Exception):
    """
    cargo-query 오류의 기본 클래스.

    Attributes:
        exit_code: 이 오류로 종료할 때 사용할 프로세스 종료 코드
        category: 오류가 발생한 쿼리 카테고리 이름 (있는 경우)
        original_error: 원본 예외 (있는 경우)
    """

    exit_code: int = 1

    def __init__(self, message: str, category: Optional[str] = None,
                 original_error: Optional[Exception] = None):
        super().__init__(message)
        self.category = category
        self.original_error = original_error

    def __str__(self) -> str:
        category_str = f"[{self.category}] " if self.category else ""
        return f"{category_str}{super().__str__()}"


class UsageError(QueryError):
    """잘못된 명령행 인자 조합"""

    exit_code = 2


class UnknownCategoryError(UsageError):
    """알 수 없는 카테고리 토큰"""


class UnsupportedCategoryError(QueryError):
    """
    카테고리에 predicate / build mode / 열거 방식이 정의되지 않은 경우.

    대화형 세션 시작 전에 감지되며, 터미널을 점유하지 않습니다.
    """

    exit_code = 2


class SelectionCancelledError(QueryError):
    """사용자가 선택 세션을 중단한 경우"""

    exit_code = 130


class InternalUIError(QueryError):
    """Picker를 시작할 수 없거나 비정상 종료된 경우 (사용자 중단 아님)"""

    exit_code = 3


class InvariantViolationError(QueryError):
    """내부 계약(선택 개수, 후보 형식 등)이 깨진 경우. 버그를 의미합니다."""

    exit_code = 70


class WorkspaceError(QueryError):
    """워크스페이스 메타데이터, 프로파일, 설정 파일을 해석할 수 없는 경우"""

    exit_code = 101
