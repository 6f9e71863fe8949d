import logging
import os
import sys
from typing import Optional, Union

# CLI 전용 로그 레벨 정의 (INFO=20, WARNING=30 사이)
CLI_LEVEL = 25
logging.addLevelName(CLI_LEVEL, "CLI")

# 기본 터미널 로그 레벨: 결과 출력(stdout)을 방해하지 않도록 경고 이상만
DEFAULT_LEVEL = logging.WARNING

# 전역 로거 객체
logger = logging.getLogger("cargo_query")

_LEVEL_NAMES = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "CLI": CLI_LEVEL,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}


class TerminalFormatter(logging.Formatter):
    """
    터미널용 포맷터.

    DEBUG 레벨에서는 레벨 이름을 붙여 출력하고,
    CARGO_QUERY_LOG_TIMESTAMPS=1 이면 타임스탬프를 추가합니다.
    """

    def format(self, record: logging.LogRecord) -> str:
        message = record.getMessage()
        if record.levelno >= logging.WARNING:
            message = f"{record.levelname.lower()}: {message}"
        if os.environ.get("CARGO_QUERY_LOG_TIMESTAMPS") == "1":
            return f"{self.formatTime(record, '%H:%M:%S')} {message}"
        return message


def resolve_level(level: Union[int, str]) -> int:
    """레벨 이름 또는 숫자를 logging 레벨 숫자로 변환"""
    if isinstance(level, int):
        return level
    try:
        return _LEVEL_NAMES[level.upper()]
    except KeyError:
        raise ValueError(f"Unknown log level: {level}") from None


def setup_log_level(level: Union[int, str], stream: Optional[object] = None) -> None:
    """
    런타임 로그 레벨 설정 (-v, -q 옵션 지원).

    콘솔 핸들러는 항상 stderr에 기록합니다. stdout은 선택 결과 전용입니다.

    Args:
        level: logging 레벨 숫자 또는 이름 ("DEBUG", "WARNING" 등)
        stream: 핸들러 출력 스트림 (테스트용, 기본 sys.stderr)
    """
    level = resolve_level(level)
    logger.setLevel(level)
    logger.propagate = False

    # 핸들러 중복 등록 방지
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler(stream or sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(TerminalFormatter())
    logger.addHandler(console_handler)

    # 외부 라이브러리 로그 억제
    logging.getLogger("asyncio").setLevel(logging.WARNING)


# 표준화된 카테고리별 로깅 함수
# 카테고리: QUERY(카테고리 해석), CAT(카탈로그), SESSION(선택 세션),
#          WS(워크스페이스), SYS(시스템)


def log_query(message: str, category: str = None) -> None:
    """카테고리 해석 및 결과 매핑 로그 (DEBUG)"""
    if category:
        logger.debug(f"[QUERY:{category}] {message}")
    else:
        logger.debug(f"[QUERY] {message}")


def log_catalog(message: str, category: str = None) -> None:
    """후보 목록 열거 로그 (DEBUG)"""
    if category:
        logger.debug(f"[CAT:{category}] {message}")
    else:
        logger.debug(f"[CAT] {message}")


def log_session(message: str) -> None:
    """선택 세션 로그 (DEBUG)"""
    logger.debug(f"[SESSION] {message}")


def log_ws(message: str) -> None:
    """워크스페이스 로드 로그 (DEBUG)"""
    logger.debug(f"[WS] {message}")


def log_sys(message: str) -> None:
    """시스템/환경 로그 (DEBUG)"""
    logger.debug(f"[SYS] {message}")


def log_warn(message: str) -> None:
    """경고 로그"""
    logger.warning(message)
