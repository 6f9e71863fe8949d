"""
Selection Session
외부 fuzzy picker 한 번의 실행을 구성하고 결과(선택 또는 중단)를 반환합니다.

터미널 점유는 terminal_guard() 범위 안에서만 이루어지며,
정상 선택 / 사용자 중단 / 오류 / 시그널 모든 경로에서 원래 상태로 복구됩니다.
"""

import signal
import sys
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterator, List, Optional, Sequence, Tuple, Union

from cargo_query.exceptions import InternalUIError, InvariantViolationError
from cargo_query.settings.config import PickerConfig
from cargo_query.utils.logger import log_session, log_warn

try:
    import termios
except ImportError:  # Windows
    termios = None

# picker 상단의 프롬프트/정보 줄 수 (height="auto" 계산용)
PICKER_CHROME_LINES = 2


@dataclass(frozen=True)
class Accepted:
    """사용자가 확정한 선택. 확정한 순서를 유지합니다."""
    chosen: Tuple[str, ...]

    def __post_init__(self):
        if not self.chosen:
            raise InvariantViolationError("an accepted selection must contain at least one item")


@dataclass(frozen=True)
class Aborted:
    """사용자가 아무것도 확정하지 않고 세션을 중단함"""


SelectionOutcome = Union[Accepted, Aborted]


@dataclass(frozen=True)
class PickerRequest:
    """picker 한 번의 실행에 필요한 입력과 표시 설정"""
    candidates: Tuple[str, ...]
    multi: bool
    prompt: str
    height: Union[int, str]
    border: bool = False
    info: bool = True


class Picker:
    """
    대화형 fuzzy picker 인터페이스.

    pick()은 선택된 문자열 목록을 반환하고, 사용자가 중단하면 None을 반환하거나
    KeyboardInterrupt를 발생시킵니다. 그 외의 예외는 picker 실패로 취급됩니다.
    """

    def pick(self, request: PickerRequest) -> Optional[List[str]]:
        raise NotImplementedError


# 실행 중인 prompt_toolkit Application (시그널을 앱 종료로 전달하기 위함)
_active_applications: List[Any] = []


@contextmanager
def _tracking_application(application: Any) -> Iterator[None]:
    _active_applications.append(application)
    try:
        yield
    finally:
        _active_applications.remove(application)


class ToggleOrder:
    """
    multiselect 에서 사용자가 항목을 태그한 순서를 기록합니다.

    InquirerPy는 태그된 항목을 후보 목록 순서로 돌려주므로,
    토글 키 처리 직후 태그 상태를 비교해 순서를 따로 유지합니다.
    """

    ACTIONS = ("toggle", "toggle-down", "toggle-up", "toggle-all", "toggle-all-true", "toggle-all-false")

    def __init__(self):
        self.order: List[str] = []

    def attach(self, prompt: Any) -> None:
        """prompt의 토글 액션마다 sync 를 덧붙입니다. 키 처리 시점에 조회되므로 실행 전에 호출합니다."""
        lookup = prompt.kb_func_lookup
        for action in self.ACTIONS:
            if action not in lookup:
                continue
            handlers = list(lookup[action])
            handlers.append({"func": lambda _event: self.sync(prompt.content_control.choices)})
            prompt.kb_func_lookup = {action: handlers}

    def sync(self, choices: Sequence[dict]) -> None:
        enabled = [choice["value"] for choice in choices if choice.get("enabled")]
        kept = [value for value in self.order if value in enabled]
        self.order = kept + [value for value in enabled if value not in kept]

    def arrange(self, result: Sequence[str]) -> List[str]:
        """picker 결과를 태그 순서로 정렬. 기록에 없는 항목은 원래 순서대로 뒤에 둡니다."""
        ordered = [value for value in self.order if value in result]
        return ordered + [value for value in result if value not in ordered]


class InquirerPicker(Picker):
    """
    InquirerPy fuzzy prompt 기반 picker. 화면은 stderr에 그립니다.

    input / output 을 지정하면 해당 prompt_toolkit 입출력을 사용합니다 (테스트용).
    """

    SKIP_KEYS = [{"key": "escape"}, {"key": "c-z"}]

    def __init__(self, input: Any = None, output: Any = None):
        self.input = input
        self.output = output

    def pick(self, request: PickerRequest) -> Optional[List[str]]:
        if not request.candidates:
            # InquirerPy는 빈 choices를 거부하므로 즉시 중단으로 처리
            log_session("no candidates to present")
            sys.stderr.write("(no candidates)\n")
            sys.stderr.flush()
            return None

        from InquirerPy import inquirer  # pyright: ignore[reportPrivateImportUsage]
        from prompt_toolkit.application import create_app_session
        from prompt_toolkit.output import create_output

        output = self.output if self.output is not None else create_output(stdout=sys.stderr)
        order = ToggleOrder()

        with create_app_session(input=self.input, output=output):
            prompt = inquirer.fuzzy(  # pyright: ignore[reportPrivateImportUsage]
                message=request.prompt,
                choices=list(request.candidates),
                multiselect=request.multi,
                height=request.height,
                border=request.border,
                info=request.info,
                qmark="",
                amark="",
                mandatory=False,
                keybindings={"skip": self.SKIP_KEYS},
            )
            if request.multi:
                order.attach(prompt)
            with _tracking_application(prompt.application):
                result = prompt.execute()

        if result is None:
            return None
        if isinstance(result, list):
            return order.arrange([str(item) for item in result])
        return [str(result)]


class TerminalSignal(Exception):
    """세션 도중 종료 시그널(SIGTERM, SIGHUP)을 받음"""

    def __init__(self, signum: int):
        super().__init__(f"received signal {signal.Signals(signum).name}")
        self.signum = signum


def _guarded_signals() -> List[int]:
    signals = [signal.SIGTERM]
    if hasattr(signal, "SIGHUP"):
        signals.append(signal.SIGHUP)
    return signals


def _snapshot_terminal(stream: Any) -> Optional[Tuple[int, Any]]:
    if termios is None:
        return None
    try:
        fd = stream.fileno()
        return fd, termios.tcgetattr(fd)
    except (OSError, ValueError, termios.error) as e:
        log_session(f"terminal attributes unavailable: {e}")
        return None


def _restore_terminal(saved: Optional[Tuple[int, Any]]) -> None:
    if saved is None:
        return
    fd, attrs = saved
    try:
        termios.tcsetattr(fd, termios.TCSADRAIN, attrs)
    except (OSError, termios.error) as e:
        log_warn(f"failed to restore terminal mode: {e}")


@contextmanager
def terminal_guard(stdin: Any = None) -> Iterator[None]:
    """
    대화형 세션 동안 터미널을 점유하고, 모든 종료 경로에서 복구합니다.

    Args:
        stdin: 입력 스트림 (기본 sys.stdin)

    Raises:
        InternalUIError: 입력이 터미널에 연결되어 있지 않은 경우
    """
    stream = stdin if stdin is not None else sys.stdin
    if stream is None or not stream.isatty():
        raise InternalUIError("cannot attach to a terminal: stdin is not a TTY")

    saved = _snapshot_terminal(stream)
    previous_handlers = {}

    def _on_signal(signum, frame):
        error = TerminalSignal(signum)
        application = _active_applications[-1] if _active_applications else None
        if application is not None and application.is_running and not application.is_done:
            # 이벤트 루프 콜백 도중 발생한 예외는 루프가 삼키므로 앱 종료 결과로 전달
            application.exit(exception=error)
            return
        raise error

    # 시그널 핸들러는 메인 스레드에서만 설치 가능
    if threading.current_thread() is threading.main_thread():
        for signum in _guarded_signals():
            previous_handlers[signum] = signal.signal(signum, _on_signal)

    try:
        yield
    finally:
        for signum, handler in previous_handlers.items():
            signal.signal(signum, handler)
        _restore_terminal(saved)
        log_session("terminal released")


def resolve_height(height: str, candidate_count: int, max_height: int) -> Union[int, str]:
    """
    picker 높이 결정. 표시 방식에만 영향을 줍니다.

    Examples:
        resolve_height("40%", 3, 20) -> "40%"
        resolve_height("auto", 3, 20) -> 5
        resolve_height("12", 3, 20) -> 12
    """
    if height == "auto":
        return max(PICKER_CHROME_LINES + 1, min(candidate_count + PICKER_CHROME_LINES, max_height))
    if height.isdigit():
        return int(height)
    return height


class SelectionSession:
    """fuzzy picker 한 번의 실행을 담당"""

    def __init__(
        self,
        picker: Optional[Picker] = None,
        picker_config: Optional[PickerConfig] = None,
        stdin: Any = None,
    ):
        self.picker = picker or InquirerPicker()
        self.picker_config = picker_config or PickerConfig()
        self.stdin = stdin

    @staticmethod
    def validate_candidates(candidates: Sequence[str]) -> Tuple[str, ...]:
        """
        후보는 한 줄짜리 비어 있지 않은 문자열이어야 합니다.

        Raises:
            InvariantViolationError: 계약을 어긴 후보가 있는 경우 (호출자 버그)
        """
        for candidate in candidates:
            if not isinstance(candidate, str) or not candidate:
                raise InvariantViolationError(f"invalid candidate: {candidate!r}")
            if "\n" in candidate or "\r" in candidate:
                raise InvariantViolationError(f"candidate contains a line break: {candidate!r}")
        return tuple(candidates)

    def run(
        self,
        candidates: Sequence[str],
        allows_multi: bool,
        prompt_label: str,
        viewport: Optional[str] = None,
    ) -> SelectionOutcome:
        """
        후보 목록으로 picker를 실행하고 사용자가 확정하거나 중단할 때까지 대기합니다.

        Args:
            candidates: 후보 목록
            allows_multi: 여러 항목 선택 허용 여부
            prompt_label: 프롬프트 문자열
            viewport: picker 높이 힌트 (기본: 설정값)

        Returns:
            Accepted 또는 Aborted

        Raises:
            InternalUIError: picker를 시작할 수 없거나 비정상 종료된 경우
            InvariantViolationError: 후보 형식이 잘못된 경우
        """
        items = self.validate_candidates(candidates)
        request = PickerRequest(
            candidates=items,
            multi=allows_multi,
            prompt=prompt_label,
            height=resolve_height(
                viewport or self.picker_config.height, len(items), self.picker_config.max_height
            ),
            border=self.picker_config.border,
            info=self.picker_config.info,
        )
        log_session(f"presenting {len(items)} candidate(s), multi={allows_multi}")

        try:
            with terminal_guard(self.stdin):
                chosen = self.picker.pick(request)
        except KeyboardInterrupt:
            log_session("interrupted by user")
            return Aborted()
        except TerminalSignal as e:
            raise InternalUIError(f"selection terminated: {e}", original_error=e) from e
        except (InternalUIError, InvariantViolationError):
            raise
        except Exception as e:
            raise InternalUIError(f"picker failed: {e}", original_error=e) from e

        if not chosen:
            log_session("aborted without selecting anything")
            return Aborted()

        if not allows_multi and len(chosen) > 1:
            log_warn(f"picker returned {len(chosen)} items in single-select mode; keeping the first")
            chosen = chosen[:1]

        log_session(f"accepted {len(chosen)} item(s)")
        return Accepted(tuple(chosen))
