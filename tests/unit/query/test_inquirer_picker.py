"""
Unit Tests for InquirerPicker
prompt_toolkit pipe 입력으로 실제 fuzzy prompt를 구동합니다.
"""

import sys
from unittest.mock import patch

import pytest
from prompt_toolkit.input import create_pipe_input
from prompt_toolkit.output import DummyOutput

from cargo_query.query.session import (
    Aborted,
    Accepted,
    InquirerPicker,
    PickerRequest,
    SelectionSession,
    ToggleOrder,
)

DOWN = "\x1b[B"
UP = "\x1b[A"
TAB = "\t"
ENTER = "\r"
CTRL_C = "\x03"
CTRL_Z = "\x1a"


def _request(candidates=("json", "tls", "serde"), multi=False, **options):
    return PickerRequest(candidates=tuple(candidates), multi=multi, prompt="features> ", height=10, **options)


def _pick(keys, request):
    with create_pipe_input() as pipe:
        pipe.send_text(keys)
        return InquirerPicker(input=pipe, output=DummyOutput()).pick(request)


class TestInquirerPickerKeys:
    """키 입력 -> 선택 결과"""

    def test_single_select_accepts_highlighted_candidate(self):
        assert _pick(ENTER, _request()) == ["json"]

    def test_single_select_after_moving_down(self):
        assert _pick(DOWN + ENTER, _request()) == ["tls"]

    def test_multi_select_keeps_tag_order(self):
        # tls 를 먼저, json 을 나중에 태그
        keys = DOWN + TAB + UP + UP + TAB + ENTER

        assert _pick(keys, _request(multi=True)) == ["tls", "json"]

    def test_untagged_item_moves_to_end_when_tagged_again(self):
        # json, tls 태그 -> json 해제 -> json 다시 태그
        keys = TAB + TAB + UP + UP + TAB + UP + TAB + ENTER

        assert _pick(keys, _request(multi=True)) == ["tls", "json"]

    def test_multi_select_without_tags_returns_highlighted(self):
        assert _pick(DOWN + DOWN + ENTER, _request(multi=True)) == ["serde"]

    def test_skip_key_returns_none(self):
        assert _pick(CTRL_Z, _request()) is None

    def test_ctrl_c_raises_keyboard_interrupt(self):
        with pytest.raises(KeyboardInterrupt):
            _pick(CTRL_C, _request())

    def test_skip_through_session_is_aborted(self, fake_tty):
        with create_pipe_input() as pipe:
            pipe.send_text(CTRL_Z)
            session = SelectionSession(
                picker=InquirerPicker(input=pipe, output=DummyOutput()), stdin=fake_tty
            )
            outcome = session.run(["server", "client"], allows_multi=False, prompt_label="binaries> ")

        assert outcome == Aborted()

    def test_accept_through_session(self, fake_tty):
        with create_pipe_input() as pipe:
            pipe.send_text(DOWN + ENTER)
            session = SelectionSession(
                picker=InquirerPicker(input=pipe, output=DummyOutput()), stdin=fake_tty
            )
            outcome = session.run(["server", "client"], allows_multi=False, prompt_label="binaries> ")

        assert outcome == Accepted(("client",))


class TestInquirerPickerConfiguration:
    """fuzzy prompt 구성과 결과 정규화"""

    @patch("InquirerPy.inquirer.fuzzy")
    def test_prompt_options(self, mock_fuzzy):
        mock_fuzzy.return_value.execute.return_value = ["tls"]

        result = InquirerPicker(output=DummyOutput()).pick(
            _request(("tls", "json"), multi=True, border=True, info=False)
        )

        assert result == ["tls"]
        kwargs = mock_fuzzy.call_args.kwargs
        assert kwargs["choices"] == ["tls", "json"]
        assert kwargs["multiselect"] is True
        assert kwargs["mandatory"] is False
        assert kwargs["keybindings"] == {"skip": InquirerPicker.SKIP_KEYS}
        assert {"key": "escape"} in kwargs["keybindings"]["skip"]
        assert kwargs["message"] == "features> "
        assert kwargs["height"] == 10
        assert kwargs["border"] is True
        assert kwargs["info"] is False

    @pytest.mark.parametrize("raw, expected", [
        ("json", ["json"]),
        (["json", "tls"], ["json", "tls"]),
        ([], []),
        (None, None),
    ])
    @patch("InquirerPy.inquirer.fuzzy")
    def test_result_normalisation(self, mock_fuzzy, raw, expected):
        mock_fuzzy.return_value.execute.return_value = raw

        assert InquirerPicker(output=DummyOutput()).pick(_request()) == expected

    @patch("InquirerPy.inquirer.fuzzy")
    def test_empty_candidates_never_start_prompt(self, mock_fuzzy, capsys):
        result = InquirerPicker(output=DummyOutput()).pick(_request(()))

        assert result is None
        assert capsys.readouterr().err == "(no candidates)\n"
        mock_fuzzy.assert_not_called()

    @patch("prompt_toolkit.output.create_output")
    @patch("InquirerPy.inquirer.fuzzy")
    def test_renders_on_stderr_by_default(self, mock_fuzzy, mock_create_output):
        mock_create_output.return_value = DummyOutput()
        mock_fuzzy.return_value.execute.return_value = "json"

        InquirerPicker().pick(_request())

        mock_create_output.assert_called_once_with(stdout=sys.stderr)


class TestToggleOrder:
    """태그 순서 기록"""

    def choices(self, *enabled):
        return [{"name": v, "value": v, "enabled": v in enabled} for v in ("json", "tls", "serde")]

    def test_records_tag_order(self):
        order = ToggleOrder()

        order.sync(self.choices("tls"))
        order.sync(self.choices("tls", "json"))

        assert order.order == ["tls", "json"]
        assert order.arrange(["json", "tls"]) == ["tls", "json"]

    def test_untag_removes_entry(self):
        order = ToggleOrder()
        order.sync(self.choices("json"))
        order.sync(self.choices("json", "tls"))

        order.sync(self.choices("tls"))

        assert order.order == ["tls"]

    def test_bulk_toggle_uses_candidate_order(self):
        order = ToggleOrder()
        order.sync(self.choices("serde"))

        order.sync(self.choices("json", "tls", "serde"))

        assert order.order == ["serde", "json", "tls"]

    def test_unrecorded_items_keep_picker_order(self):
        assert ToggleOrder().arrange(["serde", "json"]) == ["serde", "json"]
