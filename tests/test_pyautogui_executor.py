"""
Tests for the pyautogui-backed executor.

A MagicMock stands in for the pyautogui module so no display is needed.
"""

from unittest.mock import MagicMock, call

import pytest

from screenpilot.config.pipeline_config import PipelineConfig
from screenpilot.schemas.commands import (
    NavigationAction,
    NavigationCommand,
    Point,
    ScrollCommand,
    ScrollDirection,
    SwipeCommand,
    TapCommand,
    TypeTextCommand,
    WaitCommand,
)
from screenpilot.schemas.results import ErrorKind
from screenpilot.tools.execution.pyautogui_executor import PyAutoGUIExecutor


class FailSafeException(Exception):
    """Mirrors pyautogui's fail-safe exception by name."""


@pytest.fixture
def backend():
    fake = MagicMock()
    fake.size.return_value = (1920, 1080)
    return fake


@pytest.fixture
def sleeps():
    return []


@pytest.fixture
def executor(backend, sleeps):
    config = PipelineConfig(
        scroll_amount=3,
        typing_interval=0.0,
        back_hotkey=("alt", "left"),
        home_hotkey=("win", "d"),
        recents_hotkey=("alt", "tab"),
    )
    instance = PyAutoGUIExecutor(config=config, backend=backend, sleep=sleeps.append)
    yield instance
    instance.shutdown()


def run(executor, command):
    return executor.execute_command(command).result(timeout=5)


class TestReadiness:
    def test_ready_with_screen(self, executor):
        assert executor.is_ready()

    def test_not_ready_with_zero_size(self, executor, backend):
        backend.size.return_value = (0, 0)
        assert not executor.is_ready()
        result = run(executor, TapCommand.at(1, 1))
        assert result.error_kind == ErrorKind.CAPABILITY_UNAVAILABLE

    def test_not_ready_when_size_raises(self, executor, backend):
        backend.size.side_effect = OSError("no display")
        assert not executor.is_ready()

    def test_backend_loaded_once_at_construction(self, backend, monkeypatch):
        loads = []

        def load():
            loads.append(1)
            return backend

        monkeypatch.setattr(
            "screenpilot.tools.execution.pyautogui_executor._load_pyautogui", load
        )
        executor = PyAutoGUIExecutor(config=PipelineConfig())
        try:
            assert loads == [1]
            assert executor.is_ready()
            assert executor.is_ready()
            assert loads == [1]
        finally:
            executor.shutdown()


class TestTap:
    def test_single_tap(self, executor, backend, sleeps):
        result = run(executor, TapCommand.at(100, 200, 150))
        assert result.is_success()
        assert result.message == "Completed: Tap at (100, 200)"
        assert result.metadata == {"points": 1, "duration_ms": 150}
        backend.moveTo.assert_called_once_with(100, 200)
        backend.mouseDown.assert_called_once_with(button="left")
        backend.mouseUp.assert_called_once_with(button="left")
        assert sleeps == [0.15]

    def test_multi_point_tap_is_sequential(self, executor, backend):
        command = TapCommand(points=(Point(x=1, y=2), Point(x=3, y=4)))
        assert run(executor, command).metadata["points"] == 2
        assert backend.moveTo.call_args_list == [call(1, 2), call(3, 4)]
        assert backend.mouseUp.call_count == 2

    def test_out_of_bounds_rejected(self, executor, backend):
        result = run(executor, TapCommand.at(5000, 10))
        assert result.error_kind == ErrorKind.INVALID_COORDINATES
        backend.mouseDown.assert_not_called()


class TestSwipeAndScroll:
    def test_swipe_drags(self, executor, backend):
        command = SwipeCommand(start=Point(x=10, y=800), end=Point(x=10, y=200), duration_ms=400)
        result = run(executor, command)
        assert result.is_success()
        backend.moveTo.assert_called_once_with(10, 800)
        backend.dragTo.assert_called_once_with(10, 200, duration=0.4, button="left")

    def test_swipe_out_of_bounds(self, executor):
        command = SwipeCommand(start=Point(x=10, y=10), end=Point(x=10, y=5000))
        assert run(executor, command).error_kind == ErrorKind.INVALID_COORDINATES

    @pytest.mark.parametrize(
        "direction,method,amount",
        [
            (ScrollDirection.UP, "scroll", 3),
            (ScrollDirection.DOWN, "scroll", -3),
            (ScrollDirection.LEFT, "hscroll", -3),
            (ScrollDirection.RIGHT, "hscroll", 3),
        ],
    )
    def test_scroll_direction_mapping(self, executor, backend, direction, method, amount):
        result = run(executor, ScrollCommand(direction=direction))
        getattr(backend, method).assert_called_once_with(amount)
        assert result.metadata == {"direction": direction.value, "amount": 3}


class TestTypeText:
    def test_ascii_text_is_typed(self, executor, backend):
        result = run(executor, TypeTextCommand(text="hello"))
        backend.write.assert_called_once_with("hello", interval=0.0)
        backend.press.assert_not_called()
        assert result.metadata == {"text_length": 5, "method": "keystrokes"}

    def test_clear_and_commit(self, executor, backend):
        command = TypeTextCommand(text="hi", commit_on_finish=True, clear_existing_first=True)
        run(executor, command)
        assert backend.press.call_args_list == [call("backspace"), call("enter")]
        assert backend.hotkey.call_args[0][1] == "a"

    def test_non_ascii_text_goes_through_clipboard(self, backend, sleeps):
        clipboard = MagicMock()
        executor = PyAutoGUIExecutor(
            config=PipelineConfig(), backend=backend, clipboard=clipboard, sleep=sleeps.append
        )
        try:
            result = run(executor, TypeTextCommand(text="héllo"))
        finally:
            executor.shutdown()
        clipboard.copy.assert_called_once_with("héllo")
        assert backend.hotkey.call_args[0][1] == "v"
        backend.write.assert_not_called()
        assert result.metadata["method"] == "clipboard"

    def test_clipboard_failure(self, backend, sleeps):
        clipboard = MagicMock()
        clipboard.copy.side_effect = RuntimeError("no clipboard")
        executor = PyAutoGUIExecutor(
            config=PipelineConfig(), backend=backend, clipboard=clipboard, sleep=sleeps.append
        )
        try:
            result = run(executor, TypeTextCommand(text="ü"))
        finally:
            executor.shutdown()
        assert result.error_kind == ErrorKind.TEXT_INPUT_UNAVAILABLE
        assert "no clipboard" in result.description()


class TestWaitAndNavigation:
    def test_wait_sleeps(self, executor, backend, sleeps):
        result = run(executor, WaitCommand(duration_ms=1500))
        assert sleeps == [1.5]
        assert result.metadata == {"waited_ms": 1500}

    @pytest.mark.parametrize(
        "action,keys",
        [
            (NavigationAction.BACK, ("alt", "left")),
            (NavigationAction.HOME, ("win", "d")),
            (NavigationAction.RECENTS, ("alt", "tab")),
        ],
    )
    def test_navigation_hotkeys(self, executor, backend, action, keys):
        result = run(executor, NavigationCommand(action=action))
        backend.hotkey.assert_called_once_with(*keys)
        assert result.metadata == {"hotkey": "+".join(keys)}


class TestFailures:
    def test_fail_safe_is_boundary_violation(self, executor, backend):
        backend.moveTo.side_effect = FailSafeException("corner")
        result = run(executor, TapCommand.at(1, 1))
        assert result.error_kind == ErrorKind.BOUNDARY_VIOLATION
        assert isinstance(result.cause, FailSafeException)

    def test_backend_error_is_dispatch_failure(self, executor, backend):
        backend.hotkey.side_effect = OSError("xdotool missing")
        result = run(executor, NavigationCommand(action=NavigationAction.HOME))
        assert result.error_kind == ErrorKind.DISPATCH_FAILED
        assert "xdotool missing" in result.description()

    def test_missing_backend_not_ready(self, monkeypatch):
        monkeypatch.setattr(
            "screenpilot.tools.execution.pyautogui_executor._load_pyautogui", lambda: None
        )
        executor = PyAutoGUIExecutor(config=PipelineConfig())
        try:
            assert not executor.is_ready()
            result = run(executor, TapCommand.at(1, 1))
        finally:
            executor.shutdown()
        assert result.error_kind == ErrorKind.CAPABILITY_UNAVAILABLE
