"""
Desktop execution capability backed by pyautogui.

Taps become mouse presses, swipes become drags, scrolls use the mouse wheel
and navigation buttons map to platform hotkeys.
"""

import logging
import platform
import time
from typing import Any, Callable, Optional

from ...config.pipeline_config import PipelineConfig, get_pipeline_config
from ...parsing.command_parser import format_for_display
from ...schemas.commands import (
    Command,
    NavigationAction,
    NavigationCommand,
    ScrollCommand,
    ScrollDirection,
    SwipeCommand,
    TapCommand,
    TypeTextCommand,
    WaitCommand,
)
from ...schemas.results import (
    CommandResult,
    CommandSuccess,
    ErrorKind,
    ExecutionError,
)
from ...utils.validation.coordinate_validator import CoordinateValidator
from .protocol import ExecutionCapability

logger = logging.getLogger(__name__)


def _load_pyautogui() -> Optional[Any]:
    """Import and configure pyautogui; it needs a display at import time."""
    try:
        import pyautogui

        pyautogui.FAILSAFE = True
        pyautogui.PAUSE = 0.02
        return pyautogui
    except Exception as e:
        logger.warning(f"pyautogui unavailable: {e}")
        return None


def _modifier() -> str:
    return "command" if platform.system() == "Darwin" else "ctrl"


class PyAutoGUIExecutor(ExecutionCapability):
    """
    Synthesizes mouse and keyboard input on the local desktop.
    """

    name = "pyautogui"

    def __init__(
        self,
        config: Optional[PipelineConfig] = None,
        backend: Optional[Any] = None,
        clipboard: Optional[Any] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Initialize the executor.

        Args:
            config: Pipeline configuration (defaults to the process-wide one)
            backend: pyautogui-compatible module; pyautogui is imported when None
            clipboard: pyperclip-compatible module for non-ASCII text
            sleep: Sleep function, replaceable in tests
        """
        super().__init__()
        self.config = config or get_pipeline_config()
        self._backend = backend if backend is not None else _load_pyautogui()
        self._clipboard = clipboard
        self._sleep = sleep

    def is_ready(self) -> bool:
        backend = self._backend
        if backend is None:
            return False
        try:
            width, height = backend.size()
        except Exception:
            return False
        return width > 0 and height > 0

    def perform(self, command: Command) -> CommandResult:
        backend = self._backend
        if backend is None:
            raise ExecutionError(
                ErrorKind.CAPABILITY_UNAVAILABLE, "pyautogui backend is not available"
            )

        try:
            metadata = self._dispatch(backend, command)
        except ExecutionError:
            raise
        except Exception as e:
            if type(e).__name__ == "FailSafeException":
                raise ExecutionError(
                    ErrorKind.BOUNDARY_VIOLATION,
                    "Pointer reached a screen corner, fail-safe triggered",
                ) from e
            raise ExecutionError(
                ErrorKind.DISPATCH_FAILED, f"Input dispatch failed: {e}"
            ) from e

        return CommandSuccess(
            message=f"Completed: {format_for_display(command)}", metadata=metadata
        )

    def _dispatch(self, backend: Any, command: Command) -> dict:
        if isinstance(command, TapCommand):
            return self._tap(backend, command)
        if isinstance(command, SwipeCommand):
            return self._swipe(backend, command)
        if isinstance(command, ScrollCommand):
            return self._scroll(backend, command)
        if isinstance(command, TypeTextCommand):
            return self._type_text(backend, command)
        if isinstance(command, WaitCommand):
            self._sleep(command.duration_ms / 1000.0)
            return {"waited_ms": command.duration_ms}
        if isinstance(command, NavigationCommand):
            return self._navigate(backend, command)
        raise ExecutionError(
            ErrorKind.INVALID_STATE, f"Unsupported command: {type(command).__name__}"
        )

    def _validator(self, backend: Any) -> CoordinateValidator:
        width, height = backend.size()
        return CoordinateValidator(width, height)

    def _tap(self, backend: Any, command: TapCommand) -> dict:
        is_valid, error = self._validator(backend).validate_points(command.points)
        if not is_valid:
            raise ExecutionError(ErrorKind.INVALID_COORDINATES, error)

        hold = command.duration_ms / 1000.0
        for point in command.points:
            backend.moveTo(point.x, point.y)
            backend.mouseDown(button="left")
            self._sleep(hold)
            backend.mouseUp(button="left")
        return {"points": len(command.points), "duration_ms": command.duration_ms}

    def _swipe(self, backend: Any, command: SwipeCommand) -> dict:
        is_valid, error = self._validator(backend).validate_points(
            (command.start, command.end)
        )
        if not is_valid:
            raise ExecutionError(ErrorKind.INVALID_COORDINATES, error)

        backend.moveTo(command.start.x, command.start.y)
        backend.dragTo(
            command.end.x,
            command.end.y,
            duration=command.duration_ms / 1000.0,
            button="left",
        )
        return {"duration_ms": command.duration_ms}

    def _scroll(self, backend: Any, command: ScrollCommand) -> dict:
        amount = self.config.scroll_amount
        if command.direction == ScrollDirection.UP:
            backend.scroll(amount)
        elif command.direction == ScrollDirection.DOWN:
            backend.scroll(-amount)
        elif command.direction == ScrollDirection.LEFT:
            backend.hscroll(-amount)
        else:
            backend.hscroll(amount)
        self._sleep(command.duration_ms / 1000.0)
        return {"direction": command.direction.value, "amount": amount}

    def _type_text(self, backend: Any, command: TypeTextCommand) -> dict:
        if command.clear_existing_first:
            backend.hotkey(_modifier(), "a")
            backend.press("backspace")

        if command.text.isascii():
            backend.write(command.text, interval=self.config.typing_interval)
            method = "keystrokes"
        else:
            self._paste(backend, command.text)
            method = "clipboard"

        if command.commit_on_finish:
            backend.press("enter")
        return {"text_length": len(command.text), "method": method}

    def _paste(self, backend: Any, text: str) -> None:
        """
        Paste text through the clipboard; keystrokes only cover ASCII.
        """
        clipboard = self._clipboard
        try:
            if clipboard is None:
                import pyperclip as clipboard
            clipboard.copy(text)
        except Exception as e:
            raise ExecutionError(
                ErrorKind.TEXT_INPUT_UNAVAILABLE, f"Clipboard unavailable: {e}"
            ) from e

        self._sleep(0.05)
        backend.hotkey(_modifier(), "v")
        self._sleep(0.05)

    def _navigate(self, backend: Any, command: NavigationCommand) -> dict:
        hotkeys = {
            NavigationAction.BACK: self.config.back_hotkey,
            NavigationAction.HOME: self.config.home_hotkey,
            NavigationAction.RECENTS: self.config.recents_hotkey,
        }
        keys = hotkeys[command.action]
        backend.hotkey(*keys)
        return {"hotkey": "+".join(keys)}
