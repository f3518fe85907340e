"""
Platform-agnostic contract for executing commands against a live environment.

Every execution backend (desktop input, dry run, ...) implements this
protocol so the pipeline can dispatch commands without knowing how input is
synthesized.
"""

import logging
import threading
from abc import ABC, abstractmethod
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, Optional

from ...parsing.command_parser import format_for_display
from ...schemas.commands import Command
from ...schemas.results import (
    CommandFailure,
    CommandResult,
    CommandSuccess,
    ErrorKind,
    ExecutionError,
)

logger = logging.getLogger(__name__)

NOT_READY_REASON = "Execution capability not ready"

CompletionCallback = Callable[[CommandResult], None]


def completed_future(result: CommandResult) -> "Future[CommandResult]":
    """Wrap an already-known result in a finished Future."""
    future: Future = Future()
    future.set_result(result)
    return future


def not_ready_failure() -> CommandFailure:
    return CommandFailure(
        reason=NOT_READY_REASON, error_kind=ErrorKind.CAPABILITY_UNAVAILABLE
    )


class ExecutionCapability(ABC):
    """
    Unified execution contract.

    Subclasses implement is_ready() and perform(). execute_command() takes
    care of the asynchronous part: commands run one at a time on a private
    worker thread and each call yields exactly one CommandResult through a
    Future.
    """

    name: str = "execution"

    def __init__(self) -> None:
        self._pool = ThreadPoolExecutor(
            max_workers=1, thread_name_prefix=f"{self.name}-executor"
        )
        self._busy = threading.Lock()

    @abstractmethod
    def is_ready(self) -> bool:
        """
        Report whether commands can be accepted right now.

        Must be cheap and free of side effects; callers poll it before every
        dispatch.
        """
        ...

    @abstractmethod
    def perform(self, command: Command) -> CommandResult:
        """
        Execute a command synchronously on the worker thread.

        Implementations may return a CommandFailure or raise ExecutionError to
        fail with a specific ErrorKind. Any other exception is reported as an
        UNKNOWN failure.

        Args:
            command: Command to execute

        Returns:
            The outcome of the command
        """
        ...

    def execute_command(
        self, command: Command, on_complete: Optional[CompletionCallback] = None
    ) -> "Future[CommandResult]":
        """
        Dispatch a command without blocking the caller.

        If the capability is not ready the returned future is already
        completed with a CAPABILITY_UNAVAILABLE failure. If a previous command
        is still running, or the value is not a command variant, it completes
        with INVALID_STATE.

        Args:
            command: Command to execute
            on_complete: Optional callback, invoked once with the result

        Returns:
            Future resolving to the CommandResult
        """
        try:
            display = format_for_display(command)
        except TypeError as e:
            display = None
            unsupported = CommandFailure(
                reason=f"Unsupported command: {type(command).__name__}",
                cause=e,
                error_kind=ErrorKind.INVALID_STATE,
            )

        if not self.is_ready():
            future = completed_future(not_ready_failure())
        elif display is None:
            future = completed_future(unsupported)
        elif not self._busy.acquire(blocking=False):
            future = completed_future(
                CommandFailure(
                    reason="Another command is currently executing",
                    error_kind=ErrorKind.INVALID_STATE,
                )
            )
        else:
            try:
                future = self._pool.submit(self._run, command, display)
            except RuntimeError as e:
                self._busy.release()
                future = completed_future(
                    CommandFailure(
                        reason="Execution capability has been shut down",
                        cause=e,
                        error_kind=ErrorKind.CAPABILITY_UNAVAILABLE,
                    )
                )

        if on_complete is not None:
            future.add_done_callback(lambda done: _deliver(on_complete, done))
        return future

    def _run(self, command: Command, display: str) -> CommandResult:
        try:
            result = self.perform(command)
            if not isinstance(result, (CommandSuccess, CommandFailure)):
                raise TypeError(f"perform() returned {type(result).__name__}")
        except ExecutionError as e:
            result = e.to_failure()
        except Exception as e:
            logger.exception(f"Error executing command: {display}")
            result = CommandFailure(
                reason="Command execution failed", cause=e, error_kind=ErrorKind.UNKNOWN
            )
        finally:
            self._busy.release()

        if result.is_success():
            logger.debug(f"Executed: {display}")
        else:
            logger.info(f"Failed: {display}: {result.description()}")
        return result

    def shutdown(self, wait: bool = True) -> None:
        """Stop the worker thread. Later dispatches fail as unavailable."""
        self._pool.shutdown(wait=wait)


def _deliver(callback: CompletionCallback, future: "Future[CommandResult]") -> None:
    try:
        callback(future.result())
    except Exception:
        logger.exception("Completion callback raised")
