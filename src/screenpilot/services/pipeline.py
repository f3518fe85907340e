"""
Command pipeline: text in, commands dispatched, status out.

Wires the parser to an execution capability and forwards every step to a
status sink (console, overlay, log...). Also exposes the screen state as a
JSON payload for an external planner.
"""

import json
import logging
import threading
import time
from concurrent.futures import Future, TimeoutError as FutureTimeoutError
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional

from ..config.pipeline_config import PipelineConfig, get_pipeline_config
from ..parsing.command_parser import CommandParser, format_for_display
from ..schemas.commands import Command
from ..schemas.results import CommandFailure, CommandResult, ErrorKind
from ..tools.execution.protocol import (
    ExecutionCapability,
    completed_future,
    not_ready_failure,
)
from .state.screen_state import ScreenStateAggregator

logger = logging.getLogger(__name__)


class StatusKind(str, Enum):
    """Pipeline step reported to the status sink."""

    NOT_UNDERSTOOD = "not_understood"
    DISPATCHED = "dispatched"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class PipelineStatus:
    """One status line for the display layer."""

    kind: StatusKind
    message: str
    command_display: Optional[str] = None
    error_kind: Optional[ErrorKind] = None


StatusSink = Callable[[PipelineStatus], None]


class CommandPipeline:
    """
    Thin orchestrator between the command parser and an execution capability.

    The capability may be attached later (for example once a platform
    service connects); until then every dispatch fails immediately as
    CAPABILITY_UNAVAILABLE.
    """

    def __init__(
        self,
        executor: Optional[ExecutionCapability] = None,
        aggregator: Optional[ScreenStateAggregator] = None,
        status_sink: Optional[StatusSink] = None,
        config: Optional[PipelineConfig] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Args:
            executor: Execution capability, or None if not constructed yet
            aggregator: Screen state source for planner payloads
            status_sink: Receives a PipelineStatus for every step
            config: Pipeline configuration (defaults to the process-wide one)
            sleep: Sleep function used between script commands
        """
        self.config = config or get_pipeline_config()
        self.parser = CommandParser(self.config)
        self.aggregator = aggregator or ScreenStateAggregator(self.config.history_size)
        self._executor = executor
        self._executor_lock = threading.Lock()
        self._status_sink = status_sink
        self._sleep = sleep

    def attach_executor(self, executor: Optional[ExecutionCapability]) -> None:
        """Set or replace the execution capability (None detaches it)."""
        with self._executor_lock:
            self._executor = executor

    @property
    def executor(self) -> Optional[ExecutionCapability]:
        with self._executor_lock:
            return self._executor

    def is_ready(self) -> bool:
        executor = self.executor
        return executor is not None and executor.is_ready()

    def _emit(self, status: PipelineStatus) -> None:
        if self._status_sink is None:
            return
        try:
            self._status_sink(status)
        except Exception as e:
            logger.exception(f"Status sink raised: {e}")

    def _on_result(self, display: str, result: CommandResult) -> None:
        if result.is_success():
            self._emit(
                PipelineStatus(StatusKind.SUCCEEDED, result.description(), display)
            )
        else:
            self._emit(
                PipelineStatus(
                    StatusKind.FAILED,
                    result.description(),
                    display,
                    error_kind=result.error_kind,
                )
            )

    def dispatch(self, command: Command) -> "Future[CommandResult]":
        """
        Hand one command to the execution capability.

        Readiness is re-checked right before dispatch; a missing or unready
        capability yields an already-completed CAPABILITY_UNAVAILABLE failure.

        Args:
            command: Parsed command

        Returns:
            Future resolving to the CommandResult
        """
        display = format_for_display(command)
        executor = self.executor

        if executor is None or not executor.is_ready():
            result = not_ready_failure()
            self._on_result(display, result)
            return completed_future(result)

        self._emit(PipelineStatus(StatusKind.DISPATCHED, f"Executing: {display}", display))

        # resolves only after the sink has seen the outcome
        reported: Future = Future()

        def on_complete(result: CommandResult) -> None:
            self._on_result(display, result)
            reported.set_result(result)

        executor.execute_command(command, on_complete=on_complete)
        return reported

    def submit_line(self, line: str) -> "Optional[Future[CommandResult]]":
        """
        Parse and dispatch a single line.

        Returns:
            Future for the result, or None when the line could not be understood
        """
        command = self.parser.parse_command(line)
        if command is None:
            self._emit(
                PipelineStatus(
                    StatusKind.NOT_UNDERSTOOD, f"Could not understand: {line.strip()!r}"
                )
            )
            return None
        return self.dispatch(command)

    def run_commands(
        self, commands: List[Command], stop_on_failure: bool = True
    ) -> List[CommandResult]:
        """
        Execute commands one after another, waiting for each result.

        Args:
            commands: Commands in execution order
            stop_on_failure: Stop at the first failed command

        Returns:
            Results of the commands that were dispatched, in order
        """
        results: List[CommandResult] = []
        for index, command in enumerate(commands):
            if index > 0 and self.config.inter_command_delay > 0:
                self._sleep(self.config.inter_command_delay)

            future = self.dispatch(command)
            try:
                result = future.result(timeout=self.config.result_timeout)
            except FutureTimeoutError as e:
                result = CommandFailure(
                    reason=f"No result within {self.config.result_timeout}s",
                    cause=e,
                    error_kind=ErrorKind.TIMEOUT,
                )
            results.append(result)

            if result.is_failure() and stop_on_failure:
                logger.info(f"Stopping script after failure: {result.description()}")
                break
        return results

    def run_script(self, script: str, stop_on_failure: bool = True) -> List[CommandResult]:
        """
        Parse a script and execute its commands sequentially.

        Lines that cannot be parsed are skipped.

        Args:
            script: Multi-line script text
            stop_on_failure: Stop at the first failed command

        Returns:
            Results of the commands that were dispatched, in order
        """
        return self.run_commands(self.parser.parse_commands(script), stop_on_failure)

    def screen_payload(self) -> Optional[str]:
        """
        Describe the current screen for an external planner.

        Returns:
            JSON text with foreground app, last transition and UI tree, or
            None before the first tree arrives
        """
        state = self.aggregator.get_state()
        if state.ui_tree is None:
            return None
        try:
            payload = {
                "foregroundPackage": state.foreground_package,
                "lastTransition": (
                    state.last_transition.model_dump(by_alias=True)
                    if state.last_transition
                    else None
                ),
                "uiTree": state.ui_tree.model_dump(by_alias=True),
            }
            return json.dumps(payload)
        except Exception as e:
            logger.error(f"Error building screen payload: {e}")
            return None

    def shutdown(self) -> None:
        """Stop the attached capability and clear screen state."""
        executor = self.executor
        if executor is not None:
            executor.shutdown()
        self.aggregator.reset()
