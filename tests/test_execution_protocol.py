"""
Tests for the execution capability contract and the dry-run executor.
"""

import threading

import pytest

from screenpilot.schemas.commands import NavigationAction, NavigationCommand, TapCommand, WaitCommand
from screenpilot.schemas.results import (
    CommandFailure,
    CommandSuccess,
    ErrorKind,
    ExecutionError,
)
from screenpilot.tools.execution import (
    NOT_READY_REASON,
    DryRunExecutor,
    ExecutionCapability,
)


class _ScriptedExecutor(ExecutionCapability):
    """Capability whose readiness and behavior are set by the test."""

    name = "scripted"

    def __init__(self, ready=True, behavior=None):
        super().__init__()
        self.ready = ready
        self.behavior = behavior or (lambda command: CommandSuccess(message="ok"))
        self.performed = []

    def is_ready(self):
        return self.ready

    def perform(self, command):
        self.performed.append(command)
        return self.behavior(command)


@pytest.fixture
def executors():
    created = []

    def factory(**kwargs):
        executor = _ScriptedExecutor(**kwargs)
        created.append(executor)
        return executor

    yield factory
    for executor in created:
        executor.shutdown()


def test_success_result_via_future(executors):
    executor = executors()
    result = executor.execute_command(TapCommand.at(1, 1)).result(timeout=5)
    assert result.is_success()
    assert executor.performed == [TapCommand.at(1, 1)]


def test_callback_invoked_exactly_once(executors):
    executor = executors()
    calls = []
    done = threading.Event()

    def on_complete(result):
        calls.append(result)
        done.set()

    future = executor.execute_command(TapCommand.at(1, 1), on_complete)
    future.result(timeout=5)
    assert done.wait(timeout=5)
    assert len(calls) == 1
    assert calls[0] is future.result()


def test_not_ready_completes_immediately(executors):
    executor = executors(ready=False)
    calls = []
    future = executor.execute_command(TapCommand.at(1, 1), calls.append)

    assert future.done()
    result = future.result()
    assert isinstance(result, CommandFailure)
    assert result.error_kind == ErrorKind.CAPABILITY_UNAVAILABLE
    assert result.reason == NOT_READY_REASON
    assert calls == [result]
    assert executor.performed == []


def test_execution_error_maps_to_its_kind(executors):
    def behavior(command):
        raise ExecutionError(ErrorKind.FOCUS_TARGET_NOT_FOUND, "No focused input field found")

    executor = executors(behavior=behavior)
    result = executor.execute_command(TapCommand.at(1, 1)).result(timeout=5)
    assert result.error_kind == ErrorKind.FOCUS_TARGET_NOT_FOUND
    assert result.reason == "No focused input field found"


def test_unexpected_exception_becomes_unknown_failure(executors):
    def behavior(command):
        raise RuntimeError("kaboom")

    executor = executors(behavior=behavior)
    result = executor.execute_command(TapCommand.at(1, 1)).result(timeout=5)
    assert result.error_kind == ErrorKind.UNKNOWN
    assert isinstance(result.cause, RuntimeError)


def test_busy_capability_rejects_second_command(executors):
    release = threading.Event()
    started = threading.Event()

    def behavior(command):
        started.set()
        release.wait(timeout=5)
        return CommandSuccess(message="slow")

    executor = executors(behavior=behavior)
    first = executor.execute_command(WaitCommand(duration_ms=1))
    assert started.wait(timeout=5)

    second = executor.execute_command(WaitCommand(duration_ms=1)).result(timeout=5)
    assert second.error_kind == ErrorKind.INVALID_STATE

    release.set()
    assert first.result(timeout=5).is_success()
    assert executor.execute_command(WaitCommand(duration_ms=1)).result(timeout=5).is_success()


def test_callback_exception_is_contained(executors):
    executor = executors()

    def broken(result):
        raise RuntimeError("sink bug")

    assert executor.execute_command(TapCommand.at(1, 1), broken).result(timeout=5).is_success()


def test_non_command_is_rejected_without_wedging(executors):
    executor = executors()
    calls = []

    future = executor.execute_command({"kind": "tap"}, calls.append)
    assert future.done()
    result = future.result()
    assert result.error_kind == ErrorKind.INVALID_STATE
    assert "dict" in result.reason
    assert calls == [result]
    assert executor.performed == []

    assert executor.execute_command(TapCommand.at(1, 1)).result(timeout=5).is_success()


def test_non_result_from_perform_is_unknown_failure(executors):
    executor = executors(behavior=lambda command: None)
    future = executor.execute_command(TapCommand.at(1, 1))
    result = future.result(timeout=5)
    assert result.error_kind == ErrorKind.UNKNOWN
    assert isinstance(result.cause, TypeError)
    assert executor.execute_command(TapCommand.at(1, 1)).result(timeout=5).error_kind == (
        ErrorKind.UNKNOWN
    )


def test_shutdown_makes_capability_unavailable():
    executor = _ScriptedExecutor()
    executor.shutdown()
    result = executor.execute_command(TapCommand.at(1, 1)).result(timeout=5)
    assert result.error_kind == ErrorKind.CAPABILITY_UNAVAILABLE


def test_dry_run_executor_records_commands():
    executor = DryRunExecutor()
    try:
        assert executor.is_ready()
        back = NavigationCommand(action=NavigationAction.BACK)
        result = executor.execute_command(back).result(timeout=5)
        assert result.message == "Dry run: Press Back"
        assert result.metadata == {"kind": "navigation"}
        assert executor.executed == [back]
    finally:
        executor.shutdown()
