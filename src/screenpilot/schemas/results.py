"""
Execution outcome schemas.
"""

from enum import Enum
from typing import Any, Dict, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class ErrorKind(str, Enum):
    """Categorized reason why a command failed to execute."""

    UNKNOWN = "unknown"
    PERMISSION_DENIED = "permission_denied"
    CAPABILITY_UNAVAILABLE = "capability_unavailable"
    INVALID_COORDINATES = "invalid_coordinates"
    FOCUS_TARGET_NOT_FOUND = "focus_target_not_found"
    TEXT_INPUT_UNAVAILABLE = "text_input_unavailable"
    DISPATCH_FAILED = "dispatch_failed"
    TIMEOUT = "timeout"
    INVALID_STATE = "invalid_state"
    BOUNDARY_VIOLATION = "boundary_violation"


class CommandSuccess(BaseModel):
    """
    Command executed successfully.
    """

    model_config = ConfigDict(frozen=True)

    outcome: Literal["success"] = "success"
    message: str = Field(description="Human-readable success message")
    metadata: Optional[Dict[str, Any]] = Field(
        default=None, description="Optional technical details"
    )

    def is_success(self) -> bool:
        return True

    def is_failure(self) -> bool:
        return False

    def description(self) -> str:
        """Human-readable description of the outcome."""
        return self.message


class CommandFailure(BaseModel):
    """
    Command could not be executed.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    outcome: Literal["failure"] = "failure"
    reason: str = Field(description="Human-readable error description")
    cause: Optional[BaseException] = Field(
        default=None, exclude=True, description="Underlying exception, if any"
    )
    error_kind: ErrorKind = Field(default=ErrorKind.UNKNOWN)

    def is_success(self) -> bool:
        return False

    def is_failure(self) -> bool:
        return True

    def description(self) -> str:
        """Reason, followed by the underlying cause when one is attached."""
        if self.cause is not None:
            return f"{self.reason} ({self.cause})"
        return self.reason


CommandResult = Union[CommandSuccess, CommandFailure]


class ExecutionError(Exception):
    """
    Raised inside an execution capability to fail with a specific ErrorKind.
    """

    def __init__(self, error_kind: ErrorKind, reason: str):
        super().__init__(reason)
        self.error_kind = error_kind
        self.reason = reason

    def to_failure(self) -> CommandFailure:
        return CommandFailure(
            reason=self.reason, cause=self.__cause__, error_kind=self.error_kind
        )
