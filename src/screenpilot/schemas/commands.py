"""
Command schemas for the automation pipeline.

Each command variant is an immutable pydantic model tagged by its ``kind``
field, so a raw dict can be validated straight into the right variant.
"""

from enum import Enum
from typing import Annotated, Literal, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


DEFAULT_TAP_DURATION_MS = 100
DEFAULT_SWIPE_DURATION_MS = 300
DEFAULT_SCROLL_DURATION_MS = 500


class ScrollDirection(str, Enum):
    """Direction of a scroll gesture."""

    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"


class NavigationAction(str, Enum):
    """System navigation buttons."""

    BACK = "back"
    HOME = "home"
    RECENTS = "recents"


class Point(BaseModel):
    """
    A screen coordinate in pixels.
    """

    model_config = ConfigDict(frozen=True)

    x: int = Field(description="X coordinate")
    y: int = Field(description="Y coordinate")


class TapCommand(BaseModel):
    """
    Tap at one or more points. Several points form a multi-point tap.
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["tap"] = "tap"
    points: Tuple[Point, ...] = Field(
        min_length=1, description="Points to tap, in order"
    )
    duration_ms: int = Field(
        default=DEFAULT_TAP_DURATION_MS, ge=1, description="Press duration"
    )

    @classmethod
    def at(cls, x: int, y: int, duration_ms: int = DEFAULT_TAP_DURATION_MS) -> "TapCommand":
        """Build a single-point tap."""
        return cls(points=(Point(x=x, y=y),), duration_ms=duration_ms)


class SwipeCommand(BaseModel):
    """
    Straight-line swipe from start to end.
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["swipe"] = "swipe"
    start: Point = Field(description="Where the swipe begins")
    end: Point = Field(description="Where the swipe ends")
    duration_ms: int = Field(default=DEFAULT_SWIPE_DURATION_MS, ge=1)


class ScrollCommand(BaseModel):
    """
    Scroll the focused surface in one direction.
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["scroll"] = "scroll"
    direction: ScrollDirection
    duration_ms: int = Field(default=DEFAULT_SCROLL_DURATION_MS, ge=1)


class TypeTextCommand(BaseModel):
    """
    Enter literal text into the focused input.
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["type_text"] = "type_text"
    text: str = Field(description="Literal text to enter")
    commit_on_finish: bool = Field(
        default=False, description="Press Enter once the text is entered"
    )
    clear_existing_first: bool = Field(
        default=False, description="Clear the field before typing"
    )


class WaitCommand(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["wait"] = "wait"
    duration_ms: int = Field(ge=0)


class NavigationCommand(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["navigation"] = "navigation"
    action: NavigationAction


Command = Annotated[
    Union[
        TapCommand,
        SwipeCommand,
        ScrollCommand,
        TypeTextCommand,
        WaitCommand,
        NavigationCommand,
    ],
    Field(discriminator="kind"),
]

command_adapter: TypeAdapter = TypeAdapter(Command)


def command_from_dict(data: dict) -> Command:
    """
    Validate a raw mapping into the matching command variant.

    Args:
        data: Mapping with a ``kind`` key and the variant's fields

    Returns:
        The validated command

    Raises:
        pydantic.ValidationError: If the mapping is not a valid command
    """
    return command_adapter.validate_python(data)
