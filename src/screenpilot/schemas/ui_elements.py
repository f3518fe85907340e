"""
UI element tree schemas.

Captures the on-screen hierarchy as reported by the platform accessibility
facility. JSON output uses camelCase keys (``isClickable``,
``viewIdResourceName``...); both camelCase and snake_case are accepted on input.
"""

import time
from typing import Callable, Iterator, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


_MODEL_CONFIG = ConfigDict(
    frozen=True,
    alias_generator=to_camel,
    populate_by_name=True,
)


class UiBounds(BaseModel):
    """
    Rectangle in pixels, edges inclusive of left/top and exclusive of right/bottom.
    """

    model_config = _MODEL_CONFIG

    left: int
    top: int
    right: int
    bottom: int

    @property
    def width(self) -> int:
        return self.right - self.left

    @property
    def height(self) -> int:
        return self.bottom - self.top

    @property
    def center(self) -> Tuple[int, int]:
        return (self.left + self.width // 2, self.top + self.height // 2)


class UiElement(BaseModel):
    """
    A single node in the on-screen element hierarchy.

    Children are owned by their parent and kept in source order. The model is
    frozen and children are stored as a tuple, so a tree cannot gain cycles
    after it has been built.
    """

    model_config = _MODEL_CONFIG

    id: Optional[str] = Field(default=None, description="Element identifier")
    class_name: Optional[str] = Field(default=None, description="Widget class tag")
    package_name: Optional[str] = Field(
        default=None, description="Owning application id"
    )
    text: Optional[str] = Field(default=None, description="Displayed text")
    content_description: Optional[str] = Field(
        default=None, description="Accessibility label"
    )
    view_id_resource_name: Optional[str] = Field(
        default=None, description="Stable resource id"
    )
    bounds: Optional[UiBounds] = Field(
        default=None, description="Bounds relative to the parent"
    )
    bounds_in_screen: Optional[UiBounds] = Field(
        default=None, description="Absolute screen bounds"
    )
    is_clickable: bool = False
    is_enabled: bool = True
    is_focusable: bool = False
    is_focused: bool = False
    is_scrollable: bool = False
    is_selected: bool = False
    is_visible: bool = True
    children: Tuple["UiElement", ...] = Field(default_factory=tuple)
    timestamp: int = Field(default_factory=now_ms, description="Capture time (ms)")

    def iter_tree(self) -> Iterator["UiElement"]:
        """
        Walk this element and its descendants depth-first, parents first.
        """
        stack: List[UiElement] = [self]
        while stack:
            element = stack.pop()
            yield element
            stack.extend(reversed(element.children))

    def find_all(self, predicate: Callable[["UiElement"], bool]) -> List["UiElement"]:
        """
        Collect every element in this subtree matching predicate.

        Args:
            predicate: Callable returning True for elements to keep

        Returns:
            Matching elements in depth-first, parents-first order
        """
        return [element for element in self.iter_tree() if predicate(element)]

    def label(self) -> str:
        """Best human-readable label: text, then accessibility label, then id."""
        return self.text or self.content_description or self.view_id_resource_name or ""


UiElement.model_rebuild()


class UiTree(BaseModel):
    """
    One consistent snapshot of the screen for a single application.
    """

    model_config = _MODEL_CONFIG

    root: UiElement
    package_name: str
    timestamp: int = Field(default_factory=now_ms)


class AppTransitionEvent(BaseModel):
    """
    Emitted when the foreground application id changes.

    previous_package is None when no application had been observed before.
    """

    model_config = _MODEL_CONFIG

    previous_package: Optional[str] = None
    new_package: str
    timestamp: int = Field(default_factory=now_ms)


def count_elements(element: UiElement) -> int:
    """
    Count an element and all of its descendants.

    Args:
        element: Root of the subtree

    Returns:
        Number of elements in the subtree, including element itself
    """
    return sum(1 for _ in element.iter_tree())
