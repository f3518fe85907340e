"""
Screen state aggregation.

Tracks what is on screen and which application owns it. Two independent
platform streams feed the aggregator: element tree snapshots and foreground
application notifications. Both may arrive concurrently with each other and
with readers, so all state lives behind one lock and readers only ever get
immutable values.
"""

import logging
import threading
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from ...schemas.ui_elements import (
    AppTransitionEvent,
    UiElement,
    UiTree,
    count_elements,
)

logger = logging.getLogger(__name__)

MAX_HISTORY_SIZE = 10

TransitionListener = Callable[[AppTransitionEvent], None]
TreeListener = Callable[[UiTree], None]


@dataclass(frozen=True)
class ScreenStateSnapshot:
    """Immutable view of the whole aggregator state at one instant."""

    ui_tree: Optional[UiTree]
    foreground_package: Optional[str]
    last_transition: Optional[AppTransitionEvent]
    history: Tuple[UiTree, ...]

    @property
    def has_snapshot(self) -> bool:
        return self.ui_tree is not None


class ScreenStateAggregator:
    """
    Thread-safe holder for the current UI tree, foreground application,
    last app transition and a bounded history of trees.

    Ingestion methods never raise: a bad observation is logged and dropped so
    the automation loop keeps running on the last consistent state.
    """

    def __init__(self, history_size: int = MAX_HISTORY_SIZE):
        """
        Args:
            history_size: Max number of trees kept in history (oldest evicted first)
        """
        if history_size < 1:
            raise ValueError("history_size must be at least 1")
        self.history_size = history_size
        self._lock = threading.RLock()
        self._ui_tree: Optional[UiTree] = None
        self._foreground_package: Optional[str] = None
        self._last_transition: Optional[AppTransitionEvent] = None
        self._history: Tuple[UiTree, ...] = ()
        self._transition_listeners: List[TransitionListener] = []
        self._tree_listeners: List[TreeListener] = []

    # Ingestion

    def on_foreground_application_observed(self, package_name: str) -> None:
        """
        Record the package currently owning the screen.

        Publishes an AppTransitionEvent only when the package differs from the
        current one. Repeated notifications for the same package are ignored.

        Args:
            package_name: Foreground application id
        """
        try:
            if not package_name:
                logger.warning("Ignoring foreground notification without a package name")
                return

            with self._lock:
                if package_name == self._foreground_package:
                    return
                event = AppTransitionEvent(
                    previous_package=self._foreground_package,
                    new_package=package_name,
                )
                self._foreground_package = package_name
                self._last_transition = event
                listeners = list(self._transition_listeners)

            logger.info(
                f"App transition detected: {event.previous_package or 'NULL'} -> {event.new_package}"
            )
            self._notify(listeners, event)
        except Exception as e:
            logger.exception(f"Error handling foreground notification: {e}")

    on_accessibility_event = on_foreground_application_observed

    def on_ui_tree_observed(self, ui_tree: UiTree) -> None:
        """
        Replace the current snapshot and append it to history.

        Snapshot and history change together under the lock. If the history
        cannot be rebuilt the snapshot is still replaced so readers never see
        a stale screen.

        Args:
            ui_tree: Newly captured tree
        """
        try:
            if not isinstance(ui_tree, UiTree):
                raise TypeError(f"Expected UiTree, got {type(ui_tree).__name__}")

            if logger.isEnabledFor(logging.DEBUG):
                try:
                    logger.debug(
                        f"UI tree updated for package: {ui_tree.package_name}, "
                        f"elements: {count_elements(ui_tree.root)}"
                    )
                except Exception as e:
                    logger.debug(f"Could not count UI tree elements: {e}")

            with self._lock:
                try:
                    history = self._append_history(ui_tree)
                except Exception as e:
                    logger.exception(f"Error updating UI tree history: {e}")
                    history = self._history
                self._ui_tree = ui_tree
                self._history = history
                listeners = list(self._tree_listeners)

            self._notify(listeners, ui_tree)
        except Exception as e:
            logger.exception(f"Error updating UI tree: {e}")

    def _append_history(self, ui_tree: UiTree) -> Tuple[UiTree, ...]:
        history = self._history + (ui_tree,)
        if len(history) > self.history_size:
            history = history[len(history) - self.history_size:]
        return history

    def _notify(self, listeners: list, payload) -> None:
        for listener in listeners:
            try:
                listener(payload)
            except Exception as e:
                logger.exception(f"State listener raised: {e}")

    # Queries

    def current_snapshot(self) -> Optional[UiTree]:
        """Most recent UI tree, or None before the first one arrives."""
        with self._lock:
            return self._ui_tree

    def current_foreground_application(self) -> Optional[str]:
        with self._lock:
            return self._foreground_package

    def last_transition(self) -> Optional[AppTransitionEvent]:
        with self._lock:
            return self._last_transition

    def history(self) -> Tuple[UiTree, ...]:
        """Retained trees, oldest first."""
        with self._lock:
            return self._history

    def get_state(self) -> ScreenStateSnapshot:
        """Capture every field in one consistent read."""
        with self._lock:
            return ScreenStateSnapshot(
                ui_tree=self._ui_tree,
                foreground_package=self._foreground_package,
                last_transition=self._last_transition,
                history=self._history,
            )

    def serialize_snapshot(self) -> Optional[str]:
        """
        Encode the current tree as JSON.

        Returns:
            JSON text, or None when there is no snapshot or encoding fails
        """
        ui_tree = self.current_snapshot()
        if ui_tree is None:
            return None
        try:
            return ui_tree.model_dump_json(by_alias=True)
        except Exception as e:
            logger.error(f"Error serializing UI tree: {e}")
            return None

    def serialize_element(self, element: UiElement) -> Optional[str]:
        """
        Encode an arbitrary subtree as JSON.

        Returns:
            JSON text, or None when encoding fails
        """
        try:
            return element.model_dump_json(by_alias=True)
        except Exception as e:
            logger.error(f"Error serializing element: {e}")
            return None

    # Subscriptions

    def add_transition_listener(self, listener: TransitionListener) -> None:
        with self._lock:
            if listener not in self._transition_listeners:
                self._transition_listeners.append(listener)

    def remove_transition_listener(self, listener: TransitionListener) -> None:
        with self._lock:
            if listener in self._transition_listeners:
                self._transition_listeners.remove(listener)

    def add_tree_listener(self, listener: TreeListener) -> None:
        with self._lock:
            if listener not in self._tree_listeners:
                self._tree_listeners.append(listener)

    def remove_tree_listener(self, listener: TreeListener) -> None:
        with self._lock:
            if listener in self._tree_listeners:
                self._tree_listeners.remove(listener)

    # Lifecycle

    def reset(self) -> None:
        """
        Drop all tracked state so nothing leaks into the next session.
        Listeners stay registered.
        """
        with self._lock:
            self._ui_tree = None
            self._foreground_package = None
            self._last_transition = None
            self._history = ()
        logger.info("Screen state cleared")

    clear = reset
