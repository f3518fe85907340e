"""
Pytest configuration and fixtures.
"""

import sys
from pathlib import Path

import pytest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from screenpilot.config.pipeline_config import PipelineConfig  # noqa: E402
from screenpilot.schemas.ui_elements import UiBounds, UiElement, UiTree  # noqa: E402


def pytest_configure(config):
    """Register markers used by pytest_collection_modifyitems."""
    for marker in ("parser", "state", "execution", "pipeline"):
        config.addinivalue_line("markers", f"{marker}: {marker} tests")


def pytest_collection_modifyitems(config, items):
    """
    Modify test items to add helpful markers.
    """
    for item in items:
        nodeid = item.nodeid.lower()
        if "parser" in nodeid:
            item.add_marker("parser")
        if "screen_state" in nodeid:
            item.add_marker("state")
        if "executor" in nodeid or "execution" in nodeid:
            item.add_marker("execution")
        if "pipeline" in nodeid:
            item.add_marker("pipeline")


@pytest.fixture
def config() -> PipelineConfig:
    """Default configuration, independent of the environment."""
    return PipelineConfig(inter_command_delay=0.0, result_timeout=5.0)


def make_tree(package_name: str = "com.example.app", label: str = "root") -> UiTree:
    """Small three-node tree: a frame with a button and a text field."""
    button = UiElement(
        id="ok_button",
        class_name="android.widget.Button",
        package_name=package_name,
        text="OK",
        is_clickable=True,
        bounds_in_screen=UiBounds(left=10, top=20, right=110, bottom=70),
    )
    field = UiElement(
        id="name_field",
        class_name="android.widget.EditText",
        package_name=package_name,
        is_focusable=True,
        is_focused=True,
    )
    root = UiElement(
        id=label,
        class_name="android.widget.FrameLayout",
        package_name=package_name,
        children=(button, field),
    )
    return UiTree(root=root, package_name=package_name)


@pytest.fixture
def ui_tree() -> UiTree:
    return make_tree()
