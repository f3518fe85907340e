"""
Pipeline configuration: default durations, history size and input timings.

Durations ending in ``_ms`` are milliseconds; every other timing value is in
seconds. Values can be overridden with ``SCREENPILOT_*`` environment variables
(a ``.env`` file is loaded automatically).
"""

import logging
import os
import platform
from dataclasses import dataclass, field, fields, replace
from typing import Any, Optional, Tuple

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

ENV_PREFIX = "SCREENPILOT_"


def _default_hotkeys() -> Tuple[Tuple[str, ...], Tuple[str, ...], Tuple[str, ...]]:
    """Back, home and recents hotkeys for the current desktop platform."""
    if platform.system() == "Darwin":
        return ("command", "["), ("command", "h"), ("command", "tab")
    return ("alt", "left"), ("win", "d"), ("alt", "tab")


_BACK, _HOME, _RECENTS = _default_hotkeys()


@dataclass
class PipelineConfig:
    """
    Centralized configuration for parsing, execution and state tracking.
    """

    tap_duration_ms: int = 100
    """Press duration used when a tap line omits one"""

    swipe_duration_ms: int = 300
    """Swipe duration used when a swipe line omits one"""

    scroll_duration_ms: int = 500
    """Scroll duration used when a scroll line omits one"""

    history_size: int = 10
    """Number of UI tree snapshots kept by the state aggregator"""

    inter_command_delay: float = 0.5
    """Pause between commands when running a script"""

    result_timeout: float = 30.0
    """Max seconds to wait for a command result when running a script"""

    scroll_amount: int = 5
    """Wheel clicks per scroll command"""

    typing_interval: float = 0.02
    """Delay between keystrokes when typing"""

    back_hotkey: Tuple[str, ...] = field(default=_BACK)
    home_hotkey: Tuple[str, ...] = field(default=_HOME)
    recents_hotkey: Tuple[str, ...] = field(default=_RECENTS)


def _coerce(raw: str, default: Any) -> Any:
    """Convert an environment string to the type of the field default."""
    if isinstance(default, tuple):
        return tuple(part.strip() for part in raw.split("+") if part.strip())
    if isinstance(default, bool):
        return raw.strip().lower() in ("1", "true", "yes", "on")
    if isinstance(default, int):
        return int(raw)
    if isinstance(default, float):
        return float(raw)
    return raw


def load_config_from_env(environ: Optional[dict] = None) -> PipelineConfig:
    """
    Build a configuration from SCREENPILOT_* environment variables.

    Hotkeys are written as ``alt+left``. Unset variables keep their defaults,
    and so do variables whose value cannot be converted (a warning is logged).

    Args:
        environ: Mapping to read from (defaults to os.environ)

    Returns:
        PipelineConfig with overrides applied
    """
    environ = os.environ if environ is None else environ
    config = PipelineConfig()
    overrides = {}
    for config_field in fields(PipelineConfig):
        name = ENV_PREFIX + config_field.name.upper()
        raw = environ.get(name)
        if raw is None or raw == "":
            continue
        try:
            overrides[config_field.name] = _coerce(raw, getattr(config, config_field.name))
        except ValueError:
            logger.warning(f"Ignoring invalid value for {name}: {raw!r}")
    return replace(config, **overrides)


_config: Optional[PipelineConfig] = None


def get_pipeline_config() -> PipelineConfig:
    """
    Get the process-wide configuration, loading it from the environment once.
    """
    global _config
    if _config is None:
        _config = load_config_from_env()
    return _config


def create_custom_config(**overrides: Any) -> PipelineConfig:
    """
    Create a configuration from the process-wide one with some fields replaced.

    Args:
        **overrides: Field names and their new values

    Returns:
        New PipelineConfig instance
    """
    return replace(get_pipeline_config(), **overrides)
