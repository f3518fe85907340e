"""
Configuration module.
"""

from .pipeline_config import (
    PipelineConfig,
    create_custom_config,
    get_pipeline_config,
    load_config_from_env,
)

__all__ = [
    "PipelineConfig",
    "create_custom_config",
    "get_pipeline_config",
    "load_config_from_env",
]
