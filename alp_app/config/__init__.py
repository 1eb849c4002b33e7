"""
Configuration management.

Frozen dataclass defaults, a YAML-backed loader with layered precedence
and validation of user-supplied values.
"""
from .defaults import DashboardConfig, get_default_config
from .loader import ConfigLoader, build_config
from .validation import ConfigValidator, ValidationError

__all__ = [
    "DashboardConfig",
    "get_default_config",
    "ConfigLoader",
    "build_config",
    "ConfigValidator",
    "ValidationError",
]
