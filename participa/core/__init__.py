"""Core system functionality."""

from .component_system import (
    ComponentManifest,
    ComponentRegistry,
    ComponentConfig,
    ComponentInUseError,
    SettingsError,
    registry,
)
from .stats import HIGH_PRIORITY, MEDIUM_PRIORITY, LOW_PRIORITY

__all__ = [
    "ComponentManifest",
    "ComponentRegistry",
    "ComponentConfig",
    "ComponentInUseError",
    "SettingsError",
    "registry",
    "HIGH_PRIORITY",
    "MEDIUM_PRIORITY",
    "LOW_PRIORITY",
]
