"""
Hooks Common module.

This module contains the domain models and the configuration loader shared
by the relay server and the admin CLI.

The common module has no dependencies on other hooks_* modules, making it
a pure domain layer that can be imported by any component.
"""

from .config import ConfigError, RelayConfig, load_config, parse_config
from .models import CIConnection, JobMapping, JobTarget, PushEvent, TriggerOutcome

__all__ = [
    "CIConnection",
    "ConfigError",
    "JobMapping",
    "JobTarget",
    "PushEvent",
    "RelayConfig",
    "TriggerOutcome",
    "load_config",
    "parse_config",
]
