"""
Configuration management for the AudioShare relay.

This package provides configuration management including:
- Configuration data structure with defaults
- Validation of limits and timings
- Environment variable handling
"""

from .settings import RelayConfig, RelayConfigManager, config_manager

__all__ = [
    "RelayConfig",
    "RelayConfigManager",
    "config_manager",
]
