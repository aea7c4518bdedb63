"""
Infrastructure components for the AudioShare relay.

This package contains infrastructure concerns including:
- Logging configuration and utilities with production controls
- Custom exception definitions
"""

from .logging_manager import LoggingManager, setup_logging
from .exceptions import (
    RelayError,
    ConfigurationError,
    ValidationError,
    ProtocolError,
    MissingParametersError,
    RoleConflictError,
    NoPublisherError,
)

__all__ = [
    # Logging
    "setup_logging",
    "LoggingManager",
    # Exceptions
    "RelayError",
    "ConfigurationError",
    "ValidationError",
    "ProtocolError",
    "MissingParametersError",
    "RoleConflictError",
    "NoPublisherError",
]
