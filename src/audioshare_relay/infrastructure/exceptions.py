"""
Custom exceptions for the AudioShare relay.

This module defines all custom exceptions used throughout the relay,
providing clear error categorization and handling.
"""


class RelayError(Exception):
    """Base exception for all relay related errors."""

    pass


class ConfigurationError(RelayError):
    """Raised when there are configuration-related errors."""

    pass


class ValidationError(ConfigurationError):
    """Raised when configuration validation fails."""

    pass


class ProtocolError(RelayError):
    """
    Raised when a connection violates the join protocol.

    Carries the WebSocket close code and reason the offending
    connection is closed with.
    """

    code: int = 4000
    default_reason: str = "Protocol error"

    def __init__(self, reason: str = None):
        self.reason = reason or self.default_reason
        super().__init__(self.reason)


class MissingParametersError(ProtocolError):
    """Raised when the room id or role is missing or invalid."""

    code = 4000
    default_reason = "Missing parameters"


class RoleConflictError(ProtocolError):
    """Raised when a host joins a room that already has one."""

    code = 4001
    default_reason = "A host is already connected to this room"


class NoPublisherError(ProtocolError):
    """Raised when a guest joins a room without an active host."""

    code = 4002
    default_reason = "no_host"
