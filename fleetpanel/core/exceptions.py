"""Custom exception hierarchy for fleetpanel.

All fleetpanel-specific exceptions inherit from FleetPanelError, enabling
callers to catch every panel failure with a single except clause.
"""

from __future__ import annotations


class FleetPanelError(Exception):
    """Base exception for all fleetpanel errors."""


class TransportError(FleetPanelError):
    """Raised when a call to the capacity service fails on the wire."""


class HttpStatusError(TransportError):
    """Raised when the capacity service answers with a non-2xx status."""

    def __init__(self, status: int, body: str) -> None:
        self.status = status
        self.body = body
        super().__init__(f"HTTP {status}: {body}")


class ResponseDecodeError(TransportError):
    """Raised when a response payload doesn't match the expected shape."""


class ValidationError(FleetPanelError):
    """Raised for local invariant violations. Never sent to the service."""


class EditorClosedError(FleetPanelError):
    """Raised when an allow-list editor is used after confirm or cancel."""

    def __init__(self) -> None:
        super().__init__("Allow-list editor is closed.")


class ConfigurationError(FleetPanelError):
    """Raised for invalid configuration or missing required settings."""
