from .exceptions import (
    ConfigurationError,
    EditorClosedError,
    FleetPanelError,
    HttpStatusError,
    ResponseDecodeError,
    TransportError,
    ValidationError,
)

__all__ = [
    "ConfigurationError",
    "EditorClosedError",
    "FleetPanelError",
    "HttpStatusError",
    "ResponseDecodeError",
    "TransportError",
    "ValidationError",
]
