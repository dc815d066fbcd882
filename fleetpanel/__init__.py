"""fleetpanel - control panel client for a fleet-capacity service.

Example:

    from fleetpanel import create_panel, load_settings
    from fleetpanel.console import RichPrompts

    async with create_panel(load_settings(), RichPrompts()) as panel:
        panel.thresholds.increment("max")
        await panel.thresholds.commit()
        await panel.workers.add_worker("n1-standard-2")
"""

# Logging (disables the library logger on import)
from fleetpanel.logging import LogConfig, setup_logging, teardown_logging

# Errors
from fleetpanel.core.exceptions import (
    ConfigurationError,
    EditorClosedError,
    FleetPanelError,
    HttpStatusError,
    ResponseDecodeError,
    TransportError,
    ValidationError,
)

# Results
from fleetpanel.infra.result import Err, Ok, Result

# Model
from fleetpanel.model import Config, ConfigPatch, MachineType, Worker

# Components
from fleetpanel.allowlist import AllowList, AllowListEditor, AllowListParams
from fleetpanel.client import CapacityClient, RemoteClient
from fleetpanel.panel import CapacityPanel
from fleetpanel.prompts import ConfirmationGate, Prompts
from fleetpanel.store import ConfigStore
from fleetpanel.thresholds import PendingEdit, ThresholdEditor
from fleetpanel.workers import WorkerCollection

# Settings and wiring
from fleetpanel.config import PanelConfig, load_settings
from fleetpanel.module import PanelModule, create_panel

__all__ = [
    "AllowList",
    "AllowListEditor",
    "AllowListParams",
    "CapacityClient",
    "CapacityPanel",
    "Config",
    "ConfigPatch",
    "ConfigStore",
    "ConfigurationError",
    "ConfirmationGate",
    "EditorClosedError",
    "Err",
    "FleetPanelError",
    "HttpStatusError",
    "LogConfig",
    "MachineType",
    "Ok",
    "PanelConfig",
    "PanelModule",
    "PendingEdit",
    "Prompts",
    "RemoteClient",
    "ResponseDecodeError",
    "Result",
    "ThresholdEditor",
    "TransportError",
    "ValidationError",
    "Worker",
    "WorkerCollection",
    "create_panel",
    "load_settings",
    "setup_logging",
    "teardown_logging",
]
