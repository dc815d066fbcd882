"""Capacity service wire types.

TypedDicts for request and response payloads, camelCase as on the wire.
"""

from __future__ import annotations

from typing import NotRequired, TypedDict

# =============================================================================
# Response Types
# =============================================================================


class ConfigResponse(TypedDict):
    """Cluster capacity configuration."""

    workersCountMin: int
    workersCountMax: int
    providerName: str
    machineTypes: NotRequired[list[str] | None]
    paused: NotRequired[bool | None]
    clusterName: NotRequired[str]


class WorkerResponse(TypedDict):
    """A machine and the kubernetes node running on it."""

    machineID: str
    machineName: NotRequired[str]
    machineType: NotRequired[str]
    machineState: NotRequired[str]  # pending, running, shutting-down, terminated
    reserved: NotRequired[bool]
    clusterName: NotRequired[str]
    nodeName: NotRequired[str]
    creationTimestamp: NotRequired[str | None]
    nodeLabels: NotRequired[dict[str, str] | None]


class WorkerListResponse(TypedDict):
    items: list[WorkerResponse] | None


class MachineTypeResponse(TypedDict):
    name: str


# =============================================================================
# Request Types
# =============================================================================


class ConfigPatchParams(TypedDict, total=False):
    """Body of PATCH /config. Only the fields being changed are present."""

    paused: bool
    workersCountMin: int
    workersCountMax: int
    machineTypes: list[str]


class WorkerCreateParams(TypedDict):
    machineType: str


class WorkerUpdateParams(TypedDict):
    reserved: bool
