from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Literal

from fleetpanel.core.exceptions import ResponseDecodeError
from fleetpanel.types import (
    ConfigPatchParams,
    ConfigResponse,
    MachineTypeResponse,
    WorkerResponse,
)

type MachineState = Literal["pending", "running", "shutting-down", "terminated"]

DEFAULT_VISIBLE_STATES: frozenset[str] = frozenset({"running", "pending"})


def _malformed(kind: str, error: Exception) -> ResponseDecodeError:
    return ResponseDecodeError(f"Malformed {kind} payload: {error!r}")


@dataclass(frozen=True, slots=True)
class Config:
    """Server-confirmed capacity configuration."""

    workers_count_min: int
    workers_count_max: int
    machine_types: frozenset[str]
    provider_name: str
    paused: bool = False
    cluster_name: str = ""

    @classmethod
    def from_wire(cls, data: ConfigResponse) -> Config:
        try:
            return cls(
                workers_count_min=int(data["workersCountMin"]),
                workers_count_max=int(data["workersCountMax"]),
                machine_types=frozenset(data.get("machineTypes") or ()),
                provider_name=str(data["providerName"]),
                paused=bool(data.get("paused") or False),
                cluster_name=str(data.get("clusterName") or ""),
            )
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise _malformed("config", e) from e


@dataclass(frozen=True, slots=True)
class ConfigPatch:
    """Partial config update. Fields left as None are not sent."""

    paused: bool | None = None
    workers_count_min: int | None = None
    workers_count_max: int | None = None
    machine_types: frozenset[str] | None = None

    @property
    def touches_counts(self) -> bool:
        return self.workers_count_min is not None or self.workers_count_max is not None

    def to_wire(self) -> ConfigPatchParams:
        params: ConfigPatchParams = {}
        if self.paused is not None:
            params["paused"] = self.paused
        if self.workers_count_min is not None:
            params["workersCountMin"] = self.workers_count_min
        if self.workers_count_max is not None:
            params["workersCountMax"] = self.workers_count_max
        if self.machine_types is not None:
            params["machineTypes"] = sorted(self.machine_types)
        return params


@dataclass(frozen=True, slots=True)
class MachineType:
    name: str

    @classmethod
    def from_wire(cls, data: MachineTypeResponse) -> MachineType:
        try:
            return cls(name=str(data["name"]))
        except (KeyError, TypeError) as e:
            raise _malformed("machine type", e) from e


@dataclass(frozen=True, slots=True)
class Worker:
    """A provider machine and the kubernetes node running on it."""

    machine_id: str
    machine_name: str = ""
    machine_type: str = ""
    machine_state: MachineState | str = "pending"
    reserved: bool = False
    cluster_name: str = ""
    node_name: str = ""
    creation_timestamp: str | None = None
    node_labels: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))

    @classmethod
    def from_wire(cls, data: WorkerResponse) -> Worker:
        try:
            return cls(
                machine_id=str(data["machineID"]),
                machine_name=data.get("machineName") or "",
                machine_type=data.get("machineType") or "",
                machine_state=data.get("machineState") or "pending",
                reserved=bool(data.get("reserved", False)),
                cluster_name=data.get("clusterName") or "",
                node_name=data.get("nodeName") or "",
                creation_timestamp=data.get("creationTimestamp"),
                node_labels=MappingProxyType(dict(data.get("nodeLabels") or {})),
            )
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise _malformed("worker", e) from e

    def visible_in(self, states: Iterable[str]) -> bool:
        return self.machine_state in states
