"""Async client for the capacity service REST API."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable
from urllib.parse import quote

from loguru import logger

from fleetpanel.core.exceptions import ResponseDecodeError, TransportError
from fleetpanel.infra.http import HttpClient, JsonBody, Method
from fleetpanel.model import Config, ConfigPatch, MachineType, Worker
from fleetpanel.types import WorkerCreateParams, WorkerUpdateParams

API_PREFIX = "/api/v1"
CONFIG_PATH = "/config"
WORKERS_PATH = "/workers"
MACHINE_TYPES_PATH = "/machinetypes"


@runtime_checkable
class RemoteClient(Protocol):
    """What the panel needs from the capacity service."""

    async def get_config(self) -> Config: ...
    async def patch_config(self, patch: ConfigPatch) -> Config: ...
    async def list_workers(self) -> list[Worker]: ...
    async def create_worker(self, machine_type: str) -> Worker: ...
    async def update_worker(self, machine_id: str, *, reserved: bool) -> Worker: ...
    async def delete_worker(self, machine_id: str) -> Worker: ...
    async def list_machine_types(self) -> list[MachineType]: ...


def _worker_path(machine_id: str) -> str:
    return f"{WORKERS_PATH}/{quote(machine_id, safe='')}"


class CapacityClient:
    """Typed client for ``/api/v1``.

    Returns model dataclasses and raises ``TransportError`` subclasses on
    any failure, including malformed payloads.

    Example:
        async with CapacityClient(HttpClient("http://localhost:8080/api/v1")) as client:
            config = await client.get_config()
    """

    def __init__(self, http: HttpClient) -> None:
        self._http = http
        self._log = logger.bind(component="client")

    @classmethod
    def for_url(cls, url: str, *, timeout: float = 30) -> CapacityClient:
        return cls(
            HttpClient(
                f"{url.rstrip('/')}{API_PREFIX}",
                timeout=timeout,
                default_headers={"Content-Type": "application/json"},
            )
        )

    async def __aenter__(self) -> CapacityClient:
        return self

    async def __aexit__(self, *_args: object) -> None:
        await self.close()

    async def close(self) -> None:
        await self._http.close()

    async def _request(self, method: Method, path: str, json: JsonBody | None = None) -> Any:
        try:
            return await self._http.request(method, path, json=json)
        except TransportError as e:
            self._log.warning("API error {method} {path}: {error}", method=method, path=path, error=e)
            raise

    # =========================================================================
    # Config
    # =========================================================================

    async def get_config(self) -> Config:
        return Config.from_wire(await self._request("GET", CONFIG_PATH))

    async def patch_config(self, patch: ConfigPatch) -> Config:
        body = patch.to_wire()
        self._log.debug("Patching config fields {fields}", fields=sorted(body))
        return Config.from_wire(await self._request("PATCH", CONFIG_PATH, json=dict(body)))

    # =========================================================================
    # Workers
    # =========================================================================

    async def list_workers(self) -> list[Worker]:
        data = await self._request("GET", WORKERS_PATH)
        if not isinstance(data, dict):
            raise ResponseDecodeError(f"Malformed worker list payload: {data!r}")
        return [Worker.from_wire(item) for item in data.get("items") or ()]

    async def create_worker(self, machine_type: str) -> Worker:
        params: WorkerCreateParams = {"machineType": machine_type}
        self._log.debug("Creating {machine_type} worker", machine_type=machine_type)
        return Worker.from_wire(await self._request("POST", WORKERS_PATH, json=dict(params)))

    async def update_worker(self, machine_id: str, *, reserved: bool) -> Worker:
        params: WorkerUpdateParams = {"reserved": reserved}
        return Worker.from_wire(
            await self._request("PATCH", _worker_path(machine_id), json=dict(params))
        )

    async def delete_worker(self, machine_id: str) -> Worker:
        self._log.debug("Deleting worker {machine_id}", machine_id=machine_id)
        return Worker.from_wire(await self._request("DELETE", _worker_path(machine_id)))

    # =========================================================================
    # Catalog
    # =========================================================================

    async def list_machine_types(self) -> list[MachineType]:
        data = await self._request("GET", MACHINE_TYPES_PATH)
        if not isinstance(data, list):
            raise ResponseDecodeError(f"Malformed machine type list payload: {data!r}")
        return [MachineType.from_wire(item) for item in data]
