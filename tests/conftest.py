from __future__ import annotations

import asyncio
import copy
from collections.abc import Callable
from typing import Any

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer
from loguru import logger

from fleetpanel.allowlist import AllowListEditor, AllowListParams
from fleetpanel.client import CapacityClient

API = "/api/v1"

type Selection = Callable[[AllowListEditor], frozenset[str] | None]


def make_worker(machine_id: str, state: str = "running", **extra: Any) -> dict[str, Any]:
    return {
        "machineID": machine_id,
        "machineName": f"node-{machine_id}",
        "machineType": extra.pop("machineType", "n1"),
        "machineState": state,
        "reserved": extra.pop("reserved", False),
        "clusterName": "test",
        "nodeName": f"node-{machine_id}",
        "creationTimestamp": "2024-01-01T00:00:00Z",
        **extra,
    }


class FakeCapacityService:
    """In-process capacity service recording every request it receives."""

    def __init__(self) -> None:
        self.config: dict[str, Any] = {
            "clusterName": "test",
            "providerName": "gcp",
            "paused": False,
            "workersCountMin": 2,
            "workersCountMax": 5,
            "machineTypes": ["n1"],
        }
        self.workers: list[dict[str, Any]] = [make_worker("a", "running")]
        self.machine_types: list[dict[str, str]] = [
            {"name": "n1"},
            {"name": "n1-standard"},
            {"name": "e2-small"},
        ]
        self.requests: list[tuple[str, str, Any]] = []
        self.failures: dict[tuple[str, str], int] = {}
        self.patch_transform: Callable[[dict[str, Any]], dict[str, Any]] | None = None
        self.delete_identity: str | None = None
        self.list_delay = 0.0
        self._created = 0

    def fail(self, method: str, path: str, status: int = 500) -> None:
        self.failures[(method, API + path)] = status

    def recover(self) -> None:
        self.failures.clear()

    def calls(self, method: str, path: str) -> list[Any]:
        return [body for m, p, body in self.requests if m == method and p == API + path]

    async def _record(self, request: web.Request) -> web.Response | None:
        body = await request.json() if request.can_read_body else None
        self.requests.append((request.method, request.path, body))
        status = self.failures.get((request.method, request.path))
        if status is not None:
            return web.Response(status=status, text="injected failure")
        return None

    def _find(self, machine_id: str) -> dict[str, Any] | None:
        return next((w for w in self.workers if w["machineID"] == machine_id), None)

    def app(self) -> web.Application:
        app = web.Application()

        async def get_config(request: web.Request) -> web.Response:
            if failed := await self._record(request):
                return failed
            return web.json_response(self.config)

        async def patch_config(request: web.Request) -> web.Response:
            if failed := await self._record(request):
                return failed
            self.config = {**self.config, **self.requests[-1][2]}
            if self.patch_transform:
                self.config = self.patch_transform(copy.deepcopy(self.config))
            return web.json_response(self.config)

        async def list_workers(request: web.Request) -> web.Response:
            if failed := await self._record(request):
                return failed
            if self.list_delay:
                await asyncio.sleep(self.list_delay)
            return web.json_response({"items": self.workers})

        async def create_worker(request: web.Request) -> web.Response:
            if failed := await self._record(request):
                return failed
            self._created += 1
            worker = make_worker(
                f"new-{self._created}", "pending",
                machineType=self.requests[-1][2]["machineType"],
            )
            self.workers.append(worker)
            return web.json_response(worker, status=201)

        async def update_worker(request: web.Request) -> web.Response:
            if failed := await self._record(request):
                return failed
            worker = self._find(request.match_info["machine_id"])
            if worker is None:
                return web.Response(status=404, text="not found")
            worker["reserved"] = self.requests[-1][2]["reserved"]
            return web.json_response(worker)

        async def delete_worker(request: web.Request) -> web.Response:
            if failed := await self._record(request):
                return failed
            worker = self._find(request.match_info["machine_id"])
            if worker is None:
                return web.Response(status=404, text="not found")
            self.workers.remove(worker)
            if self.delete_identity:
                worker = {**worker, "machineID": self.delete_identity}
            return web.json_response(worker)

        async def machine_types(request: web.Request) -> web.Response:
            if failed := await self._record(request):
                return failed
            return web.json_response(self.machine_types)

        app.router.add_get(f"{API}/config", get_config)
        app.router.add_patch(f"{API}/config", patch_config)
        app.router.add_get(f"{API}/workers", list_workers)
        app.router.add_post(f"{API}/workers", create_worker)
        app.router.add_patch(f"{API}/workers/{{machine_id}}", update_worker)
        app.router.add_delete(f"{API}/workers/{{machine_id}}", delete_worker)
        app.router.add_get(f"{API}/machinetypes", machine_types)
        return app


class FakePrompts:
    """Scripted operator.

    ``answers`` feed ``confirm`` in order (False once exhausted).
    ``selections`` drive a real AllowListEditor per ``select_allow_list`` call.
    """

    def __init__(
        self,
        answers: tuple[bool, ...] = (),
        selections: tuple[Selection, ...] = (),
    ) -> None:
        self._answers = list(answers)
        self._selections = list(selections)
        self.confirm_prompts: list[str] = []
        self.opened_with: list[AllowListParams] = []

    async def confirm(self, prompt: str) -> bool:
        self.confirm_prompts.append(prompt)
        return self._answers.pop(0) if self._answers else False

    async def select_allow_list(self, params: AllowListParams) -> frozenset[str] | None:
        self.opened_with.append(params)
        editor = AllowListEditor(params)
        return self._selections.pop(0)(editor)


async def eventually(predicate: Callable[[], bool], timeout: float = 3.0) -> None:
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            raise AssertionError("condition not met before timeout")
        await asyncio.sleep(0.01)


@pytest.fixture
def service() -> FakeCapacityService:
    return FakeCapacityService()


@pytest.fixture
async def server(service: FakeCapacityService):
    srv = TestServer(service.app())
    await srv.start_server()
    yield srv
    await srv.close()


@pytest.fixture
def base_url(server: TestServer) -> str:
    return f"http://{server.host}:{server.port}"


@pytest.fixture
async def client(base_url: str):
    c = CapacityClient.for_url(base_url, timeout=5)
    yield c
    await c.close()


@pytest.fixture
def log_records():
    records: list[dict[str, Any]] = []
    logger.enable("fleetpanel")
    hid = logger.add(lambda message: records.append(message.record), level="DEBUG", filter="fleetpanel")
    yield records
    logger.remove(hid)
    logger.disable("fleetpanel")
