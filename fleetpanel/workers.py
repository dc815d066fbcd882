"""Polled view of the worker nodes, with add, reserve and delete.

The displayed tuple is only ever replaced wholesale: by a poll tick, or by
applying a single server response (an appended or removed worker).
"""

from __future__ import annotations

from collections.abc import Iterable

from loguru import logger

from fleetpanel.client import RemoteClient
from fleetpanel.core.exceptions import ValidationError
from fleetpanel.infra.poller import RepeatingTask
from fleetpanel.infra.result import Err, Ok, Result, attempt
from fleetpanel.model import DEFAULT_VISIBLE_STATES, Worker
from fleetpanel.prompts import ConfirmationGate

DEFAULT_POLL_INTERVAL = 10.0


class WorkerCollection:
    def __init__(
        self,
        client: RemoteClient,
        gate: ConfirmationGate,
        *,
        interval: float = DEFAULT_POLL_INTERVAL,
        visible_states: Iterable[str] = DEFAULT_VISIBLE_STATES,
    ) -> None:
        self._client = client
        self._gate = gate
        self._interval = interval
        self._visible_states = frozenset(visible_states)
        self._workers: tuple[Worker, ...] = ()
        self._poller: RepeatingTask | None = None
        self._log = logger.bind(component="workers")

        self.loading = False
        self.machine_type_input: str | None = None

    @property
    def workers(self) -> tuple[Worker, ...]:
        return self._workers

    @property
    def visible_states(self) -> frozenset[str]:
        return self._visible_states

    @property
    def polling(self) -> bool:
        return self._poller is not None and self._poller.running

    def __len__(self) -> int:
        return len(self._workers)

    def __contains__(self, machine_id: object) -> bool:
        return any(w.machine_id == machine_id for w in self._workers)

    # ─── Polling ─────────────────────────────────────────────────────

    def start_polling(self, interval: float | None = None) -> None:
        if self.polling:
            raise RuntimeError("Worker polling already running")
        self._poller = RepeatingTask(
            "workers", self.refresh, interval=self._interval if interval is None else interval
        )
        self._poller.start()

    async def stop_polling(self) -> None:
        if self._poller is None:
            return
        poller, self._poller = self._poller, None
        await poller.stop()

    async def refresh(self) -> Result[tuple[Worker, ...]]:
        match await attempt(self._client.list_workers()):
            case Ok(items):
                self._workers = tuple(w for w in items if w.visible_in(self._visible_states))
                return Ok(self._workers)
            case Err(cause) as err:
                self._log.error("Worker list fetch failed: {cause}", cause=cause)
                return err

    # ─── Mutations ───────────────────────────────────────────────────

    async def add_worker(self, machine_type: str | None = None) -> Result[Worker]:
        machine_type = machine_type or self.machine_type_input
        if not machine_type:
            return Err(ValidationError("no machine type selected"))

        self.loading = True
        try:
            result = await attempt(self._client.create_worker(machine_type))
        finally:
            self.loading = False

        match result:
            case Ok(worker):
                self._workers = (*self._workers, worker)
                self.machine_type_input = None
                self._log.info(
                    "Worker {id} ({machine_type}) added", id=worker.machine_id, machine_type=machine_type
                )
            case Err(cause):
                self._log.error("Adding {machine_type} worker failed: {cause}", machine_type=machine_type, cause=cause)
        return result

    async def set_reserved(self, machine_id: str, reserved: bool) -> Result[Worker]:
        result = await attempt(self._client.update_worker(machine_id, reserved=reserved))
        if isinstance(result, Err):
            self._log.error(
                "Setting reserved={reserved} on {id} failed: {cause}",
                reserved=reserved, id=machine_id, cause=result.cause,
            )
        return result

    async def delete_worker(self, machine_id: str, name: str | None = None) -> Result[Worker] | None:
        if not await self._gate.confirm_destroy(name or machine_id):
            return None

        result = await attempt(self._client.delete_worker(machine_id))
        match result:
            case Ok(deleted):
                self._workers = tuple(w for w in self._workers if w.machine_id != deleted.machine_id)
                self._log.info("Worker {id} deleted", id=deleted.machine_id)
            case Err(cause):
                self._log.error("Deleting worker {id} failed: {cause}", id=machine_id, cause=cause)
        return result
