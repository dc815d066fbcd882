"""The capacity control panel.

Ties the store, the editors and the worker view together and owns their
lifecycle:

    async with CapacityPanel(client, store, thresholds, workers, prompts) as panel:
        panel.thresholds.increment("max")
        await panel.thresholds.commit()
        await panel.edit_allow_list()

Entering the panel installs the configured log sinks, fetches the
configuration and the machine-type catalog and starts the worker poll. Leaving
it stops the poll, removes the sinks and closes the client.
"""

from __future__ import annotations

from typing import Any

from loguru import logger

from fleetpanel.allowlist import AllowListParams
from fleetpanel.client import CapacityClient
from fleetpanel.infra.result import Err, Ok, Result
from fleetpanel.logging import LogConfig, setup_logging, teardown_logging
from fleetpanel.model import Config, ConfigPatch
from fleetpanel.prompts import Prompts
from fleetpanel.store import ConfigStore
from fleetpanel.thresholds import ThresholdEditor
from fleetpanel.workers import WorkerCollection


class CapacityPanel:
    def __init__(
        self,
        client: CapacityClient,
        store: ConfigStore,
        thresholds: ThresholdEditor,
        workers: WorkerCollection,
        prompts: Prompts,
        *,
        log: LogConfig | None = None,
    ) -> None:
        self._client = client
        self._store = store
        self._prompts = prompts
        self._log_config = log
        self._log_handler_ids: list[int] = []
        self._active = False
        self._log = logger.bind(component="panel")

        self.thresholds = thresholds
        self.workers = workers
        self.allowed_machine_types: frozenset[str] = frozenset()
        store.subscribe(self._on_config)

    def _on_config(self, config: Config) -> None:
        self.allowed_machine_types = config.machine_types

    @property
    def store(self) -> ConfigStore:
        return self._store

    @property
    def config(self) -> Config | None:
        return self._store.config

    @property
    def active(self) -> bool:
        return self._active

    # ─── Lifecycle ───────────────────────────────────────────────────

    async def activate(self) -> None:
        if self._active:
            return
        self._active = True
        # Sinks go in before anything is logged
        if self._log_config is not None:
            self._log_handler_ids = setup_logging(self._log_config)

        self._log.info("Activating panel")
        await self._store.fetch_config()
        await self._store.fetch_catalog()
        self.workers.start_polling()

    async def deactivate(self) -> None:
        if not self._active:
            return
        self._active = False
        self._log.info("Deactivating panel")
        try:
            await self.workers.stop_polling()
        finally:
            if self._log_config is not None:
                teardown_logging(self._log_handler_ids)
                self._log_handler_ids = []

    async def __aenter__(self) -> CapacityPanel:
        await self.activate()
        return self

    async def __aexit__(self, *_: Any) -> None:
        try:
            await self.deactivate()
        finally:
            await self._client.close()

    # ─── Config edits ────────────────────────────────────────────────

    async def set_enabled(self, enabled: bool) -> Result[Config]:
        result = await self._store.apply_patch(ConfigPatch(paused=not enabled))
        if isinstance(result, Ok):
            self._log.info("Capacity service {state}", state="enabled" if enabled else "paused")
        return result

    async def edit_allow_list(self) -> Result[Config] | None:
        """Ask for a new allow-list and commit it, restoring the old one on failure."""
        # Retries the catalog if activation could not load it; cached otherwise.
        await self._store.fetch_catalog()
        params = AllowListParams(
            catalog=tuple(m.name for m in self._store.catalog),
            allowed=self.allowed_machine_types,
            provider_name=self.config.provider_name if self.config else "",
        )
        selected = await self._prompts.select_allow_list(params)
        if selected is None:
            return None

        previous = self.allowed_machine_types
        self.allowed_machine_types = frozenset(selected)

        result = await self._store.apply_patch(ConfigPatch(machine_types=self.allowed_machine_types))
        match result:
            case Ok(config):
                self.allowed_machine_types = config.machine_types
            case Err(cause):
                self.allowed_machine_types = previous
                self._log.error("Allow-list not saved, restored previous: {cause}", cause=cause)
        return result
