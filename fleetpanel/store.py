"""Holder of the last server-confirmed configuration.

The store never merges: it only replaces its Config with what the service
returned. A failed patch leaves it untouched, and the component that
initiated the patch rolls back its own draft.
"""

from __future__ import annotations

from collections.abc import Callable

from loguru import logger

from fleetpanel.client import RemoteClient
from fleetpanel.core.exceptions import ValidationError
from fleetpanel.infra.result import Err, Ok, Result, attempt
from fleetpanel.model import Config, ConfigPatch, MachineType

type ConfigListener = Callable[[Config], None]


def check_counts(patch: ConfigPatch, current: Config | None) -> ValidationError | None:
    """Return the violation a count-changing patch would introduce, if any."""
    minimum = patch.workers_count_min
    maximum = patch.workers_count_max
    if current is not None:
        minimum = current.workers_count_min if minimum is None else minimum
        maximum = current.workers_count_max if maximum is None else maximum
    if minimum is None or maximum is None or minimum <= maximum:
        return None
    return ValidationError(f"workers count min {minimum} exceeds max {maximum}")


class ConfigStore:
    def __init__(self, client: RemoteClient) -> None:
        self._client = client
        self._config: Config | None = None
        self._catalog: tuple[MachineType, ...] | None = None
        self._listeners: list[ConfigListener] = []
        self._log = logger.bind(component="config")

    @property
    def config(self) -> Config | None:
        return self._config

    @property
    def catalog(self) -> tuple[MachineType, ...]:
        return self._catalog or ()

    def subscribe(self, listener: ConfigListener) -> None:
        self._listeners.append(listener)
        if self._config is not None:
            listener(self._config)

    def _adopt(self, config: Config) -> None:
        self._config = config
        for listener in self._listeners:
            listener(config)

    async def fetch_config(self) -> Result[Config]:
        result = await attempt(self._client.get_config())
        match result:
            case Ok(config):
                self._log.debug("Fetched config for provider {p}", p=config.provider_name)
                self._adopt(config)
            case Err(cause):
                self._log.error("Config fetch failed: {cause}", cause=cause)
        return result

    async def apply_patch(self, patch: ConfigPatch) -> Result[Config]:
        if patch.touches_counts and (violation := check_counts(patch, self._config)):
            return Err(violation)

        result = await attempt(self._client.patch_config(patch))
        match result:
            case Ok(config):
                self._adopt(config)
            case Err(cause):
                self._log.error("Config patch failed: {cause}", cause=cause)
        return result

    async def fetch_catalog(self, *, refresh: bool = False) -> Result[tuple[MachineType, ...]]:
        if self._catalog is not None and not refresh:
            return Ok(self._catalog)

        match await attempt(self._client.list_machine_types()):
            case Ok(machine_types):
                self._catalog = tuple(machine_types)
                self._log.debug("Fetched {n} machine types", n=len(self._catalog))
                return Ok(self._catalog)
            case Err(cause) as err:
                self._log.error("Machine type fetch failed: {cause}", cause=cause)
                return err
