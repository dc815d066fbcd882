"""DI wiring for a capacity panel.

Components take every dependency through their constructors; this module
only decides which instances go where:

    injector = Injector([PanelModule(load_settings(), RichPrompts())])
    panel = injector.get(CapacityPanel)
"""

from __future__ import annotations

from injector import Binder, Injector, InstanceProvider, Module, provider, singleton

from .client import CapacityClient
from .config import PanelConfig
from .panel import CapacityPanel
from .prompts import ConfirmationGate, Prompts
from .store import ConfigStore
from .thresholds import ThresholdEditor
from .workers import WorkerCollection


class PanelModule(Module):
    """Binds settings and prompts, and provides one of each component."""

    def __init__(self, config: PanelConfig, prompts: Prompts) -> None:
        self._config = config
        self._prompts = prompts

    def configure(self, binder: Binder) -> None:
        binder.bind(PanelConfig, to=self._config)
        binder.bind(Prompts, to=InstanceProvider(self._prompts))  # type: ignore[type-abstract]

    @singleton
    @provider
    def provide_client(self, config: PanelConfig) -> CapacityClient:
        return CapacityClient.for_url(config.url, timeout=config.request_timeout)

    @singleton
    @provider
    def provide_store(self, client: CapacityClient) -> ConfigStore:
        return ConfigStore(client)

    @singleton
    @provider
    def provide_thresholds(self, store: ConfigStore) -> ThresholdEditor:
        return ThresholdEditor(store)

    @singleton
    @provider
    def provide_workers(
        self, config: PanelConfig, client: CapacityClient, prompts: Prompts
    ) -> WorkerCollection:
        return WorkerCollection(
            client,
            ConfirmationGate(prompts),
            interval=config.poll_interval,
            visible_states=config.visible_states,
        )

    @singleton
    @provider
    def provide_panel(
        self,
        config: PanelConfig,
        client: CapacityClient,
        store: ConfigStore,
        thresholds: ThresholdEditor,
        workers: WorkerCollection,
        prompts: Prompts,
    ) -> CapacityPanel:
        return CapacityPanel(client, store, thresholds, workers, prompts, log=config.log)


def create_panel(config: PanelConfig, prompts: Prompts) -> CapacityPanel:
    return Injector([PanelModule(config, prompts)]).get(CapacityPanel)


__all__ = [
    "PanelModule",
    "create_panel",
]
