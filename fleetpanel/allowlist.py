"""Set-algebra editing of the machine-type allow-list.

``AllowList`` is an immutable value: every edit returns a new one, so the
snapshot handed to an editor can never be changed behind the caller's back.
``AllowListEditor`` is one editing session over such a value; it ends with
``confirm()`` (the new set) or ``cancel()`` (nothing).
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, replace

from fleetpanel.core.exceptions import EditorClosedError


@dataclass(frozen=True, slots=True)
class AllowList:
    options: frozenset[str]
    allowed: frozenset[str]

    @classmethod
    def of(cls, options: Iterable[str], allowed: Iterable[str]) -> AllowList:
        return cls(options=frozenset(options), allowed=frozenset(allowed))

    def add(self, name: str) -> AllowList:
        return replace(self, allowed=self.allowed | {name})

    def remove(self, name: str) -> AllowList:
        return replace(self, allowed=self.allowed - {name})

    def toggle(self, name: str, checked: bool) -> AllowList:
        return self.add(name) if checked else self.remove(name)

    def toggle_all(self, checked: bool) -> AllowList:
        return replace(self, allowed=self.options if checked else frozenset())

    @property
    def all_selected(self) -> bool:
        return self.allowed == self.options


@dataclass(frozen=True, slots=True)
class AllowListParams:
    """What the allow-list prompt is opened with."""

    catalog: tuple[str, ...]
    allowed: frozenset[str]
    provider_name: str


class AllowListEditor:
    def __init__(self, params: AllowListParams) -> None:
        self._provider_name = params.provider_name
        self._catalog = params.catalog
        self._state = AllowList.of(params.catalog, params.allowed)
        self._closed = False

    @property
    def provider_name(self) -> str:
        return self._provider_name

    @property
    def catalog(self) -> tuple[str, ...]:
        """Options in catalog order, for display."""
        return self._catalog

    @property
    def options(self) -> frozenset[str]:
        return self._state.options

    @property
    def allowed(self) -> frozenset[str]:
        return self._state.allowed

    @property
    def closed(self) -> bool:
        return self._closed

    def _ensure_open(self) -> None:
        if self._closed:
            raise EditorClosedError()

    def toggle(self, name: str, checked: bool) -> None:
        self._ensure_open()
        self._state = self._state.toggle(name, checked)

    def toggle_select_all(self, checked: bool) -> None:
        self._ensure_open()
        self._state = self._state.toggle_all(checked)

    def is_all_selected(self) -> bool:
        return self._state.all_selected

    def confirm(self) -> frozenset[str]:
        self._ensure_open()
        self._closed = True
        return self._state.allowed

    def cancel(self) -> None:
        self._ensure_open()
        self._closed = True
