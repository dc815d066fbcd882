from __future__ import annotations

from typing import Protocol, runtime_checkable

from loguru import logger

from fleetpanel.allowlist import AllowListParams


@runtime_checkable
class Prompts(Protocol):
    """User-facing questions the panel has to ask.

    Both calls are suspension points: the panel awaits the operator's answer.
    ``select_allow_list`` returns None when the operator cancels.
    """

    async def confirm(self, prompt: str) -> bool: ...
    async def select_allow_list(self, params: AllowListParams) -> frozenset[str] | None: ...


class ConfirmationGate:
    """Explicit yes before anything destructive."""

    def __init__(self, prompts: Prompts) -> None:
        self._prompts = prompts
        self._log = logger.bind(component="confirm")

    async def confirm_destroy(self, name: str) -> bool:
        answer = await self._prompts.confirm(f"Delete worker {name}?")
        if answer is not True:
            self._log.debug("Deletion of {name} not confirmed", name=name)
            return False
        return True
