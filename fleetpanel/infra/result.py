"""Discriminated result for remote calls.

Every call to the capacity service is turned into ``Ok(value)`` or
``Err(cause)`` at the call site, so rollback can sit next to the call:

    match await attempt(client.get_config()):
        case Ok(config):
            self._config = config
        case Err(cause):
            log.error("fetch failed: {cause}", cause=cause)
"""

from __future__ import annotations

from collections.abc import Awaitable
from dataclasses import dataclass

from fleetpanel.core.exceptions import TransportError


@dataclass(frozen=True, slots=True)
class Ok[T]:
    value: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True, slots=True)
class Err:
    cause: Exception

    @property
    def ok(self) -> bool:
        return False


type Result[T] = Ok[T] | Err


async def attempt[T](call: Awaitable[T]) -> Result[T]:
    """Await a remote call, capturing transport failures as ``Err``.

    Only ``TransportError`` is captured. Anything else is a bug and propagates.
    """
    try:
        return Ok(await call)
    except TransportError as e:
        return Err(e)
