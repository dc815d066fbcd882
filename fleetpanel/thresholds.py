from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Literal

from loguru import logger

from fleetpanel.core.exceptions import ValidationError
from fleetpanel.infra.result import Err, Ok, Result
from fleetpanel.model import Config, ConfigPatch
from fleetpanel.store import ConfigStore

type Bound = Literal["min", "max"]


@dataclass(frozen=True, slots=True)
class PendingEdit:
    """Draft worker-count bounds next to the last committed ones."""

    committed_min: int | None = None
    committed_max: int | None = None
    draft_min: int = 0
    draft_max: int = 0

    @classmethod
    def from_config(cls, config: Config) -> PendingEdit:
        return cls(
            committed_min=config.workers_count_min,
            committed_max=config.workers_count_max,
            draft_min=config.workers_count_min,
            draft_max=config.workers_count_max,
        )

    @property
    def dirty(self) -> bool:
        if self.committed_min is None or self.committed_max is None:
            return False
        return self.draft_max != self.committed_max or self.draft_min != self.committed_min

    def draft(self, bound: Bound) -> int:
        return self.draft_min if bound == "min" else self.draft_max

    def with_draft(self, bound: Bound, value: int) -> PendingEdit:
        value = max(0, value)
        return replace(self, draft_min=value) if bound == "min" else replace(self, draft_max=value)


class ThresholdEditor:
    """Stepper for the worker-pool bounds.

    ``commit_enabled`` tracks whether there is an uncommitted change, not
    whether the change is valid: stepping into ``max < min`` leaves it on and
    only raises ``validation_error``. ``commit`` is what refuses to send an
    invalid pair. Drafts are re-seeded whenever the store adopts a Config.
    """

    def __init__(self, store: ConfigStore) -> None:
        self._store = store
        self._edit = PendingEdit()
        self._validation_error = False
        self._log = logger.bind(component="thresholds")
        store.subscribe(self._seed)

    def _seed(self, config: Config) -> None:
        self._edit = PendingEdit.from_config(config)
        self._validation_error = config.workers_count_max < config.workers_count_min

    @property
    def pending(self) -> PendingEdit:
        return self._edit

    @property
    def draft_min(self) -> int:
        return self._edit.draft_min

    @property
    def draft_max(self) -> int:
        return self._edit.draft_max

    @property
    def commit_enabled(self) -> bool:
        return self._edit.dirty

    @property
    def validation_error(self) -> bool:
        return self._validation_error

    def increment(self, bound: Bound) -> None:
        self._step(bound, 1)

    def decrement(self, bound: Bound) -> None:
        if self._edit.draft(bound) > 0:
            self._step(bound, -1)

    def _step(self, bound: Bound, delta: int) -> None:
        self._edit = self._edit.with_draft(bound, self._edit.draft(bound) + delta)
        self.validate(self._edit.draft_max, self._edit.draft_min)

    def validate(self, maximum: int, minimum: int) -> bool:
        self._validation_error = not (maximum >= minimum)
        return not self._validation_error

    async def commit(self, maximum: int | None = None, minimum: int | None = None) -> Result[Config]:
        maximum = self._edit.draft_max if maximum is None else maximum
        minimum = self._edit.draft_min if minimum is None else minimum

        if not self.validate(maximum, minimum):
            return Err(ValidationError(f"max {maximum} is lower than min {minimum}"))

        result = await self._store.apply_patch(
            ConfigPatch(workers_count_min=minimum, workers_count_max=maximum)
        )
        match result:
            case Ok(config):
                self._log.info(
                    "Worker bounds set to {lo}..{hi}",
                    lo=config.workers_count_min, hi=config.workers_count_max,
                )
            case Err():
                self._log.warning(
                    "Worker bounds {lo}..{hi} not saved, keeping drafts", lo=minimum, hi=maximum
                )
        return result
