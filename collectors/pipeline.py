# collectors/pipeline.py
from __future__ import annotations

import logging
from collections.abc import Awaitable
from collections.abc import Callable
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)

Probe = Callable[[dict[str, Any]], Awaitable[dict[str, Any]]]
Predicate = Callable[[dict[str, Any]], bool]


@dataclass(frozen=True)
class ProbeStep:
    """
    One link of a fallback chain.

    probe:     coroutine function taking the record so far and returning
               {field: value} for whatever it found.
    when:      optional guard evaluated against the record before probing.
    overwrite: let this step replace values that are already set.
    """
    name: str
    probe: Probe
    when: Predicate | None = None
    overwrite: bool = False


class FallbackChain:
    """
    Ordered list of probes filling a record.

    Steps run strictly one after another. A value is accepted only when it is
    not a default itself and the target field still holds its default, so an
    earlier probe always wins over a later one. Booleans default to False,
    which makes flags such as `virtual` monotonic.
    """

    def __init__(self, steps: Iterable[ProbeStep] | None = None, defaults: dict[str, Any] | None = None):
        self.steps: list[ProbeStep] = list(steps) if steps else []
        self.defaults: dict[str, Any] = dict(defaults or {})

    def add(self, step: ProbeStep) -> FallbackChain:
        self.steps.append(step)
        return self

    def names(self) -> list[str]:
        return [s.name for s in self.steps]

    def is_default(self, field: str, value: Any) -> bool:
        if value is None or value == '' or value is False:
            return True
        return field in self.defaults and value == self.defaults[field]

    async def run(self, record: dict[str, Any]) -> dict[str, Any]:
        for step in self.steps:
            if step.when is not None and not step.when(record):
                continue

            found = await step.probe(record)
            if not found:
                logger.debug(f"Step '{step.name}' found nothing")
                continue

            for field, value in found.items():
                if self.is_default(field, value):
                    continue
                if step.overwrite or self.is_default(field, record.get(field)):
                    record[field] = value

        return record
