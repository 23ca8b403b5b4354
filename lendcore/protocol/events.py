"""Observable notifications emitted by the accrual engine."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReserveDataUpdated:
    """New rates and current indices of a reserve after a rate refresh."""

    asset: str
    liquidity_rate: int
    stable_borrow_rate: int
    variable_borrow_rate: int
    liquidity_index: int
    variable_borrow_index: int


Listener = Callable[[ReserveDataUpdated], None]


class EventEmitter:
    """Synchronous fan-out of events to subscribed listeners."""

    def __init__(self) -> None:
        self._listeners: list[Listener] = []

    def subscribe(self, listener: Listener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        self._listeners.remove(listener)

    def emit(self, event: ReserveDataUpdated) -> None:
        logger.debug("Emitting %s", event)
        for listener in list(self._listeners):
            listener(event)
