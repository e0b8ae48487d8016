"""Ports for reading stage events from the ledger."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from supplytrail.domain.model import Stage, StageEvent


class QueryUnavailableError(RuntimeError):
    """Raised when a stage query could not be executed.

    The outcome of the stage is indeterminate; it must not be reported as absent.
    """


class SelectorUnavailableError(QueryUnavailableError):
    """Raised when the event selector for a stage cannot be built."""


class LedgerConnectionError(QueryUnavailableError):
    """Raised when the ledger connection fails or answers with an error."""

    def __init__(self, message: str, *, code: int | None = None) -> None:
        super().__init__(message)
        self.code = code


@dataclass(frozen=True, slots=True)
class EventSelector:
    """Filter matching every log of one event type emitted by one contract."""

    address: str
    topic: str


@dataclass(frozen=True, slots=True)
class RawLogEntry:
    """A ledger log as returned by the connection, payload still encoded."""

    payload: str
    transaction_id: str
    block_number: int
    log_index: int


@runtime_checkable
class LedgerConnection(Protocol):
    """Read access to the ledger's log-query capability.

    Logs are filtered by event type only; payload contents are never filtered
    server-side.
    """

    async def query_events(
        self,
        selector: EventSelector,
        from_block: int,
    ) -> Sequence[RawLogEntry]: ...


@runtime_checkable
class SelectorFactory(Protocol):
    """Builds the event selector for a stage (the contract ABI seam)."""

    def selector_for(self, stage: Stage) -> EventSelector: ...


@runtime_checkable
class StageEventSource(Protocol):
    """Per-stage event lookup consumed by the reconstructor."""

    async def query(self, stage: Stage, from_position: int = 0) -> list[StageEvent]: ...


__all__ = [
    "EventSelector",
    "LedgerConnection",
    "LedgerConnectionError",
    "QueryUnavailableError",
    "RawLogEntry",
    "SelectorFactory",
    "SelectorUnavailableError",
    "StageEventSource",
]
