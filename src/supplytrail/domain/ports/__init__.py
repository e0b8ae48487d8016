"""Domain port definitions for adapters."""

from __future__ import annotations

from .identity import IdentityDecoder
from .ledger import (
    EventSelector,
    LedgerConnection,
    LedgerConnectionError,
    QueryUnavailableError,
    RawLogEntry,
    SelectorFactory,
    SelectorUnavailableError,
    StageEventSource,
)

__all__ = [
    "EventSelector",
    "IdentityDecoder",
    "LedgerConnection",
    "LedgerConnectionError",
    "QueryUnavailableError",
    "RawLogEntry",
    "SelectorFactory",
    "SelectorUnavailableError",
    "StageEventSource",
]
