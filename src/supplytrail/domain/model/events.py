"""Immutable ledger records of stage transitions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, NamedTuple

if TYPE_CHECKING:
    from .enums import Stage
    from .identity import ItemIdentity


class BlockPosition(NamedTuple):
    """Position of a log entry on the ledger; totally ordered."""

    block_number: int
    log_index: int

    def __str__(self) -> str:
        return f"{self.block_number}:{self.log_index}"


GENESIS_BLOCK = 0


@dataclass(frozen=True, slots=True)
class StageEvent:
    stage: Stage
    item_identity: ItemIdentity
    transaction_id: str
    block_position: BlockPosition
