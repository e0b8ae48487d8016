"""Domain model for supply-chain provenance."""

from __future__ import annotations

from .enums import SelectionPolicy, Stage, StageStatus
from .events import GENESIS_BLOCK, BlockPosition, StageEvent
from .identity import (
    InvalidItemCodeError,
    ItemIdentity,
    PayloadDecodeError,
    decode_item_code,
    decode_log_payload,
    is_blank_code,
)
from .provenance import ProvenanceRecord, StageResult

__all__ = [
    "GENESIS_BLOCK",
    "BlockPosition",
    "InvalidItemCodeError",
    "ItemIdentity",
    "PayloadDecodeError",
    "ProvenanceRecord",
    "SelectionPolicy",
    "Stage",
    "StageEvent",
    "StageResult",
    "StageStatus",
    "decode_item_code",
    "decode_log_payload",
    "is_blank_code",
]
