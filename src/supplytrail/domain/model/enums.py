"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import IntEnum, StrEnum


class Stage(IntEnum):
    """Lifecycle stages of a supply-chain item, in their fixed domain order."""

    HARVESTED = 0
    PROCESSED = 1
    PACKED = 2
    FOR_SALE = 3
    SOLD = 4
    SHIPPED = 5
    RECEIVED = 6
    PURCHASED = 7

    @property
    def event_name(self) -> str:
        """Name of the contract event emitted on entering this stage."""
        return _EVENT_NAMES[self]

    @classmethod
    def parse(cls, value: str | int) -> Stage:
        """Resolve a stage from its ordinal, member name or contract event name."""

        if isinstance(value, int):
            return cls(value)
        text = value.strip()
        if text.isdigit():
            return cls(int(text))
        key = text.replace("-", "").replace("_", "").replace(" ", "").lower()
        for stage in cls:
            if key == stage.event_name.lower():
                return stage
        raise ValueError(f"Unknown stage: {value!r}")


_EVENT_NAMES: dict[Stage, str] = {
    Stage.HARVESTED: "Harvested",
    Stage.PROCESSED: "Processed",
    Stage.PACKED: "Packed",
    Stage.FOR_SALE: "ForSale",
    Stage.SOLD: "Sold",
    Stage.SHIPPED: "Shipped",
    Stage.RECEIVED: "Received",
    Stage.PURCHASED: "Purchased",
}


class StageStatus(StrEnum):
    NOT_ATTEMPTED = "not_attempted"
    FOUND = "found"
    NOT_FOUND = "not_found"
    QUERY_UNAVAILABLE = "query_unavailable"


class SelectionPolicy(StrEnum):
    """Tie-break used when more than one event matches an item at a stage."""

    FIRST_SEEN = "first-seen"
    EARLIEST_POSITION = "earliest"
