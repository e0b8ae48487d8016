"""Reconstructed provenance trails."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING

from .enums import Stage, StageStatus

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

    from .events import BlockPosition, StageEvent
    from .identity import ItemIdentity


@dataclass(frozen=True, slots=True)
class StageResult:
    """Outcome of looking up one stage for one item."""

    stage: Stage
    status: StageStatus
    transaction_id: str | None = None
    block_position: BlockPosition | None = None
    match_count: int = 0
    error: str | None = None

    def __post_init__(self) -> None:
        if (self.status is StageStatus.FOUND) != (self.transaction_id is not None):
            raise ValueError("transaction_id must be set exactly when the stage was found")

    @classmethod
    def not_attempted(cls, stage: Stage) -> StageResult:
        return cls(stage=stage, status=StageStatus.NOT_ATTEMPTED)

    @classmethod
    def not_found(cls, stage: Stage) -> StageResult:
        return cls(stage=stage, status=StageStatus.NOT_FOUND)

    @classmethod
    def unavailable(cls, stage: Stage, error: str) -> StageResult:
        return cls(stage=stage, status=StageStatus.QUERY_UNAVAILABLE, error=error)

    @classmethod
    def found(cls, event: StageEvent, *, match_count: int = 1) -> StageResult:
        return cls(
            stage=event.stage,
            status=StageStatus.FOUND,
            transaction_id=event.transaction_id,
            block_position=event.block_position,
            match_count=match_count,
        )

    @property
    def is_found(self) -> bool:
        return self.status is StageStatus.FOUND


@dataclass(frozen=True, slots=True)
class ProvenanceRecord(Mapping[Stage, StageResult]):
    """Read-only snapshot of an item's stage trail.

    The record always covers all eight stages. It is produced fresh for every
    reconstruction and is never the system of record; the ledger is.
    """

    item_code: str | None
    item_identity: ItemIdentity | None
    results: Mapping[Stage, StageResult]

    def __post_init__(self) -> None:
        missing = [stage.event_name for stage in Stage if stage not in self.results]
        if missing:
            raise ValueError(f"Provenance record is missing stages: {', '.join(missing)}")
        for stage, result in self.results.items():
            if result.stage is not stage:
                msg = f"Result for {result.stage.event_name} filed under {stage.event_name}"
                raise ValueError(msg)
        frozen = MappingProxyType({stage: self.results[stage] for stage in Stage})
        object.__setattr__(self, "results", frozen)

    @classmethod
    def not_attempted(cls, item_code: str | None = None) -> ProvenanceRecord:
        return cls(
            item_code=item_code,
            item_identity=None,
            results={stage: StageResult.not_attempted(stage) for stage in Stage},
        )

    def __getitem__(self, stage: Stage) -> StageResult:
        return self.results[stage]

    def __iter__(self) -> Iterator[Stage]:
        return iter(Stage)

    def __len__(self) -> int:
        return len(Stage)

    def status_for(self, stage: Stage) -> StageStatus:
        return self.results[stage].status

    def transaction_for(self, stage: Stage) -> str | None:
        return self.results[stage].transaction_id

    def trail(self) -> list[StageResult]:
        """Found stages in lifecycle order."""
        return [result for result in self.results.values() if result.is_found]

    @property
    def latest_stage(self) -> Stage | None:
        found = self.trail()
        return found[-1].stage if found else None

    @property
    def is_complete(self) -> bool:
        """True when every stage resolved to found or not-found."""
        return all(
            result.status in {StageStatus.FOUND, StageStatus.NOT_FOUND}
            for result in self.results.values()
        )

    def as_dict(
        self, *, explorer: Callable[[str], str | None] | None = None
    ) -> dict[str, object]:
        """JSON-ready view; ``explorer`` maps transaction ids to display links."""
        return {
            "item_code": self.item_code,
            "item_identity": None if self.item_identity is None else str(self.item_identity),
            "latest_stage": None if self.latest_stage is None else self.latest_stage.event_name,
            "stages": [
                {
                    "stage": result.stage.event_name,
                    "status": str(result.status),
                    "transaction_id": result.transaction_id,
                    "block_position": (
                        None if result.block_position is None else str(result.block_position)
                    ),
                    "match_count": result.match_count,
                    "error": result.error,
                    "explorer_url": (
                        explorer(result.transaction_id)
                        if explorer is not None and result.transaction_id is not None
                        else None
                    ),
                }
                for result in self.results.values()
            ],
        }
