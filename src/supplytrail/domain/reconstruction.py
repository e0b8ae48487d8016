"""Reconstruct an item's provenance trail from per-stage ledger events."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from supplytrail.domain.model import (
    GENESIS_BLOCK,
    ProvenanceRecord,
    SelectionPolicy,
    Stage,
    StageResult,
    decode_item_code,
    is_blank_code,
)
from supplytrail.domain.ports.ledger import QueryUnavailableError

if TYPE_CHECKING:
    from supplytrail.domain.model import ItemIdentity, StageEvent
    from supplytrail.domain.ports.identity import IdentityDecoder
    from supplytrail.domain.ports.ledger import StageEventSource

log = getLogger(__name__)


def select_event(
    events: list[StageEvent],
    identity: ItemIdentity,
    policy: SelectionPolicy = SelectionPolicy.FIRST_SEEN,
) -> tuple[StageEvent | None, int]:
    """Return the chosen event for ``identity`` and how many events matched."""

    matches = [event for event in events if event.item_identity == identity]
    if not matches:
        return None, 0
    if policy is SelectionPolicy.EARLIEST_POSITION:
        return min(matches, key=lambda event: event.block_position), len(matches)
    return matches[0], len(matches)


@dataclass(slots=True)
class ProvenanceReconstructor:
    """Build a :class:`ProvenanceRecord` for an item code.

    The ledger can only be queried by event type, so each of the eight stages is
    fetched in full and filtered client-side for the item's identity. The lookups
    are independent and run concurrently; a stage whose query is unavailable is
    reported as such without affecting the others.
    """

    events: StageEventSource
    decoder: IdentityDecoder = field(default=decode_item_code)
    policy: SelectionPolicy = SelectionPolicy.FIRST_SEEN

    def decode(self, item_code: str) -> ItemIdentity | None:
        """Identity for ``item_code``, or ``None`` when no item is selected."""
        if is_blank_code(item_code):
            return None
        return self.decoder(item_code)

    async def reconstruct(self, item_code: str) -> ProvenanceRecord:
        identity = self.decode(item_code)
        if identity is None:
            return ProvenanceRecord.not_attempted()

        log.info("Reconstructing provenance for item %s (identity %s)", item_code, identity)
        results = await asyncio.gather(
            *(self._lookup_stage(stage, identity) for stage in Stage)
        )

        record = ProvenanceRecord(
            item_code=item_code,
            item_identity=identity,
            results={result.stage: result for result in results},
        )
        log.info(
            "Provenance for item %s: %d/%d stages found, latest=%s, complete=%s",
            item_code,
            len(record.trail()),
            len(record),
            record.latest_stage.event_name if record.latest_stage is not None else None,
            record.is_complete,
        )
        return record

    async def _lookup_stage(self, stage: Stage, identity: ItemIdentity) -> StageResult:
        try:
            events = await self.events.query(stage, GENESIS_BLOCK)
        except QueryUnavailableError as exc:
            log.warning(
                "%s lookup unavailable for identity %s: %s", stage.event_name, identity, exc
            )
            return StageResult.unavailable(stage, str(exc))

        chosen, match_count = select_event(events, identity, self.policy)
        if chosen is None:
            log.debug("%s: no event for identity %s", stage.event_name, identity)
            return StageResult.not_found(stage)

        if match_count > 1:
            log.warning(
                "%s: %d events match identity %s, using tx %s (%s)",
                stage.event_name,
                match_count,
                identity,
                chosen.transaction_id,
                self.policy,
            )
        log.debug(
            "%s: identity %s found in tx %s", stage.event_name, identity, chosen.transaction_id
        )
        return StageResult.found(chosen, match_count=match_count)
