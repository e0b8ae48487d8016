"""Stage-level view over the ledger's log-query capability."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from supplytrail.domain.model import (
    GENESIS_BLOCK,
    BlockPosition,
    PayloadDecodeError,
    StageEvent,
    decode_log_payload,
)
from supplytrail.domain.ports.ledger import SelectorUnavailableError

if TYPE_CHECKING:
    from supplytrail.domain.model import Stage
    from supplytrail.domain.ports.ledger import LedgerConnection, SelectorFactory

log = getLogger(__name__)


@dataclass(slots=True)
class StageEventQuery:
    """Fetch every ledger event of one stage, unfiltered by item.

    Entries come back in the connection's iteration order. Payloads that do not
    decode into an identity are dropped, since they can never match an item.
    """

    connection: LedgerConnection
    selectors: SelectorFactory

    async def query(self, stage: Stage, from_position: int = GENESIS_BLOCK) -> list[StageEvent]:
        if from_position < GENESIS_BLOCK:
            raise ValueError(f"from_position must be non-negative, got {from_position}")

        try:
            selector = self.selectors.selector_for(stage)
        except (LookupError, ValueError) as exc:
            raise SelectorUnavailableError(
                f"Cannot build selector for {stage.event_name}: {exc}"
            ) from exc

        entries = await self.connection.query_events(selector, from_position)

        events: list[StageEvent] = []
        for entry in entries:
            try:
                identity = decode_log_payload(entry.payload)
            except PayloadDecodeError:
                log.warning(
                    "Skipping %s log in tx %s with undecodable payload %r",
                    stage.event_name,
                    entry.transaction_id,
                    entry.payload,
                )
                continue
            events.append(
                StageEvent(
                    stage=stage,
                    item_identity=identity,
                    transaction_id=entry.transaction_id,
                    block_position=BlockPosition(entry.block_number, entry.log_index),
                )
            )

        log.debug(
            "Fetched %d %s events from block %d", len(events), stage.event_name, from_position
        )
        return events


__all__ = ["StageEventQuery"]
