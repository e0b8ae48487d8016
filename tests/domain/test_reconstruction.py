from __future__ import annotations

import asyncio

import pytest

from supplytrail.adapters.ethereum import SupplyChainContract
from supplytrail.domain import ProvenanceReconstructor, StageEventQuery, select_event
from supplytrail.domain.model import (
    BlockPosition,
    InvalidItemCodeError,
    ItemIdentity,
    SelectionPolicy,
    Stage,
    StageEvent,
    StageStatus,
)
from tests.support.ledger import FakeLedger, make_entry

UPC = "725272730706"


def test_blank_code_is_not_attempted_and_issues_no_queries(
    reconstructor: ProvenanceReconstructor,
    ledger: FakeLedger,
) -> None:
    for code in ("", "   "):
        record = asyncio.run(reconstructor.reconstruct(code))

        assert {result.status for result in record.values()} == {StageStatus.NOT_ATTEMPTED}
        assert record.item_identity is None
    assert ledger.queries == []


def test_single_packed_event_is_found(
    reconstructor: ProvenanceReconstructor,
    ledger: FakeLedger,
) -> None:
    ledger.emit(Stage.PACKED, make_entry(UPC, "0xABC"))

    record = asyncio.run(reconstructor.reconstruct(UPC))

    assert record.transaction_for(Stage.PACKED) == "0xABC"
    assert record.status_for(Stage.PACKED) is StageStatus.FOUND
    for stage in Stage:
        if stage is not Stage.PACKED:
            assert record.status_for(stage) is StageStatus.NOT_FOUND
    assert record.item_identity == ItemIdentity(int(UPC))


def test_empty_ledger_yields_not_found_everywhere(
    reconstructor: ProvenanceReconstructor,
    ledger: FakeLedger,
) -> None:
    record = asyncio.run(reconstructor.reconstruct(UPC))

    assert {result.status for result in record.values()} == {StageStatus.NOT_FOUND}
    assert record.is_complete
    assert len(ledger.queries) == len(Stage)


def test_every_stage_is_queried_from_genesis(
    reconstructor: ProvenanceReconstructor,
    ledger: FakeLedger,
) -> None:
    asyncio.run(reconstructor.reconstruct(UPC))

    assert {from_block for _, from_block in ledger.queries} == {0}
    assert len({selector.topic for selector, _ in ledger.queries}) == len(Stage)


def test_events_of_other_items_are_ignored(
    reconstructor: ProvenanceReconstructor,
    ledger: FakeLedger,
) -> None:
    ledger.emit(Stage.HARVESTED, make_entry("1", "0x01"))
    ledger.emit(Stage.HARVESTED, make_entry(UPC, "0x02"))
    ledger.emit(Stage.PROCESSED, make_entry("2", "0x03"))

    record = asyncio.run(reconstructor.reconstruct(UPC))

    assert record.transaction_for(Stage.HARVESTED) == "0x02"
    assert record.status_for(Stage.PROCESSED) is StageStatus.NOT_FOUND


def test_unavailable_stage_does_not_affect_the_others(
    reconstructor: ProvenanceReconstructor,
    ledger: FakeLedger,
) -> None:
    ledger.emit(Stage.HARVESTED, make_entry(UPC, "0xa"))
    ledger.emit(Stage.SOLD, make_entry(UPC, "0xb"))
    ledger.unavailable.add(Stage.PROCESSED)

    record = asyncio.run(reconstructor.reconstruct(UPC))

    assert record.status_for(Stage.PROCESSED) is StageStatus.QUERY_UNAVAILABLE
    assert record[Stage.PROCESSED].error is not None
    assert record.transaction_for(Stage.HARVESTED) == "0xa"
    assert record.transaction_for(Stage.SOLD) == "0xb"
    assert record.status_for(Stage.PACKED) is StageStatus.NOT_FOUND
    assert not record.is_complete


def test_missing_contract_address_marks_every_stage_unavailable(ledger: FakeLedger) -> None:
    reconstructor = ProvenanceReconstructor(
        events=StageEventQuery(connection=ledger, selectors=SupplyChainContract(address=None))
    )

    record = asyncio.run(reconstructor.reconstruct(UPC))

    assert {result.status for result in record.values()} == {StageStatus.QUERY_UNAVAILABLE}
    assert ledger.queries == []


def test_reconstruction_is_idempotent(
    reconstructor: ProvenanceReconstructor,
    ledger: FakeLedger,
) -> None:
    ledger.emit(Stage.HARVESTED, make_entry(UPC, "0xa"))
    ledger.emit(Stage.SHIPPED, make_entry(UPC, "0xb", block_number=9))

    first = asyncio.run(reconstructor.reconstruct(UPC))
    second = asyncio.run(reconstructor.reconstruct(UPC))

    assert first == second
    assert first is not second


def test_completion_order_does_not_matter(
    reconstructor: ProvenanceReconstructor,
    ledger: FakeLedger,
) -> None:
    ledger.emit(Stage.HARVESTED, make_entry(UPC, "0xa"))
    ledger.emit(Stage.PURCHASED, make_entry(UPC, "0xb"))
    ledger.delays[Stage.HARVESTED] = 0.02

    record = asyncio.run(reconstructor.reconstruct(UPC))

    assert record.transaction_for(Stage.HARVESTED) == "0xa"
    assert record.transaction_for(Stage.PURCHASED) == "0xb"
    assert record.latest_stage is Stage.PURCHASED


def test_malformed_code_is_rejected(reconstructor: ProvenanceReconstructor) -> None:
    with pytest.raises(InvalidItemCodeError):
        asyncio.run(reconstructor.reconstruct("not-a-upc"))


def test_custom_decoder_is_used(stage_events: StageEventQuery, ledger: FakeLedger) -> None:
    ledger.emit(Stage.SOLD, make_entry("99", "0x99"))
    reconstructor = ProvenanceReconstructor(
        events=stage_events,
        decoder=lambda code: ItemIdentity(len(code) * 33),
    )

    record = asyncio.run(reconstructor.reconstruct("abc"))

    assert record.transaction_for(Stage.SOLD) == "0x99"


def _event(tx: str, block: int, index: int = 0, identity: int = 5) -> StageEvent:
    return StageEvent(
        stage=Stage.SOLD,
        item_identity=ItemIdentity(identity),
        transaction_id=tx,
        block_position=BlockPosition(block, index),
    )


def test_select_event_first_seen_keeps_iteration_order() -> None:
    events = [_event("0xlate", 20), _event("0xother", 1, identity=6), _event("0xearly", 3)]

    chosen, count = select_event(events, ItemIdentity(5))

    assert chosen is not None
    assert chosen.transaction_id == "0xlate"
    assert count == 2


def test_select_event_earliest_position_breaks_ties_by_block() -> None:
    events = [_event("0xlate", 20), _event("0xsame-block-later", 3, 4), _event("0xearly", 3, 1)]

    chosen, count = select_event(events, ItemIdentity(5), SelectionPolicy.EARLIEST_POSITION)

    assert chosen is not None
    assert chosen.transaction_id == "0xearly"
    assert count == 3


def test_duplicates_are_reported_on_the_result(
    stage_events: StageEventQuery,
    ledger: FakeLedger,
) -> None:
    ledger.emit(Stage.SHIPPED, make_entry(UPC, "0xretry", block_number=12))
    ledger.emit(Stage.SHIPPED, make_entry(UPC, "0xfirst", block_number=10))
    reconstructor = ProvenanceReconstructor(
        events=stage_events, policy=SelectionPolicy.EARLIEST_POSITION
    )

    record = asyncio.run(reconstructor.reconstruct(UPC))

    shipped = record[Stage.SHIPPED]
    assert shipped.transaction_id == "0xfirst"
    assert shipped.match_count == 2
    assert shipped.block_position == BlockPosition(10, 0)
