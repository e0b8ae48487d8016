from __future__ import annotations

import pytest

from supplytrail.domain.model import Stage


def test_stage_order_is_fixed() -> None:
    assert [stage.event_name for stage in sorted(Stage)] == [
        "Harvested",
        "Processed",
        "Packed",
        "ForSale",
        "Sold",
        "Shipped",
        "Received",
        "Purchased",
    ]
    assert Stage.HARVESTED < Stage.PACKED < Stage.PURCHASED
    assert Stage.RECEIVED.value == 6


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("ForSale", Stage.FOR_SALE),
        ("for_sale", Stage.FOR_SALE),
        ("PURCHASED", Stage.PURCHASED),
        ("3", Stage.FOR_SALE),
        (0, Stage.HARVESTED),
    ],
)
def test_parse_accepts_names_and_ordinals(value: str | int, expected: Stage) -> None:
    assert Stage.parse(value) is expected


def test_parse_rejects_unknown_stage() -> None:
    with pytest.raises(ValueError, match="Unknown stage"):
        Stage.parse("Composted")
