from __future__ import annotations

import pytest

from supplytrail.domain.model import (
    InvalidItemCodeError,
    ItemIdentity,
    PayloadDecodeError,
    decode_item_code,
    decode_log_payload,
    is_blank_code,
)
from tests.support.ledger import encode_payload


def test_decode_is_deterministic() -> None:
    assert decode_item_code("123456789012") == decode_item_code("123456789012")
    assert decode_item_code("123456789012") == ItemIdentity(123456789012)


def test_decode_accepts_hex_and_surrounding_whitespace() -> None:
    assert decode_item_code("0x1f") == ItemIdentity(31)
    assert decode_item_code("  42 ") == ItemIdentity(42)


def test_distinct_codes_map_to_distinct_identities() -> None:
    codes = [str(code) for code in range(1, 500)] + ["725272730706", "36000291452"]
    identities = {decode_item_code(code) for code in codes}

    assert len(identities) == len(set(codes))


@pytest.mark.parametrize("code", ["abc", "12a", "-5", "1.5", "0x", "0xzz", "１２"])
def test_malformed_codes_are_rejected(code: str) -> None:
    with pytest.raises(InvalidItemCodeError):
        decode_item_code(code)


def test_codes_beyond_uint256_are_rejected() -> None:
    with pytest.raises(InvalidItemCodeError, match="uint256"):
        decode_item_code(str(2**256))


def test_oversized_decimal_codes_raise_invalid_item_code() -> None:
    with pytest.raises(InvalidItemCodeError, match="uint256"):
        decode_item_code("1" * 5000)


def test_leading_zeros_do_not_count_towards_the_digit_limit() -> None:
    assert decode_item_code("0" * 100 + "42") == decode_item_code("42")


def test_blank_codes_are_not_decoded() -> None:
    assert is_blank_code("")
    assert is_blank_code("   ")
    assert not is_blank_code("1")
    with pytest.raises(InvalidItemCodeError):
        decode_item_code("")


def test_decode_log_payload_reads_first_word() -> None:
    payload = encode_payload(7) + "ff" * 32

    assert decode_log_payload(encode_payload(123)) == ItemIdentity(123)
    assert decode_log_payload(payload) == ItemIdentity(7)


@pytest.mark.parametrize("payload", ["0x", "", "0xnothex"])
def test_decode_log_payload_rejects_garbage(payload: str) -> None:
    with pytest.raises(PayloadDecodeError):
        decode_log_payload(payload)
