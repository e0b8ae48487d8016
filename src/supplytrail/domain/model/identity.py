"""Ledger-native item identities and the item-code decoder."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

UINT256_LIMIT: Final[int] = 2**256
_HEX_PREFIX: Final[str] = "0x"
_WORD_HEX_CHARS: Final[int] = 64
_MAX_DECIMAL_DIGITS: Final[int] = len(str(UINT256_LIMIT))


class InvalidItemCodeError(ValueError):
    """Raised when an item code cannot be decoded into a ledger identity."""


class PayloadDecodeError(ValueError):
    """Raised when a log payload does not carry a decodable identity."""


@dataclass(frozen=True, slots=True, order=True)
class ItemIdentity:
    """Numeric identity of an item as stored on the ledger (a ``uint256``)."""

    value: int

    def __post_init__(self) -> None:
        if not 0 <= self.value < UINT256_LIMIT:
            raise InvalidItemCodeError(f"Identity out of uint256 range: {self.value}")

    def __int__(self) -> int:
        return self.value

    def __str__(self) -> str:
        return str(self.value)


def is_blank_code(item_code: str | None) -> bool:
    return item_code is None or not item_code.strip()


def decode_item_code(item_code: str) -> ItemIdentity:
    """Decode a human-facing UPC into its ledger identity.

    Decimal digit strings and ``0x``-prefixed hex are accepted, the two forms the
    ledger's numeric parser understands. Surrounding whitespace is ignored. The
    mapping is pure: equal codes always yield equal identities, and distinct
    canonical codes (no leading zeros) yield distinct identities.
    """

    text = item_code.strip()
    if not text:
        raise InvalidItemCodeError("Item code is empty")

    if text.lower().startswith(_HEX_PREFIX):
        digits = text[len(_HEX_PREFIX) :]
        if not digits or not _is_hex(digits):
            raise InvalidItemCodeError(f"Malformed hex item code: {item_code!r}")
        return ItemIdentity(int(digits, 16))

    if not text.isascii() or not text.isdigit():
        raise InvalidItemCodeError(f"Malformed item code: {item_code!r}")
    if len(text.lstrip("0")) > _MAX_DECIMAL_DIGITS:
        raise InvalidItemCodeError(f"Item code does not fit a uint256: {item_code!r}")
    return ItemIdentity(int(text, 10))


def decode_log_payload(payload: str) -> ItemIdentity:
    """Decode the first ABI word of an event's data field into an identity."""

    text = payload.strip()
    if text.lower().startswith(_HEX_PREFIX):
        text = text[len(_HEX_PREFIX) :]
    if not text or not _is_hex(text):
        raise PayloadDecodeError(f"Malformed log payload: {payload!r}")
    return ItemIdentity(int(text[:_WORD_HEX_CHARS], 16))


def _is_hex(text: str) -> bool:
    return all(char in "0123456789abcdefABCDEF" for char in text)
