"""Event topics of the supply-chain contract."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Final

from Crypto.Hash import keccak

from supplytrail.domain.model import Stage
from supplytrail.domain.ports.ledger import EventSelector, SelectorUnavailableError

_ADDRESS_RE: Final = re.compile(r"^0x[0-9a-fA-F]{40}$")


def event_signature(stage: Stage) -> str:
    # every stage event carries the item's upc as its single uint256 argument
    return f"{stage.event_name}(uint256)"


def event_topic(signature: str) -> str:
    """Keccak-256 of a canonical event signature, as the log's first topic."""
    digest = keccak.new(digest_bits=256, data=signature.encode("ascii"))
    return "0x" + digest.hexdigest()


STAGE_TOPICS: Final[dict[Stage, str]] = {
    stage: event_topic(event_signature(stage)) for stage in Stage
}


def normalize_address(address: str) -> str:
    text = address.strip()
    if not _ADDRESS_RE.match(text):
        raise SelectorUnavailableError(f"Malformed contract address: {address!r}")
    return text.lower()


@dataclass(frozen=True, slots=True)
class SupplyChainContract:
    """Builds per-stage log selectors for a deployed supply-chain contract.

    ``address`` may be unknown (not yet deployed or not configured); selectors
    then cannot be built and every stage query is unavailable.
    """

    address: str | None

    def selector_for(self, stage: Stage) -> EventSelector:
        if self.address is None:
            raise SelectorUnavailableError("No supply-chain contract address configured")
        return EventSelector(address=normalize_address(self.address), topic=STAGE_TOPICS[stage])
