"""Port for turning item codes into ledger identities."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from supplytrail.domain.model import ItemIdentity

IdentityDecoder = Callable[[str], "ItemIdentity"]

__all__ = ["IdentityDecoder"]
