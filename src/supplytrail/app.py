"""Application orchestration entry points."""

from __future__ import annotations

import asyncio
from contextlib import AsyncExitStack
from logging import getLogger
from typing import TYPE_CHECKING

from supplytrail.adapters.ethereum import JsonRpcLedger, SupplyChainContract
from supplytrail.config import get_ledger_config
from supplytrail.domain import ProvenanceReconstructor, StageEventQuery
from supplytrail.domain.model import SelectionPolicy

if TYPE_CHECKING:
    from supplytrail.config import LedgerConfig
    from supplytrail.domain.model import ProvenanceRecord
    from supplytrail.domain.ports.ledger import LedgerConnection


log = getLogger(__name__)


def build_reconstructor(
    *,
    connection: LedgerConnection,
    contract_address: str | None,
    policy: SelectionPolicy = SelectionPolicy.FIRST_SEEN,
) -> ProvenanceReconstructor:
    """Wire a reconstructor for the supply-chain contract at ``contract_address``."""

    events = StageEventQuery(
        connection=connection,
        selectors=SupplyChainContract(address=contract_address),
    )
    return ProvenanceReconstructor(events=events, policy=policy)


async def trace_item_async(
    item_code: str,
    *,
    config: LedgerConfig | None = None,
    connection: LedgerConnection | None = None,
    policy: SelectionPolicy = SelectionPolicy.FIRST_SEEN,
) -> ProvenanceRecord:
    """Reconstruct the provenance trail of one item against the configured ledger."""

    effective_config = config or get_ledger_config()
    async with AsyncExitStack() as stack:
        effective_connection = connection
        if effective_connection is None:
            effective_connection = await stack.enter_async_context(
                JsonRpcLedger(effective_config)
            )
        log.info(
            "Tracing item %r via %s (contract=%s, policy=%s)",
            item_code,
            effective_config.rpc_url,
            effective_config.contract_address,
            policy,
        )
        reconstructor = build_reconstructor(
            connection=effective_connection,
            contract_address=effective_config.contract_address,
            policy=policy,
        )
        return await reconstructor.reconstruct(item_code)


def trace_item(
    item_code: str,
    *,
    config: LedgerConfig | None = None,
    connection: LedgerConnection | None = None,
    policy: SelectionPolicy = SelectionPolicy.FIRST_SEEN,
) -> ProvenanceRecord:
    """Synchronous wrapper around :func:`trace_item_async`."""

    return asyncio.run(
        trace_item_async(item_code, config=config, connection=connection, policy=policy)
    )
