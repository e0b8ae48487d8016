from __future__ import annotations

from dataclasses import replace

import pytest

from supplytrail.adapters.ethereum import SupplyChainContract
from supplytrail.config import LedgerConfig, build_ledger_config
from supplytrail.config.http_resilience import RetryPolicy
from supplytrail.domain import ProvenanceReconstructor, StageEventQuery
from tests.support.ledger import CONTRACT_ADDRESS, FakeLedger

RPC_URL = "http://ledger.test:8545"


@pytest.fixture
def ledger() -> FakeLedger:
    return FakeLedger()


@pytest.fixture
def stage_events(ledger: FakeLedger) -> StageEventQuery:
    return StageEventQuery(
        connection=ledger,
        selectors=SupplyChainContract(address=CONTRACT_ADDRESS),
    )


@pytest.fixture
def reconstructor(stage_events: StageEventQuery) -> ProvenanceReconstructor:
    return ProvenanceReconstructor(events=stage_events)


@pytest.fixture
def ledger_config() -> LedgerConfig:
    base = build_ledger_config(rpc_url=RPC_URL)
    # no backoff sleeps or rate limiting in tests
    resilience = replace(base.resilience, retry=RetryPolicy(total=0), ratelimit=None)
    return build_ledger_config(
        rpc_url=RPC_URL,
        contract_address=CONTRACT_ADDRESS,
        explorer_tx_url="https://explorer.test/tx/{tx}",
        resilience=resilience,
    )
