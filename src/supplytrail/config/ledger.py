"""Ledger connection configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import optional_env_var, require_env_vars
from .errors import ConfigurationError
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy

RPC_URL_VAR = "SUPPLYTRAIL_RPC_URL"
CONTRACT_ADDRESS_VAR = "SUPPLYTRAIL_CONTRACT_ADDRESS"
EXPLORER_TX_URL_VAR = "SUPPLYTRAIL_EXPLORER_TX_URL"

LEDGER_TIMEOUT_SECONDS = 20.0
EXPLORER_PLACEHOLDER = "{tx}"


@dataclass(frozen=True, slots=True)
class LedgerConfig:
    """Holds the JSON-RPC endpoint and supply-chain contract settings."""

    rpc_url: str
    contract_address: str | None
    explorer_tx_url: str | None
    resilience: ResilienceConfig

    def explorer_link(self, transaction_id: str) -> str | None:
        if self.explorer_tx_url is None:
            return None
        return self.explorer_tx_url.replace(EXPLORER_PLACEHOLDER, transaction_id)


def default_ledger_resilience(rpc_url: str) -> ResilienceConfig:
    return ResilienceConfig(
        name="ledger",
        base_url=rpc_url,
        timeout_seconds=LEDGER_TIMEOUT_SECONDS,
        retry=RetryPolicy(total=3),
        ratelimit=RateLimit(max_calls=8, per_seconds=1.0),
        default_headers={"Content-Type": "application/json"},
    )


def build_ledger_config(
    *,
    rpc_url: str,
    contract_address: str | None = None,
    explorer_tx_url: str | None = None,
    resilience: ResilienceConfig | None = None,
) -> LedgerConfig:
    if explorer_tx_url is not None and EXPLORER_PLACEHOLDER not in explorer_tx_url:
        raise ConfigurationError(
            f"Explorer URL template must contain {EXPLORER_PLACEHOLDER}: {explorer_tx_url}"
        )
    return LedgerConfig(
        rpc_url=rpc_url,
        contract_address=contract_address,
        explorer_tx_url=explorer_tx_url,
        resilience=resilience or default_ledger_resilience(rpc_url),
    )


def get_ledger_config(
    *,
    rpc_url: str | None = None,
    contract_address: str | None = None,
    resilience: ResilienceConfig | None = None,
) -> LedgerConfig:
    """Load ledger configuration from the environment, with explicit overrides."""

    if rpc_url is None:
        rpc_url = require_env_vars((RPC_URL_VAR,))[RPC_URL_VAR]
    return build_ledger_config(
        rpc_url=rpc_url,
        contract_address=contract_address or optional_env_var(CONTRACT_ADDRESS_VAR),
        explorer_tx_url=optional_env_var(EXPLORER_TX_URL_VAR),
        resilience=resilience,
    )
