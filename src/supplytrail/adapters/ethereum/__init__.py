"""Public interface for the Ethereum JSON-RPC ledger adapter."""

from __future__ import annotations

from .abi import STAGE_TOPICS, SupplyChainContract, event_signature, event_topic
from .client import JsonRpcLedger
from .schema import LogPayload, LogsResponse, RpcError

__all__ = [
    "STAGE_TOPICS",
    "JsonRpcLedger",
    "LogPayload",
    "LogsResponse",
    "RpcError",
    "SupplyChainContract",
    "event_signature",
    "event_topic",
]
