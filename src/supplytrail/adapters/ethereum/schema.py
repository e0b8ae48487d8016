"""Pydantic models describing Ethereum JSON-RPC ``eth_getLogs`` payloads."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _parse_quantity(value: object) -> object:
    if isinstance(value, str) and value.lower().startswith("0x"):
        return int(value, 16)
    return value


def to_quantity(value: int) -> str:
    return hex(value)


class EthBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class LogFilter(EthBaseModel):
    address: str
    topics: list[str | None]
    from_block: str = Field(alias="fromBlock")
    to_block: str = Field(default="latest", alias="toBlock")


class JsonRpcRequest(EthBaseModel):
    jsonrpc: Literal["2.0"] = "2.0"
    id: int
    method: str
    params: list[LogFilter]


class LogPayload(EthBaseModel):
    address: str
    topics: list[str]
    data: str
    block_number: int = Field(alias="blockNumber")
    transaction_hash: str = Field(alias="transactionHash")
    log_index: int = Field(alias="logIndex")
    removed: bool = False

    @field_validator("block_number", "log_index", mode="before")
    @classmethod
    def _parse_quantities(cls, value: object) -> object:
        return _parse_quantity(value)


class RpcError(EthBaseModel):
    code: int
    message: str
    data: object | None = None


class LogsResponse(EthBaseModel):
    jsonrpc: Literal["2.0"]
    id: int | str | None = None
    result: list[LogPayload] | None = None
    error: RpcError | None = None
