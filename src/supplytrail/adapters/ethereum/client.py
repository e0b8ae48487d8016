"""JSON-RPC ledger connection for Ethereum-compatible nodes."""

from __future__ import annotations

import itertools
from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from pydantic import ValidationError

from supplytrail.adapters.http_resilience import ResilientClient
from supplytrail.domain.ports.ledger import LedgerConnectionError, RawLogEntry

from .schema import JsonRpcRequest, LogFilter, LogsResponse, to_quantity

if TYPE_CHECKING:
    from collections.abc import Callable
    from types import TracebackType

    from supplytrail.config.http_resilience import ResilienceConfig
    from supplytrail.config.ledger import LedgerConfig
    from supplytrail.domain.ports.ledger import EventSelector

log = getLogger(__name__)

GET_LOGS_METHOD = "eth_getLogs"


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


class JsonRpcLedger:
    """Ledger connection answering ``eth_getLogs`` queries over HTTP.

    One HTTP client (and so one rate limiter) is shared by all concurrent queries.
    It is opened on first use and released by :meth:`aclose` or ``async with``.
    """

    def __init__(
        self,
        config: LedgerConfig,
        *,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
    ) -> None:
        self._config = config
        self._client_factory = client_factory or _default_client_factory
        self._client: ResilientClient | None = None
        self._request_ids = itertools.count(1)

    async def __aenter__(self) -> JsonRpcLedger:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._client is not None:
            client, self._client = self._client, None
            await client.aclose()

    async def query_events(self, selector: EventSelector, from_block: int) -> list[RawLogEntry]:
        request = JsonRpcRequest(
            id=next(self._request_ids),
            method=GET_LOGS_METHOD,
            params=[
                LogFilter(
                    address=selector.address,
                    topics=[selector.topic],
                    from_block=to_quantity(from_block),
                )
            ],
        )
        response = await self._perform_request(request)

        entries: list[RawLogEntry] = []
        for payload in response.result or []:
            if payload.removed:
                log.debug("Skipping removed log in tx %s", payload.transaction_hash)
                continue
            entries.append(
                RawLogEntry(
                    payload=payload.data,
                    transaction_id=payload.transaction_hash,
                    block_number=payload.block_number,
                    log_index=payload.log_index,
                )
            )
        log.debug("eth_getLogs topic=%s returned %d entries", selector.topic, len(entries))
        return entries

    def _get_client(self) -> ResilientClient:
        if self._client is None:
            self._client = self._client_factory(self._config.resilience)
        return self._client

    async def _perform_request(self, request: JsonRpcRequest) -> LogsResponse:
        client = self._get_client()
        try:
            response = await client.post(
                self._config.rpc_url,
                json=request.model_dump(by_alias=True),
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            raise LedgerConnectionError(f"Ledger RPC answered HTTP {status}") from exc
        except httpx.HTTPError as exc:
            raise LedgerConnectionError(f"Ledger RPC unreachable: {exc}") from exc
        except httpx.InvalidURL as exc:
            raise LedgerConnectionError(f"Invalid ledger RPC URL: {exc}") from exc

        try:
            payload = response.json()
        except ValueError as exc:
            raise LedgerConnectionError("Ledger RPC returned a non-JSON body") from exc

        try:
            parsed = LogsResponse.model_validate(payload)
        except ValidationError as exc:
            raise LedgerConnectionError("Unexpected ledger RPC response payload") from exc

        if parsed.error is not None:
            log.error("Ledger RPC error %s: %s", parsed.error.code, parsed.error.message)
            raise LedgerConnectionError(parsed.error.message, code=parsed.error.code)
        if parsed.result is None:
            raise LedgerConnectionError("Ledger RPC response carries neither result nor error")
        return parsed
