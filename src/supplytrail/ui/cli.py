# ruff: noqa: T201

from __future__ import annotations

import argparse
import json
import logging
import sys
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from supplytrail.adapters.ethereum import STAGE_TOPICS, event_signature
from supplytrail.app import trace_item
from supplytrail.config import (
    ConfigurationError,
    LedgerConfig,
    configure_logging,
    get_ledger_config,
)
from supplytrail.domain.model import InvalidItemCodeError, SelectionPolicy, Stage, StageStatus

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from supplytrail.domain.model import ProvenanceRecord

log = logging.getLogger(__name__)

_STATUS_LABELS: dict[StageStatus, str] = {
    StageStatus.NOT_ATTEMPTED: "-",
    StageStatus.FOUND: "found",
    StageStatus.NOT_FOUND: "not reached",
    StageStatus.QUERY_UNAVAILABLE: "unavailable",
}


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Reconstruct supply-chain provenance trails")
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log per-stage lookups at DEBUG level",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    trace = subparsers.add_parser("trace", help="Show the ledger transaction of every stage")
    trace.add_argument("upc", type=str, help="Universal Product Code of the item")
    trace.add_argument(
        "--rpc-url",
        type=str,
        help="JSON-RPC endpoint of the ledger node (defaults to SUPPLYTRAIL_RPC_URL)",
    )
    trace.add_argument(
        "--contract",
        type=str,
        help="Supply-chain contract address (defaults to SUPPLYTRAIL_CONTRACT_ADDRESS)",
    )
    trace.add_argument(
        "--policy",
        type=SelectionPolicy,
        choices=list(SelectionPolicy),
        default=SelectionPolicy.FIRST_SEEN,
        help="Which event wins when several match one stage (default: %(default)s)",
    )
    trace.add_argument(
        "--format",
        choices=("table", "json"),
        default="table",
        help="Output format (default: %(default)s)",
    )

    subparsers.add_parser("stages", help="List lifecycle stages and their event topics")

    return parser.parse_args(list(argv))


def _render_table(record: ProvenanceRecord, config: LedgerConfig) -> str:
    if record.item_identity is None:
        lines = ["No item selected"]
    else:
        lines = [f"Item {record.item_code} (identity {record.item_identity})"]
    width = max(len(stage.event_name) for stage in Stage)
    for result in record.values():
        line = f"  {result.stage.event_name:<{width}}  {_STATUS_LABELS[result.status]:<11}"
        if result.transaction_id is not None:
            line += f"  {result.transaction_id}"
            link = config.explorer_link(result.transaction_id)
            if link is not None:
                line += f"  {link}"
            if result.match_count > 1:
                line += f"  ({result.match_count} matches)"
        elif result.error is not None:
            line += f"  {result.error}"
        lines.append(line)
    latest = record.latest_stage
    lines.append(f"Latest stage: {latest.event_name if latest is not None else 'none'}")
    if not record.is_complete:
        lines.append("Trail incomplete: some stages could not be queried")
    return "\n".join(lines)


def _render_json(record: ProvenanceRecord, config: LedgerConfig) -> str:
    return json.dumps(record.as_dict(explorer=config.explorer_link), indent=2)


def _print_stages() -> None:
    for stage in Stage:
        print(f"{stage.value}  {event_signature(stage):<20}  {STAGE_TOPICS[stage]}")


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    configure_logging()
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    if parsed_args.verbose:
        configure_logging(level=logging.DEBUG, force=True)

    if parsed_args.command == "stages":
        _print_stages()
        return

    try:
        config = get_ledger_config(
            rpc_url=parsed_args.rpc_url,
            contract_address=parsed_args.contract,
        )
    except ConfigurationError:
        log.exception("Invalid ledger configuration")
        sys.exit(2)

    try:
        record = trace_item(parsed_args.upc, config=config, policy=parsed_args.policy)
    except InvalidItemCodeError:
        log.exception("CLI validation error")
        sys.exit(2)
    except Exception:
        log.exception("Fatal error during trace")
        sys.exit(1)

    if parsed_args.format == "json":
        print(_render_json(record, config))
    else:
        print(_render_table(record, config))


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
