#!/usr/bin/env python3
"""
Operator CLI for the LP kernel.

Usage:
    python3 scripts/lp_cli.py init-db
    python3 scripts/lp_cli.py history <subject-id> [--start-date ISO] [--end-date ISO]
                                                   [--interval daily|weekly|monthly]
    python3 scripts/lp_cli.py events [--kind mint|burn] [--subject-id ID]
                                     [--from-date ISO] [--to-date ISO]
                                     [--page N] [--limit N]
    python3 scripts/lp_cli.py tokens <subject-id>
    python3 scripts/lp_cli.py mint <subject-id> --pool-id N --amount DECIMAL [--reference REF]
    python3 scripts/lp_cli.py burn <subject-id> --token-id ID --amount DECIMAL

Examples:
    # Weekly balance history for Q1, as JSON
    python3 scripts/lp_cli.py history user-42 \\
        --start-date 2025-01-01T00:00:00Z --end-date 2025-03-31T23:59:59Z --interval weekly

    # Use a different database than the configured one
    python3 scripts/lp_cli.py --db-url sqlite:///lp.db tokens user-42

Every command prints a JSON document on stdout.  Kernel errors print
``{"error": CODE, "message": ...}`` on stderr and exit with status 2.
"""

import argparse
import json
import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from lp_config import get_active_config  # noqa: E402
from lp_kernel.db.engine import (  # noqa: E402
    create_tables,
    init_engine_from_url,
    session_scope,
)
from lp_kernel.db.types import format_amount  # noqa: E402
from lp_kernel.domain.dtos import HoldingDTO  # noqa: E402
from lp_kernel.domain.intervals import format_instant  # noqa: E402
from lp_kernel.domain.query import BalanceHistoryQuery, parse_instant  # noqa: E402
from lp_kernel.exceptions import LpKernelError  # noqa: E402
from lp_kernel.logging_config import configure_logging, get_logger  # noqa: E402
from lp_kernel.selectors.holdings_selector import HoldingsSelector  # noqa: E402
from lp_kernel.selectors.ledger_event_selector import LedgerEventSelector  # noqa: E402
from lp_kernel.services.balance_history_service import BalanceHistoryService  # noqa: E402
from lp_kernel.services.lp_token_service import LpTokenService  # noqa: E402

logger = get_logger("cli")


# =============================================================================
# Formatting helpers
# =============================================================================


def _emit(document) -> None:
    print(json.dumps(document, indent=2))


def _holding_dict(holding: HoldingDTO) -> dict:
    return {
        "tokenId": holding.token_id,
        "subjectId": holding.subject_id,
        "poolId": holding.pool_id,
        "amount": format_amount(holding.amount),
        "mintedAt": format_instant(holding.minted_at) if holding.minted_at else None,
    }


# =============================================================================
# Commands
# =============================================================================


def cmd_init_db(args, config) -> dict:
    create_tables()
    return {"status": "ok", "configId": config.config_id}


def cmd_history(args, config) -> dict:
    query = BalanceHistoryQuery.parse(
        start_date=args.start_date,
        end_date=args.end_date,
        interval=args.interval or config.history.default_granularity.value,
    )
    with session_scope() as session:
        service = BalanceHistoryService.from_session(session)
        return service.get_balance_history_for_query(args.subject_id, query).to_dict()


def cmd_events(args, config) -> dict:
    from_date = parse_instant(args.from_date, field_name="fromDate") if args.from_date else None
    to_date = parse_instant(args.to_date, field_name="toDate") if args.to_date else None
    with session_scope() as session:
        page = LedgerEventSelector(session).query_events(
            kind=args.kind,
            subject_id=args.subject_id,
            from_date=from_date,
            to_date=to_date,
            page=args.page,
            limit=args.limit,
        )
        return page.to_dict()


def cmd_tokens(args, config) -> dict:
    with session_scope() as session:
        selector = HoldingsSelector(session)
        holdings = selector.find_by_subject(args.subject_id)
        return {
            "subjectId": args.subject_id,
            "tokens": [_holding_dict(h) for h in holdings],
            "currentBalance": format_amount(selector.current_balance(args.subject_id)),
        }


def cmd_mint(args, config) -> dict:
    with session_scope() as session:
        result = LpTokenService(session).mint(
            args.subject_id, args.pool_id, args.amount, reference=args.reference
        )
    return {"token": _holding_dict(result.holding), "eventReference": result.event.reference}


def cmd_burn(args, config) -> dict:
    with session_scope() as session:
        result = LpTokenService(session).burn(args.subject_id, args.token_id, args.amount)
    return {
        "tokenId": result.token_id,
        "burned": format_amount(result.burned),
        "remaining": format_amount(result.remaining),
        "fullyBurned": result.fully_burned,
    }


# =============================================================================
# Main
# =============================================================================


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Query and operate the LP token ledger.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--config", type=str, default=None, help="YAML configuration file")
    parser.add_argument("--db-url", type=str, default=None, help="Override database URL")

    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("init-db", help="Create the kernel tables")
    p.set_defaults(handler=cmd_init_db)

    p = sub.add_parser("history", help="Balance history for a subject")
    p.add_argument("subject_id")
    p.add_argument("--start-date", type=str, default=None, help="ISO-8601 instant")
    p.add_argument("--end-date", type=str, default=None, help="ISO-8601 instant")
    p.add_argument("--interval", type=str, default=None, help="daily | weekly | monthly")
    p.set_defaults(handler=cmd_history)

    p = sub.add_parser("events", help="Paginated ledger events, newest first")
    p.add_argument("--kind", choices=["mint", "burn"], default=None)
    p.add_argument("--subject-id", type=str, default=None)
    p.add_argument("--from-date", type=str, default=None)
    p.add_argument("--to-date", type=str, default=None)
    p.add_argument("--page", type=int, default=1)
    p.add_argument("--limit", type=int, default=20)
    p.set_defaults(handler=cmd_events)

    p = sub.add_parser("tokens", help="Current holdings for a subject")
    p.add_argument("subject_id")
    p.set_defaults(handler=cmd_tokens)

    p = sub.add_parser("mint", help="Mint LP tokens")
    p.add_argument("subject_id")
    p.add_argument("--pool-id", type=int, required=True)
    p.add_argument("--amount", type=str, required=True)
    p.add_argument("--reference", type=str, default=None)
    p.set_defaults(handler=cmd_mint)

    p = sub.add_parser("burn", help="Burn LP tokens")
    p.add_argument("subject_id")
    p.add_argument("--token-id", type=str, required=True)
    p.add_argument("--amount", type=str, required=True)
    p.set_defaults(handler=cmd_burn)

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    environ = {"LP_KERNEL_DATABASE_URL": args.db_url} if args.db_url else None
    try:
        config = get_active_config(args.config, environ=environ)
    except (FileNotFoundError, KeyError, ValueError) as exc:
        print(f"  ERROR: Invalid configuration: {exc}", file=sys.stderr)
        return 1

    configure_logging(level=getattr(logging, config.logging.level))

    try:
        init_engine_from_url(
            config.database.url,
            echo=config.database.echo,
            pool_size=config.database.pool_size,
            max_overflow=config.database.max_overflow,
            pool_timeout=config.database.pool_timeout,
            pool_recycle=config.database.pool_recycle,
        )
    except Exception as exc:
        print(f"  ERROR: Cannot connect to database: {exc}", file=sys.stderr)
        return 1

    try:
        document = args.handler(args, config)
    except LpKernelError as exc:
        logger.warning("cli_command_failed", extra={"command": args.command}, exc_info=True)
        print(json.dumps({"error": exc.code, "message": str(exc)}), file=sys.stderr)
        return 2

    _emit(document)
    return 0


if __name__ == "__main__":
    sys.exit(main())
