from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import asdict
from pathlib import Path
from typing import Any, Sequence

from crm_dedupe.config import load_settings
from crm_dedupe.datasets import ReferenceDatasetGenerator
from crm_dedupe.errors import DedupError
from crm_dedupe.models import DedupStats, DuplicateGroup, FieldOverrides, MergeRequest
from crm_dedupe.service import CustomerDedupService
from crm_dedupe.stores import SqliteCustomerStore

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"

logger = logging.getLogger(__name__)


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    try:
        settings = load_settings(args.config)
    except DedupError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2
    _configure_logging(args.log_level or settings.logging.level)

    db_path = args.db or settings.store.database_path
    store = SqliteCustomerStore(db_path)
    try:
        if args.command == "seed":
            return run_seed(
                store,
                size=args.size,
                duplicate_rate=args.duplicate_rate,
                seed=args.seed,
                organization_id=args.organization,
            )

        service = CustomerDedupService.from_settings(store, settings)
        if args.command == "scan":
            return run_scan(service, scope=args.organization, as_json=args.json)
        if args.command == "stats":
            return run_stats(service, scope=args.organization)
        if args.command == "merge":
            overrides = FieldOverrides(
                email=args.email,
                phone=args.phone,
                first_name=args.first_name,
                last_name=args.last_name,
            )
            return run_merge(service, primary=args.primary, duplicates=args.duplicate, overrides=overrides)
    except DedupError as exc:
        logger.error("%s failed: %s", args.command, exc)
        print(f"error: {exc}", file=sys.stderr)
        return 1
    finally:
        store.close()

    parser.print_help()
    return 0


def run_seed(
    store: SqliteCustomerStore,
    *,
    size: int,
    duplicate_rate: float,
    seed: int,
    organization_id: str | None,
) -> int:
    customers, bookings = ReferenceDatasetGenerator(seed=seed).generate(
        size=size,
        duplicate_rate=duplicate_rate,
        organization_id=organization_id,
    )
    for customer in customers:
        store.add_customer(customer)
    for booking in bookings:
        store.add_booking(booking)
    print(f"Database: {store.path}")
    print(f"customers={len(customers)}")
    print(f"bookings={len(bookings)}")
    return 0


def run_scan(service: CustomerDedupService, *, scope: str | None, as_json: bool) -> int:
    groups, stats = service.scan(scope)
    if as_json:
        print(json.dumps({"stats": _stats_payload(stats), "groups": [_group_payload(g) for g in groups]}, indent=2))
        return 0

    print(f"customers={stats.total_customers}")
    print(f"duplicate_groups={stats.duplicate_groups}")
    print(f"potential_duplicates={stats.potential_duplicates}")
    for group in groups:
        print("---")
        print(f"primary={group.primary_customer_id} matched_on={','.join(group.matched_on)}")
        for duplicate in group.duplicates:
            name = f"{duplicate.first_name} {duplicate.last_name}".strip()
            print(
                f"  {duplicate.customer_id} score={duplicate.match_score} "
                f"email={duplicate.email} name={name} reasons={'; '.join(duplicate.match_reasons)}"
            )
    return 0


def run_stats(service: CustomerDedupService, *, scope: str | None) -> int:
    print(json.dumps(_stats_payload(service.get_stats(scope)), indent=2))
    return 0


def run_merge(
    service: CustomerDedupService,
    *,
    primary: str,
    duplicates: list[str],
    overrides: FieldOverrides,
) -> int:
    try:
        request = MergeRequest(
            primary_customer_id=primary,
            duplicate_customer_ids=duplicates,
            overrides=overrides if overrides.as_update() else None,
        )
    except ValueError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2
    result = service.merge_customers(request)
    print(json.dumps(asdict(result), indent=2))
    return 0 if result.success else 1


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="crm-dedupe", description="Customer duplicate scan and merge CLI")
    parser.add_argument("--config", type=Path, default=None, help="Settings YAML (default: ./crm-dedupe.yaml)")
    parser.add_argument("--log-level", type=str, default=None)
    subparsers = parser.add_subparsers(dest="command")

    def _add_store_args(sub: argparse.ArgumentParser) -> None:
        sub.add_argument("--db", type=Path, default=None, help="SQLite database path")
        sub.add_argument("--organization", type=str, default=None, help="Limit to one organization id")

    scan_parser = subparsers.add_parser("scan", help="List probable duplicate customer groups")
    _add_store_args(scan_parser)
    scan_parser.add_argument("--json", action="store_true")

    stats_parser = subparsers.add_parser("stats", help="Print duplicate statistics for a scope")
    _add_store_args(stats_parser)

    merge_parser = subparsers.add_parser("merge", help="Merge duplicate customers into a primary record")
    _add_store_args(merge_parser)
    merge_parser.add_argument("--primary", type=str, required=True)
    merge_parser.add_argument("--duplicate", type=str, action="append", required=True)
    merge_parser.add_argument("--email", type=str, default=None)
    merge_parser.add_argument("--phone", type=str, default=None)
    merge_parser.add_argument("--first-name", type=str, default=None)
    merge_parser.add_argument("--last-name", type=str, default=None)

    seed_parser = subparsers.add_parser("seed", help="Write a synthetic dataset with intentional duplicates")
    _add_store_args(seed_parser)
    seed_parser.add_argument("--size", type=int, default=200)
    seed_parser.add_argument("--duplicate-rate", type=float, default=0.15)
    seed_parser.add_argument("--seed", type=int, default=42)

    return parser


def _configure_logging(level_name: str) -> None:
    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(getattr(logging, level_name.upper(), logging.INFO))
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root_logger.addHandler(handler)


def _group_payload(group: DuplicateGroup) -> dict[str, Any]:
    return {
        "primary_customer_id": group.primary_customer_id,
        "matched_on": [str(category) for category in group.matched_on],
        "duplicates": [asdict(duplicate) for duplicate in group.duplicates],
    }


def _stats_payload(stats: DedupStats) -> dict[str, Any]:
    payload = asdict(stats)
    payload["last_scan_at"] = stats.last_scan_at.isoformat()
    return payload


if __name__ == "__main__":
    sys.exit(main())
