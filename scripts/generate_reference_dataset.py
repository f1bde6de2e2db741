from __future__ import annotations

import argparse
from pathlib import Path

from crm_dedupe.datasets import ReferenceDatasetGenerator
from crm_dedupe.stores import SqliteCustomerStore


def main() -> None:
    parser = argparse.ArgumentParser(description="Generate a synthetic customer/booking database with duplicates")
    parser.add_argument("--size", type=int, default=2000)
    parser.add_argument("--seed", type=int, default=42)
    parser.add_argument("--duplicate-rate", type=float, default=0.15)
    parser.add_argument("--organization", type=str, default=None)
    parser.add_argument("--output", type=Path, default=Path("data/reference_customers.sqlite3"))
    args = parser.parse_args()

    customers, bookings = ReferenceDatasetGenerator(seed=args.seed).generate(
        size=args.size,
        duplicate_rate=args.duplicate_rate,
        organization_id=args.organization,
    )

    store = SqliteCustomerStore(args.output)
    try:
        for customer in customers:
            store.add_customer(customer)
        for booking in bookings:
            store.add_booking(booking)
    finally:
        store.close()


if __name__ == "__main__":
    main()
