from __future__ import annotations

import sqlite3
from collections.abc import Mapping, Sequence
from pathlib import Path

from crm_dedupe.errors import StoreError
from crm_dedupe.models import BookingRecord, CustomerRecord
from crm_dedupe.schema import BOOKING_COLUMNS, CUSTOMER_COLUMNS, UPDATABLE_COLUMNS


class SqliteCustomerStore:
    """SQLite-backed customer and booking tables.

    Every write commits immediately; a merge spanning several calls is not
    atomic. ``rowid`` order is the natural listing order.
    """

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        if str(self.path) != ":memory:":
            self.path.parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(str(self.path))
        self._conn.row_factory = sqlite3.Row
        self._conn.execute(
            """
            CREATE TABLE IF NOT EXISTS customers (
                id TEXT PRIMARY KEY,
                organization_id TEXT,
                email TEXT NOT NULL DEFAULT '',
                first_name TEXT NOT NULL DEFAULT '',
                last_name TEXT NOT NULL DEFAULT '',
                phone TEXT,
                total_bookings INTEGER NOT NULL DEFAULT 0,
                total_spent REAL NOT NULL DEFAULT 0,
                created_at TEXT
            )
            """
        )
        self._conn.execute(
            """
            CREATE TABLE IF NOT EXISTS bookings (
                id TEXT PRIMARY KEY,
                customer_id TEXT NOT NULL,
                organization_id TEXT,
                total_amount REAL NOT NULL DEFAULT 0,
                created_at TEXT
            )
            """
        )
        self._conn.execute("CREATE INDEX IF NOT EXISTS bookings_customer ON bookings(customer_id)")
        self._conn.commit()

    def close(self) -> None:
        self._conn.close()

    def add_customer(self, customer: CustomerRecord) -> None:
        values = (
            customer.customer_id,
            customer.organization_id,
            customer.email or "",
            customer.first_name or "",
            customer.last_name or "",
            customer.phone,
            customer.total_bookings,
            customer.total_spent,
            customer.created_at,
        )
        self._write(
            f"INSERT INTO customers ({', '.join(CUSTOMER_COLUMNS)}) VALUES ({_placeholders(CUSTOMER_COLUMNS)})",
            values,
        )

    def add_booking(self, booking: BookingRecord) -> None:
        values = (
            booking.booking_id,
            booking.customer_id,
            booking.organization_id,
            booking.total_amount,
            booking.created_at,
        )
        self._write(
            f"INSERT INTO bookings ({', '.join(BOOKING_COLUMNS)}) VALUES ({_placeholders(BOOKING_COLUMNS)})",
            values,
        )

    def get_customer(self, customer_id: str) -> CustomerRecord | None:
        rows = self._read(f"SELECT {', '.join(CUSTOMER_COLUMNS)} FROM customers WHERE id = ?", (customer_id,))
        return _customer_from_row(rows[0]) if rows else None

    def bookings_for(self, customer_id: str) -> list[BookingRecord]:
        rows = self._read(
            f"SELECT {', '.join(BOOKING_COLUMNS)} FROM bookings WHERE customer_id = ? ORDER BY rowid",
            (customer_id,),
        )
        return [
            BookingRecord(
                booking_id=row["id"],
                customer_id=row["customer_id"],
                total_amount=row["total_amount"],
                organization_id=row["organization_id"],
                created_at=row["created_at"],
            )
            for row in rows
        ]

    def list_customers(self, scope: str | None = None) -> list[CustomerRecord]:
        query = f"SELECT {', '.join(CUSTOMER_COLUMNS)} FROM customers"
        params: tuple[object, ...] = ()
        if scope is not None:
            query += " WHERE organization_id = ?"
            params = (scope,)
        rows = self._read(query + " ORDER BY rowid", params)
        return [_customer_from_row(row) for row in rows]

    def count_customers(self, scope: str | None = None) -> int:
        if scope is None:
            rows = self._read("SELECT COUNT(*) FROM customers")
        else:
            rows = self._read("SELECT COUNT(*) FROM customers WHERE organization_id = ?", (scope,))
        return int(rows[0][0])

    def reassign_bookings(self, from_customer_id: str, to_customer_id: str) -> int:
        return self._write(
            "UPDATE bookings SET customer_id = ? WHERE customer_id = ?",
            (to_customer_id, from_customer_id),
        )

    def update_customer(self, customer_id: str, fields: Mapping[str, object]) -> None:
        if not fields:
            return
        unknown = set(fields) - UPDATABLE_COLUMNS
        if unknown:
            raise StoreError(f"cannot update column(s): {', '.join(sorted(unknown))}")
        columns = list(fields)
        assignments = ", ".join(f"{column} = ?" for column in columns)
        updated = self._write(
            f"UPDATE customers SET {assignments} WHERE id = ?",
            (*(fields[column] for column in columns), customer_id),
        )
        if updated == 0:
            raise StoreError(f"customer {customer_id} not found")

    def booking_amounts(self, customer_id: str) -> list[float]:
        rows = self._read("SELECT total_amount FROM bookings WHERE customer_id = ?", (customer_id,))
        return [float(row[0] or 0.0) for row in rows]

    def delete_customers(self, customer_ids: Sequence[str]) -> int:
        ids = list(customer_ids)
        if not ids:
            return 0
        return self._write(f"DELETE FROM customers WHERE id IN ({_placeholders(ids)})", tuple(ids))

    def _read(self, query: str, params: tuple[object, ...] = ()) -> list[sqlite3.Row]:
        try:
            return self._conn.execute(query, params).fetchall()
        except sqlite3.Error as exc:
            raise StoreError(str(exc)) from exc

    def _write(self, query: str, params: tuple[object, ...]) -> int:
        try:
            with self._conn:
                cursor = self._conn.execute(query, params)
        except sqlite3.Error as exc:
            raise StoreError(str(exc)) from exc
        return cursor.rowcount


def _placeholders(values: Sequence[object]) -> str:
    return ", ".join("?" for _ in values)


def _customer_from_row(row: sqlite3.Row) -> CustomerRecord:
    return CustomerRecord(
        customer_id=row["id"],
        organization_id=row["organization_id"],
        email=row["email"] or "",
        first_name=row["first_name"] or "",
        last_name=row["last_name"] or "",
        phone=row["phone"],
        total_bookings=row["total_bookings"] or 0,
        total_spent=row["total_spent"] or 0.0,
        created_at=row["created_at"],
    )
