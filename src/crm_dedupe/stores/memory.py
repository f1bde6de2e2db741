from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import replace

from crm_dedupe.errors import StoreError
from crm_dedupe.models import BookingRecord, CustomerRecord
from crm_dedupe.schema import UPDATABLE_COLUMNS

# Column name -> CustomerRecord attribute where they differ.
_ATTRIBUTE_FOR_COLUMN = {"id": "customer_id"}


class InMemoryCustomerStore:
    """Dict-backed store for local development and tests; insertion order is natural order."""

    def __init__(
        self,
        customers: Sequence[CustomerRecord] = (),
        bookings: Sequence[BookingRecord] = (),
    ) -> None:
        self._customers: dict[str, CustomerRecord] = {}
        self._bookings: dict[str, BookingRecord] = {}
        for customer in customers:
            self.add_customer(customer)
        for booking in bookings:
            self.add_booking(booking)

    def add_customer(self, customer: CustomerRecord) -> None:
        if customer.customer_id in self._customers:
            raise StoreError(f"customer {customer.customer_id} already exists")
        self._customers[customer.customer_id] = replace(customer)

    def add_booking(self, booking: BookingRecord) -> None:
        if booking.booking_id in self._bookings:
            raise StoreError(f"booking {booking.booking_id} already exists")
        self._bookings[booking.booking_id] = replace(booking)

    def get_customer(self, customer_id: str) -> CustomerRecord | None:
        customer = self._customers.get(customer_id)
        return replace(customer) if customer else None

    def bookings_for(self, customer_id: str) -> list[BookingRecord]:
        return [replace(b) for b in self._bookings.values() if b.customer_id == customer_id]

    def list_customers(self, scope: str | None = None) -> list[CustomerRecord]:
        return [
            replace(customer)
            for customer in self._customers.values()
            if scope is None or customer.organization_id == scope
        ]

    def count_customers(self, scope: str | None = None) -> int:
        return sum(1 for c in self._customers.values() if scope is None or c.organization_id == scope)

    def reassign_bookings(self, from_customer_id: str, to_customer_id: str) -> int:
        moved = 0
        for booking in self._bookings.values():
            if booking.customer_id == from_customer_id:
                booking.customer_id = to_customer_id
                moved += 1
        return moved

    def update_customer(self, customer_id: str, fields: Mapping[str, object]) -> None:
        customer = self._customers.get(customer_id)
        if customer is None:
            raise StoreError(f"customer {customer_id} not found")
        unknown = set(fields) - UPDATABLE_COLUMNS
        if unknown:
            raise StoreError(f"cannot update column(s): {', '.join(sorted(unknown))}")
        for column, value in fields.items():
            setattr(customer, _ATTRIBUTE_FOR_COLUMN.get(column, column), value)

    def booking_amounts(self, customer_id: str) -> list[float]:
        return [b.total_amount for b in self._bookings.values() if b.customer_id == customer_id]

    def delete_customers(self, customer_ids: Sequence[str]) -> int:
        removed = 0
        for customer_id in customer_ids:
            if self._customers.pop(customer_id, None) is not None:
                removed += 1
        return removed
