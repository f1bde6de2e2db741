from __future__ import annotations

import random
from datetime import datetime, timedelta, timezone

from crm_dedupe.models import BookingRecord, CustomerRecord

_FIRST_NAMES = [
    "Dominique",
    "Luke",
    "Alex",
    "Sofia",
    "Maya",
    "Daniel",
    "Emma",
    "Chris",
    "Olivia",
    "Noah",
]
_LAST_NAMES = [
    "Smith",
    "Johnson",
    "Brown",
    "Taylor",
    "Wilson",
    "Davies",
    "Martin",
    "Thomas",
]
_DOMAINS = ["gmail.com", "outlook.com", "yahoo.com", "example.com"]
_BOOKING_PRICES = [25.0, 35.0, 49.5, 60.0, 75.0, 120.0]
_EPOCH = datetime(2024, 1, 1, tzinfo=timezone.utc)


class ReferenceDatasetGenerator:
    """Generate synthetic customers and bookings (with intentional dupes) for tests and demos."""

    def __init__(self, seed: int = 7) -> None:
        self._rng = random.Random(seed)

    def generate(
        self,
        size: int,
        duplicate_rate: float = 0.15,
        organization_id: str | None = None,
        max_bookings: int = 3,
    ) -> tuple[list[CustomerRecord], list[BookingRecord]]:
        if size <= 0:
            return [], []

        customers: list[CustomerRecord] = []
        unique_count = int(size * (1.0 - duplicate_rate))
        unique_count = max(1, min(unique_count, size))

        for i in range(unique_count):
            customers.append(self._customer(i, organization_id))

        while len(customers) < size:
            source = self._rng.choice(customers[:unique_count])
            customers.append(self._duplicate_of(source, len(customers)))

        self._rng.shuffle(customers)

        bookings: list[BookingRecord] = []
        for customer in customers:
            amounts = [self._rng.choice(_BOOKING_PRICES) for _ in range(self._rng.randint(0, max_bookings))]
            for amount in amounts:
                bookings.append(
                    BookingRecord(
                        booking_id=f"bkg_{len(bookings):07d}",
                        customer_id=customer.customer_id,
                        total_amount=amount,
                        organization_id=organization_id,
                        created_at=customer.created_at,
                    )
                )
            customer.total_bookings = len(amounts)
            customer.total_spent = round(sum(amounts), 2)
        return customers, bookings

    def _customer(self, idx: int, organization_id: str | None) -> CustomerRecord:
        first_name = self._rng.choice(_FIRST_NAMES)
        last_name = self._rng.choice(_LAST_NAMES)
        email_local = f"{first_name}.{last_name}{idx % 97}".lower()
        phone = f"555{idx % 10000000:07d}" if self._rng.random() < 0.7 else None
        return CustomerRecord(
            customer_id=f"cust_{idx:07d}",
            email=f"{email_local}@{self._rng.choice(_DOMAINS)}",
            first_name=first_name,
            last_name=last_name,
            phone=phone,
            created_at=self._timestamp(idx),
            organization_id=organization_id,
        )

    def _duplicate_of(self, source: CustomerRecord, idx: int) -> CustomerRecord:
        duplicate = CustomerRecord(
            customer_id=f"cust_{idx:07d}",
            email=source.email,
            first_name=source.first_name,
            last_name=source.last_name,
            phone=source.phone,
            created_at=self._timestamp(idx),
            organization_id=source.organization_id,
        )
        mutation = self._rng.choice(["email", "phone", "name", "mixed"])

        if mutation in {"email", "mixed"}:
            duplicate.email = self._email_variant(duplicate.email)
        if mutation in {"phone", "mixed"} and duplicate.phone:
            duplicate.phone = self._phone_variant(duplicate.phone)
        if mutation in {"name", "mixed"}:
            duplicate.first_name, duplicate.last_name = self._name_variant(source.first_name, source.last_name)
        return duplicate

    def _timestamp(self, idx: int) -> str:
        offset = timedelta(days=idx % 365, minutes=self._rng.randint(0, 1439))
        return (_EPOCH + offset).isoformat()

    def _email_variant(self, email: str) -> str:
        local, domain = email.split("@", maxsplit=1)
        variant = self._rng.choice(["case", "space", "other"])
        if variant == "case":
            return f"{local.capitalize()}@{domain.upper()}"
        if variant == "space":
            return f" {email} "
        return f"{local}{self._rng.randint(100, 999)}@{domain}"

    def _phone_variant(self, phone: str) -> str:
        digits = "".join(ch for ch in phone if ch.isdigit())
        if len(digits) != 10:
            return phone
        return self._rng.choice(
            [
                f"({digits[:3]}) {digits[3:6]}-{digits[6:]}",
                f"{digits[:3]}-{digits[3:6]}-{digits[6:]}",
                f"{digits[:3]}.{digits[3:6]}.{digits[6:]}",
            ]
        )

    def _name_variant(self, first_name: str, last_name: str) -> tuple[str, str]:
        variant = self._rng.choice(["case", "typo", "initial"])
        if variant == "case":
            return first_name.upper(), last_name.lower()
        if variant == "typo" and len(last_name) > 4:
            drop = self._rng.randrange(1, len(last_name) - 1)
            return first_name, last_name[:drop] + last_name[drop + 1 :]
        return first_name[0], last_name
