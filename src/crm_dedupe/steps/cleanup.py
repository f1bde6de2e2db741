from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass

from crm_dedupe.models import CustomerRecord

_NON_DIGITS = re.compile(r"\D")


@dataclass(frozen=True, slots=True)
class NormalizedCustomer:
    """Comparable view of a customer: lowercased email, bare phone digits, full name."""

    customer_id: str
    email: str
    phone_digits: str
    full_name: str


def _text(value: object) -> str:
    return "" if value is None else str(value)


def normalize_email(value: object) -> str:
    return _text(value).strip().lower()


def normalize_phone(value: object) -> str:
    return _NON_DIGITS.sub("", _text(value))


def normalize_name(first_name: object, last_name: object) -> str:
    return f"{_text(first_name)} {_text(last_name)}".strip().lower()


class RecordNormalizer:
    """Composable normalizer; extra per-field transforms run after the defaults."""

    def __init__(self, field_transforms: dict[str, Callable[[str], str]] | None = None) -> None:
        self._field_transforms = field_transforms or {}

    def normalize(self, record: CustomerRecord) -> NormalizedCustomer:
        values = {
            "email": normalize_email(record.email),
            "phone_digits": normalize_phone(record.phone),
            "full_name": normalize_name(record.first_name, record.last_name),
        }
        for field, transform in self._field_transforms.items():
            if field in values:
                values[field] = transform(values[field])
        return NormalizedCustomer(customer_id=record.customer_id, **values)
