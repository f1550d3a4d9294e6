from __future__ import annotations

from decimal import Decimal, InvalidOperation

from django.core.exceptions import ValidationError
from django.utils import timezone

from billing.gst import money


def positive_amount(value, label: str = "Amount") -> Decimal:
    try:
        amount = money(value)
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError(f"{label} must be a number") from None
    if amount <= 0:
        raise ValidationError(f"{label} must be greater than zero")
    return amount


def today():
    return timezone.localdate()
