from __future__ import annotations

import datetime as _dt

from dateutil import parser as dateparser
from django.conf import settings
from django.core.exceptions import ValidationError


def parse_date_param(value) -> _dt.date | None:
    """Parse a date from a query parameter or spreadsheet cell.

    ISO dates (``2024-04-01``) are read as such; anything else is parsed
    day-first (``01/04/2024`` is 1 April). Empty input gives ``None``;
    unparseable input raises ``ValueError``.
    """
    if value is None:
        return None
    if isinstance(value, _dt.datetime):
        return value.date()
    if isinstance(value, _dt.date):
        return value
    txt = str(value).strip()
    if not txt:
        return None
    try:
        return _dt.date.fromisoformat(txt)
    except ValueError:
        pass
    try:
        return dateparser.parse(txt, dayfirst=True).date()
    except (ValueError, OverflowError) as exc:
        raise ValueError(f"Invalid date: {txt}") from exc


def loading_place(value) -> str:
    """Upper-cased configured loading place (mill); blank means the default."""
    place = (value or settings.DEFAULT_LOADING_PLACE).strip().upper()
    if place not in settings.LOADING_PLACES:
        raise ValidationError(f"Unknown loading place '{value}'")
    return place
