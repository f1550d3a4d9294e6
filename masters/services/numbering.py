"""Sequential document numbers (bill serials, receipt and note numbers, codes).

Each series is configured in ``settings.DOCUMENT_SERIES`` and backed by a
``DocumentSeries`` counter row. A claim locks that row, scans the target
column for the highest existing number of the series and hands out the
next one, so the policy stays "max plus one" while concurrent claims are
serialised by the row lock.
"""

from __future__ import annotations

import logging
import re

from django.conf import settings
from django.db import transaction
from django.db.models import IntegerField, Max
from django.db.models.functions import Cast, Substr

from masters.models import DocumentSeries

logger = logging.getLogger(__name__)

INTEGER_FIELD_TYPES = {
    "IntegerField",
    "BigIntegerField",
    "SmallIntegerField",
    "PositiveIntegerField",
    "PositiveBigIntegerField",
    "PositiveSmallIntegerField",
}


class NumberingError(Exception):
    """Raised when a document number cannot be claimed."""


def series_config(key: str) -> tuple[str, int, int]:
    try:
        conf = settings.DOCUMENT_SERIES[key]
    except KeyError:
        raise NumberingError(f"Unknown document series '{key}'") from None
    try:
        prefix = str(conf.get("prefix", ""))
        width = int(conf.get("width", 0))
        floor = int(conf.get("floor", 1))
    except (TypeError, ValueError) as exc:
        raise NumberingError(f"Invalid configuration for series '{key}'") from exc
    if width < 0 or floor < 1:
        raise NumberingError(f"Invalid configuration for series '{key}'")
    return prefix, width, floor


def sale_series_key(loading_place: str | None, special: bool = False) -> str:
    if special:
        return "sale:SPECIAL"
    place = (loading_place or settings.DEFAULT_LOADING_PLACE).strip().upper()
    return f"sale:{place}"


def debit_note_series_key(mill: str | None) -> str:
    place = (mill or settings.DEFAULT_LOADING_PLACE).strip().upper()
    return f"debit_note:{place}"


def max_existing(queryset, field: str, prefix: str = "") -> int:
    """Highest numeric suffix stored in ``field`` for values of the series.

    Values that do not look like ``<prefix><digits>`` are ignored, so a
    plain numeric series does not pick up ``D001`` or ``GRM050``.
    """
    if queryset is None or not field:
        return 0
    model_field = queryset.model._meta.get_field(field)
    if model_field.get_internal_type() in INTEGER_FIELD_TYPES:
        return queryset.aggregate(m=Max(field))["m"] or 0

    pattern = r"^%s[0-9]+$" % re.escape(prefix)
    qs = (
        queryset.filter(**{f"{field}__regex": pattern})
        .annotate(series_num=Cast(Substr(field, len(prefix) + 1), IntegerField()))
    )
    return qs.aggregate(m=Max("series_num"))["m"] or 0


def _lock_series(key: str) -> DocumentSeries:
    prefix, width, floor = series_config(key)
    series, _ = DocumentSeries.objects.select_for_update().get_or_create(
        key=key, defaults={"prefix": prefix, "width": width, "floor": floor}
    )
    if series.prefix != prefix:
        # A new prefix starts a new sequence; the scan finds what exists.
        series.last_number = 0
    series.prefix, series.width, series.floor = prefix, width, floor
    return series


def _next_number(series: DocumentSeries, queryset, field) -> int:
    existing = max_existing(queryset, field, series.prefix)
    return max(max(existing, series.last_number) + 1, series.floor)


def _claim(key, queryset, field) -> tuple[DocumentSeries, int]:
    with transaction.atomic():
        series = _lock_series(key)
        number = _next_number(series, queryset, field)
        series.last_number = number
        series.save()
    return series, number


def claim_next_number(key: str, queryset=None, field: str | None = None) -> str:
    """Claim and return the next formatted number of series ``key``.

    When called inside an outer ``transaction.atomic`` block the counter
    row stays locked until that block commits, so the number and the row
    that uses it become visible together.
    """
    series, number = _claim(key, queryset, field)
    value = series.format(number)
    logger.info("Claimed %s from series %s", value, key)
    return value


def claim_next_serial(key: str, queryset=None, field: str | None = None) -> int:
    """Integer variant of :func:`claim_next_number` for numeric columns."""
    _, number = _claim(key, queryset, field)
    logger.info("Claimed serial %s from series %s", number, key)
    return number


def peek_next_number(key: str, queryset=None, field: str | None = None) -> str:
    """Preview the number the next claim would return, without claiming it."""
    prefix, width, floor = series_config(key)
    series = DocumentSeries.objects.filter(key=key).first()
    if series is None or series.prefix != prefix:
        series = DocumentSeries(key=key, prefix=prefix, width=width, floor=floor)
    else:
        series.width, series.floor = width, floor
    return series.format(_next_number(series, queryset, field))
