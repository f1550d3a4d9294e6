"""Outward entries: empty weighment on arrival, load weighment before dispatch."""

from __future__ import annotations

import logging
from decimal import Decimal, InvalidOperation

from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils import timezone

from logistics.models import OutwardEntry
from masters.services.numbering import claim_next_serial
from masters.utils import loading_place

logger = logging.getLogger(__name__)


class AlreadyCompleted(Exception):
    """Raised when the load weight of an entry has already been recorded."""


def _weight(value, label: str) -> Decimal:
    try:
        weight = Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError(f"{label} must be a number") from None
    if weight <= 0:
        raise ValidationError(f"{label} must be greater than zero")
    return weight


@transaction.atomic
def record_outward_entry(data: dict, user=None) -> OutwardEntry:
    """Register a lorry with its empty weight; the serial number is claimed here."""
    lorry_no = (data.get("lorry_no") or "").strip()
    if not lorry_no:
        raise ValidationError("Lorry number is required")
    entry = OutwardEntry.objects.create(
        serial_no=claim_next_serial("outward_entry", OutwardEntry.objects.all(), "serial_no"),
        entry_date=data.get("entry_date") or timezone.localdate(),
        customer=data["customer"],
        item=data["item"],
        loading_place=loading_place(data.get("loading_place")),
        lorry_no=lorry_no,
        driver_mobile=(data.get("driver_mobile") or "").strip(),
        empty_weight=_weight(data.get("empty_weight"), "Empty weight"),
        weighment_photo_url=data.get("weighment_photo_url") or "",
        remarks=(data.get("remarks") or "").strip(),
        created_by=user,
    )
    logger.info("Outward entry #%s created for lorry %s", entry.serial_no, entry.lorry_no)
    return entry


@transaction.atomic
def record_load_weight(entry_id, load_weight, user=None, photo_url: str = "", remarks: str = "") -> OutwardEntry:
    """Complete an entry with its loaded weight; ``net = load - empty``."""
    entry = OutwardEntry.objects.select_for_update().get(pk=entry_id)
    if entry.is_completed:
        raise AlreadyCompleted(f"Load weight already recorded for entry #{entry.serial_no}")
    load = _weight(load_weight, "Load weight")
    if load <= entry.empty_weight:
        raise ValidationError("Load weight must be greater than empty weight")

    entry.load_weight = load
    entry.is_completed = True
    entry.load_weight_updated_at = timezone.now()
    entry.load_weight_updated_by = user
    if photo_url:
        entry.load_weight_photo_url = photo_url
    if remarks:
        entry.remarks = remarks.strip()
    entry.save()
    logger.info(
        "Load weight %s recorded for entry #%s (net %s)", load, entry.serial_no, entry.net_weight
    )
    return entry


EDITABLE_FIELDS = ("entry_date", "lorry_no", "driver_mobile", "remarks", "loading_place")


@transaction.atomic
def edit_outward_entry(entry_id, data: dict, user=None) -> OutwardEntry:
    """Correct an entry; a sale made from it follows the new net weight and lorry."""
    from billing.services.sales import resync_sale_with_entry

    entry = OutwardEntry.objects.select_for_update().get(pk=entry_id)
    old_lorry = entry.lorry_no
    for name in EDITABLE_FIELDS:
        if data.get(name) is not None:
            value = data[name]
            if name == "loading_place":
                value = loading_place(value)
            setattr(entry, name, value)

    weights_changed = False
    if data.get("empty_weight") is not None:
        entry.empty_weight = _weight(data["empty_weight"], "Empty weight")
        weights_changed = True
    if data.get("load_weight") is not None:
        entry.load_weight = _weight(data["load_weight"], "Load weight")
        entry.is_completed = True
        entry.load_weight_updated_at = timezone.now()
        entry.load_weight_updated_by = user
        weights_changed = True
    if entry.load_weight is not None and entry.load_weight <= entry.empty_weight:
        raise ValidationError("Load weight must be greater than empty weight")
    entry.save()

    if entry.is_completed and (weights_changed or entry.lorry_no != old_lorry):
        sale = resync_sale_with_entry(entry)
        if sale is not None:
            logger.info("Sale %s resynced after editing entry #%s", sale.bill_serial_no, entry.serial_no)
    return entry
