"""Sales posting.

A sale, its bill number, its customer-ledger debit and its stock-ledger
movement are written in one transaction; nothing is booked if any step
fails.
"""

from __future__ import annotations

import logging
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import transaction

from billing.gst import line_total
from billing.models import Sale, CreditNote, DebitNote
from billing.services.common import positive_amount, today
from ledger.models import CustomerLedgerEntry, StockLedgerEntry
from ledger.services.posting import (
    CUSTOMERS,
    STOCK,
    post_customer_entry,
    post_stock_entry,
    update_entry,
)
from logistics.models import OutwardEntry
from masters.services.numbering import claim_next_number, peek_next_number, sale_series_key
from masters.utils import loading_place

logger = logging.getLogger(__name__)


class AlreadyBilled(Exception):
    """Raised when an outward entry has already been converted into a sale."""


def next_bill_no(place: str | None, special: bool = False) -> str:
    """Preview the bill number the next sale at ``place`` would get."""
    return peek_next_number(
        sale_series_key(loading_place(place), special), Sale.objects.all(), "bill_serial_no"
    )


def _claim_bill_no(place: str, special: bool) -> str:
    return claim_next_number(
        sale_series_key(place, special), Sale.objects.all(), "bill_serial_no"
    )


def _apply_totals(sale: Sale) -> None:
    breakdown = line_total(sale.quantity, sale.rate, sale.gst_percentage)
    sale.taxable_amount = breakdown.taxable
    sale.gst_amount = breakdown.gst
    sale.total_amount = breakdown.total


def _description(sale: Sale) -> str:
    if sale.outward_entry_id:
        return f"Sale - {sale.bill_serial_no} ({sale.outward_entry.lorry_no})"
    return f"Sale - {sale.bill_serial_no}"


def _post(sale: Sale) -> None:
    post_customer_entry(
        sale.customer,
        CustomerLedgerEntry.SALE,
        sale.pk,
        sale.sale_date,
        debit=sale.total_amount,
        description=_description(sale),
    )
    post_stock_entry(
        sale.item,
        StockLedgerEntry.SALE,
        sale.pk,
        sale.sale_date,
        quantity_out=sale.quantity,
        mill=sale.loading_place,
        description=f"Sale - {sale.bill_serial_no}",
    )


def _create(*, customer, item, quantity, rate, place, sale_date, user,
            special=False, outward_entry=None, irn="") -> Sale:
    place = loading_place(place)
    sale = Sale(
        bill_serial_no=_claim_bill_no(place, special),
        customer=customer,
        item=item,
        outward_entry=outward_entry,
        quantity=quantity,
        rate=rate,
        gst_percentage=item.gst_percentage,
        sale_date=sale_date or today(),
        loading_place=place,
        irn=irn or "",
        created_by=user,
    )
    _apply_totals(sale)
    sale.save()
    _post(sale)
    logger.info(
        "Sale %s posted for customer %s: %s", sale.bill_serial_no, customer.code, sale.total_amount
    )
    return sale


@transaction.atomic
def create_sale_from_entry(entry_id, rate, user=None, sale_date=None, special: bool = False) -> Sale:
    """Bill a completed outward entry; the billed quantity is its net weight."""
    entry = OutwardEntry.objects.select_for_update().get(pk=entry_id)
    if not entry.is_completed or entry.net_weight is None:
        raise ValidationError("Load weight has not been recorded for this entry")
    if Sale.objects.filter(outward_entry=entry).exists():
        raise AlreadyBilled(f"Outward entry #{entry.serial_no} is already billed")
    return _create(
        customer=entry.customer,
        item=entry.item,
        quantity=entry.net_weight,
        rate=positive_amount(rate, "Rate"),
        place=entry.loading_place,
        sale_date=sale_date,
        user=user,
        special=special,
        outward_entry=entry,
    )


@transaction.atomic
def create_direct_sale(data: dict, user=None) -> Sale:
    """Sale without a weighment (counter sale, special ``D`` series bills)."""
    return _create(
        customer=data["customer"],
        item=data["item"],
        quantity=positive_amount(data.get("quantity"), "Quantity"),
        rate=positive_amount(data.get("rate"), "Rate"),
        place=data.get("loading_place"),
        sale_date=data.get("sale_date"),
        user=user,
        special=bool(data.get("special")),
        irn=data.get("irn", ""),
    )


def _resync_postings(sale: Sale) -> None:
    update_entry(
        CUSTOMERS,
        CustomerLedgerEntry.SALE,
        sale.pk,
        debit_amount=sale.total_amount,
        transaction_date=sale.sale_date,
        description=_description(sale),
    )
    update_entry(
        STOCK,
        StockLedgerEntry.SALE,
        sale.pk,
        quantity_out=sale.quantity,
        transaction_date=sale.sale_date,
    )


def _rename_bill(sale: Sale, new_no: str) -> None:
    new_no = (new_no or "").strip()
    if not new_no:
        raise ValidationError("Bill number cannot be empty")
    if new_no == sale.bill_serial_no:
        return
    if Sale.objects.filter(bill_serial_no=new_no).exclude(pk=sale.pk).exists():
        raise ValidationError(f"Bill number {new_no} is already used")
    # Notes follow the bill they adjust
    for model in (CreditNote, DebitNote):
        model.objects.filter(reference_bill_no=sale.bill_serial_no).update(reference_bill_no=new_no)
    sale.bill_serial_no = new_no


@transaction.atomic
def edit_sale(sale_id, data: dict, user=None) -> Sale:
    """Edit a posted sale together with its weighment and ledger rows.

    Accepts ``rate``, ``quantity``, ``sale_date``, ``bill_serial_no``,
    ``irn`` and, for sales made from an outward entry, ``empty_weight`` /
    ``load_weight``. The sale, the entry and the ledger rows change together.
    """
    sale = Sale.objects.select_for_update().get(pk=sale_id)

    if "bill_serial_no" in data:
        _rename_bill(sale, data["bill_serial_no"])
    if data.get("irn") is not None:
        sale.irn = data["irn"].strip()
    if data.get("sale_date"):
        sale.sale_date = data["sale_date"]
    if data.get("rate") is not None:
        sale.rate = positive_amount(data["rate"], "Rate")

    weights = {k: data[k] for k in ("empty_weight", "load_weight") if data.get(k) is not None}
    if sale.outward_entry_id and weights:
        entry = OutwardEntry.objects.select_for_update().get(pk=sale.outward_entry_id)
        empty = positive_amount(weights.get("empty_weight", entry.empty_weight), "Empty weight")
        load = positive_amount(weights.get("load_weight", entry.load_weight), "Load weight")
        if load <= empty:
            raise ValidationError("Load weight must be greater than empty weight")
        entry.empty_weight, entry.load_weight = empty, load
        entry.save()
        sale.outward_entry = entry
        sale.quantity = entry.net_weight
    elif data.get("quantity") is not None:
        if sale.outward_entry_id:
            raise ValidationError("Quantity of a weighed sale follows the entry's net weight")
        sale.quantity = positive_amount(data["quantity"], "Quantity")

    _apply_totals(sale)
    sale.save()
    _resync_postings(sale)
    logger.info("Sale %s edited by %s", sale.bill_serial_no, getattr(user, "username", None))
    return sale


def resync_sale_with_entry(entry: OutwardEntry) -> Sale | None:
    """Re-derive the billed quantity after an outward entry's weights change."""
    sale = Sale.objects.select_for_update().filter(outward_entry=entry).first()
    if sale is None:
        return None
    sale.outward_entry = entry
    sale.quantity = entry.net_weight or Decimal("0")
    _apply_totals(sale)
    sale.save()
    _resync_postings(sale)
    return sale
