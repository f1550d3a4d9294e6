"""Credit and debit notes.

Both carry a GST inclusive amount. A credit note lowers what the customer
owes, a debit note raises it; debit notes are numbered per mill.
"""

from __future__ import annotations

import logging
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import transaction

from billing.models import CreditNote, DebitNote
from billing.services.common import positive_amount, today
from ledger.models import CustomerLedgerEntry
from ledger.services.posting import post_customer_entry
from masters.services.numbering import claim_next_number, debit_note_series_key
from masters.utils import loading_place

logger = logging.getLogger(__name__)


def _gst_rate(data: dict) -> Decimal:
    raw = data.get("gst_percentage")
    if raw in (None, ""):
        item = data.get("item")
        return item.gst_percentage if item is not None else Decimal("18.00")
    rate = Decimal(str(raw))
    if rate < 0 or rate > 100:
        raise ValidationError("GST percentage must be between 0 and 100")
    return rate


def _reason(data: dict) -> str:
    reason = (data.get("reason") or "").strip()
    if not reason:
        raise ValidationError("Reason is required")
    return reason


def _note_fields(data: dict, user) -> dict:
    return dict(
        customer=data["customer"],
        item=data.get("item"),
        amount=positive_amount(data.get("amount")),
        gst_percentage=_gst_rate(data),
        reason=_reason(data),
        reference_bill_no=(data.get("reference_bill_no") or "").strip(),
        note_date=data.get("note_date") or today(),
        irn=(data.get("irn") or "").strip(),
        created_by=user,
    )


@transaction.atomic
def create_credit_note(data: dict, user=None) -> CreditNote:
    note = CreditNote.objects.create(
        note_no=claim_next_number("credit_note", CreditNote.objects.all(), "note_no"),
        **_note_fields(data, user),
    )
    post_customer_entry(
        note.customer,
        CustomerLedgerEntry.CREDIT_NOTE,
        note.pk,
        note.note_date,
        credit=note.amount,
        description=f"Credit Note {note.note_no} - {note.reason}",
    )
    logger.info("Credit note %s of %s issued to %s", note.note_no, note.amount, note.customer.code)
    return note


@transaction.atomic
def create_debit_note(data: dict, user=None) -> DebitNote:
    mill = loading_place(data.get("mill"))
    note = DebitNote.objects.create(
        note_no=claim_next_number(debit_note_series_key(mill), DebitNote.objects.all(), "note_no"),
        mill=mill,
        **_note_fields(data, user),
    )
    post_customer_entry(
        note.customer,
        CustomerLedgerEntry.DEBIT_NOTE,
        note.pk,
        note.note_date,
        debit=note.amount,
        description=f"Debit Note {note.note_no} - {note.reason}",
    )
    logger.info("Debit note %s of %s issued to %s", note.note_no, note.amount, note.customer.code)
    return note


def update_note_irn(note, irn: str):
    """Store the IRN returned by the e-invoice portal."""
    irn = (irn or "").strip()
    if not irn:
        raise ValidationError("IRN is required")
    note.irn = irn
    note.save(update_fields=["irn", "updated_at"])
    logger.info("IRN recorded for %s %s", type(note).__name__, note.note_no)
    return note
