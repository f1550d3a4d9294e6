"""Admin removal of an outward entry together with everything billed from it."""

from __future__ import annotations

import logging

from django.db import transaction

from ledger.models import AuditLog, CustomerLedgerEntry, StockLedgerEntry
from ledger.services.posting import CUSTOMERS, STOCK, remove_entries
from logistics.models import OutwardEntry

logger = logging.getLogger(__name__)


def _related(entry):
    from billing.models import Sale, CreditNote, DebitNote

    sales = Sale.objects.filter(outward_entry=entry)
    bill_nos = list(sales.values_list("bill_serial_no", flat=True))
    sale_ids = list(sales.values_list("pk", flat=True))
    credit_notes = CreditNote.objects.filter(reference_bill_no__in=bill_nos)
    debit_notes = DebitNote.objects.filter(reference_bill_no__in=bill_nos)
    ledger = CustomerLedgerEntry.objects.filter(
        transaction_type=CustomerLedgerEntry.SALE, reference_id__in=sale_ids
    )
    credit_ledger = CustomerLedgerEntry.objects.filter(
        transaction_type=CustomerLedgerEntry.CREDIT_NOTE,
        reference_id__in=list(credit_notes.values_list("pk", flat=True)),
    )
    debit_ledger = CustomerLedgerEntry.objects.filter(
        transaction_type=CustomerLedgerEntry.DEBIT_NOTE,
        reference_id__in=list(debit_notes.values_list("pk", flat=True)),
    )
    stock = StockLedgerEntry.objects.filter(
        transaction_type=StockLedgerEntry.SALE, reference_id__in=sale_ids
    )
    return {
        "sales": sales,
        "ledger": ledger,
        "credit_ledger": credit_ledger,
        "debit_ledger": debit_ledger,
        "credit_notes": credit_notes,
        "debit_notes": debit_notes,
        "stock": stock,
    }


def deletion_impact(entry: OutwardEntry) -> dict:
    """What :func:`delete_outward_entry` would remove, for the confirmation screen."""
    rel = _related(entry)
    return {
        "entry": {"id": entry.pk, "serial_no": entry.serial_no, "lorry_no": entry.lorry_no},
        "sales": list(rel["sales"].values("id", "bill_serial_no", "total_amount")),
        "ledger_entries": rel["ledger"].count() + rel["credit_ledger"].count() + rel["debit_ledger"].count(),
        "credit_notes": list(rel["credit_notes"].values("id", "note_no", "amount")),
        "debit_notes": list(rel["debit_notes"].values("id", "note_no", "amount")),
        "stock_entries": rel["stock"].count(),
    }


@transaction.atomic
def delete_outward_entry(entry_id, user=None) -> dict:
    """Delete an entry, its sales, the notes against those bills and their ledger rows.

    Everything happens in one transaction and the running balances of the
    affected customers and items are rebuilt before it commits. Returns the
    number of rows removed per kind.
    """
    entry = OutwardEntry.objects.select_for_update().get(pk=entry_id)
    rel = _related(entry)
    serial_no = entry.serial_no

    removed = {
        "ledger_entries": remove_entries(CUSTOMERS, rel["ledger"]),
    }
    removed["ledger_entries"] += remove_entries(CUSTOMERS, rel["credit_ledger"])
    removed["credit_notes"], _ = rel["credit_notes"].delete()
    removed["ledger_entries"] += remove_entries(CUSTOMERS, rel["debit_ledger"])
    removed["debit_notes"], _ = rel["debit_notes"].delete()
    removed["stock_entries"] = remove_entries(STOCK, rel["stock"])
    removed["sales"], _ = rel["sales"].delete()
    entry.delete()

    AuditLog.objects.create(
        action="deleted",
        model="OutwardEntry",
        object_id=str(entry_id),
        user=user,
        note=f"Entry #{serial_no} with {removed['sales']} sale(s), "
             f"{removed['credit_notes']} credit note(s), {removed['debit_notes']} debit note(s)",
    )
    logger.info("Outward entry #%s cascade-deleted: %s", serial_no, removed)
    return removed
