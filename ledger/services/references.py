"""Resolve the human-readable document number behind a ledger row."""

from __future__ import annotations

from collections import defaultdict

from django.apps import apps

# transaction_type -> (model label, number field)
DOCUMENT_FIELDS = {
    "sale": ("billing.Sale", "bill_serial_no"),
    "receipt": ("billing.Receipt", "receipt_no"),
    "credit_note": ("billing.CreditNote", "note_no"),
    "debit_note": ("billing.DebitNote", "note_no"),
    "purchase": ("billing.Purchase", "bill_serial_no"),
    "payment": ("billing.SupplierPayment", "payment_no"),
}


def document_numbers(entries) -> dict:
    """Map ``(transaction_type, reference_id)`` to the document number.

    One query per document type present in ``entries``.
    """
    wanted = defaultdict(set)
    for e in entries:
        if e.reference_id is not None and e.transaction_type in DOCUMENT_FIELDS:
            wanted[e.transaction_type].add(e.reference_id)

    out = {}
    for tx_type, ids in wanted.items():
        label, field = DOCUMENT_FIELDS[tx_type]
        model = apps.get_model(label)
        for pk, number in model.objects.filter(pk__in=ids).values_list("pk", field):
            out[(tx_type, pk)] = number or ""
    return out


def describe(entry, numbers: dict) -> str:
    """Ledger description with the originating document number appended."""
    number = numbers.get((entry.transaction_type, entry.reference_id), "")
    if entry.description:
        return f"{entry.description} - Bill: {number}" if number else entry.description
    return f"Bill: {number}" if number else ""
