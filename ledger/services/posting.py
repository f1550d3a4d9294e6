"""Ledger writer.

Every financial event posts exactly one ledger row that points back at the
originating document through ``(transaction_type, reference_id)``. The
writer owns the running balance: after any insert, update or delete it
locks the party row and rebuilds the balances from the earliest affected
date forward, so backdated postings keep the chain consistent and readers
never recompute balances.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Optional

from django.db import transaction
from django.db.models import Sum

from ledger.models import CustomerLedgerEntry, SupplierLedgerEntry, StockLedgerEntry

logger = logging.getLogger(__name__)

ZERO = Decimal("0.00")


def _money(v) -> Decimal:
    if v is None or v == "":
        return ZERO
    return Decimal(str(v)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


class Book:
    """How one kind of ledger signs its rows and where its chain starts."""

    model = None
    party_field = ""
    balance_field = "balance"
    in_field = "debit_amount"
    out_field = "credit_amount"

    def delta(self, row) -> Decimal:
        return _money(getattr(row, self.in_field)) - _money(getattr(row, self.out_field))

    def opening(self, party) -> Decimal:
        return ZERO

    def rows(self, party):
        return self.model.objects.filter(**{self.party_field: party}).order_by(
            "transaction_date", "id"
        )


class CustomerBook(Book):
    model = CustomerLedgerEntry
    party_field = "customer"


class SupplierBook(Book):
    model = SupplierLedgerEntry
    party_field = "supplier"
    in_field = "credit_amount"
    out_field = "debit_amount"


class StockBook(Book):
    model = StockLedgerEntry
    party_field = "item"
    balance_field = "running_stock"
    in_field = "quantity_in"
    out_field = "quantity_out"

    def opening(self, party) -> Decimal:
        return _money(party.opening_stock)


CUSTOMERS = CustomerBook()
SUPPLIERS = SupplierBook()
STOCK = StockBook()


def _lock_party(party):
    return type(party).objects.select_for_update().get(pk=party.pk)


def rebuild_balances(book: Book, party, from_date: Optional[date] = None) -> int:
    """Recompute running balances of ``party`` from ``from_date`` onward.

    Returns the number of rows whose stored balance changed.
    """
    qs = book.rows(party)
    running = book.opening(party)
    if from_date is not None:
        prev = qs.filter(transaction_date__lt=from_date).last()
        if prev is not None:
            running = getattr(prev, book.balance_field)
        qs = qs.filter(transaction_date__gte=from_date)

    changed = []
    for row in qs:
        running = running + book.delta(row)
        if getattr(row, book.balance_field) != running:
            setattr(row, book.balance_field, running)
            changed.append(row)
    if changed:
        book.model.objects.bulk_update(changed, [book.balance_field])
    return len(changed)


def post_entry(book: Book, party, transaction_type: str, reference_id, transaction_date,
               description: str = "", amounts=None, **extra):
    """Append a ledger row for ``party`` and return it with its balance set.

    ``amounts`` maps the in/out columns to values (rounded to paise);
    ``extra`` goes to the row unchanged.
    """
    values = {k: _money(v) for k, v in (amounts or {}).items()}
    with transaction.atomic():
        party = _lock_party(party)
        entry = book.model.objects.create(
            **{book.party_field: party},
            transaction_type=transaction_type,
            reference_id=reference_id,
            transaction_date=transaction_date,
            description=(description or "")[:255],
            **values,
            **extra,
        )
        rebuild_balances(book, party, transaction_date)
        entry.refresh_from_db(fields=[book.balance_field])
    logger.info(
        "Posted %s #%s to %s %s", transaction_type, reference_id, book.party_field, party.pk
    )
    return entry


def update_entry(book: Book, transaction_type: str, reference_id, **changes):
    """Change amounts, date or description of the row for a document."""
    with transaction.atomic():
        entry = book.model.objects.select_for_update().get(
            transaction_type=transaction_type, reference_id=reference_id
        )
        party = _lock_party(getattr(entry, book.party_field))
        old_date = entry.transaction_date
        for name, value in changes.items():
            if value is None:
                continue
            if name in (book.in_field, book.out_field):
                value = _money(value)
            if name == "description":
                value = value[:255]
            setattr(entry, name, value)
        entry.save()
        rebuild_balances(book, party, min(old_date, entry.transaction_date))
        entry.refresh_from_db(fields=[book.balance_field])
    return entry


def remove_entries(book: Book, queryset) -> int:
    """Delete ledger rows and rebuild every affected party's chain."""
    with transaction.atomic():
        earliest = {}
        for party_id, tx_date in queryset.values_list(f"{book.party_field}_id", "transaction_date"):
            if party_id not in earliest or tx_date < earliest[party_id]:
                earliest[party_id] = tx_date
        deleted, _ = queryset.delete()
        party_model = book.model._meta.get_field(book.party_field).related_model
        for party in party_model.objects.select_for_update().filter(pk__in=earliest):
            rebuild_balances(book, party, earliest[party.pk])
    return deleted


def post_customer_entry(customer, transaction_type, reference_id, transaction_date,
                        debit=ZERO, credit=ZERO, description=""):
    return post_entry(
        CUSTOMERS, customer, transaction_type, reference_id, transaction_date,
        description, amounts={"debit_amount": debit, "credit_amount": credit},
    )


def post_supplier_entry(supplier, transaction_type, reference_id, transaction_date,
                        debit=ZERO, credit=ZERO, description=""):
    return post_entry(
        SUPPLIERS, supplier, transaction_type, reference_id, transaction_date,
        description, amounts={"debit_amount": debit, "credit_amount": credit},
    )


def post_stock_entry(item, transaction_type, reference_id, transaction_date,
                     quantity_in=ZERO, quantity_out=ZERO, mill="", description=""):
    return post_entry(
        STOCK, item, transaction_type, reference_id, transaction_date,
        description, amounts={"quantity_in": quantity_in, "quantity_out": quantity_out},
        mill=mill or "",
    )


def current_balance(book: Book, party) -> Decimal:
    """Stored balance of the latest row; the opening value when there are none."""
    last = book.rows(party).last()
    if last is None:
        return book.opening(party)
    return getattr(last, book.balance_field)


@dataclass
class Statement:
    opening_balance: Decimal
    entries: List = field(default_factory=list)
    total_in: Decimal = ZERO
    total_out: Decimal = ZERO
    closing_balance: Decimal = ZERO


def ledger_statement(book: Book, party, date_from: Optional[date] = None,
                     date_to: Optional[date] = None) -> Statement:
    """Rows of ``party`` in a date range together with the stored balances.

    ``opening_balance`` is the stored balance just before ``date_from`` and
    ``closing_balance`` the stored balance of the last row in range, so
    opening + in - out == closing holds for any filter.
    """
    qs = book.rows(party)
    opening = book.opening(party)
    if date_from is not None:
        prev = qs.filter(transaction_date__lt=date_from).last()
        if prev is not None:
            opening = getattr(prev, book.balance_field)
        qs = qs.filter(transaction_date__gte=date_from)
    if date_to is not None:
        qs = qs.filter(transaction_date__lte=date_to)

    entries = list(qs)
    totals = qs.aggregate(i=Sum(book.in_field), o=Sum(book.out_field))
    closing = getattr(entries[-1], book.balance_field) if entries else opening
    return Statement(
        opening_balance=opening,
        entries=entries,
        total_in=_money(totals["i"]),
        total_out=_money(totals["o"]),
        closing_balance=closing,
    )


def mill_statement(item, mill: str, date_from: Optional[date] = None,
                   date_to: Optional[date] = None) -> Statement:
    """Stock rows of one mill with the mill's own net movement.

    Mills carry no opening stock, so ``opening_balance`` is the net quantity
    moved through the mill before ``date_from``. Each row gets a
    ``mill_balance`` attribute with the running net after it.
    """
    qs = StockLedgerEntry.objects.filter(item=item, mill=mill).order_by("transaction_date", "id")
    opening = ZERO
    if date_from is not None:
        before = qs.filter(transaction_date__lt=date_from).aggregate(
            i=Sum("quantity_in"), o=Sum("quantity_out")
        )
        opening = _money(before["i"]) - _money(before["o"])
        qs = qs.filter(transaction_date__gte=date_from)
    if date_to is not None:
        qs = qs.filter(transaction_date__lte=date_to)

    entries = list(qs)
    running = opening
    for row in entries:
        running = running + STOCK.delta(row)
        row.mill_balance = running
    totals = qs.aggregate(i=Sum("quantity_in"), o=Sum("quantity_out"))
    return Statement(
        opening_balance=opening,
        entries=entries,
        total_in=_money(totals["i"]),
        total_out=_money(totals["o"]),
        closing_balance=running,
    )


def stock_by_mill(item, mill: str) -> Decimal:
    """Net quantity moved through one mill (no opening stock attached)."""
    totals = StockLedgerEntry.objects.filter(item=item, mill=mill).aggregate(
        i=Sum("quantity_in"), o=Sum("quantity_out")
    )
    return _money(totals["i"]) - _money(totals["o"])
