import datetime
from decimal import Decimal

import pytest
from django.db import IntegrityError, transaction

from ledger.models import CustomerLedgerEntry, StockLedgerEntry
from ledger.services.posting import (
    CUSTOMERS,
    STOCK,
    current_balance,
    ledger_statement,
    post_customer_entry,
    post_stock_entry,
    remove_entries,
    update_entry,
)

D = datetime.date


def _balances(customer):
    return [
        (row.transaction_type, row.balance)
        for row in CustomerLedgerEntry.objects.filter(customer=customer).order_by("transaction_date", "id")
    ]


@pytest.mark.django_db
def test_backdated_posting_rebuilds_later_balances(customer):
    post_customer_entry(customer, "sale", 1, D(2024, 6, 15), debit="1000")
    post_customer_entry(customer, "receipt", 2, D(2024, 6, 20), credit="300")
    post_customer_entry(customer, "receipt", 3, D(2024, 6, 10), credit="400")

    assert _balances(customer) == [
        ("receipt", Decimal("-400.00")),
        ("sale", Decimal("600.00")),
        ("receipt", Decimal("300.00")),
    ]
    assert current_balance(CUSTOMERS, customer) == Decimal("300.00")


@pytest.mark.django_db
def test_one_row_per_document(customer):
    post_customer_entry(customer, "sale", 1, D(2024, 6, 15), debit="10")
    with pytest.raises(IntegrityError), transaction.atomic():
        post_customer_entry(customer, "sale", 1, D(2024, 6, 15), debit="10")


@pytest.mark.django_db
def test_statement_closing_is_stored_balance(customer):
    post_customer_entry(customer, "sale", 1, D(2024, 5, 1), debit="500")
    post_customer_entry(customer, "sale", 2, D(2024, 6, 1), debit="250.50")
    post_customer_entry(customer, "receipt", 3, D(2024, 6, 5), credit="100")
    post_customer_entry(customer, "sale", 4, D(2024, 7, 1), debit="75")

    st = ledger_statement(CUSTOMERS, customer, D(2024, 6, 1), D(2024, 6, 30))
    assert st.opening_balance == Decimal("500.00")
    assert [e.reference_id for e in st.entries] == [2, 3]
    assert st.total_in == Decimal("250.50")
    assert st.total_out == Decimal("100.00")
    assert st.closing_balance == Decimal("650.50")
    assert st.opening_balance + st.total_in - st.total_out == st.closing_balance

    full = ledger_statement(CUSTOMERS, customer)
    assert full.closing_balance == current_balance(CUSTOMERS, customer) == Decimal("725.50")


@pytest.mark.django_db
def test_empty_statement_keeps_opening(customer):
    post_customer_entry(customer, "sale", 1, D(2024, 5, 1), debit="500")
    st = ledger_statement(CUSTOMERS, customer, D(2024, 6, 1), D(2024, 6, 30))
    assert st.entries == []
    assert st.opening_balance == st.closing_balance == Decimal("500.00")


@pytest.mark.django_db
def test_update_moves_row_and_rebuilds(customer):
    post_customer_entry(customer, "sale", 1, D(2024, 6, 1), debit="100")
    post_customer_entry(customer, "sale", 2, D(2024, 6, 10), debit="200")

    update_entry(CUSTOMERS, "sale", 2, debit_amount="50", transaction_date=D(2024, 5, 1))
    assert [(r.reference_id, r.balance) for r in CustomerLedgerEntry.objects.order_by("transaction_date", "id")] == [
        (2, Decimal("50.00")),
        (1, Decimal("150.00")),
    ]


@pytest.mark.django_db
def test_remove_entries_rebuilds_chain(customer):
    post_customer_entry(customer, "sale", 1, D(2024, 6, 1), debit="100")
    post_customer_entry(customer, "sale", 2, D(2024, 6, 2), debit="200")
    post_customer_entry(customer, "receipt", 3, D(2024, 6, 3), credit="50")

    removed = remove_entries(CUSTOMERS, CustomerLedgerEntry.objects.filter(reference_id=1, transaction_type="sale"))
    assert removed == 1
    assert _balances(customer) == [("sale", Decimal("200.00")), ("receipt", Decimal("150.00"))]


@pytest.mark.django_db
def test_stock_starts_from_opening(item):
    post_stock_entry(item, "purchase", 1, D(2024, 6, 1), quantity_in="200", mill="MATTAPARAI")
    post_stock_entry(item, "sale", 2, D(2024, 6, 2), quantity_out="450", mill="PULIVANTHI")

    rows = list(StockLedgerEntry.objects.order_by("transaction_date", "id"))
    assert [r.running_stock for r in rows] == [Decimal("1200.00"), Decimal("750.00")]
    assert current_balance(STOCK, item) == Decimal("750.00")


@pytest.mark.django_db
def test_current_balance_without_rows(customer, item):
    assert current_balance(CUSTOMERS, customer) == Decimal("0.00")
    assert current_balance(STOCK, item) == Decimal("1000.00")
