from decimal import Decimal

import pytest

from billing.models import CreditNote, DebitNote, Sale
from billing.services.notes import create_credit_note, create_debit_note
from billing.services.receipts import record_receipt
from billing.services.sales import create_sale_from_entry
from ledger.models import AuditLog, CustomerLedgerEntry, StockLedgerEntry
from ledger.services.posting import CUSTOMERS, STOCK, current_balance
from logistics.models import OutwardEntry
from logistics.services import cascade
from logistics.services.cascade import delete_outward_entry, deletion_impact


@pytest.fixture
def billed(completed_entry, customer, user, today):
    sale = create_sale_from_entry(completed_entry.pk, "20", user=user, sale_date=today)
    base = {"customer": customer, "reference_bill_no": sale.bill_serial_no, "note_date": today}
    create_credit_note({**base, "amount": "118", "reason": "Short weight"}, user)
    create_debit_note({**base, "amount": "59", "reason": "Freight"}, user)
    record_receipt({"customer": customer, "amount": "1000", "receipt_date": today}, user)
    return sale


@pytest.mark.django_db
def test_impact_lists_everything(billed, completed_entry):
    impact = deletion_impact(completed_entry)
    assert impact["entry"]["serial_no"] == completed_entry.serial_no
    assert [s["bill_serial_no"] for s in impact["sales"]] == [billed.bill_serial_no]
    assert impact["ledger_entries"] == 3
    assert len(impact["credit_notes"]) == 1
    assert len(impact["debit_notes"]) == 1
    assert impact["stock_entries"] == 1


@pytest.mark.django_db
def test_delete_removes_entry_and_dependents(billed, completed_entry, customer, item, admin):
    removed = delete_outward_entry(completed_entry.pk, admin)

    assert removed == {
        "ledger_entries": 3,
        "credit_notes": 1,
        "debit_notes": 1,
        "stock_entries": 1,
        "sales": 1,
    }
    assert not OutwardEntry.objects.exists()
    assert not Sale.objects.exists()
    assert not CreditNote.objects.exists()
    assert not DebitNote.objects.exists()
    assert not StockLedgerEntry.objects.exists()
    # only the receipt remains, and its balance is rebuilt
    row = CustomerLedgerEntry.objects.get()
    assert row.transaction_type == "receipt"
    assert row.balance == Decimal("-1000.00")
    assert current_balance(CUSTOMERS, customer) == Decimal("-1000.00")
    assert current_balance(STOCK, item) == Decimal("1000.00")

    log = AuditLog.objects.get(action="deleted")
    assert log.model == "OutwardEntry"
    assert log.user == admin


@pytest.mark.django_db
def test_failure_rolls_everything_back(billed, completed_entry, admin, monkeypatch):
    def boom(*args, **kwargs):
        raise RuntimeError("disk full")

    monkeypatch.setattr(cascade.AuditLog.objects, "create", boom)
    with pytest.raises(RuntimeError):
        delete_outward_entry(completed_entry.pk, admin)

    assert OutwardEntry.objects.filter(pk=completed_entry.pk).exists()
    assert Sale.objects.count() == 1
    assert CreditNote.objects.count() == 1
    assert DebitNote.objects.count() == 1
    assert CustomerLedgerEntry.objects.count() == 4
    assert StockLedgerEntry.objects.count() == 1


@pytest.mark.django_db
def test_unbilled_entry_deletes_alone(completed_entry, admin):
    removed = delete_outward_entry(completed_entry.pk, admin)
    assert removed["sales"] == 0
    assert removed["ledger_entries"] == 0
    assert not OutwardEntry.objects.exists()
