from decimal import Decimal

import pytest
from django.core.exceptions import ValidationError

from billing.services.purchases import record_purchase, record_supplier_payment
from ledger.models import StockLedgerEntry, SupplierLedgerEntry
from ledger.services.posting import STOCK, SUPPLIERS, current_balance, stock_by_mill


@pytest.mark.django_db
def test_purchase_credits_supplier_and_adds_stock(supplier, item, user, today):
    purchase = record_purchase({
        "supplier": supplier,
        "item": item,
        "quantity": "250",
        "rate": "18.5",
        "mill": "mattaparai",
        "bill_serial_no": "KM-77",
        "purchase_date": today,
    }, user)

    assert purchase.total_amount == Decimal("4625.00")
    assert purchase.mill == "MATTAPARAI"
    row = SupplierLedgerEntry.objects.get(transaction_type="purchase", reference_id=purchase.pk)
    assert row.credit_amount == Decimal("4625.00")
    assert row.description == "Purchase - KM-77"
    assert current_balance(SUPPLIERS, supplier) == Decimal("4625.00")

    stock = StockLedgerEntry.objects.get(transaction_type="purchase", reference_id=purchase.pk)
    assert stock.running_stock == Decimal("1250.00")
    assert stock_by_mill(item, "MATTAPARAI") == Decimal("250.00")


@pytest.mark.django_db
def test_payment_lowers_payable(supplier, item, user):
    record_purchase({"supplier": supplier, "item": item, "quantity": "10", "rate": "100"}, user)
    payment = record_supplier_payment(
        {"supplier": supplier, "amount": "300", "payment_method": "bank"}, user
    )
    assert payment.payment_no == "PAY0001"
    row = SupplierLedgerEntry.objects.get(transaction_type="payment", reference_id=payment.pk)
    assert row.description == "Payment PAY0001 - Bank Transfer"
    assert current_balance(SUPPLIERS, supplier) == Decimal("700.00")


@pytest.mark.django_db
def test_unknown_payment_method(supplier, user):
    with pytest.raises(ValidationError):
        record_supplier_payment({"supplier": supplier, "amount": "1", "payment_method": "barter"}, user)
    assert current_balance(SUPPLIERS, supplier) == Decimal("0.00")


@pytest.mark.django_db
def test_purchase_without_bill_number_uses_pk(supplier, item, user):
    purchase = record_purchase({"supplier": supplier, "item": item, "quantity": "1", "rate": "1"}, user)
    row = SupplierLedgerEntry.objects.get(reference_id=purchase.pk)
    assert row.description == f"Purchase - #{purchase.pk}"
    assert current_balance(STOCK, item) == Decimal("1001.00")
