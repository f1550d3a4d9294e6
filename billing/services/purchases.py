from __future__ import annotations

import logging

from django.db import transaction

from billing.gst import money
from billing.models import Purchase, SupplierPayment
from billing.services.common import positive_amount, today
from billing.services.receipts import payment_method
from ledger.models import SupplierLedgerEntry, StockLedgerEntry
from ledger.services.posting import post_stock_entry, post_supplier_entry
from masters.services.numbering import claim_next_number
from masters.utils import loading_place

logger = logging.getLogger(__name__)


@transaction.atomic
def record_purchase(data: dict, user=None) -> Purchase:
    """Goods bought into a mill: supplier ledger credit plus stock in."""
    quantity = positive_amount(data.get("quantity"), "Quantity")
    rate = positive_amount(data.get("rate"), "Rate")
    purchase = Purchase(
        supplier=data["supplier"],
        item=data["item"],
        quantity=quantity,
        rate=rate,
        total_amount=money(quantity * rate),
        bill_serial_no=(data.get("bill_serial_no") or "").strip(),
        purchase_date=data.get("purchase_date") or today(),
        mill=loading_place(data.get("mill")),
        created_by=user,
    )
    purchase.save()

    label = purchase.bill_serial_no or f"#{purchase.pk}"
    post_supplier_entry(
        purchase.supplier,
        SupplierLedgerEntry.PURCHASE,
        purchase.pk,
        purchase.purchase_date,
        credit=purchase.total_amount,
        description=f"Purchase - {label}",
    )
    post_stock_entry(
        purchase.item,
        StockLedgerEntry.PURCHASE,
        purchase.pk,
        purchase.purchase_date,
        quantity_in=purchase.quantity,
        mill=purchase.mill,
        description=f"Purchase - {label}",
    )
    logger.info(
        "Purchase %s from supplier %s posted: %s",
        label, purchase.supplier.code, purchase.total_amount,
    )
    return purchase


@transaction.atomic
def record_supplier_payment(data: dict, user=None) -> SupplierPayment:
    payment = SupplierPayment.objects.create(
        payment_no=claim_next_number("supplier_payment", SupplierPayment.objects.all(), "payment_no"),
        supplier=data["supplier"],
        amount=positive_amount(data.get("amount")),
        payment_date=data.get("payment_date") or today(),
        payment_method=payment_method(data.get("payment_method")),
        remarks=(data.get("remarks") or "").strip(),
        created_by=user,
    )
    post_supplier_entry(
        payment.supplier,
        SupplierLedgerEntry.PAYMENT,
        payment.pk,
        payment.payment_date,
        debit=payment.amount,
        description=f"Payment {payment.payment_no} - {payment.get_payment_method_display()}",
    )
    logger.info("Payment %s of %s made to %s", payment.payment_no, payment.amount, payment.supplier.code)
    return payment
