from __future__ import annotations

import logging

from django.core.exceptions import ValidationError
from django.db import transaction

from billing.models import Receipt, PAYMENT_METHOD_CHOICES, PAYMENT_CASH
from billing.services.common import positive_amount, today
from ledger.models import CustomerLedgerEntry
from ledger.services.posting import post_customer_entry
from masters.services.numbering import claim_next_number

logger = logging.getLogger(__name__)

PAYMENT_METHODS = {code for code, _ in PAYMENT_METHOD_CHOICES}


def payment_method(value) -> str:
    method = (value or PAYMENT_CASH).strip().lower()
    if method not in PAYMENT_METHODS:
        raise ValidationError(f"Unknown payment method '{value}'")
    return method


def receipt_description(receipt: Receipt) -> str:
    text = f"Receipt {receipt.receipt_no} - {receipt.get_payment_method_display()}"
    if receipt.remarks:
        text += f" ({receipt.remarks})"
    return text


@transaction.atomic
def record_receipt(data: dict, user=None) -> Receipt:
    """Book money received from a customer and credit their ledger."""
    receipt = Receipt.objects.create(
        receipt_no=claim_next_number("receipt", Receipt.objects.all(), "receipt_no"),
        customer=data["customer"],
        amount=positive_amount(data.get("amount")),
        receipt_date=data.get("receipt_date") or today(),
        payment_method=payment_method(data.get("payment_method")),
        remarks=(data.get("remarks") or "").strip(),
        created_by=user,
    )
    post_customer_entry(
        receipt.customer,
        CustomerLedgerEntry.RECEIPT,
        receipt.pk,
        receipt.receipt_date,
        credit=receipt.amount,
        description=receipt_description(receipt),
    )
    logger.info(
        "Receipt %s of %s recorded for customer %s",
        receipt.receipt_no, receipt.amount, receipt.customer.code,
    )
    return receipt
