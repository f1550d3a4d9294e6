from decimal import Decimal

from django.contrib.auth.models import User
from django.db import models

from masters.models import Customer, Supplier, Item


class CustomerLedgerEntry(models.Model):
    """Receivable ledger: debit raises what the customer owes, credit lowers it.

    ``balance`` is maintained by ``ledger.services.posting`` and is the
    authoritative running balance: for every row it equals the signed sum
    of that customer's rows up to and including it in
    ``(transaction_date, id)`` order.
    """

    SALE = 'sale'
    RECEIPT = 'receipt'
    CREDIT_NOTE = 'credit_note'
    DEBIT_NOTE = 'debit_note'
    OPENING = 'opening'
    TYPE_CHOICES = [
        (SALE, 'Sale'),
        (RECEIPT, 'Receipt'),
        (CREDIT_NOTE, 'Credit Note'),
        (DEBIT_NOTE, 'Debit Note'),
        (OPENING, 'Opening Balance'),
    ]

    customer = models.ForeignKey(Customer, on_delete=models.PROTECT, related_name='ledger_entries')
    transaction_date = models.DateField()
    transaction_type = models.CharField(max_length=20, choices=TYPE_CHOICES)
    reference_id = models.BigIntegerField(null=True, blank=True)
    debit_amount = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0'))
    credit_amount = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0'))
    balance = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0'))
    description = models.CharField(max_length=255, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['transaction_date', 'id']
        constraints = [
            models.UniqueConstraint(
                fields=['transaction_type', 'reference_id'],
                name='uniq_customer_ledger_reference',
            ),
        ]
        indexes = [
            models.Index(fields=['customer', 'transaction_date'], name='custledger_party_date_idx'),
        ]
        verbose_name_plural = 'customer ledger entries'

    def __str__(self) -> str:
        return f"{self.transaction_date} {self.customer.code} {self.transaction_type} {self.balance}"


class SupplierLedgerEntry(models.Model):
    """Payable ledger: credit raises what we owe the supplier, debit lowers it."""

    PURCHASE = 'purchase'
    PAYMENT = 'payment'
    OPENING = 'opening'
    TYPE_CHOICES = [
        (PURCHASE, 'Purchase'),
        (PAYMENT, 'Payment'),
        (OPENING, 'Opening Balance'),
    ]

    supplier = models.ForeignKey(Supplier, on_delete=models.PROTECT, related_name='ledger_entries')
    transaction_date = models.DateField()
    transaction_type = models.CharField(max_length=20, choices=TYPE_CHOICES)
    reference_id = models.BigIntegerField(null=True, blank=True)
    debit_amount = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0'))
    credit_amount = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0'))
    balance = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0'))
    description = models.CharField(max_length=255, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['transaction_date', 'id']
        constraints = [
            models.UniqueConstraint(
                fields=['transaction_type', 'reference_id'],
                name='uniq_supplier_ledger_reference',
            ),
        ]
        indexes = [
            models.Index(fields=['supplier', 'transaction_date'], name='suppledger_party_date_idx'),
        ]
        verbose_name_plural = 'supplier ledger entries'

    def __str__(self) -> str:
        return f"{self.transaction_date} {self.supplier.code} {self.transaction_type} {self.balance}"


class StockLedgerEntry(models.Model):
    """Per-item stock movements; ``running_stock`` starts from the item's opening stock."""

    PURCHASE = 'purchase'
    SALE = 'sale'
    ADJUSTMENT = 'adjustment'
    TYPE_CHOICES = [
        (PURCHASE, 'Purchase'),
        (SALE, 'Sale'),
        (ADJUSTMENT, 'Adjustment'),
    ]

    item = models.ForeignKey(Item, on_delete=models.PROTECT, related_name='stock_entries')
    mill = models.CharField(max_length=50, blank=True)
    transaction_date = models.DateField()
    transaction_type = models.CharField(max_length=20, choices=TYPE_CHOICES)
    reference_id = models.BigIntegerField(null=True, blank=True)
    quantity_in = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0'))
    quantity_out = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0'))
    running_stock = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0'))
    description = models.CharField(max_length=255, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['transaction_date', 'id']
        constraints = [
            models.UniqueConstraint(
                fields=['transaction_type', 'reference_id'],
                name='uniq_stock_ledger_reference',
            ),
        ]
        indexes = [
            models.Index(fields=['item', 'transaction_date'], name='stockledger_item_date_idx'),
        ]
        verbose_name_plural = 'stock ledger entries'

    def __str__(self) -> str:
        return f"{self.transaction_date} {self.item.code} +{self.quantity_in} -{self.quantity_out}"


class AuditLog(models.Model):
    action = models.CharField(max_length=50)
    model = models.CharField(max_length=100)
    object_id = models.CharField(max_length=50)
    user = models.ForeignKey(User, null=True, blank=True, on_delete=models.SET_NULL)
    note = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"{self.created_at:%Y-%m-%d %H:%M} {self.action} {self.model}#{self.object_id}"
