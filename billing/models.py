from decimal import Decimal

from django.contrib.auth.models import User
from django.db import models

from logistics.models import OutwardEntry, default_loading_place
from masters.models import Customer, Supplier, Item

PAYMENT_CASH = 'cash'
PAYMENT_BANK = 'bank'
PAYMENT_UPI = 'upi'
PAYMENT_CHEQUE = 'cheque'
PAYMENT_METHOD_CHOICES = [
    (PAYMENT_CASH, 'Cash'),
    (PAYMENT_BANK, 'Bank Transfer'),
    (PAYMENT_UPI, 'UPI'),
    (PAYMENT_CHEQUE, 'Cheque'),
]


class Sale(models.Model):
    bill_serial_no = models.CharField(max_length=20, unique=True)
    customer = models.ForeignKey(Customer, on_delete=models.PROTECT, related_name='sales')
    item = models.ForeignKey(Item, on_delete=models.PROTECT, related_name='sales')
    outward_entry = models.OneToOneField(
        OutwardEntry, on_delete=models.PROTECT, null=True, blank=True, related_name='sale'
    )
    quantity = models.DecimalField(max_digits=12, decimal_places=2)
    rate = models.DecimalField(max_digits=12, decimal_places=2)
    gst_percentage = models.DecimalField(max_digits=5, decimal_places=2, default=Decimal('0'))
    taxable_amount = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0'))
    gst_amount = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0'))
    total_amount = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0'))
    sale_date = models.DateField()
    loading_place = models.CharField(max_length=30, default=default_loading_place)
    irn = models.CharField(max_length=100, blank=True)
    created_by = models.ForeignKey(
        User, on_delete=models.SET_NULL, null=True, blank=True, related_name='sales_created'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-sale_date', '-id']
        indexes = [
            models.Index(fields=['sale_date'], name='sale_date_idx'),
            models.Index(fields=['customer', 'sale_date'], name='sale_customer_date_idx'),
        ]

    @property
    def is_special_series(self) -> bool:
        return self.bill_serial_no.startswith('D')

    def __str__(self) -> str:
        return f"Bill {self.bill_serial_no} - {self.customer.name_english} - {self.total_amount}"


class Receipt(models.Model):
    receipt_no = models.CharField(max_length=20, unique=True)
    customer = models.ForeignKey(Customer, on_delete=models.PROTECT, related_name='receipts')
    amount = models.DecimalField(max_digits=14, decimal_places=2)
    receipt_date = models.DateField()
    payment_method = models.CharField(max_length=10, choices=PAYMENT_METHOD_CHOICES, default=PAYMENT_CASH)
    remarks = models.TextField(blank=True)
    created_by = models.ForeignKey(
        User, on_delete=models.SET_NULL, null=True, blank=True, related_name='receipts_created'
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-receipt_date', '-id']

    def __str__(self) -> str:
        return f"Receipt {self.receipt_no} - {self.amount}"


class NoteBase(models.Model):
    """Fields shared by credit and debit notes."""

    note_no = models.CharField(max_length=20, unique=True)
    customer = models.ForeignKey(Customer, on_delete=models.PROTECT, related_name='+')
    item = models.ForeignKey(Item, on_delete=models.PROTECT, null=True, blank=True, related_name='+')
    amount = models.DecimalField(max_digits=14, decimal_places=2, help_text="GST inclusive")
    gst_percentage = models.DecimalField(max_digits=5, decimal_places=2, default=Decimal('18.00'))
    reason = models.TextField()
    reference_bill_no = models.CharField(max_length=20, blank=True, db_index=True)
    note_date = models.DateField()
    irn = models.CharField(max_length=100, blank=True)
    created_by = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True, related_name='+')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True
        ordering = ['-note_date', '-id']


class CreditNote(NoteBase):
    DOC_TYPE = 'CRN'

    class Meta(NoteBase.Meta):
        pass

    def __str__(self) -> str:
        return f"Credit Note {self.note_no} - {self.amount}"


class DebitNote(NoteBase):
    DOC_TYPE = 'DBN'

    mill = models.CharField(max_length=30, default=default_loading_place)

    class Meta(NoteBase.Meta):
        pass

    def __str__(self) -> str:
        return f"Debit Note {self.note_no} - {self.amount}"


class Purchase(models.Model):
    supplier = models.ForeignKey(Supplier, on_delete=models.PROTECT, related_name='purchases')
    item = models.ForeignKey(Item, on_delete=models.PROTECT, related_name='purchases')
    mill = models.CharField(max_length=30, default=default_loading_place)
    quantity = models.DecimalField(max_digits=12, decimal_places=2)
    rate = models.DecimalField(max_digits=12, decimal_places=2)
    total_amount = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0'))
    bill_serial_no = models.CharField(max_length=30, blank=True)
    purchase_date = models.DateField()
    created_by = models.ForeignKey(
        User, on_delete=models.SET_NULL, null=True, blank=True, related_name='purchases_created'
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-purchase_date', '-id']

    def __str__(self) -> str:
        return f"Purchase {self.bill_serial_no or self.pk} - {self.supplier.name_english}"


class SupplierPayment(models.Model):
    payment_no = models.CharField(max_length=20, unique=True)
    supplier = models.ForeignKey(Supplier, on_delete=models.PROTECT, related_name='payments')
    amount = models.DecimalField(max_digits=14, decimal_places=2)
    payment_date = models.DateField()
    payment_method = models.CharField(max_length=10, choices=PAYMENT_METHOD_CHOICES, default=PAYMENT_CASH)
    remarks = models.TextField(blank=True)
    created_by = models.ForeignKey(
        User, on_delete=models.SET_NULL, null=True, blank=True, related_name='supplier_payments_created'
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-payment_date', '-id']

    def __str__(self) -> str:
        return f"Payment {self.payment_no} - {self.amount}"
