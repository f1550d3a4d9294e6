from django.contrib import admin

from .models import Sale, Receipt, CreditNote, DebitNote, Purchase, SupplierPayment


class PostedDocumentAdmin(admin.ModelAdmin):
    """Posted documents change through the billing services; only the IRN is editable here."""

    editable_fields = ("irn",)

    def get_readonly_fields(self, request, obj=None):
        return [f.name for f in self.model._meta.fields if f.name not in self.editable_fields]

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(Sale)
class SaleAdmin(PostedDocumentAdmin):
    list_display = ("bill_serial_no", "sale_date", "customer", "item", "quantity", "rate", "total_amount", "irn")
    list_filter = ("loading_place", "sale_date")
    search_fields = ("bill_serial_no", "customer__name_english", "irn")


@admin.register(Receipt)
class ReceiptAdmin(PostedDocumentAdmin):
    editable_fields = ()
    list_display = ("receipt_no", "receipt_date", "customer", "amount", "payment_method")
    list_filter = ("payment_method",)
    search_fields = ("receipt_no", "customer__name_english")


@admin.register(CreditNote)
class CreditNoteAdmin(PostedDocumentAdmin):
    list_display = ("note_no", "note_date", "customer", "amount", "reference_bill_no", "irn")
    search_fields = ("note_no", "reference_bill_no", "customer__name_english")


@admin.register(DebitNote)
class DebitNoteAdmin(PostedDocumentAdmin):
    list_display = ("note_no", "note_date", "customer", "mill", "amount", "reference_bill_no", "irn")
    list_filter = ("mill",)
    search_fields = ("note_no", "reference_bill_no", "customer__name_english")


@admin.register(Purchase)
class PurchaseAdmin(PostedDocumentAdmin):
    editable_fields = ()
    list_display = ("purchase_date", "bill_serial_no", "supplier", "item", "mill", "quantity", "total_amount")
    list_filter = ("mill",)


@admin.register(SupplierPayment)
class SupplierPaymentAdmin(PostedDocumentAdmin):
    editable_fields = ()
    list_display = ("payment_no", "payment_date", "supplier", "amount", "payment_method")
