from django.contrib import admin

from .models import CustomerLedgerEntry, SupplierLedgerEntry, StockLedgerEntry, AuditLog


class ReadOnlyAdmin(admin.ModelAdmin):
    """Ledger rows are written by the posting services only."""

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False

    def get_actions(self, request):
        actions = super().get_actions(request)
        if 'delete_selected' in actions:
            del actions['delete_selected']
        return actions


@admin.register(CustomerLedgerEntry)
class CustomerLedgerEntryAdmin(ReadOnlyAdmin):
    list_display = (
        "id",
        "transaction_date",
        "customer",
        "transaction_type",
        "reference_id",
        "debit_amount",
        "credit_amount",
        "balance",
    )
    list_filter = ("transaction_type", "transaction_date")
    search_fields = ("customer__name_english", "customer__code", "description")


@admin.register(SupplierLedgerEntry)
class SupplierLedgerEntryAdmin(ReadOnlyAdmin):
    list_display = (
        "id",
        "transaction_date",
        "supplier",
        "transaction_type",
        "debit_amount",
        "credit_amount",
        "balance",
    )
    list_filter = ("transaction_type", "transaction_date")


@admin.register(StockLedgerEntry)
class StockLedgerEntryAdmin(ReadOnlyAdmin):
    list_display = (
        "id",
        "transaction_date",
        "item",
        "mill",
        "transaction_type",
        "quantity_in",
        "quantity_out",
        "running_stock",
    )
    list_filter = ("transaction_type", "mill")


@admin.register(AuditLog)
class AuditLogAdmin(ReadOnlyAdmin):
    list_display = ("created_at", "action", "model", "object_id", "user")
    list_filter = ("action", "model")
    search_fields = ("object_id", "note")
