from django.contrib import admin

from .models import OutwardEntry


@admin.register(OutwardEntry)
class OutwardEntryAdmin(admin.ModelAdmin):
    list_display = (
        "serial_no",
        "entry_date",
        "customer",
        "item",
        "lorry_no",
        "empty_weight",
        "load_weight",
        "net_weight",
        "loading_place",
        "is_completed",
    )
    list_filter = ("is_completed", "loading_place", "entry_date")
    search_fields = ("lorry_no", "customer__name_english", "driver_mobile")
    readonly_fields = ("serial_no", "net_weight", "load_weight_updated_at", "load_weight_updated_by")

    def has_delete_permission(self, request, obj=None):
        # removal goes through the cascade delete endpoint
        return False
