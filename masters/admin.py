from django.contrib import admin

from .models import Customer, Supplier, Item, CompanySetting, UserRole, DocumentSeries


@admin.register(Customer)
class CustomerAdmin(admin.ModelAdmin):
    list_display = ("code", "name_english", "gstin", "phone", "state_code", "is_active")
    list_filter = ("is_active", "state_code")
    search_fields = ("code", "name_english", "name_tamil", "gstin", "phone")


@admin.register(Supplier)
class SupplierAdmin(admin.ModelAdmin):
    list_display = ("code", "name_english", "gstin", "phone", "is_active")
    list_filter = ("is_active",)
    search_fields = ("code", "name_english", "gstin")


@admin.register(Item)
class ItemAdmin(admin.ModelAdmin):
    list_display = ("code", "name_english", "unit", "unit_weight", "gst_percentage", "hsn_no", "is_active")
    list_filter = ("is_active", "unit")
    search_fields = ("code", "name_english", "hsn_no")


@admin.register(CompanySetting)
class CompanySettingAdmin(admin.ModelAdmin):
    list_display = ("location_code", "company_name", "gstin", "is_active")
    list_filter = ("is_active",)


@admin.register(UserRole)
class UserRoleAdmin(admin.ModelAdmin):
    list_display = ("user", "role", "created_at")
    list_filter = ("role",)


@admin.register(DocumentSeries)
class DocumentSeriesAdmin(admin.ModelAdmin):
    list_display = ("key", "prefix", "width", "floor", "last_number", "updated_at")
    readonly_fields = ("last_number", "updated_at")
