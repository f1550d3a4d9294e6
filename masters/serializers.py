from rest_framework import serializers

from .models import Customer, Supplier, Item, CompanySetting

PARTY_FIELDS = [
    "id",
    "code",
    "name_english",
    "name_tamil",
    "contact_person",
    "phone",
    "email",
    "address_english",
    "address_tamil",
    "gstin",
    "pin_code",
    "state_code",
    "is_active",
    "created_at",
    "updated_at",
]


class GstinMixin:
    def validate_gstin(self, value):
        value = (value or "").strip().upper()
        if value and len(value) != 15:
            raise serializers.ValidationError("GSTIN must be 15 characters.")
        return value


class CustomerSerializer(GstinMixin, serializers.ModelSerializer):
    class Meta:
        model = Customer
        fields = PARTY_FIELDS + ["place_of_supply"]
        read_only_fields = ["created_at", "updated_at"]
        extra_kwargs = {"code": {"required": False}}


class SupplierSerializer(GstinMixin, serializers.ModelSerializer):
    class Meta:
        model = Supplier
        fields = PARTY_FIELDS
        read_only_fields = ["created_at", "updated_at"]
        extra_kwargs = {"code": {"required": False}}


class ItemSerializer(serializers.ModelSerializer):
    class Meta:
        model = Item
        fields = [
            "id",
            "code",
            "name_english",
            "name_tamil",
            "unit",
            "unit_weight",
            "gst_percentage",
            "hsn_no",
            "opening_stock",
            "description_english",
            "description_tamil",
            "is_active",
        ]

    def validate_gst_percentage(self, value):
        if value < 0 or value > 100:
            raise serializers.ValidationError("GST percentage must be between 0 and 100.")
        return value


class CompanySettingSerializer(serializers.ModelSerializer):
    class Meta:
        model = CompanySetting
        fields = "__all__"
