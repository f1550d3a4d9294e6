from decimal import Decimal

from rest_framework import serializers

from .models import OutwardEntry

WEIGHT = {"max_digits": 12, "decimal_places": 2, "min_value": Decimal("0.01")}


class OutwardEntrySerializer(serializers.ModelSerializer):
    customer_name = serializers.CharField(source="customer.name_english", read_only=True)
    item_name = serializers.CharField(source="item.name_english", read_only=True)
    status = serializers.CharField(source="status_label", read_only=True)
    empty_weight = serializers.DecimalField(**WEIGHT)
    bill_serial_no = serializers.SerializerMethodField()

    class Meta:
        model = OutwardEntry
        fields = [
            "id",
            "serial_no",
            "entry_date",
            "customer",
            "customer_name",
            "item",
            "item_name",
            "loading_place",
            "lorry_no",
            "driver_mobile",
            "empty_weight",
            "load_weight",
            "net_weight",
            "load_weight_updated_at",
            "weighment_photo_url",
            "load_weight_photo_url",
            "remarks",
            "is_completed",
            "status",
            "bill_serial_no",
            "created_at",
        ]
        read_only_fields = [
            "serial_no",
            "load_weight",
            "net_weight",
            "load_weight_updated_at",
            "load_weight_photo_url",
            "is_completed",
            "created_at",
        ]
        extra_kwargs = {"entry_date": {"required": False}, "loading_place": {"required": False}}

    def get_bill_serial_no(self, obj):
        sale = getattr(obj, "sale", None)
        return sale.bill_serial_no if sale else None


class OutwardEntryEditSerializer(serializers.Serializer):
    entry_date = serializers.DateField(required=False)
    lorry_no = serializers.CharField(required=False, max_length=20)
    driver_mobile = serializers.CharField(required=False, allow_blank=True, max_length=15)
    loading_place = serializers.CharField(required=False)
    remarks = serializers.CharField(required=False, allow_blank=True)
    empty_weight = serializers.DecimalField(required=False, **WEIGHT)
    load_weight = serializers.DecimalField(required=False, **WEIGHT)


class LoadWeightSerializer(serializers.Serializer):
    load_weight = serializers.DecimalField(**WEIGHT)
    photo_url = serializers.CharField(required=False, allow_blank=True, max_length=500)
    remarks = serializers.CharField(required=False, allow_blank=True)


class PhotoUploadSerializer(serializers.Serializer):
    KIND_CHOICES = [("empty", "Empty weighment"), ("load", "Load weighment")]

    data_url = serializers.CharField()
    kind = serializers.ChoiceField(choices=KIND_CHOICES, default="empty")
