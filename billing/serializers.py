from decimal import Decimal

from rest_framework import serializers

from masters.models import Customer, Supplier, Item

from .models import (
    Sale,
    Receipt,
    CreditNote,
    DebitNote,
    Purchase,
    SupplierPayment,
    PAYMENT_METHOD_CHOICES,
)

POSITIVE = {"max_digits": 14, "decimal_places": 2, "min_value": Decimal("0.01")}


class SaleSerializer(serializers.ModelSerializer):
    customer_name = serializers.CharField(source="customer.name_english", read_only=True)
    item_name = serializers.CharField(source="item.name_english", read_only=True)
    lorry_no = serializers.CharField(source="outward_entry.lorry_no", read_only=True, default="")
    is_special_series = serializers.BooleanField(read_only=True)

    class Meta:
        model = Sale
        fields = [
            "id",
            "bill_serial_no",
            "customer",
            "customer_name",
            "item",
            "item_name",
            "outward_entry",
            "lorry_no",
            "quantity",
            "rate",
            "gst_percentage",
            "taxable_amount",
            "gst_amount",
            "total_amount",
            "sale_date",
            "loading_place",
            "irn",
            "is_special_series",
            "created_by",
            "created_at",
        ]
        read_only_fields = fields


class SaleFromEntrySerializer(serializers.Serializer):
    outward_entry = serializers.IntegerField()
    rate = serializers.DecimalField(**POSITIVE)
    sale_date = serializers.DateField(required=False)
    special = serializers.BooleanField(required=False, default=False)


class DirectSaleSerializer(serializers.Serializer):
    customer = serializers.PrimaryKeyRelatedField(queryset=Customer.objects.all())
    item = serializers.PrimaryKeyRelatedField(queryset=Item.objects.all())
    quantity = serializers.DecimalField(**POSITIVE)
    rate = serializers.DecimalField(**POSITIVE)
    loading_place = serializers.CharField(required=False, allow_blank=True)
    sale_date = serializers.DateField(required=False)
    special = serializers.BooleanField(required=False, default=False)
    irn = serializers.CharField(required=False, allow_blank=True)


class SaleEditSerializer(serializers.Serializer):
    bill_serial_no = serializers.CharField(required=False, max_length=20)
    rate = serializers.DecimalField(required=False, **POSITIVE)
    quantity = serializers.DecimalField(required=False, **POSITIVE)
    sale_date = serializers.DateField(required=False)
    irn = serializers.CharField(required=False, allow_blank=True)
    empty_weight = serializers.DecimalField(required=False, **POSITIVE)
    load_weight = serializers.DecimalField(required=False, **POSITIVE)


class ReceiptSerializer(serializers.ModelSerializer):
    customer_name = serializers.CharField(source="customer.name_english", read_only=True)
    amount = serializers.DecimalField(**POSITIVE)
    payment_method = serializers.ChoiceField(choices=PAYMENT_METHOD_CHOICES, required=False)

    class Meta:
        model = Receipt
        fields = [
            "id",
            "receipt_no",
            "customer",
            "customer_name",
            "amount",
            "receipt_date",
            "payment_method",
            "remarks",
            "created_at",
        ]
        read_only_fields = ["receipt_no", "created_at"]
        extra_kwargs = {"receipt_date": {"required": False}}


NOTE_FIELDS = [
    "id",
    "note_no",
    "customer",
    "customer_name",
    "item",
    "amount",
    "gst_percentage",
    "reason",
    "reference_bill_no",
    "note_date",
    "irn",
    "created_at",
]


class CreditNoteSerializer(serializers.ModelSerializer):
    customer_name = serializers.CharField(source="customer.name_english", read_only=True)
    amount = serializers.DecimalField(**POSITIVE)

    class Meta:
        model = CreditNote
        fields = NOTE_FIELDS
        read_only_fields = ["note_no", "irn", "created_at"]
        extra_kwargs = {"note_date": {"required": False}, "gst_percentage": {"required": False}}


class DebitNoteSerializer(CreditNoteSerializer):
    class Meta(CreditNoteSerializer.Meta):
        model = DebitNote
        fields = NOTE_FIELDS + ["mill"]
        extra_kwargs = {
            "note_date": {"required": False},
            "gst_percentage": {"required": False},
            "mill": {"required": False},
        }


class IrnSerializer(serializers.Serializer):
    irn = serializers.CharField(max_length=100)


class PurchaseSerializer(serializers.ModelSerializer):
    supplier_name = serializers.CharField(source="supplier.name_english", read_only=True)
    quantity = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal("0.01"))
    rate = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal("0.01"))

    class Meta:
        model = Purchase
        fields = [
            "id",
            "supplier",
            "supplier_name",
            "item",
            "mill",
            "quantity",
            "rate",
            "total_amount",
            "bill_serial_no",
            "purchase_date",
            "created_at",
        ]
        read_only_fields = ["total_amount", "created_at"]
        extra_kwargs = {"purchase_date": {"required": False}, "mill": {"required": False}}


class SupplierPaymentSerializer(serializers.ModelSerializer):
    supplier = serializers.PrimaryKeyRelatedField(queryset=Supplier.objects.all())
    amount = serializers.DecimalField(**POSITIVE)
    payment_method = serializers.ChoiceField(choices=PAYMENT_METHOD_CHOICES, required=False)

    class Meta:
        model = SupplierPayment
        fields = [
            "id",
            "payment_no",
            "supplier",
            "amount",
            "payment_date",
            "payment_method",
            "remarks",
            "created_at",
        ]
        read_only_fields = ["payment_no", "created_at"]
        extra_kwargs = {"payment_date": {"required": False}}
