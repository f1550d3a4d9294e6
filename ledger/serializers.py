from rest_framework import serializers

from .models import CustomerLedgerEntry, SupplierLedgerEntry, StockLedgerEntry
from .services.references import describe

LEDGER_FIELDS = [
    "id",
    "transaction_date",
    "transaction_type",
    "reference_id",
    "document_no",
    "description",
    "debit_amount",
    "credit_amount",
    "balance",
]


class DocumentNumberMixin(serializers.Serializer):
    """Adds ``document_no`` and a decorated description.

    Expects ``numbers`` (from ``document_numbers``) in the serializer context.
    """

    document_no = serializers.SerializerMethodField()
    description = serializers.SerializerMethodField()

    def get_document_no(self, obj):
        numbers = self.context.get("numbers", {})
        return numbers.get((obj.transaction_type, obj.reference_id), "")

    def get_description(self, obj):
        return describe(obj, self.context.get("numbers", {}))


class CustomerLedgerEntrySerializer(DocumentNumberMixin, serializers.ModelSerializer):
    class Meta:
        model = CustomerLedgerEntry
        fields = LEDGER_FIELDS


class SupplierLedgerEntrySerializer(DocumentNumberMixin, serializers.ModelSerializer):
    class Meta:
        model = SupplierLedgerEntry
        fields = LEDGER_FIELDS


class StockLedgerEntrySerializer(serializers.ModelSerializer):
    class Meta:
        model = StockLedgerEntry
        fields = [
            "id",
            "transaction_date",
            "transaction_type",
            "reference_id",
            "mill",
            "description",
            "quantity_in",
            "quantity_out",
            "running_stock",
        ]
