import json
import logging
from itertools import chain

from django.core.exceptions import ValidationError as DjangoValidationError
from django.http import HttpResponse
from rest_framework import permissions, viewsets
from rest_framework.decorators import action, api_view, permission_classes
from rest_framework.response import Response

from masters.permissions import IsAdminRole
from masters.services.numbering import NumberingError
from masters.utils import parse_date_param

from .einvoice import einvoice_filename, note_einvoice_json, sale_einvoice_json
from .exports import gst_report_filename, gst_summary, gst_workbook_file
from .models import Sale, Receipt, CreditNote, DebitNote, Purchase, SupplierPayment
from .pdf_utils import generate_invoice_pdf, generate_note_pdf, qr_png
from .serializers import (
    SaleSerializer,
    SaleFromEntrySerializer,
    DirectSaleSerializer,
    SaleEditSerializer,
    ReceiptSerializer,
    CreditNoteSerializer,
    DebitNoteSerializer,
    IrnSerializer,
    PurchaseSerializer,
    SupplierPaymentSerializer,
)
from .services.notes import create_credit_note, create_debit_note, update_note_irn
from .services.purchases import record_purchase, record_supplier_payment
from .services.receipts import record_receipt
from .services.sales import (
    AlreadyBilled,
    create_direct_sale,
    create_sale_from_entry,
    edit_sale,
    next_bill_no as preview_bill_no,
)
from .tasks import export_gst_report

logger = logging.getLogger(__name__)

TRUE_VALUES = ("1", "true", "yes")


def error_response(exc, status=400):
    if isinstance(exc, DjangoValidationError):
        return Response({"error": "; ".join(exc.messages)}, status=status)
    return Response({"error": str(exc)}, status=status)


def file_response(content, name, content_type):
    resp = HttpResponse(content, content_type=content_type)
    resp["Content-Disposition"] = f'attachment; filename="{name}"'
    return resp


class DateFilterMixin:
    """``?customer=``, ``?date_from=`` and ``?date_to=`` on document lists."""

    date_field = ""

    def get_queryset(self):
        qs = super().get_queryset()
        params = self.request.query_params
        for name in ("customer", "supplier", "item"):
            if params.get(name) and hasattr(qs.model, name):
                qs = qs.filter(**{f"{name}_id": params[name]})
        date_from = parse_date_param(params.get("date_from"))
        date_to = parse_date_param(params.get("date_to"))
        if date_from:
            qs = qs.filter(**{f"{self.date_field}__gte": date_from})
        if date_to:
            qs = qs.filter(**{f"{self.date_field}__lte": date_to})
        return qs

    def list(self, request, *args, **kwargs):
        try:
            return super().list(request, *args, **kwargs)
        except ValueError as exc:
            return error_response(exc)


class DocumentActionsMixin:
    """PDF, e-invoice JSON and QR downloads for a sale or note."""

    def _pdf(self, obj):
        raise NotImplementedError

    def _einvoice(self, obj):
        raise NotImplementedError

    @action(detail=True, methods=["get"])
    def pdf(self, request, pk=None):
        pdf_file = self._pdf(self.get_object())
        return file_response(pdf_file.read(), pdf_file.name, "application/pdf")

    @action(detail=True, methods=["get"])
    def einvoice(self, request, pk=None):
        obj = self.get_object()
        body = json.dumps(self._einvoice(obj), indent=2)
        return file_response(body, einvoice_filename(obj), "application/json")

    @action(detail=True, methods=["get"])
    def qr(self, request, pk=None):
        return HttpResponse(qr_png(self.get_object()), content_type="image/png")


class SaleViewSet(DateFilterMixin, DocumentActionsMixin, viewsets.ReadOnlyModelViewSet):
    queryset = Sale.objects.select_related("customer", "item", "outward_entry")
    serializer_class = SaleSerializer
    permission_classes = [permissions.IsAuthenticated]
    date_field = "sale_date"

    def _pdf(self, obj):
        return generate_invoice_pdf(obj)

    def _einvoice(self, obj):
        return sale_einvoice_json(obj)

    @action(detail=False, methods=["post"], url_path="from-entry")
    def from_entry(self, request):
        ser = SaleFromEntrySerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        data = ser.validated_data
        try:
            sale = create_sale_from_entry(
                data["outward_entry"],
                data["rate"],
                user=request.user,
                sale_date=data.get("sale_date"),
                special=data["special"],
            )
        except AlreadyBilled as exc:
            return error_response(exc, status=409)
        except (DjangoValidationError, NumberingError) as exc:
            return error_response(exc)
        return Response(SaleSerializer(sale).data, status=201)

    @action(detail=False, methods=["post"])
    def direct(self, request):
        ser = DirectSaleSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        try:
            sale = create_direct_sale(ser.validated_data, request.user)
        except (DjangoValidationError, NumberingError) as exc:
            return error_response(exc)
        return Response(SaleSerializer(sale).data, status=201)

    @action(detail=False, methods=["get"], url_path="next-bill-no")
    def next_bill_no(self, request):
        place = request.query_params.get("loading_place")
        special = request.query_params.get("special", "").lower() in TRUE_VALUES
        try:
            number = preview_bill_no(place, special)
        except (DjangoValidationError, NumberingError) as exc:
            return error_response(exc)
        return Response({"bill_serial_no": number})

    def partial_update(self, request, pk=None):
        if not IsAdminRole().has_permission(request, self):
            return Response({"error": "Admin role required."}, status=403)
        sale = self.get_object()
        ser = SaleEditSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        try:
            sale = edit_sale(sale.pk, ser.validated_data, request.user)
        except DjangoValidationError as exc:
            return error_response(exc)
        return Response(SaleSerializer(sale).data)


class ServiceCreateMixin:
    """Route ``create`` through a unit-of-work service function."""

    create_service = None

    def create(self, request, *args, **kwargs):
        ser = self.get_serializer(data=request.data)
        ser.is_valid(raise_exception=True)
        try:
            obj = type(self).create_service(ser.validated_data, request.user)
        except (DjangoValidationError, NumberingError) as exc:
            return error_response(exc)
        return Response(self.get_serializer(obj).data, status=201)


class DocumentViewSet(ServiceCreateMixin, DateFilterMixin, viewsets.ReadOnlyModelViewSet):
    permission_classes = [permissions.IsAuthenticated]


class ReceiptViewSet(DocumentViewSet):
    queryset = Receipt.objects.select_related("customer")
    serializer_class = ReceiptSerializer
    date_field = "receipt_date"
    create_service = record_receipt


class NoteViewSet(DocumentActionsMixin, DocumentViewSet):
    date_field = "note_date"

    def _pdf(self, obj):
        return generate_note_pdf(obj)

    def _einvoice(self, obj):
        return note_einvoice_json(obj)

    @action(detail=True, methods=["post"])
    def irn(self, request, pk=None):
        note = self.get_object()
        ser = IrnSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        try:
            note = update_note_irn(note, ser.validated_data["irn"])
        except DjangoValidationError as exc:
            return error_response(exc)
        return Response(self.get_serializer(note).data)


class CreditNoteViewSet(NoteViewSet):
    queryset = CreditNote.objects.select_related("customer", "item")
    serializer_class = CreditNoteSerializer
    create_service = create_credit_note


class DebitNoteViewSet(NoteViewSet):
    queryset = DebitNote.objects.select_related("customer", "item")
    serializer_class = DebitNoteSerializer
    create_service = create_debit_note


class PurchaseViewSet(DocumentViewSet):
    queryset = Purchase.objects.select_related("supplier", "item")
    serializer_class = PurchaseSerializer
    date_field = "purchase_date"
    create_service = record_purchase


class SupplierPaymentViewSet(DocumentViewSet):
    queryset = SupplierPayment.objects.select_related("supplier")
    serializer_class = SupplierPaymentSerializer
    date_field = "payment_date"
    create_service = record_supplier_payment


def _bill_row(kind, number, doc_date, customer, amount, irn, pk):
    return {
        "type": kind,
        "id": pk,
        "number": number,
        "date": doc_date,
        "customer": customer.name_english,
        "customer_id": customer.pk,
        "amount": amount,
        "irn": irn,
    }


@api_view(["GET"])
@permission_classes([permissions.IsAuthenticated])
def bills(request):
    """Sales, credit notes and debit notes in one list, newest first."""
    customer = request.query_params.get("customer")
    sales = Sale.objects.select_related("customer")
    credits = CreditNote.objects.select_related("customer")
    debits = DebitNote.objects.select_related("customer")
    if customer:
        sales, credits, debits = (
            qs.filter(customer_id=customer) for qs in (sales, credits, debits)
        )
    rows = chain(
        (_bill_row("sale", s.bill_serial_no, s.sale_date, s.customer, s.total_amount, s.irn, s.pk)
         for s in sales),
        (_bill_row("credit_note", n.note_no, n.note_date, n.customer, n.amount, n.irn, n.pk)
         for n in credits),
        (_bill_row("debit_note", n.note_no, n.note_date, n.customer, n.amount, n.irn, n.pk)
         for n in debits),
    )
    ordered = sorted(rows, key=lambda r: (r["date"], r["id"]), reverse=True)
    return Response(ordered)


def _report_params(params):
    start = parse_date_param(params.get("start"))
    end = parse_date_param(params.get("end"))
    if not start or not end:
        raise ValueError("start and end dates are required")
    exclude_d = str(params.get("exclude_d", "1")).lower() in TRUE_VALUES
    return start, end, exclude_d


@api_view(["GET"])
@permission_classes([permissions.IsAuthenticated])
def gst_report(request):
    try:
        start, end, exclude_d = _report_params(request.query_params)
        content = gst_workbook_file(start, end, exclude_d)
    except ValueError as exc:
        return error_response(exc)
    except DjangoValidationError as exc:
        return error_response(exc, status=404)
    return file_response(
        content.read(),
        gst_report_filename(start, end),
        "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    )


@api_view(["GET"])
@permission_classes([permissions.IsAuthenticated])
def gst_report_summary(request):
    try:
        start, end, exclude_d = _report_params(request.query_params)
    except ValueError as exc:
        return error_response(exc)
    return Response(gst_summary(start, end, exclude_d))


@api_view(["POST"])
@permission_classes([permissions.IsAuthenticated])
def gst_report_export(request):
    """Queue the workbook build; the task stores it under ``reports/``."""
    try:
        start, end, exclude_d = _report_params(request.data)
    except ValueError as exc:
        return error_response(exc)
    result = export_gst_report.delay(start.isoformat(), end.isoformat(), exclude_d)
    logger.info("Queued GST export %s to %s as task %s", start, end, result.id)
    return Response({"task_id": result.id}, status=202)
