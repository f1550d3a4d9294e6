from django.shortcuts import get_object_or_404
from rest_framework import permissions
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from masters.models import Customer, Supplier, Item
from masters.utils import parse_date_param

from .serializers import (
    CustomerLedgerEntrySerializer,
    SupplierLedgerEntrySerializer,
    StockLedgerEntrySerializer,
)
from .services.posting import CUSTOMERS, SUPPLIERS, STOCK, ledger_statement, mill_statement
from .services.references import document_numbers


def _date_range(request):
    return (
        parse_date_param(request.query_params.get("date_from")),
        parse_date_param(request.query_params.get("date_to")),
    )


def _party_payload(party):
    return {"id": party.pk, "code": party.code, "name": party.name_english}


@api_view(["GET"])
@permission_classes([permissions.IsAuthenticated])
def customer_ledger(request):
    """Statement for one customer; balances are the stored running balances."""
    customer_id = request.query_params.get("customer")
    if not customer_id:
        return Response({"error": "customer is required"}, status=400)
    customer = get_object_or_404(Customer, pk=customer_id)
    try:
        date_from, date_to = _date_range(request)
    except ValueError as exc:
        return Response({"error": str(exc)}, status=400)

    st = ledger_statement(CUSTOMERS, customer, date_from, date_to)
    ser = CustomerLedgerEntrySerializer(
        st.entries, many=True, context={"numbers": document_numbers(st.entries)}
    )
    return Response({
        "customer": _party_payload(customer),
        "opening_balance": st.opening_balance,
        "entries": ser.data,
        "total_debit": st.total_in,
        "total_credit": st.total_out,
        "closing_balance": st.closing_balance,
        "balance_label": "Balance Due" if st.closing_balance >= 0 else "Advance",
    })


@api_view(["GET"])
@permission_classes([permissions.IsAuthenticated])
def supplier_ledger(request):
    supplier_id = request.query_params.get("supplier")
    if not supplier_id:
        return Response({"error": "supplier is required"}, status=400)
    supplier = get_object_or_404(Supplier, pk=supplier_id)
    try:
        date_from, date_to = _date_range(request)
    except ValueError as exc:
        return Response({"error": str(exc)}, status=400)

    st = ledger_statement(SUPPLIERS, supplier, date_from, date_to)
    ser = SupplierLedgerEntrySerializer(
        st.entries, many=True, context={"numbers": document_numbers(st.entries)}
    )
    return Response({
        "supplier": _party_payload(supplier),
        "opening_balance": st.opening_balance,
        "entries": ser.data,
        "total_credit": st.total_in,
        "total_debit": st.total_out,
        "closing_balance": st.closing_balance,
    })


@api_view(["GET"])
@permission_classes([permissions.IsAuthenticated])
def stock_ledger(request):
    """Item statement; with ``?mill=`` every figure covers that mill only."""
    item_id = request.query_params.get("item")
    if not item_id:
        return Response({"error": "item is required"}, status=400)
    item = get_object_or_404(Item, pk=item_id)
    try:
        date_from, date_to = _date_range(request)
    except ValueError as exc:
        return Response({"error": str(exc)}, status=400)

    item_payload = {"id": item.pk, "code": item.code, "name": item.name_english, "unit": item.unit}
    mill = (request.query_params.get("mill") or "").strip().upper()
    if mill:
        st = mill_statement(item, mill, date_from, date_to)
        rows = StockLedgerEntrySerializer(st.entries, many=True).data
        for row, entry in zip(rows, st.entries):
            row["mill_balance"] = entry.mill_balance
        return Response({
            "item": item_payload,
            "mill": mill,
            "opening_balance": st.opening_balance,
            "entries": rows,
            "total_in": st.total_in,
            "total_out": st.total_out,
            "mill_net_quantity": st.closing_balance,
        })

    st = ledger_statement(STOCK, item, date_from, date_to)
    return Response({
        "item": item_payload,
        "opening_stock": item.opening_stock,
        "opening_balance": st.opening_balance,
        "entries": StockLedgerEntrySerializer(st.entries, many=True).data,
        "total_in": st.total_in,
        "total_out": st.total_out,
        "current_stock": st.closing_balance,
    })
