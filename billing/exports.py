"""GST sales register export (Excel)."""

from __future__ import annotations

import logging
from decimal import Decimal
from io import BytesIO

from django.core.exceptions import ValidationError
from django.core.files.base import ContentFile
from openpyxl import Workbook
from openpyxl.styles import Font

from .gst import split_exclusive
from .models import Sale

logger = logging.getLogger(__name__)

SPECIAL_SERIES_PREFIX = "D"

COLUMNS = [
    "", "DATE", "BILL NO", "PARTY", "GSTIN", "FEED", "HSN", "KG", "BAGS",
    "TOTAL WEIGHT", "RATE", "AMOUNT", "GST%", "CGST", "SGST", "DISCOUNT",
    "ADD AMOUNT", "FINAL TOTAL",
]


def report_sales(start, end, exclude_d_series: bool = True):
    qs = (
        Sale.objects.filter(sale_date__gte=start, sale_date__lte=end)
        .select_related("customer", "item")
        .order_by("sale_date", "bill_serial_no")
    )
    if exclude_d_series:
        qs = qs.exclude(bill_serial_no__startswith=SPECIAL_SERIES_PREFIX)
    return qs


def gst_report_rows(start, end, exclude_d_series: bool = True) -> list[list]:
    rows = []
    for index, sale in enumerate(report_sales(start, end, exclude_d_series), start=1):
        item = sale.item
        split = split_exclusive(Decimal(sale.quantity) * Decimal(sale.rate), sale.gst_percentage)
        rows.append([
            index,
            sale.sale_date.strftime("%d/%m/%Y"),
            sale.bill_serial_no,
            sale.customer.name_english,
            sale.customer.gstin,
            item.name_english,
            item.hsn_no,
            sale.quantity,
            "",
            sale.quantity,
            sale.rate,
            split.taxable,
            sale.gst_percentage,
            split.cgst,
            split.sgst,
            "",
            "",
            split.total,
        ])
    return rows


def gst_summary(start, end, exclude_d_series: bool = True) -> dict:
    taxable = cgst = sgst = total = Decimal("0.00")
    count = 0
    for sale in report_sales(start, end, exclude_d_series):
        split = split_exclusive(Decimal(sale.quantity) * Decimal(sale.rate), sale.gst_percentage)
        taxable += split.taxable
        cgst += split.cgst
        sgst += split.sgst
        total += split.total
        count += 1
    return {
        "totalTaxableAmount": taxable,
        "totalCGST": cgst,
        "totalSGST": sgst,
        "grandTotal": total,
        "recordCount": count,
    }


def gst_report_filename(start, end) -> str:
    return f"GST-Report-{start}-to-{end}.xlsx"


def build_gst_workbook(start, end, exclude_d_series: bool = True) -> Workbook:
    rows = gst_report_rows(start, end, exclude_d_series)
    if not rows:
        message = "No sales data found for the selected period"
        if exclude_d_series:
            message += " (excluding D series)"
        raise ValidationError(message)

    wb = Workbook()
    ws = wb.active
    ws.title = "GST Report"
    ws.append(COLUMNS)
    for cell in ws[1]:
        cell.font = Font(bold=True)
    for row in rows:
        ws.append([float(v) if isinstance(v, Decimal) else v for v in row])
    for letter, width in zip("ABCDEFGHIJKLMNOPQR", [5, 12, 10, 30, 18, 20, 8, 8, 8, 13, 10, 13, 7, 11, 11, 10, 11, 13]):
        ws.column_dimensions[letter].width = width
    logger.info("GST report %s to %s built with %d rows", start, end, len(rows))
    return wb


def gst_workbook_file(start, end, exclude_d_series: bool = True) -> ContentFile:
    wb = build_gst_workbook(start, end, exclude_d_series)
    buffer = BytesIO()
    wb.save(buffer)
    return ContentFile(buffer.getvalue(), name=gst_report_filename(start, end))
