import datetime
from decimal import Decimal
from io import BytesIO

import pytest
from django.core.exceptions import ValidationError
from django.core.files.storage import default_storage
from openpyxl import load_workbook

from billing.exports import COLUMNS, build_gst_workbook, gst_report_rows, gst_summary, gst_workbook_file
from billing.services.sales import create_direct_sale
from billing.tasks import export_gst_report

START = datetime.date(2024, 6, 1)
END = datetime.date(2024, 6, 30)


@pytest.fixture
def sales(customer, item, user, today):
    base = {"customer": customer, "item": item, "sale_date": today}
    regular = create_direct_sale({**base, "quantity": "500", "rate": "20"}, user)
    special = create_direct_sale({**base, "quantity": "100", "rate": "20", "special": True}, user)
    create_direct_sale({**base, "quantity": "1", "rate": "1", "sale_date": datetime.date(2024, 7, 1)}, user)
    return regular, special


@pytest.mark.django_db
def test_rows_exclude_special_series(sales):
    regular, _ = sales
    rows = gst_report_rows(START, END)
    assert len(rows) == 1
    row = dict(zip(COLUMNS, rows[0]))
    assert row[""] == 1
    assert row["DATE"] == "15/06/2024"
    assert row["BILL NO"] == regular.bill_serial_no
    assert row["KG"] == row["TOTAL WEIGHT"] == Decimal("500.00")
    assert row["BAGS"] == ""
    assert row["AMOUNT"] == Decimal("10000.00")
    assert row["CGST"] == row["SGST"] == Decimal("250.00")
    assert row["FINAL TOTAL"] == Decimal("10500.00")

    assert len(gst_report_rows(START, END, exclude_d_series=False)) == 2


@pytest.mark.django_db
def test_summary(sales):
    summary = gst_summary(START, END, exclude_d_series=False)
    assert summary["recordCount"] == 2
    assert summary["totalTaxableAmount"] == Decimal("12000.00")
    assert summary["totalCGST"] == Decimal("300.00")
    assert summary["grandTotal"] == Decimal("12600.00")


@pytest.mark.django_db
def test_empty_period_message(sales):
    with pytest.raises(ValidationError) as exc:
        build_gst_workbook(datetime.date(2023, 1, 1), datetime.date(2023, 1, 31))
    assert exc.value.messages == ["No sales data found for the selected period (excluding D series)"]

    with pytest.raises(ValidationError) as exc:
        build_gst_workbook(datetime.date(2023, 1, 1), datetime.date(2023, 1, 31), exclude_d_series=False)
    assert exc.value.messages == ["No sales data found for the selected period"]


@pytest.mark.django_db
def test_workbook_reads_back(sales):
    content = gst_workbook_file(START, END)
    assert content.name == "GST-Report-2024-06-01-to-2024-06-30.xlsx"
    ws = load_workbook(BytesIO(content.read())).active
    assert ws.title == "GST Report"
    assert [c.value for c in ws[1]][1:] == COLUMNS[1:]
    assert ws.max_row == 2
    assert ws["R2"].value == 10500.0


@pytest.mark.django_db
def test_export_task_stores_workbook(sales):
    path = export_gst_report("2024-06-01", "2024-06-30", False)
    try:
        assert path.startswith("reports/GST-Report-2024-06-01-to-2024-06-30")
        with default_storage.open(path) as fh:
            ws = load_workbook(BytesIO(fh.read())).active
        assert ws.max_row == 3
    finally:
        default_storage.delete(path)
