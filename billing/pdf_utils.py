"""PDF and QR rendering for invoices and notes."""

from io import BytesIO

import qrcode
from django.core.files.base import ContentFile
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas
from reportlab.platypus import Table, TableStyle

from masters.models import company_for_location

from .einvoice import note_kind, qr_text
from .gst import halve_gst, money, split_inclusive

FONT = "Helvetica"
FONT_BOLD = "Helvetica-Bold"

GRID_STYLE = [
    ("GRID", (0, 0), (-1, -1), 0.25, colors.HexColor("#2b3942")),
    ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#e8edf1")),
    ("FONT", (0, 0), (-1, -1), FONT, 9),
    ("FONT", (0, 0), (-1, 0), FONT_BOLD, 9),
    ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
]


def qr_png(document, kind=None, box_size=10, border=4) -> bytes:
    """PNG bytes of the e-invoice QR code for a sale or note."""
    qr = qrcode.QRCode(box_size=box_size, border=border)
    qr.add_data(qr_text(document, kind))
    qr.make(fit=True)
    img = qr.make_image(fill_color="black", back_color="white")
    buffer = BytesIO()
    img.save(buffer, format="PNG")
    return buffer.getvalue()


def _fmt(value) -> str:
    return f"{money(value):,.2f}"


def _draw_company_header(c, company, title, width, top):
    c.setFont(FONT_BOLD, 16)
    c.drawCentredString(width / 2, top, company.company_name or "")
    c.setFont(FONT, 9)
    y = top - 14
    for line in (company.address_line1, company.address_line2, company.locality):
        if line:
            c.drawCentredString(width / 2, y, line)
            y -= 11
    if company.gstin:
        c.drawCentredString(width / 2, y, f"GSTIN: {company.gstin}")
        y -= 11
    c.setFont(FONT_BOLD, 13)
    c.drawCentredString(width / 2, y - 8, title)
    return y - 28


def _draw_buyer(c, customer, x, y):
    c.setFont(FONT_BOLD, 10)
    c.drawString(x, y, "Bill To:")
    c.setFont(FONT, 9)
    lines = [
        customer.name_english,
        customer.address_english,
        f"PIN: {customer.pin_code}" if customer.pin_code else "",
        f"GSTIN: {customer.gstin}" if customer.gstin else "",
        f"State Code: {customer.state_code}",
    ]
    for line in lines:
        if line:
            y -= 12
            c.drawString(x, y, line)
    return y - 16


def _draw_table(c, data, col_widths, x, y, width, height):
    table = Table(data, colWidths=col_widths)
    table.setStyle(TableStyle(GRID_STYLE + [("ALIGN", (1, 1), (-1, -1), "RIGHT")]))
    _, h = table.wrapOn(c, width, height)
    table.drawOn(c, x, y - h)
    return y - h - 16


def _draw_qr(c, document, kind, x, y, size=110):
    img = ImageReader(BytesIO(qr_png(document, kind)))
    c.drawImage(img, x, y - size, size, size)


def generate_invoice_pdf(sale):
    """Tax invoice for a sale."""
    company = company_for_location(sale.loading_place)
    buffer = BytesIO()
    c = canvas.Canvas(buffer, pagesize=A4)
    width, height = A4
    left = 50

    y = _draw_company_header(c, company, "TAX INVOICE", width, height - 60)
    c.setFont(FONT, 10)
    c.drawString(left, y, f"Bill No: {sale.bill_serial_no}")
    c.drawRightString(width - left, y, f"Date: {sale.sale_date:%d/%m/%Y}")
    if sale.outward_entry_id:
        y -= 13
        c.drawString(left, y, f"Vehicle: {sale.outward_entry.lorry_no}")
    y = _draw_buyer(c, sale.customer, left, y - 20)

    cgst, sgst = halve_gst(money(sale.gst_amount))
    data = [
        ["Item", "HSN", "Qty", "Rate", "Taxable", "CGST", "SGST", "Total"],
        [
            sale.item.name_english,
            sale.item.hsn_no,
            f"{sale.quantity} {sale.item.unit}",
            _fmt(sale.rate),
            _fmt(sale.taxable_amount),
            _fmt(cgst),
            _fmt(sgst),
            _fmt(sale.total_amount),
        ],
    ]
    y = _draw_table(c, data, [120, 45, 65, 55, 65, 50, 50, 65], left, y, width - 2 * left, height)
    c.setFont(FONT_BOLD, 11)
    c.drawRightString(width - left, y, f"Grand Total: Rs. {_fmt(sale.total_amount)}")
    y -= 24

    if sale.irn:
        c.setFont(FONT, 8)
        c.drawString(left, y, f"IRN: {sale.irn}")
        _draw_qr(c, sale, "sale", width - left - 110, y - 6)
        y -= 20

    if company.bank_name:
        c.setFont(FONT_BOLD, 10)
        c.drawString(left, y - 10, "Bank Details")
        c.setFont(FONT, 9)
        c.drawString(left, y - 23, f"{company.bank_name} {company.bank_branch}".strip())
        c.drawString(left, y - 35, f"A/c No: {company.bank_account_no}  IFSC: {company.bank_ifsc}")

    c.showPage()
    c.save()
    pdf_content = buffer.getvalue()
    buffer.close()
    return ContentFile(pdf_content, name=f"invoice_{sale.bill_serial_no}.pdf")


def generate_note_pdf(note):
    """Credit or debit note with GST back-calculated from the inclusive amount."""
    kind = note_kind(note)
    company = company_for_location(getattr(note, "mill", None))
    split = split_inclusive(note.amount, note.gst_percentage)
    buffer = BytesIO()
    c = canvas.Canvas(buffer, pagesize=A4)
    width, height = A4
    left = 50

    title = "DEBIT NOTE" if kind == "debit" else "CREDIT NOTE"
    y = _draw_company_header(c, company, title, width, height - 60)
    c.setFont(FONT, 10)
    c.drawString(left, y, f"Note No: {note.note_no}")
    c.drawRightString(width - left, y, f"Date: {note.note_date:%d/%m/%Y}")
    if note.reference_bill_no:
        y -= 13
        c.drawString(left, y, f"Reference Bill: {note.reference_bill_no}")
    y = _draw_buyer(c, note.customer, left, y - 20)

    data = [
        ["Description", "Amount"],
        ["Taxable Amount", _fmt(split.taxable)],
        [f"CGST @ {split.rate / 2}%", _fmt(split.cgst)],
        [f"SGST @ {split.rate / 2}%", _fmt(split.sgst)],
        ["Total", _fmt(split.total)],
    ]
    y = _draw_table(c, data, [300, 120], left, y, width - 2 * left, height)
    c.setFont(FONT, 9)
    c.drawString(left, y, f"Reason: {note.reason}")
    y -= 16
    if note.irn:
        c.setFont(FONT, 8)
        c.drawString(left, y, f"IRN: {note.irn}")
        _draw_qr(c, note, kind, width - left - 110, y - 6)

    c.showPage()
    c.save()
    pdf_content = buffer.getvalue()
    buffer.close()
    return ContentFile(pdf_content, name=f"{kind}_note_{note.note_no}.pdf")
