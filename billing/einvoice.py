"""E-invoice payloads (schema version 1.1) for sales, credit and debit notes.

``qr_payload`` is the compact document printed as a QR code once an IRN
has been obtained; the ``*_einvoice_json`` builders produce the full
upload document. Amounts are emitted as JSON numbers with two decimals.
"""

from __future__ import annotations

import json
from collections import OrderedDict

from django.conf import settings

from billing.gst import halve_gst, money, split_inclusive
from masters.models import company_for_location

SCHEMA_VERSION = "1.1"

DOC_TYPE_SALE = "INV"
NOTE_KINDS = {"credit": "CRN", "debit": "DBN"}


def _num(value) -> float:
    return float(money(value))


def _date(value) -> str:
    return value.strftime("%d/%m/%Y") if value else ""


def _state(value) -> str:
    return value or settings.DEFAULT_STATE_CODE


def note_kind(note) -> str:
    """``credit`` or ``debit`` for a note instance."""
    return "debit" if getattr(note, "DOC_TYPE", "") == "DBN" else "credit"


def _doc_type(document, kind: str | None) -> str:
    if kind is None:
        kind = "sale" if hasattr(document, "bill_serial_no") else note_kind(document)
    if kind == "sale":
        return DOC_TYPE_SALE
    try:
        return NOTE_KINDS[kind]
    except KeyError:
        raise ValueError(f"Unknown document kind '{kind}'") from None


def _doc_fields(document):
    """(number, date, amount, location) of a sale or note."""
    if hasattr(document, "bill_serial_no"):
        return document.bill_serial_no, document.sale_date, document.total_amount, document.loading_place
    return document.note_no, document.note_date, document.amount, getattr(document, "mill", None)


def seller_details(company, with_addr2: bool = False) -> OrderedDict:
    seller = OrderedDict()
    seller["Gstin"] = company.gstin
    seller["LglNm"] = company.company_name
    seller["Addr1"] = company.address_line1
    if with_addr2:
        seller["Addr2"] = company.address_line2 or ""
    seller["Loc"] = company.locality
    seller["Pin"] = str(company.pin_code or "")
    seller["Stcd"] = _state(company.state_code)
    return seller


def buyer_details(customer, with_addr2: bool = False) -> OrderedDict:
    buyer = OrderedDict()
    buyer["Gstin"] = customer.gstin or None
    buyer["LglNm"] = customer.name_english
    buyer["Pos"] = customer.place_of_supply or customer.state_code or settings.DEFAULT_STATE_CODE
    buyer["Addr1"] = customer.address_english or "Address Not Available"
    if with_addr2:
        buyer["Addr2"] = customer.address_tamil or ""
    buyer["Pin"] = customer.pin_code or "PIN Not Available"
    buyer["Stcd"] = _state(customer.state_code)
    return buyer


def qr_payload(document, kind: str | None = None, company=None) -> OrderedDict:
    """Signed-QR style summary of a sale or note.

    ``kind`` is ``sale``, ``credit`` or ``debit``; it is inferred from the
    instance when omitted.
    """
    number, doc_date, amount, location = _doc_fields(document)
    company = company or company_for_location(location)
    payload = OrderedDict()
    payload["Version"] = SCHEMA_VERSION
    payload["TxnDtls"] = OrderedDict([("TaxSch", "GST"), ("SupTyp", "B2B")])
    payload["DocDtls"] = OrderedDict(
        [("Typ", _doc_type(document, kind)), ("No", number), ("Dt", _date(doc_date))]
    )
    payload["SellerDtls"] = seller_details(company)
    payload["BuyerDtls"] = buyer_details(document.customer)
    payload["ValDtls"] = OrderedDict([("TotInvVal", _num(amount))])
    payload["IRN"] = document.irn or ""
    return payload


def qr_text(document, kind: str | None = None, company=None) -> str:
    return json.dumps(qr_payload(document, kind, company), separators=(",", ":"))


def _hsn(item) -> str:
    if item is not None and item.hsn_no:
        return item.hsn_no
    return settings.DEFAULT_HSN_CODE


def note_einvoice_json(note, kind: str | None = None, company=None) -> OrderedDict:
    """Upload document of a credit or debit note (single GST inclusive line)."""
    kind = kind or note_kind(note)
    company = company or company_for_location(getattr(note, "mill", None))
    split = split_inclusive(note.amount, note.gst_percentage)

    doc = OrderedDict()
    doc["Version"] = SCHEMA_VERSION
    doc["TxnDtls"] = OrderedDict([("TaxSch", "GST"), ("SupTyp", "B2B")])
    doc["DocDtls"] = OrderedDict(
        [("Typ", _doc_type(note, kind)), ("No", note.note_no), ("Dt", _date(note.note_date))]
    )
    doc["SellerDtls"] = seller_details(company, with_addr2=True)
    doc["BuyerDtls"] = buyer_details(note.customer, with_addr2=True)
    doc["ValDtls"] = OrderedDict([
        ("AssVal", _num(split.taxable)),
        ("CgstVal", _num(split.cgst)),
        ("SgstVal", _num(split.sgst)),
        ("IgstVal", 0),
        ("TotInvVal", _num(split.total)),
    ])
    doc["ItemList"] = [OrderedDict([
        ("SlNo", "1"),
        ("IsServc", "N"),
        ("HsnCd", _hsn(note.item)),
        ("Qty", 1),
        ("Unit", "NOS"),
        ("UnitPrice", _num(split.taxable)),
        ("TotAmt", _num(split.taxable)),
        ("Discount", 0),
        ("PreTaxVal", _num(split.taxable)),
        ("AssAmt", _num(split.taxable)),
        ("GstRt", float(split.rate)),
        ("IgstAmt", 0),
        ("CgstAmt", _num(split.cgst)),
        ("SgstAmt", _num(split.sgst)),
        ("TotItemVal", _num(split.total)),
    ])]
    if note.irn:
        doc["IRN"] = note.irn
    return doc


def sale_einvoice_json(sale, company=None) -> OrderedDict:
    """Upload document of a sale invoice."""
    company = company or company_for_location(sale.loading_place)
    item, customer = sale.item, sale.customer

    doc = OrderedDict()
    doc["Version"] = SCHEMA_VERSION
    doc["TranDtls"] = OrderedDict(
        [("TaxSch", "GST"), ("SupTyp", "B2B"), ("RegRev", "N"), ("IgstOnIntra", "N")]
    )
    doc["DocDtls"] = OrderedDict(
        [("Typ", DOC_TYPE_SALE), ("No", sale.bill_serial_no), ("Dt", _date(sale.sale_date))]
    )
    doc["SellerDtls"] = seller_details(company, with_addr2=True)
    buyer = buyer_details(customer, with_addr2=True)
    buyer["Ph"] = customer.phone or None
    buyer["Em"] = customer.email or None
    doc["BuyerDtls"] = buyer
    doc["ItemList"] = [OrderedDict([
        ("SlNo", "1"),
        ("PrdDesc", item.name_english),
        ("IsServc", "N"),
        ("HsnCd", _hsn(item)),
        ("Qty", _num(sale.quantity)),
        ("Unit", item.unit),
        ("UnitPrice", _num(sale.rate)),
        ("TotAmt", _num(sale.taxable_amount)),
        ("Discount", 0),
        ("PreTaxVal", _num(sale.taxable_amount)),
        ("AssAmt", _num(sale.taxable_amount)),
        ("GstRt", float(sale.gst_percentage)),
        ("IgstAmt", 0),
        ("CgstAmt", _num(_cgst(sale))),
        ("SgstAmt", _num(sale.gst_amount - _cgst(sale))),
        ("TotItemVal", _num(sale.total_amount)),
    ])]
    doc["ValDtls"] = OrderedDict([
        ("AssVal", _num(sale.taxable_amount)),
        ("CgstVal", _num(_cgst(sale))),
        ("SgstVal", _num(sale.gst_amount - _cgst(sale))),
        ("IgstVal", 0),
        ("Discount", 0),
        ("TotInvVal", _num(sale.total_amount)),
    ])
    if sale.irn:
        doc["IRN"] = sale.irn
    return doc


def _cgst(sale):
    return halve_gst(money(sale.gst_amount))[0]


def einvoice_filename(document) -> str:
    if hasattr(document, "bill_serial_no"):
        return f"einvoice_{document.bill_serial_no}.json"
    return f"{note_kind(document)}-note-{document.note_no}-einvoice.json"
