"""GST arithmetic.

All results are rounded to two decimals with ROUND_HALF_UP. The tax is
split into equal CGST and SGST halves; when the tax has an odd paisa the
extra paisa goes to CGST so that ``taxable + cgst + sgst == total``.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP

TWOPLACES = Decimal("0.01")
HUNDRED = Decimal("100")


def money(v) -> Decimal:
    if v is None or v == "":
        return Decimal("0.00")
    return Decimal(str(v)).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class GstBreakdown:
    taxable: Decimal
    rate: Decimal
    gst: Decimal
    cgst: Decimal
    sgst: Decimal
    total: Decimal


def halve_gst(gst: Decimal) -> tuple[Decimal, Decimal]:
    cgst = (gst / 2).quantize(TWOPLACES, rounding=ROUND_HALF_UP)
    return cgst, gst - cgst


def split_inclusive(total, rate) -> GstBreakdown:
    """Back-calculate the taxable value from a tax-inclusive total.

    >>> split_inclusive(118, 18).taxable
    Decimal('100.00')
    """
    total = money(total)
    rate = Decimal(str(rate or 0))
    taxable = money(total / (1 + rate / HUNDRED))
    gst = total - taxable
    cgst, sgst = halve_gst(gst)
    return GstBreakdown(taxable=taxable, rate=rate, gst=gst, cgst=cgst, sgst=sgst, total=total)


def split_exclusive(amount, rate) -> GstBreakdown:
    """Add GST at ``rate`` percent on top of a taxable amount."""
    taxable = money(amount)
    rate = Decimal(str(rate or 0))
    gst = money(taxable * rate / HUNDRED)
    cgst, sgst = halve_gst(gst)
    return GstBreakdown(taxable=taxable, rate=rate, gst=gst, cgst=cgst, sgst=sgst, total=taxable + gst)


def line_total(quantity, rate, gst_rate) -> GstBreakdown:
    """Quantity x rate plus GST, as billed on a sale."""
    amount = Decimal(str(quantity or 0)) * Decimal(str(rate or 0))
    return split_exclusive(amount, gst_rate)
