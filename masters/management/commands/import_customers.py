from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional

from django.core.management.base import BaseCommand, CommandError
from django.db import transaction
from openpyxl import load_workbook

from masters.models import Customer
from masters.services.parties import create_customer

# Header text (lower-cased) -> Customer field
HEADER_ALIASES = {
    "name": "name_english",
    "customer": "name_english",
    "customer name": "name_english",
    "party": "name_english",
    "tamil name": "name_tamil",
    "contact": "contact_person",
    "contact person": "contact_person",
    "phone": "phone",
    "mobile": "phone",
    "email": "email",
    "address": "address_english",
    "gstin": "gstin",
    "gst no": "gstin",
    "pin": "pin_code",
    "pin code": "pin_code",
    "pincode": "pin_code",
    "state code": "state_code",
    "place of supply": "place_of_supply",
}


def _norm(s: object) -> str:
    return ("" if s is None else str(s)).strip().lower()


def _cell_text(v: object) -> str:
    if v is None:
        return ""
    # Excel hands PIN codes and phone numbers back as floats
    if isinstance(v, float) and v.is_integer():
        return str(int(v))
    return str(v).strip()


def _header_map(vals: List[object]) -> Dict[str, int]:
    mp: Dict[str, int] = {}
    for i, v in enumerate(vals):
        field = HEADER_ALIASES.get(_norm(v))
        if field and field not in mp:
            mp[field] = i
    return mp


def _find_header(rows: List[List[object]]) -> Optional[int]:
    for idx, vals in enumerate(rows[:20]):
        if "name_english" in _header_map(vals):
            return idx
    return None


class Command(BaseCommand):
    help = "Import customers from an .xlsx sheet (first sheet, header row with at least a name column)."

    def add_arguments(self, parser):
        parser.add_argument("path", help="Path to the .xlsx file")
        parser.add_argument("--sheet", help="Worksheet name (defaults to the first sheet)")
        parser.add_argument("--dry-run", action="store_true", help="Parse and report without saving")

    def handle(self, *args, **opts):
        path = Path(opts["path"])
        if not path.exists():
            raise CommandError(f"File not found: {path}")

        wb = load_workbook(filename=str(path), data_only=True, read_only=True)
        ws = wb[opts["sheet"]] if opts.get("sheet") else wb.worksheets[0]
        rows = [list(r) for r in ws.iter_rows(values_only=True)]

        header_idx = _find_header(rows)
        if header_idx is None:
            raise CommandError("Could not find a header row with a customer name column")
        columns = _header_map(rows[header_idx])

        created = skipped = 0
        with transaction.atomic():
            for vals in rows[header_idx + 1:]:
                data = {}
                for field, col in columns.items():
                    data[field] = _cell_text(vals[col]) if col < len(vals) else ""
                name = data.get("name_english", "")
                if not name:
                    continue
                gstin = data.get("gstin", "").upper()
                dup = Customer.objects.filter(name_english__iexact=name)
                if gstin:
                    dup = Customer.objects.filter(gstin=gstin) | dup
                if dup.exists():
                    skipped += 1
                    continue
                data = {k: v for k, v in data.items() if v}
                if not opts["dry_run"]:
                    create_customer(data)
                created += 1
            if opts["dry_run"]:
                transaction.set_rollback(True)

        self.stdout.write(self.style.SUCCESS(
            f"Customers imported: {created}, skipped (already present): {skipped}"
        ))
