import datetime
from decimal import Decimal

from django.conf import settings
from django.contrib.auth.models import User
from django.test import TestCase, override_settings
from rest_framework.test import APIRequestFactory, force_authenticate

from billing import views
from billing.models import DebitNote
from billing.services.notes import create_credit_note
from billing.services.sales import create_direct_sale
from logistics.services.weighment import record_load_weight, record_outward_entry
from masters.models import Item, UserRole
from masters.services.parties import create_customer


class BillingApiTests(TestCase):
    def setUp(self):
        self.factory = APIRequestFactory()
        self.user = User.objects.create_user(username="clerk", password="pass")
        self.admin = User.objects.create_user(username="boss", password="pass")
        UserRole.objects.create(user=self.admin, role=UserRole.ROLE_ADMIN)
        self.customer = create_customer({"name_english": "Sri Murugan Feeds", "gstin": "33ABCDE1234F1Z5"})
        self.item = Item.objects.create(
            code="FEED1", name_english="Cattle Feed", gst_percentage=Decimal("5"), hsn_no="2309"
        )
        entry = record_outward_entry({
            "customer": self.customer,
            "item": self.item,
            "lorry_no": "TN31AB1234",
            "empty_weight": "1000",
        }, self.user)
        self.entry = record_load_weight(entry.pk, "1500", self.user)

    def _call(self, view, method, path, data=None, user=None, **kwargs):
        if method == "get":
            request = self.factory.get(path, data)
        else:
            request = getattr(self.factory, method)(path, data, format="json")
        force_authenticate(request, user=user or self.user)
        return view(request, **kwargs)

    def test_second_bill_for_entry_conflicts(self):
        view = views.SaleViewSet.as_view({"post": "from_entry"})
        body = {"outward_entry": self.entry.pk, "rate": "20"}
        first = self._call(view, "post", "/api/sales/from-entry/", body)
        self.assertEqual(first.status_code, 201)
        self.assertEqual(first.data["bill_serial_no"], "1")
        self.assertEqual(first.data["total_amount"], "10500.00")
        self.assertEqual(first.data["lorry_no"], "TN31AB1234")

        second = self._call(view, "post", "/api/sales/from-entry/", body)
        self.assertEqual(second.status_code, 409)
        self.assertIn("already billed", second.data["error"])

    def test_next_bill_no_preview(self):
        view = views.SaleViewSet.as_view({"get": "next_bill_no"})
        resp = self._call(view, "get", "/api/sales/next-bill-no/", {"loading_place": "MATTAPARAI"})
        self.assertEqual(resp.data, {"bill_serial_no": "GRM050"})
        resp = self._call(view, "get", "/api/sales/next-bill-no/", {"special": "true"})
        self.assertEqual(resp.data, {"bill_serial_no": "D001"})

    def test_unknown_loading_place_is_rejected(self):
        preview = views.SaleViewSet.as_view({"get": "next_bill_no"})
        resp = self._call(preview, "get", "/api/sales/next-bill-no/", {"loading_place": "SALEM"})
        self.assertEqual(resp.status_code, 400)
        self.assertIn("Unknown loading place", resp.data["error"])

        direct = views.SaleViewSet.as_view({"post": "direct"})
        resp = self._call(direct, "post", "/api/sales/direct/", {
            "customer": self.customer.pk, "item": self.item.pk, "quantity": "10", "rate": "20",
            "loading_place": "SALEM",
        })
        self.assertEqual(resp.status_code, 400)

        debit = views.DebitNoteViewSet.as_view({"post": "create"})
        resp = self._call(debit, "post", "/api/debit-notes/", {
            "customer": self.customer.pk, "amount": "118", "reason": "Freight", "mill": "SALEM",
        })
        self.assertEqual(resp.status_code, 400)
        self.assertIn("Unknown loading place", resp.data["error"])
        self.assertFalse(DebitNote.objects.exists())

    def test_unconfigured_series_is_a_client_error(self):
        series = {k: v for k, v in settings.DOCUMENT_SERIES.items() if k != "receipt"}
        view = views.ReceiptViewSet.as_view({"post": "create"})
        with override_settings(DOCUMENT_SERIES=series):
            resp = self._call(view, "post", "/api/receipts/", {"customer": self.customer.pk, "amount": "400"})
        self.assertEqual(resp.status_code, 400)
        self.assertIn("Unknown document series", resp.data["error"])

    def test_sale_edit_requires_admin(self):
        sale = create_direct_sale({"customer": self.customer, "item": self.item, "quantity": "1", "rate": "10"})
        view = views.SaleViewSet.as_view({"patch": "partial_update"})
        denied = self._call(view, "patch", f"/api/sales/{sale.pk}/", {"rate": "12"}, pk=sale.pk)
        self.assertEqual(denied.status_code, 403)

        ok = self._call(view, "patch", f"/api/sales/{sale.pk}/", {"rate": "12"}, user=self.admin, pk=sale.pk)
        self.assertEqual(ok.status_code, 200)
        self.assertEqual(ok.data["total_amount"], "12.60")

    def test_receipt_create(self):
        view = views.ReceiptViewSet.as_view({"post": "create"})
        resp = self._call(view, "post", "/api/receipts/", {"customer": self.customer.pk, "amount": "400"})
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(resp.data["receipt_no"], "RCP0001")

        bad = self._call(view, "post", "/api/receipts/", {"customer": self.customer.pk, "amount": "0"})
        self.assertEqual(bad.status_code, 400)

    def test_bills_newest_first(self):
        sale = create_direct_sale({
            "customer": self.customer, "item": self.item, "quantity": "1", "rate": "10",
            "sale_date": datetime.date(2024, 6, 1),
        })
        create_credit_note({
            "customer": self.customer, "amount": "5", "reason": "Shortage",
            "note_date": datetime.date(2024, 6, 3), "reference_bill_no": sale.bill_serial_no,
        })
        resp = self._call(views.bills, "get", "/api/bills/", {"customer": self.customer.pk})
        self.assertEqual([r["type"] for r in resp.data], ["credit_note", "sale"])
        self.assertEqual(resp.data[1]["number"], sale.bill_serial_no)

    def test_invoice_pdf_and_einvoice_downloads(self):
        sale = create_direct_sale({
            "customer": self.customer, "item": self.item, "quantity": "2", "rate": "50", "irn": "IRN-9",
        })
        pdf = self._call(views.SaleViewSet.as_view({"get": "pdf"}), "get", "/", pk=sale.pk)
        self.assertEqual(pdf.status_code, 200)
        self.assertEqual(pdf["Content-Type"], "application/pdf")
        self.assertTrue(pdf.content.startswith(b"%PDF"))

        js = self._call(views.SaleViewSet.as_view({"get": "einvoice"}), "get", "/", pk=sale.pk)
        self.assertIn(f"einvoice_{sale.bill_serial_no}.json", js["Content-Disposition"])

        qr = self._call(views.SaleViewSet.as_view({"get": "qr"}), "get", "/", pk=sale.pk)
        self.assertEqual(qr["Content-Type"], "image/png")
        self.assertTrue(qr.content.startswith(b"\x89PNG"))

    def test_credit_note_irn_action(self):
        note = create_credit_note({"customer": self.customer, "amount": "118", "reason": "Rate"})
        view = views.CreditNoteViewSet.as_view({"post": "irn"})
        resp = self._call(view, "post", "/", {"irn": "IRN-CN-1"}, pk=note.pk)
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.data["irn"], "IRN-CN-1")

    def test_gst_report_endpoints(self):
        create_direct_sale({
            "customer": self.customer, "item": self.item, "quantity": "1", "rate": "10",
            "sale_date": datetime.date(2024, 6, 1),
        })
        params = {"start": "2024-06-01", "end": "2024-06-30"}
        xlsx = self._call(views.gst_report, "get", "/", params)
        self.assertEqual(xlsx.status_code, 200)
        self.assertIn("GST-Report-2024-06-01-to-2024-06-30.xlsx", xlsx["Content-Disposition"])

        empty = self._call(views.gst_report, "get", "/", {"start": "2023-01-01", "end": "2023-01-31"})
        self.assertEqual(empty.status_code, 404)

        missing = self._call(views.gst_report_summary, "get", "/", {"start": "2024-06-01"})
        self.assertEqual(missing.status_code, 400)

        summary = self._call(views.gst_report_summary, "get", "/", params)
        self.assertEqual(summary.data["recordCount"], 1)
