import datetime
from decimal import Decimal

from django.contrib.auth.models import User
from django.test import TestCase
from rest_framework.test import APIRequestFactory, force_authenticate

from billing.services.purchases import record_purchase, record_supplier_payment
from billing.services.receipts import record_receipt
from billing.services.sales import create_direct_sale
from ledger import views
from masters.models import Item
from masters.services.parties import create_customer, create_supplier


class LedgerApiTests(TestCase):
    def setUp(self):
        self.factory = APIRequestFactory()
        self.user = User.objects.create_user(username="clerk", password="pass")
        self.customer = create_customer({"name_english": "Sri Murugan Feeds"})
        self.supplier = create_supplier({"name_english": "Kaveri Mills"})
        self.item = Item.objects.create(code="RICE1", name_english="Broken Rice", opening_stock=Decimal("100"))

    def _get(self, view, params):
        request = self.factory.get("/", params)
        force_authenticate(request, user=self.user)
        return view(request)

    def test_customer_statement(self):
        sale = create_direct_sale({
            "customer": self.customer, "item": self.item, "quantity": "10", "rate": "100",
            "sale_date": datetime.date(2024, 6, 1),
        })
        record_receipt({
            "customer": self.customer, "amount": "400", "receipt_date": datetime.date(2024, 6, 2),
        })

        resp = self._get(views.customer_ledger, {"customer": self.customer.pk})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.data["closing_balance"], Decimal("600.00"))
        self.assertEqual(resp.data["balance_label"], "Balance Due")
        first = resp.data["entries"][0]
        self.assertEqual(first["document_no"], sale.bill_serial_no)
        self.assertEqual(first["description"], f"Sale - {sale.bill_serial_no} - Bill: {sale.bill_serial_no}")
        self.assertEqual(resp.data["entries"][1]["balance"], "600.00")

    def test_customer_statement_in_advance(self):
        record_receipt({"customer": self.customer, "amount": "50"})
        resp = self._get(views.customer_ledger, {"customer": self.customer.pk})
        self.assertEqual(resp.data["balance_label"], "Advance")

    def test_requires_party_and_valid_dates(self):
        self.assertEqual(self._get(views.customer_ledger, {}).status_code, 400)
        resp = self._get(views.customer_ledger, {"customer": self.customer.pk, "date_from": "not a date"})
        self.assertEqual(resp.status_code, 400)

    def test_supplier_statement(self):
        record_purchase({"supplier": self.supplier, "item": self.item, "quantity": "10", "rate": "30"})
        record_supplier_payment({"supplier": self.supplier, "amount": "100"})
        resp = self._get(views.supplier_ledger, {"supplier": self.supplier.pk})
        self.assertEqual(resp.data["total_credit"], Decimal("300.00"))
        self.assertEqual(resp.data["total_debit"], Decimal("100.00"))
        self.assertEqual(resp.data["closing_balance"], Decimal("200.00"))

    def test_stock_statement_by_mill(self):
        record_purchase({
            "supplier": self.supplier, "item": self.item, "quantity": "40", "rate": "30", "mill": "MATTAPARAI",
            "purchase_date": datetime.date(2024, 6, 1),
        })
        create_direct_sale({
            "customer": self.customer, "item": self.item, "quantity": "15", "rate": "50",
            "loading_place": "PULIVANTHI", "sale_date": datetime.date(2024, 6, 2),
        })
        create_direct_sale({
            "customer": self.customer, "item": self.item, "quantity": "5", "rate": "50",
            "loading_place": "MATTAPARAI", "sale_date": datetime.date(2024, 6, 3),
        })
        resp = self._get(views.stock_ledger, {"item": self.item.pk})
        self.assertEqual(resp.data["current_stock"], Decimal("120.00"))
        self.assertEqual(len(resp.data["entries"]), 3)

        resp = self._get(views.stock_ledger, {"item": self.item.pk, "mill": "mattaparai"})
        self.assertEqual(resp.data["mill"], "MATTAPARAI")
        self.assertEqual([e["mill"] for e in resp.data["entries"]], ["MATTAPARAI", "MATTAPARAI"])
        self.assertEqual(resp.data["opening_balance"], Decimal("0.00"))
        self.assertEqual(resp.data["total_in"], Decimal("40.00"))
        self.assertEqual(resp.data["total_out"], Decimal("5.00"))
        self.assertEqual(resp.data["mill_net_quantity"], Decimal("35.00"))
        self.assertEqual(resp.data["entries"][-1]["mill_balance"], Decimal("35.00"))
        self.assertNotIn("current_stock", resp.data)

        resp = self._get(views.stock_ledger, {
            "item": self.item.pk, "mill": "MATTAPARAI", "date_from": "2024-06-02",
        })
        self.assertEqual(resp.data["opening_balance"], Decimal("40.00"))
        self.assertEqual(resp.data["total_in"], Decimal("0.00"))
        self.assertEqual(resp.data["total_out"], Decimal("5.00"))
        self.assertEqual(resp.data["mill_net_quantity"], Decimal("35.00"))
