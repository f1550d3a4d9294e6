from decimal import Decimal

from django.contrib.auth.models import User
from django.test import TestCase
from rest_framework.test import APIRequestFactory, force_authenticate

from billing.services.sales import create_sale_from_entry
from logistics.models import OutwardEntry
from logistics.views import OutwardEntryViewSet
from masters.models import Item, UserRole
from masters.services.parties import create_customer


class OutwardEntryApiTests(TestCase):
    def setUp(self):
        self.factory = APIRequestFactory()
        self.user = User.objects.create_user(username="weigher", password="pass")
        self.admin = User.objects.create_user(username="boss", password="pass")
        UserRole.objects.create(user=self.admin, role=UserRole.ROLE_ADMIN)
        self.customer = create_customer({"name_english": "Sri Murugan Feeds"})
        self.item = Item.objects.create(code="FEED1", name_english="Cattle Feed", gst_percentage=Decimal("5"))

    def _post(self, action, data, pk=None, user=None):
        request = self.factory.post("/", data, format="json")
        force_authenticate(request, user=user or self.user)
        view = OutwardEntryViewSet.as_view({"post": action})
        return view(request, pk=pk) if pk else view(request)

    def _create_entry(self):
        resp = self._post("create", {
            "customer": self.customer.pk,
            "item": self.item.pk,
            "lorry_no": "tn31ab1234",
            "empty_weight": "1000",
        })
        self.assertEqual(resp.status_code, 201)
        return resp.data

    def test_create_then_load(self):
        data = self._create_entry()
        self.assertEqual(data["serial_no"], 1)
        self.assertEqual(data["status"], "Pending")
        self.assertIsNone(data["bill_serial_no"])

        loaded = self._post("load_weight", {"load_weight": "1500"}, pk=data["id"])
        self.assertEqual(loaded.status_code, 200)
        self.assertEqual(loaded.data["net_weight"], "500.00")
        self.assertEqual(loaded.data["status"], "Completed")

        again = self._post("load_weight", {"load_weight": "1600"}, pk=data["id"])
        self.assertEqual(again.status_code, 409)

    def test_light_load_is_rejected(self):
        data = self._create_entry()
        resp = self._post("load_weight", {"load_weight": "900"}, pk=data["id"])
        self.assertEqual(resp.status_code, 400)
        self.assertIn("greater than empty weight", resp.data["error"])

    def test_pending_filter_and_export(self):
        first = self._create_entry()
        self._create_entry()
        self._post("load_weight", {"load_weight": "1500"}, pk=first["id"])

        request = self.factory.get("/", {"pending": "1"})
        force_authenticate(request, user=self.user)
        resp = OutwardEntryViewSet.as_view({"get": "list"})(request)
        self.assertEqual([e["serial_no"] for e in resp.data], [2])

        request = self.factory.get("/")
        force_authenticate(request, user=self.user)
        resp = OutwardEntryViewSet.as_view({"get": "export"})(request)
        self.assertEqual(resp["Content-Type"], "text/csv")
        lines = resp.content.decode().strip().splitlines()
        self.assertEqual(lines[0].split(",")[0], "Serial No")
        self.assertEqual(len(lines), 3)

    def test_delete_needs_admin_and_cascades(self):
        data = self._create_entry()
        self._post("load_weight", {"load_weight": "1500"}, pk=data["id"])
        create_sale_from_entry(data["id"], "20", user=self.user)
        view = OutwardEntryViewSet.as_view({"delete": "destroy"})

        request = self.factory.delete("/")
        force_authenticate(request, user=self.user)
        self.assertEqual(view(request, pk=data["id"]).status_code, 403)

        request = self.factory.get("/")
        force_authenticate(request, user=self.admin)
        impact = OutwardEntryViewSet.as_view({"get": "deletion_impact"})(request, pk=data["id"])
        self.assertEqual(len(impact.data["sales"]), 1)

        request = self.factory.delete("/")
        force_authenticate(request, user=self.admin)
        resp = view(request, pk=data["id"])
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.data["removed"]["sales"], 1)
        self.assertFalse(OutwardEntry.objects.exists())
