import pytest
from django.core.management import call_command
from django.test import TestCase
from openpyxl import Workbook
from rest_framework.test import APIRequestFactory, force_authenticate

from masters.models import CompanySetting, Customer, company_for_location, is_admin
from masters.services.parties import create_customer, create_supplier
from masters.views import CustomerViewSet, CompanySettingViewSet


@pytest.mark.django_db
def test_codes_are_claimed_in_sequence():
    a = create_customer({"name_english": "Anbu Traders"})
    b = create_customer({"name_english": "Bala Stores"})
    s = create_supplier({"name_english": "Kaveri Mills"})
    assert (a.code, b.code, s.code) == ("CUST001", "CUST002", "SUP001")


@pytest.mark.django_db
def test_explicit_code_is_kept():
    c = create_customer({"code": "CUST050", "name_english": "Legacy Party"})
    assert c.code == "CUST050"
    assert create_customer({"name_english": "Next"}).code == "CUST051"


@pytest.mark.django_db
def test_gstin_is_upper_cased(customer):
    assert customer.gstin == "33ABCDE1234F1Z5"


@pytest.mark.django_db
def test_company_for_location_falls_back():
    unsaved = company_for_location("MATTAPARAI")
    assert unsaved.pk is None
    assert unsaved.state_code == "33"

    puli = CompanySetting.objects.create(location_code="PULIVANTHI", company_name="GRM Puli")
    assert company_for_location("MATTAPARAI") == puli
    matta = CompanySetting.objects.create(location_code="MATTAPARAI", company_name="GRM Matta")
    assert company_for_location("MATTAPARAI") == matta


@pytest.mark.django_db
def test_is_admin(user, admin):
    assert is_admin(admin)
    assert not is_admin(user)
    assert not is_admin(None)


@pytest.mark.django_db
def test_import_customers_skips_duplicates(tmp_path, customer):
    wb = Workbook()
    ws = wb.active
    ws.append(["Customer List"])
    ws.append(["Name", "GSTIN", "Phone", "Address", "Pin Code", "State Code"])
    ws.append(["Sri Murugan Feeds", "", "", "", "", ""])
    ws.append(["Lakshmi Dairy", "33lmnop4321q1z9", 9443012345, "Gingee", 604202.0, "33"])
    ws.append([None, None, None, None, None, None])
    path = tmp_path / "customers.xlsx"
    wb.save(path)

    call_command("import_customers", str(path))

    imported = Customer.objects.get(name_english="Lakshmi Dairy")
    assert imported.code == "CUST002"
    assert imported.gstin == "33LMNOP4321Q1Z9"
    assert imported.pin_code == "604202"
    assert imported.phone == "9443012345"
    assert Customer.objects.count() == 2


@pytest.mark.django_db
def test_import_customers_dry_run(tmp_path):
    wb = Workbook()
    wb.active.append(["Party", "Mobile"])
    wb.active.append(["Velan Agencies", "9000000001"])
    path = tmp_path / "c.xlsx"
    wb.save(path)

    call_command("import_customers", str(path), "--dry-run")
    assert not Customer.objects.exists()


class CustomerApiTests(TestCase):
    def setUp(self):
        from django.contrib.auth.models import User

        self.user = User.objects.create_user(username="clerk", password="pass")
        self.factory = APIRequestFactory()

    def test_create_claims_code(self):
        request = self.factory.post(
            "/api/customers/", {"name_english": "Arul Feeds", "gstin": "33aaaaa0000a1z5"}, format="json"
        )
        force_authenticate(request, user=self.user)
        response = CustomerViewSet.as_view({"post": "create"})(request)
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data["code"], "CUST001")
        self.assertEqual(response.data["gstin"], "33AAAAA0000A1Z5")

    def test_rejects_short_gstin(self):
        request = self.factory.post("/api/customers/", {"name_english": "X", "gstin": "33ABC"}, format="json")
        force_authenticate(request, user=self.user)
        response = CustomerViewSet.as_view({"post": "create"})(request)
        self.assertEqual(response.status_code, 400)

    def test_search(self):
        create_customer({"name_english": "Arul Feeds"})
        create_customer({"name_english": "Bala Stores", "is_active": False})
        request = self.factory.get("/api/customers/", {"q": "bala"})
        force_authenticate(request, user=self.user)
        response = CustomerViewSet.as_view({"get": "list"})(request)
        self.assertEqual([c["name_english"] for c in response.data], ["Bala Stores"])

        request = self.factory.get("/api/customers/", {"active": "1"})
        force_authenticate(request, user=self.user)
        response = CustomerViewSet.as_view({"get": "list"})(request)
        self.assertEqual([c["name_english"] for c in response.data], ["Arul Feeds"])

    def test_company_settings_write_needs_admin(self):
        request = self.factory.post(
            "/api/company-settings/", {"location_code": "PULIVANTHI", "company_name": "GRM"}, format="json"
        )
        force_authenticate(request, user=self.user)
        response = CompanySettingViewSet.as_view({"post": "create"})(request)
        self.assertEqual(response.status_code, 403)
