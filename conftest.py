import datetime
import uuid
from decimal import Decimal

import pytest
from django.contrib.auth.models import User

from masters.models import Item, UserRole
from masters.services.parties import create_customer, create_supplier


@pytest.fixture
def user(db):
    return User.objects.create_user(username=f"clerk_{uuid.uuid4().hex[:6]}", password="pass")


@pytest.fixture
def admin(db):
    u = User.objects.create_user(username=f"admin_{uuid.uuid4().hex[:6]}", password="pass")
    UserRole.objects.create(user=u, role=UserRole.ROLE_ADMIN)
    return u


@pytest.fixture
def customer(db):
    return create_customer({
        "name_english": "Sri Murugan Feeds",
        "gstin": "33abcde1234f1z5",
        "address_english": "12 Main Road, Villupuram",
        "pin_code": "605201",
        "phone": "9876543210",
    })


@pytest.fixture
def supplier(db):
    return create_supplier({"name_english": "Kaveri Mills", "gstin": "33PQRST6789K1Z2"})


@pytest.fixture
def item(db):
    return Item.objects.create(
        code="FEED1",
        name_english="Cattle Feed",
        gst_percentage=Decimal("5.00"),
        hsn_no="2309",
        unit_weight=Decimal("50"),
        opening_stock=Decimal("1000"),
    )


@pytest.fixture
def untaxed_item(db):
    return Item.objects.create(code="RICE1", name_english="Broken Rice", gst_percentage=Decimal("0"))


@pytest.fixture
def today():
    return datetime.date(2024, 6, 15)


@pytest.fixture
def completed_entry(customer, item, user, today):
    """Lorry weighed empty at 1000 and loaded at 1500 (net 500)."""
    from logistics.services.weighment import record_load_weight, record_outward_entry

    entry = record_outward_entry({
        "customer": customer,
        "item": item,
        "lorry_no": "tn 31 ab 1234",
        "empty_weight": "1000",
        "entry_date": today,
    }, user)
    return record_load_weight(entry.pk, "1500", user)
