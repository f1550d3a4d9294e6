from __future__ import annotations

import logging

from django.db import transaction

from masters.models import Customer, Supplier
from masters.services.numbering import claim_next_number

logger = logging.getLogger(__name__)


@transaction.atomic
def create_customer(data: dict) -> Customer:
    """Create a customer, claiming the next ``CUST###`` code unless one is given."""
    data = dict(data)
    if not data.get("code"):
        data["code"] = claim_next_number("customer", Customer.objects.all(), "code")
    customer = Customer.objects.create(**data)
    logger.info("Customer %s created", customer.code)
    return customer


@transaction.atomic
def create_supplier(data: dict) -> Supplier:
    data = dict(data)
    if not data.get("code"):
        data["code"] = claim_next_number("supplier", Supplier.objects.all(), "code")
    supplier = Supplier.objects.create(**data)
    logger.info("Supplier %s created", supplier.code)
    return supplier
