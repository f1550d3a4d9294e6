from decimal import Decimal

import pytest
from django.core.exceptions import ValidationError

from billing.models import DebitNote
from billing.services.notes import create_credit_note, create_debit_note, update_note_irn
from ledger.models import CustomerLedgerEntry
from ledger.services.posting import CUSTOMERS, current_balance


@pytest.mark.django_db
def test_credit_note_credits_customer(customer, user, today):
    note = create_credit_note(
        {"customer": customer, "amount": "1180", "reason": "Rate difference", "note_date": today}, user
    )
    assert note.note_no == "CN0001"
    assert note.gst_percentage == Decimal("18.00")
    row = CustomerLedgerEntry.objects.get(transaction_type="credit_note", reference_id=note.pk)
    assert row.credit_amount == Decimal("1180.00")
    assert row.description == "Credit Note CN0001 - Rate difference"
    assert current_balance(CUSTOMERS, customer) == Decimal("-1180.00")


@pytest.mark.django_db
def test_note_takes_item_gst_rate(customer, item, user):
    note = create_credit_note({"customer": customer, "item": item, "amount": "105", "reason": "Damage"}, user)
    assert note.gst_percentage == Decimal("5.00")


@pytest.mark.django_db
def test_debit_notes_are_numbered_per_mill(customer, user):
    base = {"customer": customer, "amount": "50", "reason": "Freight"}
    puli = create_debit_note(base, user)
    matta = create_debit_note({**base, "mill": "mattaparai"}, user)
    matta2 = create_debit_note({**base, "mill": "MATTAPARAI"}, user)

    assert (puli.note_no, puli.mill) == ("DNP0001", "PULIVANTHI")
    assert (matta.note_no, matta.mill) == ("DNM0001", "MATTAPARAI")
    assert matta2.note_no == "DNM0002"
    assert current_balance(CUSTOMERS, customer) == Decimal("150.00")


@pytest.mark.django_db
def test_note_needs_reason(customer, user):
    with pytest.raises(ValidationError):
        create_debit_note({"customer": customer, "amount": "50", "reason": "  "}, user)
    assert not DebitNote.objects.exists()
    assert not CustomerLedgerEntry.objects.exists()


@pytest.mark.django_db
def test_gst_rate_out_of_range(customer, user):
    with pytest.raises(ValidationError):
        create_credit_note({"customer": customer, "amount": "50", "reason": "x", "gst_percentage": "120"}, user)


@pytest.mark.django_db
def test_update_irn(customer, user):
    note = create_credit_note({"customer": customer, "amount": "10", "reason": "x"}, user)
    update_note_irn(note, " abc123 ")
    note.refresh_from_db()
    assert note.irn == "abc123"
    with pytest.raises(ValidationError):
        update_note_irn(note, "")
