from django.db.models.signals import post_save
from django.dispatch import receiver

from ledger.models import AuditLog

from .models import Sale, Receipt, CreditNote, DebitNote


def _number(instance):
    for attr in ("bill_serial_no", "receipt_no", "note_no"):
        if hasattr(instance, attr):
            return getattr(instance, attr)
    return ""


@receiver(post_save, sender=Sale)
@receiver(post_save, sender=Receipt)
@receiver(post_save, sender=CreditNote)
@receiver(post_save, sender=DebitNote)
def audit_document(sender, instance, created, **kwargs):
    if kwargs.get("raw"):
        return
    AuditLog.objects.create(
        action="created" if created else "updated",
        model=sender.__name__,
        object_id=str(instance.pk),
        user=instance.created_by,
        note=_number(instance),
    )
