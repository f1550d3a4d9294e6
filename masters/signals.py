from __future__ import annotations

from django.contrib.auth.models import Group
from django.db.models.signals import post_migrate
from django.dispatch import receiver


@receiver(post_migrate)
def ensure_groups(sender, **kwargs):
    if sender.name != "masters":
        return
    Group.objects.get_or_create(name="Admin")
    Group.objects.get_or_create(name="Clerk")
