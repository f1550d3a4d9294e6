from django.conf import settings
from django.contrib.auth.models import User
from django.db import models

from masters.models import Customer, Item


def default_loading_place():
    return settings.DEFAULT_LOADING_PLACE


class OutwardEntry(models.Model):
    """One lorry leaving a loading place, weighed empty and then loaded."""

    serial_no = models.PositiveIntegerField(unique=True)
    entry_date = models.DateField()
    customer = models.ForeignKey(Customer, on_delete=models.PROTECT, related_name='outward_entries')
    item = models.ForeignKey(Item, on_delete=models.PROTECT, related_name='outward_entries')
    loading_place = models.CharField(max_length=30, default=default_loading_place)
    lorry_no = models.CharField(max_length=20)
    driver_mobile = models.CharField(max_length=15, blank=True)
    empty_weight = models.DecimalField(max_digits=12, decimal_places=2)
    load_weight = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    net_weight = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    load_weight_updated_at = models.DateTimeField(null=True, blank=True)
    load_weight_updated_by = models.ForeignKey(
        User, on_delete=models.SET_NULL, null=True, blank=True, related_name='load_weighments'
    )
    weighment_photo_url = models.CharField(max_length=500, blank=True)
    load_weight_photo_url = models.CharField(max_length=500, blank=True)
    remarks = models.TextField(blank=True)
    is_completed = models.BooleanField(default=False)
    created_by = models.ForeignKey(
        User, on_delete=models.SET_NULL, null=True, blank=True, related_name='outward_entries'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-serial_no']
        verbose_name_plural = 'outward entries'
        indexes = [
            models.Index(fields=['is_completed', 'entry_date'], name='outward_completed_date_idx'),
        ]

    def save(self, *args, **kwargs):
        self.lorry_no = (self.lorry_no or '').strip().upper()
        if self.load_weight is not None and self.empty_weight is not None:
            self.net_weight = self.load_weight - self.empty_weight
        super().save(*args, **kwargs)

    @property
    def status_label(self) -> str:
        return 'Completed' if self.is_completed else 'Pending'

    def __str__(self) -> str:
        return f"#{self.serial_no} {self.lorry_no} ({self.customer.code})"
