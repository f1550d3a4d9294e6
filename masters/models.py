from decimal import Decimal

from django.conf import settings
from django.contrib.auth.models import User
from django.db import models


class PartyBase(models.Model):
    """Identity, GST and address fields shared by customers and suppliers."""

    code = models.CharField(max_length=20, unique=True)
    name_english = models.CharField(max_length=200)
    name_tamil = models.CharField(max_length=200, blank=True)
    contact_person = models.CharField(max_length=100, blank=True)
    phone = models.CharField(max_length=20, blank=True)
    email = models.EmailField(blank=True)
    address_english = models.TextField(blank=True)
    address_tamil = models.TextField(blank=True)
    gstin = models.CharField(max_length=15, blank=True)
    pin_code = models.CharField(max_length=10, blank=True)
    state_code = models.CharField(max_length=2, default='33')
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True
        ordering = ['name_english']

    def save(self, *args, **kwargs):
        self.gstin = (self.gstin or '').strip().upper()
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return f"{self.name_english} ({self.code})"


class Customer(PartyBase):
    place_of_supply = models.CharField(max_length=2, default='33')

    class Meta(PartyBase.Meta):
        pass


class Supplier(PartyBase):
    class Meta(PartyBase.Meta):
        pass


class Item(models.Model):
    code = models.CharField(max_length=20, unique=True)
    name_english = models.CharField(max_length=200)
    name_tamil = models.CharField(max_length=200, blank=True)
    unit = models.CharField(max_length=10, default='KG')
    unit_weight = models.DecimalField(
        max_digits=10, decimal_places=2, default=Decimal('0'),
        help_text="Weight of one bag in the item unit",
    )
    gst_percentage = models.DecimalField(max_digits=5, decimal_places=2, default=Decimal('0'))
    hsn_no = models.CharField(max_length=10, blank=True)
    opening_stock = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0'))
    description_english = models.TextField(blank=True)
    description_tamil = models.TextField(blank=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['name_english']

    def __str__(self) -> str:
        return f"{self.name_english} ({self.code})"


class CompanySetting(models.Model):
    """Seller details printed on invoices, one row per loading location."""

    location_code = models.CharField(max_length=30)
    location_name = models.CharField(max_length=100, blank=True)
    company_name = models.CharField(max_length=200)
    gstin = models.CharField(max_length=15, blank=True)
    address_line1 = models.CharField(max_length=200, blank=True)
    address_line2 = models.CharField(max_length=200, blank=True)
    locality = models.CharField(max_length=100, blank=True)
    pin_code = models.CharField(max_length=10, blank=True)
    state_code = models.CharField(max_length=2, default='33')
    phone = models.CharField(max_length=20, blank=True)
    email = models.EmailField(blank=True)
    bank_name = models.CharField(max_length=100, blank=True)
    bank_account_no = models.CharField(max_length=30, blank=True)
    bank_ifsc = models.CharField(max_length=15, blank=True)
    bank_branch = models.CharField(max_length=100, blank=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['location_code']

    def __str__(self) -> str:
        return f"{self.company_name} [{self.location_code}]"


def company_for_location(location_code):
    """Return the seller profile for a loading location.

    Falls back to any active profile, then to an unsaved instance built
    from ``settings.COMPANY_DEFAULTS``.
    """
    active = CompanySetting.objects.filter(is_active=True)
    company = active.filter(location_code=location_code).first() or active.first()
    if company is not None:
        return company
    defaults = dict(getattr(settings, 'COMPANY_DEFAULTS', {}))
    defaults.setdefault('company_name', '')
    return CompanySetting(location_code=location_code or '', **defaults)


class UserRole(models.Model):
    ROLE_ADMIN = 'admin'
    ROLE_USER = 'user'
    ROLE_CHOICES = [
        (ROLE_ADMIN, 'Admin'),
        (ROLE_USER, 'User'),
    ]

    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='roles')
    role = models.CharField(max_length=10, choices=ROLE_CHOICES, default=ROLE_USER)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=['user', 'role'], name='uniq_user_role'),
        ]

    def __str__(self) -> str:
        return f"{self.user} - {self.role}"


def is_admin(user) -> bool:
    if user is None or not getattr(user, 'is_authenticated', False):
        return False
    if user.is_superuser:
        return True
    return UserRole.objects.filter(user=user, role=UserRole.ROLE_ADMIN).exists()


class DocumentSeries(models.Model):
    """Counter row for one numbering series.

    The row is locked while a number is claimed so concurrent writers are
    serialised; ``last_number`` records the highest number handed out.
    """

    key = models.CharField(max_length=50, unique=True)
    prefix = models.CharField(max_length=10, blank=True)
    width = models.PositiveSmallIntegerField(default=0)
    floor = models.PositiveIntegerField(default=1)
    last_number = models.PositiveIntegerField(default=0)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['key']
        verbose_name_plural = 'document series'

    def format(self, number: int) -> str:
        digits = str(number).zfill(self.width) if self.width else str(number)
        return f"{self.prefix}{digits}"

    def __str__(self) -> str:
        return f"{self.key} ({self.format(self.last_number)})"
