from django.db.models import Q
from rest_framework import permissions, viewsets

from .models import Customer, Supplier, Item, CompanySetting
from .permissions import IsAdminRole
from .serializers import (
    CustomerSerializer,
    SupplierSerializer,
    ItemSerializer,
    CompanySettingSerializer,
)
from .services.parties import create_customer, create_supplier


class SearchableMixin:
    """``?active=1`` and ``?q=`` filters shared by the master lists."""

    search_fields = ("code", "name_english", "name_tamil")

    def get_queryset(self):
        qs = super().get_queryset()
        active = self.request.query_params.get("active")
        q = self.request.query_params.get("q")
        if active in ("1", "true", "yes"):
            qs = qs.filter(is_active=True)
        if q:
            cond = Q()
            for field in self.search_fields:
                cond |= Q(**{f"{field}__icontains": q})
            qs = qs.filter(cond)
        return qs


class CustomerViewSet(SearchableMixin, viewsets.ModelViewSet):
    queryset = Customer.objects.all()
    serializer_class = CustomerSerializer
    permission_classes = [permissions.IsAuthenticated]

    def perform_create(self, serializer):
        serializer.instance = create_customer(serializer.validated_data)


class SupplierViewSet(SearchableMixin, viewsets.ModelViewSet):
    queryset = Supplier.objects.all()
    serializer_class = SupplierSerializer
    permission_classes = [permissions.IsAuthenticated]

    def perform_create(self, serializer):
        serializer.instance = create_supplier(serializer.validated_data)


class ItemViewSet(SearchableMixin, viewsets.ModelViewSet):
    queryset = Item.objects.all()
    serializer_class = ItemSerializer
    permission_classes = [permissions.IsAuthenticated]


class CompanySettingViewSet(viewsets.ModelViewSet):
    queryset = CompanySetting.objects.all()
    serializer_class = CompanySettingSerializer

    def get_permissions(self):
        if self.request.method in permissions.SAFE_METHODS:
            return [permissions.IsAuthenticated()]
        return [IsAdminRole()]
