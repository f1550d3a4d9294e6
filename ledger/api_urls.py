from django.urls import path

from . import views

urlpatterns = [
    path("customer-ledger/", views.customer_ledger, name="customer-ledger"),
    path("supplier-ledger/", views.supplier_ledger, name="supplier-ledger"),
    path("stock-ledger/", views.stock_ledger, name="stock-ledger"),
]
