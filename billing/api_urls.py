from django.urls import path
from rest_framework.routers import SimpleRouter

from . import views

router = SimpleRouter()
router.register("sales", views.SaleViewSet)
router.register("receipts", views.ReceiptViewSet)
router.register("credit-notes", views.CreditNoteViewSet)
router.register("debit-notes", views.DebitNoteViewSet)
router.register("purchases", views.PurchaseViewSet)
router.register("supplier-payments", views.SupplierPaymentViewSet)

urlpatterns = [
    path("bills/", views.bills, name="bills"),
    path("reports/gst/", views.gst_report, name="gst-report"),
    path("reports/gst/summary/", views.gst_report_summary, name="gst-report-summary"),
    path("reports/gst/export/", views.gst_report_export, name="gst-report-export"),
] + router.urls
