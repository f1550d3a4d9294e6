from django.urls import path
from rest_framework.routers import SimpleRouter

from . import views

router = SimpleRouter()
router.register("outward-entries", views.OutwardEntryViewSet)

urlpatterns = router.urls + [
    path("google-drive/callback/", views.google_drive_callback, name="google-drive-callback"),
]
