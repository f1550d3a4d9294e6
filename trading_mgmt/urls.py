"""
URL configuration for trading_mgmt project.

The REST API for every app is mounted under /api/; the Django admin
under /admin/.
"""
import re

from django.conf import settings
from django.conf.urls.static import static
from django.contrib import admin
from django.http import JsonResponse
from django.urls import path, include, re_path
from django.views.static import serve as media_serve


def healthz(request):
    return JsonResponse({"status": "ok"})


urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/', include('masters.api_urls')),
    path('api/', include('logistics.api_urls')),
    path('api/', include('billing.api_urls')),
    path('api/', include('ledger.api_urls')),
    path('api-auth/', include('rest_framework.urls')),
    path("healthz/", healthz),
]

# Serve media files even when DEBUG is False (weighment photos)
if settings.DEBUG:
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)
else:
    media_prefix = settings.MEDIA_URL.lstrip('/')
    urlpatterns += [
        re_path(r'^%s(?P<path>.*)$' % re.escape(media_prefix), media_serve, {
            'document_root': settings.MEDIA_ROOT,
        }),
    ]
