import csv
import logging

from django.core.exceptions import ValidationError as DjangoValidationError
from django.http import HttpResponse
from django.utils import timezone
from rest_framework import permissions, viewsets
from rest_framework.decorators import action, api_view, permission_classes
from rest_framework.response import Response

from masters.permissions import IsAdminRole
from masters.utils import parse_date_param

from .models import OutwardEntry
from .serializers import (
    OutwardEntrySerializer,
    OutwardEntryEditSerializer,
    LoadWeightSerializer,
    PhotoUploadSerializer,
)
from .services.cascade import delete_outward_entry, deletion_impact
from .services.weighment import (
    AlreadyCompleted,
    edit_outward_entry,
    record_load_weight,
    record_outward_entry,
)
from .uploads import RemoteUploadError, UploadError, exchange_code, upload_data_url

logger = logging.getLogger(__name__)

EXPORT_COLUMNS = [
    "Serial No",
    "Date",
    "Customer",
    "Item",
    "Lorry No",
    "Driver Mobile",
    "Empty Weight",
    "Load Weight",
    "Net Weight",
    "Loading Place",
    "Status",
]


def _error(exc, status=400):
    if isinstance(exc, DjangoValidationError):
        return Response({"error": "; ".join(exc.messages)}, status=status)
    return Response({"error": str(exc)}, status=status)


class OutwardEntryViewSet(viewsets.ModelViewSet):
    queryset = OutwardEntry.objects.select_related("customer", "item", "sale")
    serializer_class = OutwardEntrySerializer
    permission_classes = [permissions.IsAuthenticated]

    def get_permissions(self):
        if self.action in ("destroy", "deletion_impact"):
            return [permissions.IsAuthenticated(), IsAdminRole()]
        return super().get_permissions()

    def get_queryset(self):
        qs = super().get_queryset()
        params = self.request.query_params
        if params.get("pending") in ("1", "true", "yes"):
            qs = qs.filter(is_completed=False)
        if params.get("customer"):
            qs = qs.filter(customer_id=params["customer"])
        if params.get("loading_place"):
            qs = qs.filter(loading_place=params["loading_place"].upper())
        date_from = parse_date_param(params.get("date_from"))
        date_to = parse_date_param(params.get("date_to"))
        if date_from:
            qs = qs.filter(entry_date__gte=date_from)
        if date_to:
            qs = qs.filter(entry_date__lte=date_to)
        return qs

    def list(self, request, *args, **kwargs):
        try:
            return super().list(request, *args, **kwargs)
        except ValueError as exc:
            return _error(exc)

    def create(self, request, *args, **kwargs):
        ser = self.get_serializer(data=request.data)
        ser.is_valid(raise_exception=True)
        try:
            entry = record_outward_entry(ser.validated_data, request.user)
        except DjangoValidationError as exc:
            return _error(exc)
        return Response(self.get_serializer(entry).data, status=201)

    def update(self, request, *args, **kwargs):
        entry = self.get_object()
        ser = OutwardEntryEditSerializer(data=request.data, partial=kwargs.get("partial", False))
        ser.is_valid(raise_exception=True)
        try:
            entry = edit_outward_entry(entry.pk, ser.validated_data, request.user)
        except DjangoValidationError as exc:
            return _error(exc)
        return Response(self.get_serializer(entry).data)

    def destroy(self, request, *args, **kwargs):
        entry = self.get_object()
        removed = delete_outward_entry(entry.pk, request.user)
        return Response({"deleted": True, "removed": removed})

    @action(detail=True, methods=["get"], url_path="deletion-impact")
    def deletion_impact(self, request, pk=None):
        return Response(deletion_impact(self.get_object()))

    @action(detail=True, methods=["post"], url_path="load-weight")
    def load_weight(self, request, pk=None):
        ser = LoadWeightSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        data = ser.validated_data
        try:
            entry = record_load_weight(
                self.get_object().pk,
                data["load_weight"],
                user=request.user,
                photo_url=data.get("photo_url", ""),
                remarks=data.get("remarks", ""),
            )
        except AlreadyCompleted as exc:
            return _error(exc, status=409)
        except DjangoValidationError as exc:
            return _error(exc)
        return Response(self.get_serializer(entry).data)

    @action(detail=True, methods=["post"], url_path="upload-photo")
    def upload_photo(self, request, pk=None):
        entry = self.get_object()
        ser = PhotoUploadSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        kind = ser.validated_data["kind"]
        stamp = timezone.now().strftime("%Y%m%d%H%M%S")
        name = f"{entry.lorry_no}_{kind}_{entry.serial_no}_{stamp}.jpg"
        try:
            url = upload_data_url(ser.validated_data["data_url"], name)
        except UploadError as exc:
            return _error(exc, status=502 if isinstance(exc, RemoteUploadError) else 400)
        field = "load_weight_photo_url" if kind == "load" else "weighment_photo_url"
        setattr(entry, field, url)
        entry.save(update_fields=[field, "updated_at"])
        return Response({"url": url, "field": field})

    @action(detail=False, methods=["get"])
    def export(self, request):
        """Transit logbook as CSV, honouring the list filters."""
        try:
            qs = self.get_queryset()
            entries = list(qs)
        except ValueError as exc:
            return _error(exc)
        resp = HttpResponse(content_type="text/csv")
        resp["Content-Disposition"] = "attachment; filename=transit_logbook.csv"
        w = csv.writer(resp)
        w.writerow(EXPORT_COLUMNS)
        for e in entries:
            w.writerow([
                e.serial_no,
                e.entry_date.strftime("%d/%m/%Y"),
                e.customer.name_english,
                e.item.name_english,
                e.lorry_no,
                e.driver_mobile,
                e.empty_weight,
                e.load_weight if e.load_weight is not None else "",
                e.net_weight if e.net_weight is not None else "",
                e.loading_place,
                e.status_label,
            ])
        return resp


@api_view(["GET"])
@permission_classes([permissions.IsAuthenticated, IsAdminRole])
def google_drive_callback(request):
    """OAuth redirect target: trade ``?code=`` for a Drive refresh token.

    The token is shown once to the admin, who stores it as
    ``GOOGLE_OAUTH_REFRESH_TOKEN``.
    """
    denied = request.query_params.get("error")
    if denied:
        return Response({"error": f"Authentication failed: {denied}"}, status=400)
    code = request.query_params.get("code")
    if not code:
        return Response({"error": "No authorization code received"}, status=400)
    try:
        tokens = exchange_code(code)
    except RemoteUploadError as exc:
        return _error(exc, status=502)
    if not tokens.get("refresh_token"):
        return Response(
            {"error": "Google returned no refresh token; revoke access and consent again"}, status=400
        )
    logger.info("Google Drive authorised by %s", request.user.username)
    return Response({
        "refresh_token": tokens["refresh_token"],
        "expires_in": tokens.get("expires_in"),
        "scope": tokens.get("scope", ""),
    })
