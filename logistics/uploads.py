"""Weighment photo uploads.

Photos arrive from the weighbridge screen as ``data:`` URLs. They are
downscaled to JPEG and sent to the configured Google Drive folder, or kept
in local media storage when Drive is not configured.
"""

import base64
import binascii
import json
import logging
import re
from io import BytesIO

import requests
from django.conf import settings
from django.core.files.base import ContentFile
from django.core.files.storage import default_storage
from PIL import Image, ImageOps, UnidentifiedImageError

logger = logging.getLogger(__name__)

TOKEN_URL = "https://oauth2.googleapis.com/token"
DRIVE_UPLOAD_URL = "https://www.googleapis.com/upload/drive/v3/files?uploadType=multipart&fields=id,webViewLink"
TIMEOUT = 30

DATA_URL_RE = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+);base64,(?P<payload>.+)$", re.S)


class UploadError(Exception):
    """Raised when a photo cannot be decoded or stored."""


class RemoteUploadError(UploadError):
    """Google rejected the request or could not be reached."""


def decode_data_url(data_url: str) -> tuple[str, bytes]:
    match = DATA_URL_RE.match((data_url or "").strip())
    if not match:
        raise UploadError("Photo must be a base64 data URL")
    try:
        payload = base64.b64decode(match.group("payload"), validate=True)
    except (binascii.Error, ValueError) as exc:
        raise UploadError("Photo data is not valid base64") from exc
    return match.group("mime"), payload


def compress_image(raw: bytes, max_size: int = 1600, quality: int = 72) -> bytes:
    """Downscale to fit ``max_size`` on the long side and re-encode as JPEG."""
    try:
        img = Image.open(BytesIO(raw))
        img = ImageOps.exif_transpose(img)
    except (UnidentifiedImageError, OSError) as exc:
        raise UploadError("Photo is not a readable image") from exc
    img = img.convert("RGB")
    img.thumbnail((max_size, max_size))
    out = BytesIO()
    img.save(out, format="JPEG", quality=quality, optimize=True)
    return out.getvalue()


def _token_request(data: dict) -> dict:
    data = {
        "client_id": settings.GOOGLE_OAUTH_CLIENT_ID,
        "client_secret": settings.GOOGLE_OAUTH_CLIENT_SECRET,
        **data,
    }
    try:
        resp = requests.post(TOKEN_URL, data=data, timeout=TIMEOUT)
    except requests.RequestException as exc:
        logger.warning("Google token request failed: %s", exc)
        raise RemoteUploadError("Could not reach Google OAuth") from exc
    if not resp.ok:
        logger.warning("Google token request rejected (%s): %s", resp.status_code, resp.text[:200])
        raise RemoteUploadError(f"Google OAuth returned {resp.status_code}")
    return resp.json()


def exchange_code(code: str) -> dict:
    """Trade an OAuth authorisation code for access and refresh tokens."""
    return _token_request({
        "code": code,
        "grant_type": "authorization_code",
        "redirect_uri": settings.GOOGLE_OAUTH_REDIRECT_URI,
    })


def refresh_access_token(refresh_token: str) -> dict:
    return _token_request({"refresh_token": refresh_token, "grant_type": "refresh_token"})


def drive_configured() -> bool:
    return bool(
        settings.GOOGLE_DRIVE_FOLDER_ID
        and settings.GOOGLE_OAUTH_REFRESH_TOKEN
        and settings.GOOGLE_OAUTH_CLIENT_ID
    )


def upload_to_drive(content: bytes, file_name: str, mime: str = "image/jpeg") -> str:
    token = refresh_access_token(settings.GOOGLE_OAUTH_REFRESH_TOKEN)["access_token"]
    metadata = {"name": file_name, "parents": [settings.GOOGLE_DRIVE_FOLDER_ID]}
    files = {
        "metadata": (None, json.dumps(metadata), "application/json; charset=UTF-8"),
        "file": (file_name, content, mime),
    }
    try:
        resp = requests.post(
            DRIVE_UPLOAD_URL,
            headers={"Authorization": f"Bearer {token}"},
            files=files,
            timeout=TIMEOUT,
        )
    except requests.RequestException as exc:
        logger.warning("Drive upload of %s failed: %s", file_name, exc)
        raise RemoteUploadError("Could not reach Google Drive") from exc
    if not resp.ok:
        logger.warning("Drive upload of %s rejected (%s)", file_name, resp.status_code)
        raise RemoteUploadError(f"Google Drive returned {resp.status_code}")
    body = resp.json()
    return body.get("webViewLink") or f"https://drive.google.com/file/d/{body['id']}/view"


def upload_data_url(data_url: str, file_name: str) -> str:
    """Store a weighment photo and return the URL to keep on the entry."""
    _, raw = decode_data_url(data_url)
    content = compress_image(raw)
    if not file_name.lower().endswith((".jpg", ".jpeg")):
        file_name = f"{file_name}.jpg"
    if drive_configured():
        url = upload_to_drive(content, file_name)
    else:
        path = default_storage.save(f"weighments/{file_name}", ContentFile(content))
        url = default_storage.url(path)
    logger.info("Weighment photo %s stored at %s", file_name, url)
    return url
