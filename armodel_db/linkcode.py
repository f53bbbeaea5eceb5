"""
Link-code (QR) generation.

A link code is a PNG encoding the AR viewer URL of one record:

    {base_url}/ar/{record_id}

Images are 512x512, black on white, with a 3-module quiet zone and
error-correction level H so they still scan when partly covered.
"""

from __future__ import annotations

import base64
import io
import logging

import qrcode
from PIL import Image
from qrcode.constants import ERROR_CORRECT_H

from .config import DEFAULT_BASE_URL
from .errors import RemoteStorageError
from .object_store.base import ObjectStore
from .utils.paths import build_link_code_key

logger = logging.getLogger(__name__)

LINK_CODE_WIDTH = 512
LINK_CODE_MARGIN = 3
LINK_CODE_DARK = "#000000"
LINK_CODE_LIGHT = "#FFFFFF"


def build_viewer_url(base_url: str | None, record_id: str) -> str:
    """AR viewer URL for a record; an empty base falls back to the local default."""
    base = (base_url or DEFAULT_BASE_URL).rstrip("/")
    return f"{base}/ar/{record_id}"


def render_link_code(url: str) -> bytes:
    """Encode `url` into a PNG and return its bytes."""
    qr = qrcode.QRCode(
        error_correction=ERROR_CORRECT_H,
        box_size=10,
        border=LINK_CODE_MARGIN,
    )
    qr.add_data(url)
    qr.make(fit=True)

    img = qr.make_image(fill_color=LINK_CODE_DARK, back_color=LINK_CODE_LIGHT)
    img = img.get_image().convert("RGB")
    img = img.resize((LINK_CODE_WIDTH, LINK_CODE_WIDTH), Image.NEAREST)

    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


def to_data_url(png: bytes) -> str:
    return "data:image/png;base64," + base64.b64encode(png).decode("ascii")


def generate_link_code(store: ObjectStore, record_id: str, base_url: str | None) -> str:
    """
    Render and store the link code for `record_id`.

    Returns the stored image's public URL. When a remote bucket rejects the
    upload, the image is returned inline as a data URL instead. Local write
    errors propagate.
    """
    viewer_url = build_viewer_url(base_url, record_id)
    logger.info("Generating link code for %s", viewer_url)

    png = render_link_code(viewer_url)
    key = build_link_code_key(record_id)

    try:
        store.save_bytes(key, png, "image/png")
    except RemoteStorageError as exc:
        logger.warning("Link code upload failed for %s, using inline image: %s",
                       record_id, exc)
        return to_data_url(png)

    return store.public_url(key)
