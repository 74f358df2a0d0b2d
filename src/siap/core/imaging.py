"""
Image codec.

Signatures and visit photos travel as base64 data URIs (`data:image/png;base64,...`),
the same representation the remote spreadsheet store keeps. An empty string means
"no artifact".
"""

from __future__ import annotations

import base64
import binascii
import io

from PIL import Image

EMPTY_ARTIFACT = ""


def encode_png_data_uri(image: Image.Image) -> str:
    """Encode a Pillow image as a PNG data URI."""
    buf = io.BytesIO()
    image.save(buf, format="PNG")
    return encode_bytes_data_uri(buf.getvalue(), "image/png")


def encode_bytes_data_uri(data: bytes, mime: str) -> str:
    """Wrap already-encoded image bytes (e.g., an uploaded JPEG) as a data URI."""
    if not mime.startswith("image/"):
        raise ValueError(f"Unsupported artifact mime type: {mime!r}")
    return f"data:{mime};base64,{base64.b64encode(data).decode('ascii')}"


def decode_data_uri(uri: str) -> tuple[str, bytes]:
    """Split a base64 data URI into `(mime, raw_bytes)`.

    Raises:
        ValueError: If `uri` is not a base64 data URI.
    """
    if not uri.startswith("data:") or "," not in uri:
        raise ValueError("Not a data URI")
    header, body = uri[5:].split(",", 1)
    parts = header.split(";")
    if "base64" not in parts[1:]:
        raise ValueError("Only base64 data URIs are supported")
    try:
        raw = base64.b64decode(body, validate=True)
    except binascii.Error as e:
        raise ValueError(f"Invalid base64 payload: {e}") from e
    return parts[0] or "text/plain", raw


def decode_image(uri: str) -> Image.Image:
    """Decode an image data URI into a Pillow image."""
    _, raw = decode_data_uri(uri)
    return Image.open(io.BytesIO(raw))