"""
utils/photo.py
---------------------------------
Attendance photo handling

- Accepts raw base64 or a data: URL from the browser camera
- Downsizes so the longest side fits PHOTO_MAX_SIDE (never upsizes)
- Re-encodes to JPEG for the Odoo payload
"""

import base64
import binascii
import logging

import cv2
import numpy as np

_logger = logging.getLogger(__name__)

MAX_SIDE = 1024
JPEG_QUALITY = 88


class PhotoError(ValueError):
    pass


def decode_data_url(value):
    """Bytes of a 'data:image/...;base64,...' URL or a bare base64 string."""
    if not value:
        raise PhotoError("Face image not captured. Please try again.")
    if value.startswith("data:"):
        _, _, value = value.partition(",")
    try:
        return base64.b64decode(value.strip(), validate=True)
    except (binascii.Error, ValueError) as e:
        raise PhotoError("Face image is not valid base64.") from e


def compress_photo(raw_bytes, max_side=MAX_SIDE, quality=JPEG_QUALITY):
    if not raw_bytes:
        raise PhotoError("Face image not captured. Please try again.")

    buffer = np.frombuffer(raw_bytes, dtype=np.uint8)
    image = cv2.imdecode(buffer, cv2.IMREAD_COLOR)
    if image is None:
        raise PhotoError("Failed to compress image")

    h, w = image.shape[:2]
    scale = max_side / float(max(h, w))
    if scale < 1.0:
        size = (max(1, int(round(w * scale))), max(1, int(round(h * scale))))
        image = cv2.resize(image, size, interpolation=cv2.INTER_AREA)

    ok, encoded = cv2.imencode(".jpg", image, [int(cv2.IMWRITE_JPEG_QUALITY), int(quality)])
    if not ok:
        raise PhotoError("Failed to compress image")

    compressed = encoded.tobytes()
    if len(raw_bytes):
        reduction = (len(raw_bytes) - len(compressed)) / float(len(raw_bytes)) * 100
        _logger.debug(
            "Image compressed: %dKB -> %dKB (%.1f%% reduction)",
            len(raw_bytes) // 1024, len(compressed) // 1024, reduction,
        )
    return compressed


def photo_to_base64(raw_bytes, max_side=MAX_SIDE, quality=JPEG_QUALITY):
    compressed = compress_photo(raw_bytes, max_side=max_side, quality=quality)
    return base64.b64encode(compressed).decode("utf-8")


__all__ = [
    "PhotoError",
    "decode_data_url",
    "compress_photo",
    "photo_to_base64",
]
