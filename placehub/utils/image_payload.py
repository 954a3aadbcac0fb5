"""
Image Payload Utility - Validate image answers.

Answers may carry an image instead of text. The front end sends either:
- A data URL (data:image/png;base64,....) from the paste/upload widget
- A plain http(s) URL to an already hosted image

Max decoded size: 5MB
"""

import base64
import binascii
import re


MAX_IMAGE_SIZE_MB = 5
MAX_IMAGE_SIZE_BYTES = MAX_IMAGE_SIZE_MB * 1024 * 1024
ALLOWED_IMAGE_TYPES = {'png', 'jpeg', 'jpg', 'gif', 'webp'}

_DATA_URL_RE = re.compile(r"^data:image/(?P<subtype>[a-zA-Z0-9.+-]+);base64,(?P<data>.*)$", re.DOTALL)


def decoded_size(b64_data: str) -> int:
    """Size in bytes of a base64 payload without decoding all of it."""
    stripped = b64_data.strip()
    padding = stripped[-2:].count('=')
    return (len(stripped) * 3) // 4 - padding


def validate_image_url(value: str) -> str:
    """
    Validate an answer image payload.

    Returns:
        The value unchanged when valid

    Raises:
        ValueError on unsupported scheme, type, bad base64 or oversize payload
    """
    value = value.strip()

    if value.startswith(("http://", "https://")):
        return value

    match = _DATA_URL_RE.match(value)
    if not match:
        raise ValueError("imageUrl must be an http(s) URL or a base64 image data URL")

    subtype = match.group("subtype").lower()
    if subtype not in ALLOWED_IMAGE_TYPES:
        raise ValueError(
            f"Unsupported image type: {subtype}. "
            f"Allowed: {', '.join(sorted(ALLOWED_IMAGE_TYPES))}"
        )

    data = match.group("data")
    if not data.strip():
        raise ValueError("imageUrl data URL is empty")
    if decoded_size(data) > MAX_IMAGE_SIZE_BYTES:
        raise ValueError(f"Image too large. Max size: {MAX_IMAGE_SIZE_MB}MB")

    # Only the head is decoded; 4096 is a multiple of 4 so the slice stays aligned
    head = data.strip()[:4096]
    try:
        base64.b64decode(head + "=" * (-len(head) % 4), validate=True)
    except (binascii.Error, ValueError):
        raise ValueError("imageUrl contains invalid base64 data")

    return value
