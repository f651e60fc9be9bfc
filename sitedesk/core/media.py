"""Logo/photo handling: uploaded images arrive as data URLs, otherwise an avatar URL."""

import base64
import binascii
from urllib.parse import quote

from sitedesk.core.errors import ValidationError

MAX_IMAGE_BYTES = 5 * 1024 * 1024
AVATAR_URL = "https://ui-avatars.com/api/?name={name}&background={bg}&color=fff&size={size}"


def avatar_url(name: str, bg: str = "6366f1", size: int = 128) -> str:
    return AVATAR_URL.format(name=quote(name), bg=bg, size=size)


def validate_image(data_url: str) -> str:
    """Check a `data:image/...;base64,` URL and return it unchanged.

    Raises ValidationError when it is not a base64 image or is over 5 MB decoded.
    """
    if not isinstance(data_url, str) or not data_url.startswith("data:image/") \
            or ";base64," not in data_url:
        raise ValidationError("Error processing image. Please try again.")
    payload = data_url.split(";base64,", 1)[1]
    try:
        raw = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError):
        raise ValidationError("Error processing image. Please try again.")
    if len(raw) > MAX_IMAGE_BYTES:
        raise ValidationError("Image size should be less than 5MB")
    return data_url


def make_code(name: str, sequence: int) -> str:
    """Initials of the name's words (max 6) + zero-padded running number."""
    initials = "".join(word[0].upper() for word in name.split() if word)[:6]
    return f"{initials}{sequence:03d}"
