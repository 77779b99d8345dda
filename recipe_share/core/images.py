import base64
import binascii
import re
from typing import Optional, Tuple

# data:image/png;base64,iVBORw0...
DATA_URI_PATTERN = re.compile(r"^data:(?P<content_type>[\w.+-]+/[\w.+-]+);base64,(?P<payload>.*)$", re.DOTALL)

DEFAULT_CONTENT_TYPE = "application/octet-stream"


def decode_image(value: str) -> Tuple[bytes, Optional[str]]:
    """
    Decode an image sent by a client.

    Accepts bare base64 or a data URI. Returns the raw bytes and the content
    type found in the data URI (None for bare base64).
    Raises ValueError on anything that is not valid base64.
    """
    content_type = None
    payload = value.strip()
    match = DATA_URI_PATTERN.match(payload)
    if match:
        content_type = match.group("content_type")
        payload = match.group("payload")

    try:
        data = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError):
        raise ValueError("Image data is not valid base64")
    if not data:
        raise ValueError("Image data is empty")
    return data, content_type


def encode_image(data: bytes) -> str:
    """Encode stored image bytes for transmission."""
    return base64.b64encode(data).decode("ascii")
