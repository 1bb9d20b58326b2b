"""URL-safe base64 helpers for compact serialization segments."""

from __future__ import annotations

import base64
import binascii
import re

from .errors import EncodingError

_SEGMENT_RE = re.compile(r"[A-Za-z0-9_-]*={0,2}")


def b64url_encode(data: bytes) -> str:
    """Encode ``data`` as unpadded URL-safe base64."""
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def b64url_decode(segment: str | bytes) -> bytes:
    """Decode a URL-safe base64 segment, padded or not.

    Characters from the standard alphabet (``+``, ``/``), whitespace and
    padding that does not complete the final quantum are rejected, as are
    segments whose unused trailing bits are not zero.
    """

    if isinstance(segment, (bytes, bytearray)):
        try:
            segment = bytes(segment).decode("ascii")
        except UnicodeDecodeError as exc:
            raise EncodingError("Segment contains non-ASCII bytes") from exc
    if not isinstance(segment, str):
        raise EncodingError(f"Cannot decode segment of type {type(segment).__name__}")

    if not _SEGMENT_RE.fullmatch(segment):
        raise EncodingError("Segment is not URL-safe base64")

    body = segment.rstrip("=")
    if len(body) % 4 == 1:
        raise EncodingError("Segment has an impossible base64 length")
    if body != segment and len(segment) % 4 != 0:
        raise EncodingError("Segment has malformed padding")

    try:
        data = base64.urlsafe_b64decode(body + "=" * (-len(body) % 4))
    except (binascii.Error, ValueError) as exc:
        raise EncodingError(f"Segment is not URL-safe base64: {exc}") from exc
    # Unused trailing bits must be zero so each byte string has one encoding.
    if b64url_encode(data) != body:
        raise EncodingError("Segment is not canonical base64")
    return data
