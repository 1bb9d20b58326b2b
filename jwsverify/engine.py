"""JWS compact serialization verification."""

from __future__ import annotations

import json
import logging
from typing import Any, List

from .algorithms import Algorithm, verify_signature
from .encoding import b64url_decode
from .errors import FormatError, JwsError, KeyLookupError, MalformedInputError
from .header import Header, decode_header
from .keys import KeyProvider

logger = logging.getLogger(__name__)


def _split(token: str) -> List[str]:
    if not isinstance(token, str):
        raise MalformedInputError(f"Expected compact JWS string. Got {type(token).__name__}")
    parts = token.split(".")
    if len(parts) != 3 or not all(parts):
        raise MalformedInputError("Malformed JWS")
    return parts


def get_unverified_header(token: str) -> Header:
    """Decode the header of ``token`` without checking its signature."""
    return decode_header(_split(token)[0])


def verify_and_decode(token: str, provider: KeyProvider) -> bytes:
    """Verify a compact JWS and return its raw payload.

    Steps run in a fixed order and stop at the first failure: split, decode
    the header, ask ``provider`` for a key (exactly once), decode the
    signature, check it for the header's algorithm, then decode the payload.
    The signing input is the encoded header and payload joined by ``.``.

    Raises:
        MalformedInputError: ``token`` is not three non-empty segments.
        EncodingError: a segment is not URL-safe base64.
        FormatError: the header is not a valid JSON header object.
        KeyLookupError: ``provider`` could not supply a key.
        UnknownAlgorithmError: ``alg`` is not supported.
        KeyTypeError: the key does not fit ``alg``.
        SignatureInvalidError: the signature does not verify.
    """

    header_segment, payload_segment, signature_segment = _split(token)
    header = decode_header(header_segment)
    logger.debug(f"Verifying JWS alg={header.alg!r} kid={header.kid!r}")

    try:
        key = provider.get_key(header)
    except JwsError:
        raise
    except Exception as exc:
        raise KeyLookupError(f"Failed to acquire public key: {exc}") from exc

    signature = b64url_decode(signature_segment)
    algorithm = Algorithm.parse(header.alg)
    signing_input = f"{header_segment}.{payload_segment}".encode("utf-8")
    verify_signature(algorithm, signing_input, signature, key)

    return b64url_decode(payload_segment)


class JwsVerifier:
    """Verifies compact JWS tokens against a fixed key provider."""

    def __init__(self, key_provider: KeyProvider) -> None:
        self.key_provider = key_provider

    def verify(self, token: str) -> bytes:
        """Verify ``token`` and return its raw payload."""
        return verify_and_decode(token, self.key_provider)

    def verify_json(self, token: str) -> Any:
        """Verify ``token`` and return its payload parsed as JSON."""
        payload = self.verify(token)
        try:
            return json.loads(payload)
        except ValueError as exc:
            raise FormatError(f"Payload is not valid JSON: {exc}") from exc
