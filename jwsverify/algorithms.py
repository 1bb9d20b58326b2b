"""Supported JWS algorithms and their signature checks."""

from __future__ import annotations

import hashlib
import hmac
import logging
from enum import Enum
from typing import Any, Callable, Dict

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import ec, padding
from cryptography.hazmat.primitives.asymmetric.utils import encode_dss_signature

from .errors import KeyTypeError, SignatureInvalidError, UnknownAlgorithmError
from .keys import NONE_KEY, EcKey, RsaKey, SymmetricKey, as_key_material

logger = logging.getLogger(__name__)


class Algorithm(str, Enum):
    """Closed set of algorithms the verifier understands."""

    NONE = "none"
    HS256 = "HS256"
    RS256 = "RS256"
    ES256 = "ES256"
    ES512 = "ES512"

    @classmethod
    def parse(cls, value: str) -> "Algorithm":
        """Return the member named exactly ``value``."""
        for member in cls:
            if member.value == value:
                return member
        raise UnknownAlgorithmError(value)


Verifier = Callable[[bytes, bytes, Any], None]


def _verify_none(signing_input: bytes, signature: bytes, key: Any) -> None:
    # Identity only: nothing but the sentinel object authorizes an unsigned token.
    if key is not NONE_KEY:
        logger.warning("Refusing to validate unsigned JWS")
        raise SignatureInvalidError()
    logger.warning("Accepting unsigned JWS explicitly authorized by key provider")


def _verify_hs256(signing_input: bytes, signature: bytes, key: Any) -> None:
    material = as_key_material(key)
    if not isinstance(material, SymmetricKey):
        raise KeyTypeError(f"Expected symmetric (bytes) key. Got {type(key).__name__}")
    expected = hmac.new(material.secret, signing_input, hashlib.sha256).digest()
    if not hmac.compare_digest(expected, signature):
        raise SignatureInvalidError()


def _verify_rs256(signing_input: bytes, signature: bytes, key: Any) -> None:
    material = as_key_material(key)
    if not isinstance(material, RsaKey):
        raise KeyTypeError(f"Expected RSA key. Got {type(key).__name__}")
    try:
        material.public_key.verify(
            signature, signing_input, padding.PKCS1v15(), hashes.SHA256()
        )
    except InvalidSignature:
        raise SignatureInvalidError() from None


def _ecdsa_verifier(
    curve: type[ec.EllipticCurve], field_size: int, hash_algorithm: hashes.HashAlgorithm
) -> Verifier:
    def _verify(signing_input: bytes, signature: bytes, key: Any) -> None:
        material = as_key_material(key)
        if not isinstance(material, EcKey):
            raise KeyTypeError(f"Expected ECDSA key. Got {type(key).__name__}")
        if not isinstance(material.public_key.curve, curve):
            raise KeyTypeError(
                f"Expected ECDSA key on {curve.name}. Got {material.curve_name}"
            )
        if len(signature) != 2 * field_size:
            raise SignatureInvalidError()

        r = int.from_bytes(signature[:field_size], "big")
        s = int.from_bytes(signature[field_size:], "big")
        try:
            material.public_key.verify(
                encode_dss_signature(r, s), signing_input, ec.ECDSA(hash_algorithm)
            )
        except InvalidSignature:
            raise SignatureInvalidError() from None

    return _verify


_VERIFIERS: Dict[Algorithm, Verifier] = {
    Algorithm.NONE: _verify_none,
    Algorithm.HS256: _verify_hs256,
    Algorithm.RS256: _verify_rs256,
    Algorithm.ES256: _ecdsa_verifier(ec.SECP256R1, 32, hashes.SHA256()),
    Algorithm.ES512: _ecdsa_verifier(ec.SECP521R1, 66, hashes.SHA512()),
}

if set(_VERIFIERS) != set(Algorithm):
    raise RuntimeError("Every Algorithm member needs a verifier")


def verify_signature(
    algorithm: Algorithm, signing_input: bytes, signature: bytes, key: Any
) -> None:
    """Check ``signature`` over ``signing_input`` with ``key`` for ``algorithm``.

    Raises:
        KeyTypeError: ``key`` does not fit ``algorithm``.
        SignatureInvalidError: the signature does not verify.
    """

    _VERIFIERS[algorithm](signing_input, signature, key)
