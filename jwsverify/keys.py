"""Key material and key providers used during verification."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Protocol, Union

import jwt
import requests
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec, rsa

from .errors import KeyLookupError, KeyTypeError
from .header import Header

logger = logging.getLogger(__name__)


class NoneKey:
    """Marker key authorizing unsigned (``alg: none``) tokens.

    There is exactly one instance, :data:`NONE_KEY`.  It is not bytes and not a
    cryptographic key, so it can never satisfy any signed algorithm.
    """

    __slots__ = ()
    _instance: Optional["NoneKey"] = None

    def __new__(cls) -> "NoneKey":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "NONE_KEY"

    def __reduce__(self) -> str:
        return "NONE_KEY"


NONE_KEY = NoneKey()


@dataclass(frozen=True)
class SymmetricKey:
    """Shared secret for HMAC algorithms."""

    secret: bytes = field(repr=False)


@dataclass(frozen=True)
class RsaKey:
    """RSA public key for RS256."""

    public_key: rsa.RSAPublicKey


@dataclass(frozen=True)
class EcKey:
    """Elliptic-curve public key for the ES family."""

    public_key: ec.EllipticCurvePublicKey

    @property
    def curve_name(self) -> str:
        return self.public_key.curve.name


KeyMaterial = Union[NoneKey, SymmetricKey, RsaKey, EcKey]


def as_key_material(value: Any) -> KeyMaterial:
    """Normalize whatever a provider returned into a :data:`KeyMaterial`.

    Private RSA and EC keys are reduced to their public component.
    """

    if isinstance(value, (NoneKey, SymmetricKey, RsaKey, EcKey)):
        return value
    if isinstance(value, (bytes, bytearray)):
        return SymmetricKey(bytes(value))
    if isinstance(value, rsa.RSAPublicKey):
        return RsaKey(value)
    if isinstance(value, rsa.RSAPrivateKey):
        return RsaKey(value.public_key())
    if isinstance(value, ec.EllipticCurvePublicKey):
        return EcKey(value)
    if isinstance(value, ec.EllipticCurvePrivateKey):
        return EcKey(value.public_key())
    raise KeyTypeError(f"Unsupported key material: {type(value).__name__}")


def load_pem_key(data: bytes) -> Any:
    """Load a PEM public key, or an unencrypted PEM private key."""

    try:
        return serialization.load_pem_public_key(data)
    except (ValueError, UnsupportedAlgorithm):
        pass
    try:
        return serialization.load_pem_private_key(data, password=None)
    except (ValueError, TypeError, UnsupportedAlgorithm) as exc:
        raise KeyLookupError(f"Could not load PEM key: {exc}") from exc


class KeyProvider(Protocol):
    """Resolves a decoded header to the key it must be verified with."""

    def get_key(self, header: Header) -> Any:
        """Return key material for ``header`` or raise ``KeyLookupError``."""


class SingleKeyProvider:
    """Returns the same key regardless of the header."""

    def __init__(self, key: Any) -> None:
        self.key = key

    def get_key(self, header: Header) -> Any:
        return self.key


def provider_from_key(key: Any) -> SingleKeyProvider:
    """Wrap a single fixed key as a provider."""
    return SingleKeyProvider(key)


class KeySetProvider:
    """Selects a key by the header's ``kid``.

    Headers without a ``kid`` get ``default`` when one is configured.
    """

    def __init__(self, keys: Mapping[str, Any], default: Any = None) -> None:
        self.keys = dict(keys)
        self.default = default

    def get_key(self, header: Header) -> Any:
        if header.kid is None:
            if self.default is None:
                raise KeyLookupError("Header has no kid and no default key is configured")
            return self.default
        try:
            return self.keys[header.kid]
        except KeyError:
            raise KeyLookupError(f"No key registered for kid {header.kid!r}") from None


class JwksKeyProvider:
    """Looks keys up in a remote JSON Web Key Set.

    The fetched set is cached on the instance for ``cache_seconds``.  A ``kid``
    missing from the cached set triggers one refetch before failing.
    """

    def __init__(self, url: str, timeout: float = 5, cache_seconds: float = 300) -> None:
        self.url = url
        self.timeout = timeout
        self.cache_seconds = cache_seconds
        self._jwks_cache: List[Dict[str, Any]] = []
        self._last_fetch: Optional[float] = None

    def _fetch_jwks(self) -> None:
        logger.info(f"Fetching JWKS from {self.url}")
        try:
            resp = requests.get(self.url, timeout=self.timeout)
            resp.raise_for_status()
            keys = resp.json().get("keys", [])
        except (requests.RequestException, ValueError, AttributeError) as exc:
            raise KeyLookupError(f"Failed to fetch JWKS from {self.url}: {exc}") from exc
        if not isinstance(keys, list):
            raise KeyLookupError(f"JWKS document at {self.url} has no key list")
        self._jwks_cache = [k for k in keys if isinstance(k, dict)]
        self._last_fetch = time.monotonic()

    def _is_stale(self) -> bool:
        return (
            self._last_fetch is None
            or time.monotonic() - self._last_fetch > self.cache_seconds
        )

    def _select(self, kid: Optional[str]) -> Optional[Dict[str, Any]]:
        if kid is None:
            return self._jwks_cache[0] if len(self._jwks_cache) == 1 else None
        return next((k for k in self._jwks_cache if k.get("kid") == kid), None)

    def get_key(self, header: Header) -> Any:
        fetched = self._is_stale()
        if fetched:
            self._fetch_jwks()
        jwk = self._select(header.kid)
        if jwk is None and not fetched:
            logger.debug(f"kid {header.kid!r} not cached, refetching JWKS")
            self._fetch_jwks()
            jwk = self._select(header.kid)
        if jwk is None:
            raise KeyLookupError(f"No matching JWK found for kid {header.kid!r}")
        try:
            return jwt.PyJWK(jwk).key
        except (jwt.PyJWTError, ValueError, TypeError) as exc:
            raise KeyLookupError(f"Unusable JWK for kid {header.kid!r}: {exc}") from exc


__all__ = [
    "NONE_KEY",
    "NoneKey",
    "SymmetricKey",
    "RsaKey",
    "EcKey",
    "KeyMaterial",
    "as_key_material",
    "load_pem_key",
    "KeyProvider",
    "SingleKeyProvider",
    "provider_from_key",
    "KeySetProvider",
    "JwksKeyProvider",
]
