"""Exception hierarchy raised while verifying a JWS."""

from __future__ import annotations


class JwsError(Exception):
    """Base class for every verification failure."""


class MalformedInputError(JwsError, ValueError):
    """The input is not three non-empty dot-separated segments."""


class EncodingError(JwsError, ValueError):
    """A segment is not valid URL-safe base64."""


class FormatError(JwsError, ValueError):
    """The header decoded but is not a valid JWS header object."""


class KeyLookupError(JwsError, LookupError):
    """The key provider could not produce a key for the header."""


class KeyTypeError(JwsError, TypeError):
    """The key material does not fit the declared algorithm."""


class SignatureInvalidError(JwsError):
    """The cryptographic check failed.

    The message is the same for every cause (bad MAC, wrong length, wrong
    curve point, refused ``none``) so a caller cannot tell forgeries apart.
    """

    def __init__(self) -> None:
        super().__init__("Signature verification failed")


class UnknownAlgorithmError(JwsError, ValueError):
    """The header names an algorithm outside the supported set."""

    def __init__(self, algorithm: object) -> None:
        self.algorithm = algorithm
        super().__init__(f"Unknown signature algorithm: {algorithm}")


__all__ = [
    "JwsError",
    "MalformedInputError",
    "EncodingError",
    "FormatError",
    "KeyLookupError",
    "KeyTypeError",
    "SignatureInvalidError",
    "UnknownAlgorithmError",
]
