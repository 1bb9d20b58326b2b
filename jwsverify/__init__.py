"""jwsverify: verification of JSON Web Signatures in compact form."""

from .algorithms import Algorithm, verify_signature
from .config import JwsVerifyConfig, get_key_provider, load_config
from .encoding import b64url_decode, b64url_encode
from .engine import JwsVerifier, get_unverified_header, verify_and_decode
from .errors import (
    EncodingError,
    FormatError,
    JwsError,
    KeyLookupError,
    KeyTypeError,
    MalformedInputError,
    SignatureInvalidError,
    UnknownAlgorithmError,
)
from .header import Header, decode_header
from .keys import (
    NONE_KEY,
    EcKey,
    JwksKeyProvider,
    KeyProvider,
    KeySetProvider,
    RsaKey,
    SingleKeyProvider,
    SymmetricKey,
    load_pem_key,
    provider_from_key,
)

__version__ = "0.1.0"
__all__ = [
    "Algorithm",
    "verify_signature",
    "JwsVerifyConfig",
    "get_key_provider",
    "load_config",
    "b64url_decode",
    "b64url_encode",
    "JwsVerifier",
    "get_unverified_header",
    "verify_and_decode",
    "EncodingError",
    "FormatError",
    "JwsError",
    "KeyLookupError",
    "KeyTypeError",
    "MalformedInputError",
    "SignatureInvalidError",
    "UnknownAlgorithmError",
    "Header",
    "decode_header",
    "NONE_KEY",
    "EcKey",
    "JwksKeyProvider",
    "KeyProvider",
    "KeySetProvider",
    "RsaKey",
    "SingleKeyProvider",
    "SymmetricKey",
    "load_pem_key",
    "provider_from_key",
]
