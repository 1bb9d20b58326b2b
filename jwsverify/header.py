"""JWS protected header model."""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .encoding import b64url_decode
from .errors import FormatError


class Header(BaseModel):
    """Decoded JOSE header of a compact JWS.

    ``alg`` is kept exactly as sent; it is matched against the supported
    algorithms only at dispatch time.  The remaining fields are hints for a
    key provider and are never interpreted by the verifier.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    alg: str = Field(..., description="Signature algorithm identifier")
    typ: Optional[str] = Field(default=None, description="Media type of the JWS")
    cty: Optional[str] = Field(default=None, description="Media type of the payload")
    jku: Optional[str] = Field(default=None, description="JWK Set URL")
    jwk: Optional[Union[str, Dict[str, Any]]] = Field(
        default=None, description="Embedded JSON Web Key"
    )
    x5u: Optional[str] = Field(default=None, description="X.509 URL")
    x5c: Optional[Union[str, List[str]]] = Field(
        default=None, description="X.509 certificate chain"
    )
    x5t: Optional[str] = Field(default=None, description="X.509 SHA-1 thumbprint")
    x5t_s256: Optional[str] = Field(
        default=None, alias="x5t#S256", description="X.509 SHA-256 thumbprint"
    )
    kid: Optional[str] = Field(default=None, description="Key identifier")


def decode_header(segment: str) -> Header:
    """Decode the first compact-serialization segment into a :class:`Header`."""

    raw = b64url_decode(segment)
    try:
        return Header.model_validate_json(raw)
    except ValidationError as exc:
        raise FormatError(f"Failed to decode header: {exc.errors()[0]['msg']}") from exc
