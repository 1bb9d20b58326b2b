"""Tests for key material normalization and key providers."""

import json
import pickle

import jwt
import pytest
import requests
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec, ed25519, rsa

from jwsverify.errors import KeyLookupError, KeyTypeError
from jwsverify.header import Header
from jwsverify.keys import (
    NONE_KEY,
    EcKey,
    JwksKeyProvider,
    KeySetProvider,
    NoneKey,
    RsaKey,
    SymmetricKey,
    as_key_material,
    load_pem_key,
    provider_from_key,
)

RSA_KEY = rsa.generate_private_key(public_exponent=65537, key_size=2048)
EC_KEY = ec.generate_private_key(ec.SECP256R1())


def test_none_key_is_a_singleton():
    assert NoneKey() is NONE_KEY
    assert pickle.loads(pickle.dumps(NONE_KEY)) is NONE_KEY
    assert NONE_KEY != b""
    assert NONE_KEY != 0
    assert repr(NONE_KEY) == "NONE_KEY"


def test_as_key_material_wraps_bytes():
    assert as_key_material(b"secret") == SymmetricKey(b"secret")
    assert as_key_material(bytearray(b"secret")) == SymmetricKey(b"secret")


def test_as_key_material_reduces_private_keys_to_public():
    rsa_material = as_key_material(RSA_KEY)
    assert isinstance(rsa_material, RsaKey)
    assert isinstance(rsa_material.public_key, rsa.RSAPublicKey)
    assert rsa_material.public_key.public_numbers() == RSA_KEY.public_key().public_numbers()

    ec_material = as_key_material(EC_KEY)
    assert isinstance(ec_material, EcKey)
    assert isinstance(ec_material.public_key, ec.EllipticCurvePublicKey)
    assert ec_material.curve_name == "secp256r1"


def test_as_key_material_passes_variants_through():
    material = SymmetricKey(b"k")
    assert as_key_material(material) is material
    assert as_key_material(NONE_KEY) is NONE_KEY


@pytest.mark.parametrize(
    "value",
    ["secret", 42, None, ed25519.Ed25519PrivateKey.generate()],
)
def test_as_key_material_rejects_other_shapes(value):
    with pytest.raises(KeyTypeError):
        as_key_material(value)


def test_symmetric_key_repr_hides_secret():
    assert "hunter2" not in repr(SymmetricKey(b"hunter2"))


def test_provider_from_key_ignores_header():
    provider = provider_from_key(b"k")
    assert provider.get_key(Header(alg="HS256")) == b"k"
    assert provider.get_key(Header(alg="RS256", kid="other")) == b"k"


def test_key_set_provider_selects_by_kid():
    provider = KeySetProvider({"a": b"key-a", "b": b"key-b"}, default=b"fallback")
    assert provider.get_key(Header(alg="HS256", kid="b")) == b"key-b"
    assert provider.get_key(Header(alg="HS256")) == b"fallback"
    with pytest.raises(KeyLookupError):
        provider.get_key(Header(alg="HS256", kid="missing"))


def test_key_set_provider_without_default_requires_kid():
    provider = KeySetProvider({"a": b"key-a"})
    with pytest.raises(KeyLookupError):
        provider.get_key(Header(alg="HS256"))


def test_load_pem_key_reads_public_and_private_keys():
    public_pem = RSA_KEY.public_key().public_bytes(
        serialization.Encoding.PEM, serialization.PublicFormat.SubjectPublicKeyInfo
    )
    private_pem = EC_KEY.private_bytes(
        serialization.Encoding.PEM,
        serialization.PrivateFormat.PKCS8,
        serialization.NoEncryption(),
    )
    assert isinstance(load_pem_key(public_pem), rsa.RSAPublicKey)
    assert isinstance(load_pem_key(private_pem), ec.EllipticCurvePrivateKey)
    with pytest.raises(KeyLookupError):
        load_pem_key(b"-----BEGIN NOTHING-----")


def _jwk(public_key, kid):
    if isinstance(public_key, rsa.RSAPublicKey):
        jwk_json = jwt.algorithms.RSAAlgorithm.to_jwk(public_key)
    else:
        jwk_json = jwt.algorithms.ECAlgorithm.to_jwk(public_key)
    jwk_dict = json.loads(jwk_json)
    jwk_dict["kid"] = kid
    return jwk_dict


class Resp:
    def __init__(self, document):
        self.status_code = 200
        self.document = document

    def raise_for_status(self):
        pass

    def json(self):
        return self.document


def test_jwks_provider_fetches_and_caches(monkeypatch):
    calls = []
    jwks = {"keys": [_jwk(RSA_KEY.public_key(), "rsa"), _jwk(EC_KEY.public_key(), "ec")]}

    def fake_get(url, timeout=5):
        calls.append(url)
        return Resp(jwks)

    monkeypatch.setattr("requests.get", fake_get)

    provider = JwksKeyProvider("http://idp/jwks")
    rsa_public = provider.get_key(Header(alg="RS256", kid="rsa"))
    ec_public = provider.get_key(Header(alg="ES256", kid="ec"))

    assert rsa_public.public_numbers() == RSA_KEY.public_key().public_numbers()
    assert ec_public.public_numbers() == EC_KEY.public_key().public_numbers()
    assert calls == ["http://idp/jwks"]


def test_jwks_provider_refetches_once_for_unknown_kid(monkeypatch):
    documents = [
        {"keys": [_jwk(RSA_KEY.public_key(), "old")]},
        {"keys": [_jwk(RSA_KEY.public_key(), "old"), _jwk(EC_KEY.public_key(), "new")]},
        {"keys": []},
    ]
    calls = []

    def fake_get(url, timeout=5):
        calls.append(url)
        return Resp(documents[len(calls) - 1])

    monkeypatch.setattr("requests.get", fake_get)

    provider = JwksKeyProvider("http://idp/jwks")
    provider.get_key(Header(alg="RS256", kid="old"))
    assert len(calls) == 1

    provider.get_key(Header(alg="ES256", kid="new"))
    assert len(calls) == 2


def test_jwks_provider_unknown_kid_is_lookup_error(monkeypatch):
    calls = []

    def fake_get(url, timeout=5):
        calls.append(url)
        return Resp({"keys": [_jwk(RSA_KEY.public_key(), "rsa")]})

    monkeypatch.setattr("requests.get", fake_get)

    provider = JwksKeyProvider("http://idp/jwks")
    with pytest.raises(KeyLookupError):
        provider.get_key(Header(alg="RS256", kid="missing"))
    assert len(calls) == 1


def test_jwks_provider_network_error_is_lookup_error(monkeypatch):
    def fake_get(url, timeout=5):
        raise requests.ConnectionError("unreachable")

    monkeypatch.setattr("requests.get", fake_get)

    with pytest.raises(KeyLookupError):
        JwksKeyProvider("http://idp/jwks").get_key(Header(alg="RS256", kid="rsa"))
