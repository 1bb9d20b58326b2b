"""Example showing key selection by ``kid`` across algorithm families."""

import jwt
from cryptography.hazmat.primitives.asymmetric import ec, rsa

from jwsverify import (
    NONE_KEY,
    JwsError,
    KeySetProvider,
    b64url_encode,
    provider_from_key,
    verify_and_decode,
)


def main():
    """Verify tokens signed with different keys through one provider."""
    rsa_key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    ec_key = ec.generate_private_key(ec.SECP256R1())

    provider = KeySetProvider(
        {
            "billing-rsa": rsa_key.public_key(),
            "events-ec": ec_key.public_key(),
        }
    )

    billing = jwt.api_jws.encode(
        b'{"invoice": 42}', rsa_key, algorithm="RS256", headers={"kid": "billing-rsa"}
    )
    events = jwt.api_jws.encode(
        b"user.created", ec_key, algorithm="ES256", headers={"kid": "events-ec"}
    )

    print(f"✅ billing payload: {verify_and_decode(billing, provider)!r}")
    print(f"✅ events payload: {verify_and_decode(events, provider)!r}")

    # Unsigned tokens only pass when the provider hands out NONE_KEY.
    unsigned = ".".join(
        [b64url_encode(b'{"alg":"none"}'), b64url_encode(b"debug"), b64url_encode(b"-")]
    )
    try:
        verify_and_decode(unsigned, provider_from_key(rsa_key.public_key()))
    except JwsError as exc:
        print(f"❌ unsigned token refused: {exc}")
    print(f"✅ unsigned payload: {verify_and_decode(unsigned, provider_from_key(NONE_KEY))!r}")


if __name__ == "__main__":
    main()
