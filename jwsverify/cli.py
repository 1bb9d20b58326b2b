"""Command line interface for verifying JWS tokens."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

import typer
import yaml

from jwsverify import (
    NONE_KEY,
    JwksKeyProvider,
    JwsError,
    JwsVerifyConfig,
    KeyProvider,
    SingleKeyProvider,
    get_key_provider,
    get_unverified_header,
    load_config,
    load_pem_key,
    verify_and_decode,
)

app = typer.Typer(help="CLI for verifying JSON Web Signatures")


@app.callback()
def main() -> None:
    """jwsverify CLI entry point."""
    pass


def _build_provider(
    config: JwsVerifyConfig,
    secret: Optional[str],
    key_file: Optional[Path],
    jwks_url: Optional[str],
    allow_none: bool,
) -> KeyProvider:
    if secret is not None:
        return SingleKeyProvider(secret.encode("utf-8"))
    if key_file is not None:
        return SingleKeyProvider(load_pem_key(key_file.read_bytes()))
    if jwks_url is not None:
        return JwksKeyProvider(jwks_url)
    if allow_none:
        return SingleKeyProvider(NONE_KEY)
    return get_key_provider(config=config)


@app.command("verify")
def verify(
    token: str,
    secret: Optional[str] = typer.Option(None, help="Shared secret for HS256"),
    key_file: Optional[Path] = typer.Option(
        None, exists=True, dir_okay=False, help="PEM file holding an RSA or EC key"
    ),
    jwks_url: Optional[str] = typer.Option(None, help="URL of a JSON Web Key Set"),
    allow_none: bool = typer.Option(
        False, help="Accept unsigned tokens (alg: none)"
    ),
    as_json: bool = typer.Option(False, "--json", help="Pretty-print a JSON payload"),
) -> None:
    """
    Verify a compact JWS and print its payload.

    The key comes from the first of --secret, --key-file, --jwks-url and
    --allow-none that is given, otherwise from the configuration file.

    Example:
        jwsverify verify eyJhbGciOi... --secret s3cr3t
        jwsverify verify eyJhbGciOi... --key-file public.pem --json
    """
    try:
        config = load_config()
        logging.basicConfig(level=config.log_level.upper())
        provider = _build_provider(config, secret, key_file, jwks_url, allow_none)
        payload = verify_and_decode(token, provider)
    except JwsError as exc:
        typer.echo(f"Verification failed: {exc}", err=True)
        raise typer.Exit(code=1)
    except (ValueError, OSError, yaml.YAMLError) as exc:
        typer.echo(f"Configuration error: {exc}", err=True)
        raise typer.Exit(code=2)

    if as_json:
        try:
            typer.echo(json.dumps(json.loads(payload), indent=2))
        except ValueError:
            typer.echo("Payload is not valid JSON", err=True)
            raise typer.Exit(code=1)
    else:
        typer.echo(payload.decode("utf-8", errors="replace"))


@app.command("header")
def header(token: str) -> None:
    """Print the header of a compact JWS without verifying it."""
    try:
        decoded = get_unverified_header(token)
    except JwsError as exc:
        typer.echo(f"Invalid header: {exc}", err=True)
        raise typer.Exit(code=1)
    typer.echo(decoded.model_dump_json(by_alias=True, exclude_none=True, indent=2))


if __name__ == "__main__":
    app()
