from __future__ import annotations

import os
from pathlib import Path
from typing import Literal, Optional

import yaml
from pydantic import BaseModel

from .keys import (
    NONE_KEY,
    JwksKeyProvider,
    KeyProvider,
    SingleKeyProvider,
    load_pem_key,
)


class JwksConfig(BaseModel):
    """Configuration for a remote JWKS key provider."""

    url: Optional[str] = None
    timeout: float = 5
    cache_seconds: float = 300


class ProviderConfig(BaseModel):
    """Key provider configuration settings."""

    backend: Literal["static", "jwks"] = "static"
    secret: Optional[str] = None
    key_file: Optional[str] = None
    allow_none: bool = False
    jwks: JwksConfig = JwksConfig()


class JwsVerifyConfig(BaseModel):
    """Top-level configuration model."""

    provider: ProviderConfig = ProviderConfig()
    log_level: str = "WARNING"


def load_config(path: Optional[str] = None) -> JwsVerifyConfig:
    """Load configuration from YAML file.

    Args:
        path: Optional path to config file. Falls back to JWSVERIFY_CONFIG env
            variable or 'jwsverify.yaml' in the current directory.
    """

    config_path = path or os.getenv("JWSVERIFY_CONFIG", "jwsverify.yaml")
    if os.path.exists(config_path):
        with open(config_path) as f:
            data = yaml.safe_load(f) or {}
        config = JwsVerifyConfig(**data)
    else:
        config = JwsVerifyConfig()

    env_jwks_url = os.getenv("JWSVERIFY_JWKS_URL")
    if env_jwks_url:
        config.provider.jwks.url = env_jwks_url
        config.provider.backend = "jwks"
    env_secret = os.getenv("JWSVERIFY_SECRET")
    if env_secret:
        config.provider.secret = env_secret
    env_log_level = os.getenv("JWSVERIFY_LOG_LEVEL")
    if env_log_level:
        config.log_level = env_log_level
    return config


def get_key_provider(
    backend: Optional[str] = None, config: Optional[JwsVerifyConfig] = None
) -> KeyProvider:
    """Factory function to build the configured key provider."""

    config = config or load_config()
    provider_conf = config.provider
    backend = (backend or provider_conf.backend).lower()

    if backend == "static":
        if provider_conf.secret is not None:
            return SingleKeyProvider(provider_conf.secret.encode("utf-8"))
        if provider_conf.key_file is not None:
            return SingleKeyProvider(load_pem_key(Path(provider_conf.key_file).read_bytes()))
        if provider_conf.allow_none:
            return SingleKeyProvider(NONE_KEY)
        raise ValueError("Static key provider needs a secret, a key_file or allow_none")
    elif backend == "jwks":
        jwks_conf = provider_conf.jwks
        if not jwks_conf.url:
            raise ValueError("JWKS key provider needs a url")
        return JwksKeyProvider(
            jwks_conf.url,
            timeout=jwks_conf.timeout,
            cache_seconds=jwks_conf.cache_seconds,
        )
    else:
        raise ValueError(f"Unsupported key provider backend: {backend}")
