"""Application configuration defaults."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping

from sharefinder.auth.credentials import (
    CredentialProvider,
    FallbackCredentialProvider,
    OnBehalfOfCredentialProvider,
    PassThroughCredentialProvider,
    ServiceAccountCredentialProvider,
)
from sharefinder.relevance.extractor import DEFAULT_MODEL
from sharefinder.utils.text import DEFAULT_MAX_WINDOW_TOKENS

DEFAULT_GRAPH_BASE_URL = "https://graph.microsoft.com/v1.0"
CREDENTIAL_MODES = ("obo", "passthrough", "service", "auto")

_ENV_PREFIX = "SHAREFINDER_"


def _env_int(environ: Mapping[str, str], name: str, default: int) -> int:
    raw = environ.get(_ENV_PREFIX + name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{_ENV_PREFIX}{name} must be an integer, got {raw!r}") from exc


@dataclass(slots=True)
class AppConfig:
    credential_mode: str = "obo"
    tenant_id: str | None = None
    client_id: str | None = None
    client_secret: str | None = None
    service_username: str | None = None
    service_password: str | None = None
    graph_base_url: str = DEFAULT_GRAPH_BASE_URL
    graph_timeout: float = 30.0
    openai_api_key: str | None = None
    openai_base_url: str | None = None
    model_name: str = DEFAULT_MODEL
    max_window_tokens: int = DEFAULT_MAX_WINDOW_TOKENS
    max_excerpt_sentences: int = 10
    max_completion_tokens: int = 1000
    window_concurrency: int = 4
    page_size: int = 10

    def __post_init__(self) -> None:
        if self.credential_mode not in CREDENTIAL_MODES:
            raise ValueError(
                f"Unknown credential mode {self.credential_mode!r}; "
                f"expected one of {', '.join(CREDENTIAL_MODES)}"
            )
        for name in (
            "max_window_tokens",
            "max_excerpt_sentences",
            "max_completion_tokens",
            "window_concurrency",
            "page_size",
        ):
            if getattr(self, name) < 1:
                raise ValueError(f"{name} must be a positive integer")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "AppConfig":
        """Build a config from process environment variables.

        Azure and OpenAI credentials use their conventional names
        (``TENANT_ID``, ``OPENAI_API_KEY``...), tuning knobs use the
        ``SHAREFINDER_`` prefix.
        """
        env = os.environ if environ is None else environ
        defaults = cls()
        return cls(
            credential_mode=env.get(_ENV_PREFIX + "CREDENTIAL_MODE", defaults.credential_mode),
            tenant_id=env.get("TENANT_ID"),
            client_id=env.get("CLIENT_ID"),
            client_secret=env.get("CLIENT_SECRET"),
            service_username=env.get("SERVICE_USERNAME"),
            service_password=env.get("SERVICE_PASSWORD"),
            graph_base_url=env.get(_ENV_PREFIX + "GRAPH_BASE_URL", defaults.graph_base_url),
            openai_api_key=env.get("OPENAI_API_KEY"),
            openai_base_url=env.get("OPENAI_BASE_URL") or None,
            model_name=env.get(_ENV_PREFIX + "MODEL", defaults.model_name),
            max_window_tokens=_env_int(env, "MAX_WINDOW_TOKENS", defaults.max_window_tokens),
            max_excerpt_sentences=_env_int(
                env, "MAX_EXCERPT_SENTENCES", defaults.max_excerpt_sentences
            ),
            max_completion_tokens=_env_int(
                env, "MAX_COMPLETION_TOKENS", defaults.max_completion_tokens
            ),
            window_concurrency=_env_int(env, "WINDOW_CONCURRENCY", defaults.window_concurrency),
            page_size=_env_int(env, "PAGE_SIZE", defaults.page_size),
        )

    def build_credential_provider(self) -> CredentialProvider:
        if self.credential_mode == "passthrough":
            return PassThroughCredentialProvider()

        obo = OnBehalfOfCredentialProvider(
            tenant_id=self.tenant_id,
            client_id=self.client_id,
            client_secret=self.client_secret,
        )
        if self.credential_mode == "obo":
            return obo

        service = ServiceAccountCredentialProvider(
            tenant_id=self.tenant_id,
            client_id=self.client_id,
            username=self.service_username,
            password=self.service_password,
        )
        if self.credential_mode == "service":
            return service
        return FallbackCredentialProvider(obo, service)
