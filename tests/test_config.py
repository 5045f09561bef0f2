"""Tests for application configuration."""

from __future__ import annotations

import pytest

from sharefinder.auth.credentials import (
    FallbackCredentialProvider,
    OnBehalfOfCredentialProvider,
    PassThroughCredentialProvider,
    ServiceAccountCredentialProvider,
)
from sharefinder.config import AppConfig


class TestAppConfig:
    """Test AppConfig dataclass."""

    def test_default_config(self) -> None:
        """Should create config with default values."""
        config = AppConfig()

        assert config.credential_mode == "obo"
        assert config.model_name == "gpt-4o-mini"
        assert config.max_window_tokens == 7500
        assert config.max_excerpt_sentences == 10
        assert config.page_size == 10
        assert config.graph_base_url == "https://graph.microsoft.com/v1.0"

    def test_custom_config(self) -> None:
        config = AppConfig(model_name="gpt-4o", max_window_tokens=2000, page_size=5)

        assert config.model_name == "gpt-4o"
        assert config.max_window_tokens == 2000
        assert config.page_size == 5

    def test_rejects_unknown_mode(self) -> None:
        with pytest.raises(ValueError, match="credential mode"):
            AppConfig(credential_mode="kerberos")

    @pytest.mark.parametrize("field", ["max_window_tokens", "page_size", "window_concurrency"])
    def test_rejects_non_positive(self, field: str) -> None:
        with pytest.raises(ValueError, match=field):
            AppConfig(**{field: 0})


class TestFromEnv:
    """Test AppConfig.from_env."""

    def test_empty_environment_uses_defaults(self) -> None:
        assert AppConfig.from_env({}) == AppConfig()

    def test_reads_environment(self) -> None:
        config = AppConfig.from_env(
            {
                "TENANT_ID": "tenant",
                "CLIENT_ID": "client",
                "CLIENT_SECRET": "secret",
                "OPENAI_API_KEY": "sk-test",
                "SHAREFINDER_CREDENTIAL_MODE": "auto",
                "SHAREFINDER_MODEL": "gpt-4o",
                "SHAREFINDER_MAX_WINDOW_TOKENS": "3000",
                "SHAREFINDER_PAGE_SIZE": "20",
            }
        )

        assert config.tenant_id == "tenant"
        assert config.client_secret == "secret"
        assert config.openai_api_key == "sk-test"
        assert config.credential_mode == "auto"
        assert config.model_name == "gpt-4o"
        assert config.max_window_tokens == 3000
        assert config.page_size == 20

    def test_rejects_non_integer(self) -> None:
        with pytest.raises(ValueError, match="SHAREFINDER_PAGE_SIZE"):
            AppConfig.from_env({"SHAREFINDER_PAGE_SIZE": "ten"})


class TestBuildCredentialProvider:
    """Test AppConfig.build_credential_provider."""

    @pytest.mark.parametrize(
        "mode,expected",
        [
            ("obo", OnBehalfOfCredentialProvider),
            ("passthrough", PassThroughCredentialProvider),
            ("service", ServiceAccountCredentialProvider),
            ("auto", FallbackCredentialProvider),
        ],
    )
    def test_mode_selects_provider(self, mode: str, expected: type) -> None:
        provider = AppConfig(credential_mode=mode, tenant_id="t").build_credential_provider()
        assert isinstance(provider, expected)

    def test_obo_uses_configured_credentials(self) -> None:
        provider = AppConfig(
            tenant_id="t", client_id="c", client_secret="s"
        ).build_credential_provider()

        assert provider.token_url == "https://login.microsoftonline.com/t/oauth2/v2.0/token"
        assert provider.client_secret == "s"
