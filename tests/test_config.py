"""Tests for configuration loading and validation."""

import sys
from pathlib import Path

import pytest

# Add src directory to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from timebreakdown.config import DEFAULT_EXCLUDED_ARTISTS, load_config
from timebreakdown.errors import AuthenticationError, ConfigurationError


def test_load_config_reads_environment_and_strips_trailing_slash(monkeypatch):
    """Verify URL and key come from the environment with defaults for excluded artists."""
    monkeypatch.setenv("SUPABASE_URL", "https://project.supabase.co/")
    monkeypatch.setenv("SUPABASE_KEY", " service-key ")

    config = load_config()

    assert config.supabase_url == "https://project.supabase.co"
    assert config.api_key == "service-key"
    assert config.excluded_artists == DEFAULT_EXCLUDED_ARTISTS


def test_load_config_prefers_explicit_url_and_excluded_artists(monkeypatch):
    """Verify explicit arguments override the environment URL and default exclusions."""
    monkeypatch.setenv("SUPABASE_URL", "https://env.supabase.co")
    monkeypatch.setenv("SUPABASE_KEY", "key")

    config = load_config(supabase_url="https://cli.supabase.co", excluded_artists=["Label Team"])

    assert config.supabase_url == "https://cli.supabase.co"
    assert config.excluded_artists == ("Label Team",)


def test_load_config_missing_url_raises_configuration_error(monkeypatch):
    """Verify a missing project URL is reported as a configuration error."""
    monkeypatch.delenv("SUPABASE_URL", raising=False)
    monkeypatch.setenv("SUPABASE_KEY", "key")

    with pytest.raises(ConfigurationError):
        load_config()


def test_load_config_non_http_url_raises_configuration_error(monkeypatch):
    """Verify a URL without an http(s) scheme is rejected."""
    monkeypatch.setenv("SUPABASE_KEY", "key")

    with pytest.raises(ConfigurationError):
        load_config(supabase_url="project.supabase.co")


def test_load_config_missing_key_raises_authentication_error(monkeypatch):
    """Verify a missing API key is reported as an authentication error."""
    monkeypatch.delenv("SUPABASE_KEY", raising=False)

    with pytest.raises(AuthenticationError):
        load_config(supabase_url="https://project.supabase.co")
