"""Configuration parsing and validation for the feedback time breakdown."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from .errors import AuthenticationError, ConfigurationError

DEFAULT_EXCLUDED_ARTISTS: Tuple[str, ...] = ("INTERN // Social Media",)


@dataclass(frozen=True)
class Config:
    """Validated runtime settings used by the time breakdown."""

    supabase_url: str
    api_key: str
    excluded_artists: Tuple[str, ...] = DEFAULT_EXCLUDED_ARTISTS


def load_config(
    supabase_url: Optional[str] = None,
    excluded_artists: Optional[Sequence[str]] = None,
) -> Config:
    """Build and validate application configuration.

    Args:
        supabase_url: Project URL; falls back to ``SUPABASE_URL``.
        excluded_artists: Artist names left out of the artist view; defaults
            to ``DEFAULT_EXCLUDED_ARTISTS``.

    Returns:
        A validated ``Config`` instance.

    Raises:
        ConfigurationError: If no project URL is configured or it is not an
            ``http(s)`` URL.
        AuthenticationError: If ``SUPABASE_KEY`` is not configured.
    """
    url = (supabase_url or os.getenv("SUPABASE_URL", "")).strip().rstrip("/")
    if not url:
        raise ConfigurationError(
            "Missing Supabase project URL. Pass --supabase-url or set the 'SUPABASE_URL' environment variable."
        )
    if not url.startswith(("http://", "https://")):
        raise ConfigurationError(f"Invalid Supabase project URL '{url}': expected an http(s) URL.")

    api_key: str = os.getenv("SUPABASE_KEY", "").strip()
    if not api_key:
        raise AuthenticationError(
            "Missing required Supabase API key. "
            "Set the 'SUPABASE_KEY' environment variable before running the time breakdown."
        )

    return Config(
        supabase_url=url,
        api_key=api_key,
        excluded_artists=tuple(excluded_artists) if excluded_artists is not None else DEFAULT_EXCLUDED_ARTISTS,
    )
