"""
core/config.py

Provider configuration: the ProviderConfig dataclass, the built-in site
presets and environment-variable overrides.

Environment variables:
  NEXUS_PROVIDER                 Preset name used by the server (default: oyunindir)
  NEXUS_PROVIDER_BASE_URL        Base URL override
  NEXUS_PROVIDER_API_KEY         Bearer token sent with every request
  NEXUS_PROVIDER_CACHE_DURATION  Cache TTL in seconds      (default: 300)
  NEXUS_PROVIDER_TIMEOUT         Request timeout in seconds (default: 30)
  NEXUS_PROVIDER_MAX_RETRIES     Reserved, not enforced     (default: 3)
"""
from __future__ import annotations

import os
import urllib.parse
from dataclasses import dataclass, field, replace
from typing import Dict, List, Mapping, Optional

from .errors import ConfigurationError

# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------

PROVIDER_NAME = "WordPress Provider"

DEFAULT_API_ENDPOINT = "/wp-json/wp/v2/posts"
DEFAULT_CATEGORIES_ENDPOINT = "/wp-json/wp/v2/categories"
DEFAULT_POSTS_PER_PAGE = 30
DEFAULT_CACHE_EXPIRY = 5 * 60       # seconds
DEFAULT_REQUEST_TIMEOUT = 30.0      # seconds
DEFAULT_MAX_RETRIES = 3             # reserved
DEFAULT_RETRY_DELAY = 1.0           # reserved
CATEGORIES_PER_PAGE = 100

DEFAULT_HEADERS: Dict[str, str] = {
    "User-Agent": "Nexus-Launcher/1.0",
    "Accept": "application/json",
}

ENV_PROVIDER = "NEXUS_PROVIDER"
ENV_BASE_URL = "NEXUS_PROVIDER_BASE_URL"
ENV_API_KEY = "NEXUS_PROVIDER_API_KEY"
ENV_CACHE_DURATION = "NEXUS_PROVIDER_CACHE_DURATION"
ENV_TIMEOUT = "NEXUS_PROVIDER_TIMEOUT"
ENV_MAX_RETRIES = "NEXUS_PROVIDER_MAX_RETRIES"


# ---------------------------------------------------------------------------
# ProviderConfig
# ---------------------------------------------------------------------------

@dataclass
class ProviderConfig:
    """All tunable parameters of a WordPress game provider."""
    base_url: str
    api_endpoint: str = DEFAULT_API_ENDPOINT
    posts_per_page: int = DEFAULT_POSTS_PER_PAGE
    embed: bool = True
    category: Optional[str] = None     # informational; listings are never filtered by it
    api_key: Optional[str] = None
    headers: Dict[str, str] = field(default_factory=dict)
    cache_expiry: float = DEFAULT_CACHE_EXPIRY
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    max_retries: int = DEFAULT_MAX_RETRIES
    retry_delay: float = DEFAULT_RETRY_DELAY

    def validate(self) -> None:
        """Raise ConfigurationError if the config cannot be used to build requests."""
        if not self.base_url:
            raise ConfigurationError(PROVIDER_NAME, "Invalid configuration", "base_url is required")

        parsed = urllib.parse.urlparse(self.base_url)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ConfigurationError(
                PROVIDER_NAME, "Invalid configuration", f"base_url is not an absolute URL: {self.base_url!r}"
            )

        for key, value in self.headers.items():
            if not isinstance(key, str) or not isinstance(value, str):
                raise ConfigurationError(
                    PROVIDER_NAME, "Invalid configuration", f"header {key!r} must map a string to a string"
                )
            if not key or any(c in key for c in ":\r\n") or any(c in value for c in "\r\n"):
                raise ConfigurationError(
                    PROVIDER_NAME, "Invalid configuration", f"malformed header {key!r}"
                )

        if self.posts_per_page < 1:
            raise ConfigurationError(PROVIDER_NAME, "Invalid configuration", "posts_per_page must be >= 1")
        if self.cache_expiry < 0:
            raise ConfigurationError(PROVIDER_NAME, "Invalid configuration", "cache_expiry must be >= 0")

    def copy(self, **changes) -> "ProviderConfig":
        """Return a new config with *changes* applied (headers are copied)."""
        changes.setdefault("headers", dict(self.headers))
        return replace(self, **changes)

    def to_dict(self) -> dict:
        return {
            "base_url": self.base_url,
            "api_endpoint": self.api_endpoint,
            "posts_per_page": self.posts_per_page,
            "embed": self.embed,
            "category": self.category,
            "has_api_key": bool(self.api_key),
            "headers": dict(self.headers),
            "cache_expiry": self.cache_expiry,
            "request_timeout": self.request_timeout,
        }


# ---------------------------------------------------------------------------
# Presets
# ---------------------------------------------------------------------------

OYUNINDIR_CONFIG = ProviderConfig(
    base_url="https://www.oyunindir.vip",
    posts_per_page=30,
    embed=True,
    category="12",  # PC games
)

WORDPRESS_PROVIDERS: Dict[str, ProviderConfig] = {
    "oyunindir": OYUNINDIR_CONFIG,
}


def get_provider_config(name: str) -> Optional[ProviderConfig]:
    """Return a copy of the preset called *name*, or None."""
    config = WORDPRESS_PROVIDERS.get(name)
    return config.copy() if config is not None else None


def available_providers() -> List[str]:
    return list(WORDPRESS_PROVIDERS.keys())


def create_wordpress_config(base_url: str, **options) -> ProviderConfig:
    """Build a config for an arbitrary WordPress site with the usual defaults."""
    return ProviderConfig(base_url=base_url, **options)


def provider_metadata(config: ProviderConfig) -> dict:
    return {
        "name": PROVIDER_NAME,
        "base_url": config.base_url,
        "type": "wordpress",
        "has_auth": bool(config.api_key),
    }


# ---------------------------------------------------------------------------
# Environment overrides
# ---------------------------------------------------------------------------

def _env_number(env: Mapping[str, str], name: str, default, cast):
    raw = env.get(name, "").strip()
    if not raw:
        return default
    try:
        return cast(raw)
    except ValueError:
        raise ConfigurationError(
            PROVIDER_NAME, "Invalid environment", f"{name}={raw!r} is not a number"
        ) from None


def load_from_environment(
    base: ProviderConfig,
    env: Optional[Mapping[str, str]] = None,
) -> ProviderConfig:
    """Return *base* with NEXUS_PROVIDER_* overrides applied."""
    env = os.environ if env is None else env
    return base.copy(
        base_url=env.get(ENV_BASE_URL) or base.base_url,
        api_key=env.get(ENV_API_KEY) or base.api_key,
        cache_expiry=_env_number(env, ENV_CACHE_DURATION, base.cache_expiry, float),
        request_timeout=_env_number(env, ENV_TIMEOUT, base.request_timeout, float),
        max_retries=_env_number(env, ENV_MAX_RETRIES, base.max_retries, int),
    )


def config_from_environment(env: Optional[Mapping[str, str]] = None) -> ProviderConfig:
    """Pick the preset named by NEXUS_PROVIDER and apply the overrides."""
    env = os.environ if env is None else env
    name = env.get(ENV_PROVIDER, "oyunindir")
    base = get_provider_config(name)
    if base is None:
        raise ConfigurationError(
            PROVIDER_NAME,
            "Invalid environment",
            f"unknown provider {name!r}, available: {available_providers()}",
        )
    return load_from_environment(base, env)
