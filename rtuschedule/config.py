"""
Configuration surface.

Defaults live in module constants; Settings bundles them so callers (and the
CLI) can override any of them from the environment:

    RTU_SCHEDULE_BASE_URL        portal root, default https://nodarbibas.rtu.lv
    RTU_SCHEDULE_LOCALE          "lang" query parameter, default lv
    RTU_SCHEDULE_USER_AGENT      outbound User-Agent header
    RTU_SCHEDULE_TIMEOUT         per-request timeout in seconds (both clients)
    RTU_SCHEDULE_DISCOVERY_TTL   discovery cache TTL in seconds
    RTU_SCHEDULE_API_TTL         live-data cache TTL in seconds
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional


DEFAULT_BASE_URL = "https://nodarbibas.rtu.lv"
DEFAULT_LOCALE = "lv"
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0.6367.118 Safari/537.36"
)

DISCOVERY_TIMEOUT = 15.0
API_TIMEOUT = 10.0

DISCOVERY_CACHE_TTL = 60 * 60.0  # 1 hour
API_CACHE_TTL = 5 * 60.0  # 5 minutes

ENV_PREFIX = "RTU_SCHEDULE_"


def _positive_float(env: Mapping[str, str], name: str) -> Optional[float]:
    raw = env.get(ENV_PREFIX + name)
    if raw is None or not raw.strip():
        return None
    try:
        value = float(raw)
    except ValueError:
        raise ValueError(f"{ENV_PREFIX}{name} must be a number, got {raw!r}") from None
    if value <= 0:
        raise ValueError(f"{ENV_PREFIX}{name} must be positive, got {raw!r}")
    return value


@dataclass(frozen=True)
class Settings:
    base_url: str = DEFAULT_BASE_URL
    locale: str = DEFAULT_LOCALE
    user_agent: str = DEFAULT_USER_AGENT
    discovery_timeout: float = DISCOVERY_TIMEOUT
    api_timeout: float = API_TIMEOUT
    discovery_cache_ttl: float = DISCOVERY_CACHE_TTL
    api_cache_ttl: float = API_CACHE_TTL

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "Settings":
        """
        Build settings from environment variables, keeping defaults for
        anything unset. A single RTU_SCHEDULE_TIMEOUT applies to both clients.
        """
        env = os.environ if env is None else env

        timeout = _positive_float(env, "TIMEOUT")
        discovery_ttl = _positive_float(env, "DISCOVERY_TTL")
        api_ttl = _positive_float(env, "API_TTL")

        return cls(
            base_url=(env.get(ENV_PREFIX + "BASE_URL") or DEFAULT_BASE_URL).rstrip("/"),
            locale=env.get(ENV_PREFIX + "LOCALE") or DEFAULT_LOCALE,
            user_agent=env.get(ENV_PREFIX + "USER_AGENT") or DEFAULT_USER_AGENT,
            discovery_timeout=timeout or DISCOVERY_TIMEOUT,
            api_timeout=timeout or API_TIMEOUT,
            discovery_cache_ttl=discovery_ttl or DISCOVERY_CACHE_TTL,
            api_cache_ttl=api_ttl or API_CACHE_TTL,
        )
