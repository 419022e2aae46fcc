"""Harness settings.

Read the same way as the application settings: environment first, then
`.env` / `.env.defaults`, then the defaults below.
"""
from __future__ import annotations

from dataclasses import dataclass

from ..config_defaults import get_bool, get_int, get_setting

DEFAULT_BASE_URL = "https://newsdesk.test"


@dataclass(frozen=True)
class TrustSettings:
    """Knobs for the in-process harness."""

    base_url: str = DEFAULT_BASE_URL
    bcrypt_rounds: int = 4  # Hashes minted by setup_user(); keep tests fast
    log_bodies: bool = False
    body_excerpt: int = 200

    @classmethod
    def from_env(cls) -> "TrustSettings":
        return cls(
            base_url=get_setting("TRUST_BASE_URL") or DEFAULT_BASE_URL,
            bcrypt_rounds=get_int("TRUST_BCRYPT_ROUNDS", cls.bcrypt_rounds),
            log_bodies=get_bool("TRUST_LOG_BODIES", cls.log_bodies),
            body_excerpt=get_int("TRUST_BODY_EXCERPT", cls.body_excerpt),
        )
