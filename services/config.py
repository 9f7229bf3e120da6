"""
Runtime configuration.

Values come from the environment, with a `.env` file in the project root
loaded first (existing environment variables win).

Environment variables:
- SUPABASE_URL / SUPABASE_KEY: Supabase project URL and server-side API key.
- LEADS_TABLE: table holding lead records (default: "leads").
- DEALER_KEYWORDS: comma-separated keywords appended to the built-in dealer
  keyword list.
- LOG_LEVEL: root log level for scripts and the API (default: "INFO").
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Optional, Tuple

from dotenv import load_dotenv

from domain.owner_classifier import DEFAULT_DEALER_KEYWORDS, OwnerClassifier

_ENV_PATH = Path(__file__).parent.parent / ".env"


def _split_keywords(raw: Optional[str]) -> Tuple[str, ...]:
    if not raw:
        return ()
    return tuple(part.strip().lower() for part in raw.split(",") if part.strip())


@dataclass(frozen=True, slots=True)
class Settings:
    supabase_url: Optional[str]
    supabase_key: Optional[str]
    leads_table: str = "leads"
    extra_dealer_keywords: Tuple[str, ...] = ()
    log_level: str = "INFO"

    @property
    def dealer_keywords(self) -> Tuple[str, ...]:
        merged = list(DEFAULT_DEALER_KEYWORDS)
        for keyword in self.extra_dealer_keywords:
            if keyword not in merged:
                merged.append(keyword)
        return tuple(merged)

    def owner_classifier(self) -> OwnerClassifier:
        return OwnerClassifier.with_keywords(self.dealer_keywords)


def load_settings() -> Settings:
    """Read settings from the environment (and the project's .env file)."""

    load_dotenv(dotenv_path=_ENV_PATH)
    return Settings(
        supabase_url=os.getenv("SUPABASE_URL") or None,
        supabase_key=os.getenv("SUPABASE_KEY") or None,
        leads_table=os.getenv("LEADS_TABLE") or "leads",
        extra_dealer_keywords=_split_keywords(os.getenv("DEALER_KEYWORDS")),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Process-wide settings, loaded once."""

    return load_settings()


def configure_logging(level: Optional[str] = None) -> None:
    """Configure console logging for scripts and the API process."""

    resolved = (level or get_settings().log_level).upper()
    numeric = logging.getLevelName(resolved)
    if not isinstance(numeric, int):
        numeric = logging.INFO

    logging.basicConfig(
        level=numeric,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


__all__ = ["Settings", "configure_logging", "get_settings", "load_settings"]
