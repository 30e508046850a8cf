"""Environment-driven settings for the CLI and file ingest.

Values are read from the process environment; the CLI loads a local ``.env``
first (without overriding variables that are already set). Invalid values
fall back to defaults with a warning rather than aborting.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from .logging_setup import get_logger
from .models import CURRENCY_CODES, FREQUENCIES, CurrencyCode, Frequency

_logger = get_logger("statement_import.config")

DEFAULT_MAX_FILE_BYTES = 10 * 1024 * 1024


@dataclass(frozen=True, slots=True)
class ImportSettings:
    max_file_bytes: int = DEFAULT_MAX_FILE_BYTES
    default_frequency: Frequency = "monthly"
    currency_code: CurrencyCode | None = None


def _env_max_bytes() -> int:
    raw = os.getenv("STATEMENT_IMPORT_MAX_FILE_BYTES")
    if not raw:
        return DEFAULT_MAX_FILE_BYTES
    try:
        value = int(raw.strip())
    except ValueError:
        value = 0
    if value <= 0:
        _logger.warning("config:invalid_max_file_bytes value=%r", raw)
        return DEFAULT_MAX_FILE_BYTES
    return value


def _env_choice(name: str, allowed: tuple[str, ...], *, upper: bool = False) -> str | None:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return None
    value = raw.strip().upper() if upper else raw.strip().lower()
    if value not in allowed:
        _logger.warning("config:invalid_choice name=%s value=%r", name, raw)
        return None
    return value


def load_settings() -> ImportSettings:
    """Build :class:`ImportSettings` from ``STATEMENT_IMPORT_*`` variables."""

    frequency = _env_choice("STATEMENT_IMPORT_DEFAULT_FREQUENCY", FREQUENCIES)
    currency = _env_choice("STATEMENT_IMPORT_CURRENCY", CURRENCY_CODES, upper=True)
    return ImportSettings(
        max_file_bytes=_env_max_bytes(),
        default_frequency=frequency or "monthly",  # type: ignore[arg-type]
        currency_code=currency,  # type: ignore[arg-type]
    )


__all__ = ["DEFAULT_MAX_FILE_BYTES", "ImportSettings", "load_settings"]
