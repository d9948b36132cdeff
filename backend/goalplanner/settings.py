from __future__ import annotations

import datetime as dt
import os
from dataclasses import dataclass


@dataclass(frozen=True)
class Settings:
    default_currency: str
    reference_date: dt.date | None
    log_level: str


def _env(name: str) -> str | None:
    value = os.getenv(name)
    if value and value.strip():
        return value.strip()
    return None


def get_settings() -> Settings:
    currency = (_env("GOALPLANNER_DEFAULT_CURRENCY") or "BRL").upper()

    # "aujourd'hui" figé: utile pour des runs déterministes (démo, fixtures)
    raw_ref = _env("GOALPLANNER_REFERENCE_DATE")
    if raw_ref is not None:
        try:
            reference_date = dt.date.fromisoformat(raw_ref)
        except ValueError as exc:
            raise RuntimeError(f"GOALPLANNER_REFERENCE_DATE must be an ISO date, got {raw_ref!r}") from exc
    else:
        reference_date = None

    log_level = (_env("GOALPLANNER_LOG_LEVEL") or "INFO").upper()

    return Settings(
        default_currency=currency,
        reference_date=reference_date,
        log_level=log_level,
    )


def default_today() -> dt.date:
    """Date de référence des calculs: GOALPLANNER_REFERENCE_DATE sinon la date du jour."""
    ref = get_settings().reference_date
    if ref is not None:
        return ref
    return dt.date.today()
