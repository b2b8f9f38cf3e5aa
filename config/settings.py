"""Centralised configuration handling for TourLedger."""

from __future__ import annotations

from functools import lru_cache
from typing import Any, Mapping

import streamlit as st
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.mirror import DEFAULT_COLLECTIONS
from core.models import EntityKind

DEFAULT_TRAVEL_COLLECTION = DEFAULT_COLLECTIONS[EntityKind.TRAVEL]
DEFAULT_BUSINESS_COLLECTION = DEFAULT_COLLECTIONS[EntityKind.BUSINESS]
DEFAULT_CHART_LIMIT = 20


def _streamlit_section(name: str) -> Mapping[str, Any] | None:
    """Return a mapping from Streamlit secrets for the given section."""

    try:
        if hasattr(st, "secrets") and name in st.secrets:
            section = st.secrets[name]
            if isinstance(section, Mapping):
                return section
            return dict(section)
    except Exception:  # pragma: no cover - accessing secrets may fail in tests
        return None
    return None


class Settings(BaseSettings):
    """Application settings sourced from env vars and Streamlit secrets."""

    travel_collection: str = DEFAULT_TRAVEL_COLLECTION
    business_collection: str = DEFAULT_BUSINESS_COLLECTION
    chart_limit: int = DEFAULT_CHART_LIMIT
    currency_symbol: str = "¥"
    log_level: str = "INFO"
    export_sheet_name: str = "Records"
    export_file_prefix: str = "TourLedger_Records"
    demo_seed: int | None = 7
    demo_months: int = 4

    model_config = SettingsConfigDict(env_prefix="TOURLEDGER_", extra="ignore")

    @property
    def collections(self) -> dict[EntityKind, str]:
        return {
            EntityKind.TRAVEL: self.travel_collection,
            EntityKind.BUSINESS: self.business_collection,
        }


@lru_cache
def get_settings() -> Settings:
    """Load and cache application settings."""

    overrides: dict[str, Any] = {}
    secrets_section = _streamlit_section("tourledger")
    if secrets_section:
        overrides = {key: secrets_section.get(key) for key in Settings.model_fields}

    return Settings(**{k: v for k, v in overrides.items() if v is not None})
