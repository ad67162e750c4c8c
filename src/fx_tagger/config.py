"""Application configuration via environment variables with FX_TAGGER_ prefix."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from fx_tagger.models.currency import CurrencyToken


class Settings(BaseSettings):
    """Price tagger configuration.

    All settings are read from environment variables prefixed with ``FX_TAGGER_``.
    """

    model_config = SettingsConfigDict(env_prefix="FX_TAGGER_")

    # ── Currencies ─────────────────────────────────────────────────────────
    target_currency: str = "CZK"
    currencies: list[CurrencyToken] = Field(default_factory=lambda: list(CurrencyToken))

    # ── Markup ─────────────────────────────────────────────────────────────
    marker_tag: str = "span"
    marker_class: str = "fx-price"
    excluded_tags: list[str] = Field(
        default=["script", "style", "noscript", "template", "textarea"]
    )

    # ── Scheduling ─────────────────────────────────────────────────────────
    # Seconds between a mutation batch and the pass it triggers
    coalesce_interval: float = Field(default=0.5, gt=0.0, le=10.0)
    restart_timer_on_mutation: bool = True

    # ── Rates ──────────────────────────────────────────────────────────────
    rate_cache_max_age: float = Field(default=24 * 60 * 60, gt=0.0)

    # ── Logging ────────────────────────────────────────────────────────────
    log_level: str = "INFO"
