"""
SellerFees application configuration.

Loads settings from environment variables with validation via Pydantic Settings.
"""

from enum import StrEnum
from functools import lru_cache

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from sellerfees.core.models import RuleOverrides, RulePolicy


class AppEnv(StrEnum):
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class Settings(BaseSettings):
    """Application settings loaded from .env file and environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ─── Application ──────────────────────────────────────────
    app_name: str = "SellerFees"
    app_env: AppEnv = AppEnv.DEVELOPMENT
    app_debug: bool = False
    app_host: str = "0.0.0.0"
    app_port: int = 8000

    # ─── Commission Rules ─────────────────────────────────────
    # Unset overrides fall back to the default 2026 rule set.
    rule_policy: RulePolicy = RulePolicy.CURRENT
    campaign_extra_rate: float | None = None
    cpf_extra_fee: float | None = None
    cpf_extra_orders_threshold_90d: int | None = None
    cnpj_low_price_threshold: float | None = None
    cpf_low_price_threshold: float | None = None

    # ─── Observability ──────────────────────────────────────────
    log_level: str = "INFO"
    log_format: str = "auto"

    # ─── CORS ────────────────────────────────────────────────
    cors_allowed_origins: str = ""  # Comma-separated origins for production

    @model_validator(mode="after")
    def enforce_production_safety(self) -> "Settings":
        """Block application boot if production safety invariants are violated.

        Only fires when APP_ENV=production.
        """
        if self.app_env != AppEnv.PRODUCTION:
            return self

        violations: list[str] = []

        if self.app_debug:
            violations.append("APP_DEBUG must be False in production")

        if not self.cors_allowed_origins.strip():
            violations.append("CORS_ALLOWED_ORIGINS must be non-empty in production")

        if violations:
            raise ValueError(
                "Production safety check failed:\n  - " + "\n  - ".join(violations)
            )

        return self

    @property
    def is_development(self) -> bool:
        return self.app_env == AppEnv.DEVELOPMENT

    @property
    def is_production(self) -> bool:
        return self.app_env == AppEnv.PRODUCTION

    def rule_overrides(self) -> RuleOverrides:
        """Rule overrides configured through the environment."""
        return RuleOverrides(
            campaign_extra_rate=self.campaign_extra_rate,
            cpf_extra_fee=self.cpf_extra_fee,
            cpf_extra_orders_threshold_90d=self.cpf_extra_orders_threshold_90d,
            cnpj_low_price_threshold=self.cnpj_low_price_threshold,
            cpf_low_price_threshold=self.cpf_low_price_threshold,
        )


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings singleton."""
    return Settings()
