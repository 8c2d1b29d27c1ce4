# ─────────────────────────────────────────────────────────────────────────────
# Settings — Pydantic v2 BaseSettings
# ─────────────────────────────────────────────────────────────────────────────


from functools import lru_cache

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Server configuration sourced from environment variables.

    Uses pydantic-settings v2 (separate package from pydantic).
    """

    model_config = SettingsConfigDict(env_prefix="", env_file=".env")

    port: int = 3001

    # ── Provider credentials ─────────────────────────────────────────────────
    # SecretStr keeps keys out of logs, repr() and model_dump().
    # Empty string = mock mode for that provider.
    google_maps_api_key: SecretStr = SecretStr("")
    google_ai_api_key: SecretStr = SecretStr("")

    # Comma-separated origins for CORS. Empty string = deny all cross-origin requests.
    allowed_origins: str = ""

    # ── Admission control (slowapi format) ──────────────────────────────────
    general_rate_limit: str = "100/minute"
    generation_rate_limit: str = "5/minute"

    # ── Models ───────────────────────────────────────────────────────────────
    vision_model: str = "gemini-2.0-flash"
    synthesis_model: str = "gemini-2.5-flash-image"
    synthesis_fallback_model: str = "gemini-2.0-flash-exp"
    provider_timeout_seconds: float = 60.0

    # ── Imagery ──────────────────────────────────────────────────────────────
    street_view_size: str = "640x480"
    aerial_view_size: str = "640x640"
    aerial_view_zoom: int = 19

    # ── Caches (one instance per resource) ───────────────────────────────────
    street_view_cache_size: int = 200
    aerial_view_cache_size: int = 200
    identity_cache_size: int = 200
    cache_ttl_seconds: float = 3600.0

    # ── Generation queue ─────────────────────────────────────────────────────
    max_concurrent_generations: int = 3

    # ── Limits ───────────────────────────────────────────────────────────────
    max_address_length: int = 200
    log_address_chars: int = 60
    log_error_chars: int = 200

    # ── Persistence (append-only JSON Lines) ────────────────────────────────
    generation_log_path: str = "generation_log.jsonl"
    leads_path: str = "leads.jsonl"
    gallery_base_url: str = "/gallery"

    # ── Cost estimates, USD per call ─────────────────────────────────────────
    cost_street_view: float = 0.007
    cost_aerial_view: float = 0.002
    cost_identity: float = 0.001
    cost_synthesis: float = 0.039

    # ── Logging ──────────────────────────────────────────────────────────────
    log_level: str = "INFO"
    log_json: bool = True

    @property
    def has_maps_key(self) -> bool:
        return bool(self.google_maps_api_key.get_secret_value())

    @property
    def has_ai_key(self) -> bool:
        return bool(self.google_ai_api_key.get_secret_value())


@lru_cache
def get_settings() -> Settings:
    """Cached settings singleton."""
    return Settings()
