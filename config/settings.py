from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    api_host: str = Field(default="0.0.0.0", alias="API_HOST")
    api_port: int = Field(default=8000, alias="API_PORT")
    debug: bool = Field(default=True, alias="DEBUG")

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_format: str = Field(default="rich", alias="LOG_FORMAT")   # rich / json

    # ── Sample data ────────────────────────────────────────────────────────────
    seed_sample_data: bool = Field(default=True, alias="SEED_SAMPLE_DATA")
    sample_data_seed: int = Field(default=42, alias="SAMPLE_DATA_SEED")

    # ── Data sources ───────────────────────────────────────────────────────────
    # Aggregation visits the sources in this order.
    data_sources: list[str] = Field(
        default_factory=lambda: ["bank_a", "credit_union"], alias="DATA_SOURCES"
    )
    data_source_seed: int | None = Field(default=None, alias="DATA_SOURCE_SEED")
    simulate_latency: bool = Field(default=True, alias="SIMULATE_LATENCY")
    latency_scale: float = Field(default=1.0, ge=0.0, alias="LATENCY_SCALE")

    # Update/delete of a missing id raises (True) or is a silent no-op (False).
    strict_not_found: bool = Field(default=True, alias="STRICT_NOT_FOUND")

    summary_cache_ttl: int = Field(default=60, ge=0, alias="SUMMARY_CACHE_TTL")

    model_config = {"env_file": ".env", "populate_by_name": True}

    @property
    def effective_latency_scale(self) -> float:
        return self.latency_scale if self.simulate_latency else 0.0


settings = Settings()
