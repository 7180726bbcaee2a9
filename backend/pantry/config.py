from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    app_name: str = "pantry"
    env: str = "local"

    database_dsn: str = "sqlite:///pantry.db"
    # Seed standard units, ingredients and categories into empty tables on startup.
    seed_on_startup: bool = True

    # ThreadPoolExecutor workers for per-recipe preparation during aggregation.
    # Set AGGREGATE_MAX_WORKERS in .env to override.
    aggregate_max_workers: int = 8

    # Grocery scale factors must fall in (0, max_scale_factor].
    max_scale_factor: float = 10.0

    # Minimum cosine similarity for RankedMatchStrategy to accept a candidate.
    ranked_match_threshold: float = 0.5

    log_level: str = "INFO"

    class Config:
        env_file = ".env"


settings = Settings()
