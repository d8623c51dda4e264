# Configuration management

from pydantic_settings import BaseSettings  # type: ignore
from functools import lru_cache
from typing import List, Optional


class Settings(BaseSettings):
    # Logging
    log_level: str = "INFO"
    log_json: bool = True

    # Tables
    default_table_name: str = "json"

    # Type inference
    missing_value_indicators: List[str] = ["", "NA", "N/A", "NaN", "null", "*"]
    locale: str = "en_US"
    minimize_column_sizes: bool = False
    max_sample_size: Optional[int] = None  # None = infer from every record
    prune_empty_columns: bool = False

    # Observability
    metrics_enabled: bool = True

    class Config:
        env_file = ".env"
        env_prefix = "JSONTABLE_"
        case_sensitive = False


@lru_cache()
def get_settings() -> Settings:
    return Settings()
