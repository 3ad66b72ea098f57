"""
Shared Configuration Module

Central configuration management for the matching service
"""

from typing import List
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # ===== Batch Processing =====
    default_batch_size: int = 500
    allowed_batch_sizes: List[int] = [100, 250, 500, 1000]

    # ===== Upload Settings =====
    max_upload_size_mb: int = 50
    supported_formats: List[str] = ['.csv', '.tsv', '.txt']

    # ===== Session Settings =====
    session_ttl_hours: int = 24
    cleanup_interval_minutes: int = 30
    cleanup_enabled: bool = True

    # ===== Results =====
    pos_chart_limit: int = 10
    results_page_size: int = 500

    # ===== Backend Settings =====
    backend_host: str = "0.0.0.0"
    backend_port: int = 8000
    cors_origins: List[str] = ["*"]
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance

    Returns:
        Settings instance
    """
    return Settings()


# ===== Constants =====

# Column layouts accepted for reference data (shown in API docs and errors)
REFERENCE_FORMATS = {
    'morpheme': ['Word', 'Frequency', 'Lemma', 'POS', 'Gloss', 'Morphemes'],
    'word_forms': ['Word forms', 'Lemma', 'POS', 'Gloss'],
    'frequency_annotated': ['Words (Frequency)', 'Lemma'],
}

WORD_LIST_COLUMNS = {
    'required': ['Word'],
    'optional': ['Freq', 'Frequency'],
}
