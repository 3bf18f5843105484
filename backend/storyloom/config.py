"""
Configuration settings using Pydantic Settings.
"""

from pathlib import Path
from pydantic import model_validator
from pydantic_settings import BaseSettings
from functools import lru_cache

import os

BASE_DIR = Path(__file__).resolve().parents[1]


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    OPENROUTER_API_KEY: str = os.environ.get("OPENROUTER_API_KEY") or ""
    OPENROUTER_BASE_URL: str = "https://openrouter.ai/api/v1"

    OPENAI_API_KEY: str = os.environ.get("OPENAI_API_KEY") or ""
    OPENAI_BASE_URL: str | None = None
    OPENAI_EMBEDDING_MODEL: str = "text-embedding-3-small"
    EMBEDDING_DIMENSIONS: int | None = None
    EMBEDDING_CHUNK_SIZE: int = 2048
    EMBEDDING_CHUNK_OVERLAP_RATIO: float = 0.15
    EMBEDDING_MIN_CHUNK_RATIO: float = 0.1
    EMBEDDING_MAX_TOKENS: int = 8191

    SEMANTIC_MAX_RESULTS: int = 50
    SEMANTIC_RETRY_COUNT: int = 3
    SEMANTIC_RETRY_BASE_SECONDS: float = 0.1
    VECTOR_QUERY_MAX_RESULTS: int = 50

    ENTITY_MATCH_THRESHOLD: float = 0.5
    EPISODIC_WINDOW_SIZE: int = 3

    DATABASE_PATH: str = "database/storyloom.db"
    NOVEL_CONFIG_PATH: str = "config/novel.config.json"

    DEBUG: bool = False

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore"
    }

    @model_validator(mode="after")
    def resolve_relative_paths(self):
        db_path = Path(self.DATABASE_PATH)
        if not db_path.is_absolute():
            self.DATABASE_PATH = str((BASE_DIR / db_path).resolve())

        novel_path = Path(self.NOVEL_CONFIG_PATH)
        if not novel_path.is_absolute():
            self.NOVEL_CONFIG_PATH = str((BASE_DIR / novel_path).resolve())

        return self


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    :return: Cached Settings instance
    :rtype: Settings
    """
    return Settings()


settings = get_settings()
