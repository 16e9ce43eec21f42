"""
Configuration settings for tableseed.

Uses Pydantic Settings to load environment variables for the database
connection, logging, and seed generation defaults. The CLI builds one
`Settings` instance and hands it to the generator; library code never reads
the environment on its own.
"""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Database
    db_host: str = Field("localhost", alias="DB_HOST")
    db_port: int = Field(5432, alias="DB_PORT")
    db_user: str = Field("postgres", alias="DB_USER")
    db_password: str = Field("postgres", alias="DB_PASSWORD")
    db_name: str = Field("postgres", alias="DB_NAME")
    db_schema: str = Field("public", alias="DB_SCHEMA")
    db_connect_timeout: int = Field(10, alias="DB_CONNECT_TIMEOUT")

    # Application
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_json: bool = Field(False, alias="LOG_JSON")

    # Seed generation defaults
    seeds_path: Path = Field(Path("database/seeders"), alias="SEEDS_PATH")
    seed_chunk_size: int = Field(500, alias="SEED_CHUNK_SIZE")
    seed_order_direction: Literal["asc", "desc"] = Field("asc", alias="SEED_ORDER_DIRECTION")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Retrieve a cached instance of Settings to avoid repeated env parsing.
    """
    return Settings()


__all__ = ["Settings", "get_settings"]
