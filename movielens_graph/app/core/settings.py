from __future__ import annotations

from pathlib import Path
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

ImportTarget = Literal["all", "movies", "ratings"]
ExecutorType = Literal["neo4j", "dry_run"]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Input files
    # defaulted to the MovieLens "small" layout relative to the working directory
    movies_csv: Path = Path("data") / "ml-latest-small" / "movies.csv"
    ratings_csv: Path = Path("data") / "ml-latest-small" / "ratings.csv"
    csv_delimiter: str = Field(default=",", min_length=1, max_length=1)
    genre_delimiter: str = Field(default="|", min_length=1)

    # Neo4j
    neo4j_uri: str = "bolt://localhost:7687"
    neo4j_user: str = "neo4j"
    neo4j_password: str = "password"
    neo4j_database: Optional[str] = "neo4j"

    # Run behaviour
    batch_size: int = Field(default=1, ge=1)
    dry_run: bool = False
    log_level: str = "INFO"

    @property
    def executor_type(self) -> ExecutorType:
        return "dry_run" if self.dry_run else "neo4j"


def get_settings() -> Settings:
    return Settings()
