from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest

from movielens_graph.app.core.settings import Settings
from tests.fakes import FakeGraphExecutor

MOVIES_HEADER = "movieId,title,genres"
RATINGS_HEADER = "userId,movieId,rating,timestamp"


@pytest.fixture
def write_csv(tmp_path: Path) -> Callable[..., Path]:
    def _write(name: str, header: str, *rows: str) -> Path:
        path = tmp_path / name
        path.write_text("\n".join((header,) + rows) + "\n", encoding="utf-8")
        return path
    return _write


@pytest.fixture
def movies_csv(write_csv) -> Callable[..., Path]:
    return lambda *rows: write_csv("movies.csv", MOVIES_HEADER, *rows)


@pytest.fixture
def ratings_csv(write_csv) -> Callable[..., Path]:
    return lambda *rows: write_csv("ratings.csv", RATINGS_HEADER, *rows)


@pytest.fixture
def make_settings(tmp_path: Path) -> Callable[..., Settings]:
    def _make(**overrides) -> Settings:
        values = {
            "movies_csv": tmp_path / "movies.csv",
            "ratings_csv": tmp_path / "ratings.csv",
            "batch_size": 1,
            "dry_run": False,
        }
        values.update(overrides)
        return Settings(_env_file=None, **values)
    return _make


@pytest.fixture
def graph() -> FakeGraphExecutor:
    return FakeGraphExecutor()
