from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import uvicorn
from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from movielens_graph import __version__
from movielens_graph.app.core.log_config import configure_logging
from movielens_graph.app.core.settings import ImportTarget, Settings, get_settings
from movielens_graph.app.services.pipeline import ImportPipeline


LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

app = FastAPI(title="MovieLens Graph Import", version=__version__)


class ImportRequest(BaseModel):
    only: ImportTarget = "all"


@app.get("/health")
def health() -> Dict[str, Any]:
    return {"status": "ok"}


@app.post("/import")
def run_import(req: ImportRequest) -> Dict[str, Any]:
    settings = get_settings()
    pipeline = ImportPipeline(settings)
    try:
        summary = pipeline.run(req.only)
    except FileNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    result = summary.model_dump(mode="json")
    if summary.status != "success":
        raise HTTPException(status_code=500, detail=result)
    return result


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Import MovieLens movies/ratings CSV files into Neo4j")
    parser.add_argument("--movies", help="Path to movies.csv (default: MOVIES_CSV)")
    parser.add_argument("--ratings", help="Path to ratings.csv (default: RATINGS_CSV)")
    parser.add_argument("--only", choices=["all", "movies", "ratings"], default="all")
    parser.add_argument("--batch-size", type=int, help="Rows per write statement (default: BATCH_SIZE or 1)")
    parser.add_argument("--dry-run", action="store_true", help="Parse and build statements without touching Neo4j")
    parser.add_argument("--log-level", type=str.upper, choices=LOG_LEVELS,
                        help="Logging level (default: LOG_LEVEL or INFO)")
    return parser


def cli(argv: Optional[List[str]] = None) -> None:
    args = build_parser().parse_args(argv)

    settings = Settings()
    if args.movies:
        settings.movies_csv = Path(args.movies)
    if args.ratings:
        settings.ratings_csv = Path(args.ratings)
    if args.batch_size is not None:
        if args.batch_size < 1:
            raise SystemExit("--batch-size must be >= 1")
        settings.batch_size = args.batch_size
    if args.dry_run:
        settings.dry_run = True
    if args.log_level:
        settings.log_level = args.log_level

    configure_logging(settings.log_level)

    pipeline = ImportPipeline(settings)
    try:
        summary = pipeline.run(args.only)
    except FileNotFoundError as e:
        raise SystemExit(str(e))

    print(json.dumps(summary.model_dump(mode="json"), ensure_ascii=False, indent=2))
    if summary.status != "success":
        sys.exit(1)


def serve() -> None:
    settings = get_settings()
    configure_logging(settings.log_level)
    uvicorn.run("movielens_graph.app.main:app", host="0.0.0.0", port=8000)


if __name__ == "__main__":
    cli()
