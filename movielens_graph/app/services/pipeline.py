from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, List, Optional, Tuple, Type

from movielens_graph.app.core.settings import ImportTarget, Settings
from movielens_graph.app.models.reports import ImportReport, RunSummary
from movielens_graph.app.services.executors.base import StatementExecutor
from movielens_graph.app.services.executors.factory import create_executor
from movielens_graph.app.services.importer import RowImporter
from movielens_graph.app.services.movies import MovieImporter
from movielens_graph.app.services.ratings import RatingImporter

logger = logging.getLogger(__name__)

ExecutorFactory = Callable[[Settings], StatementExecutor]


def count_csv_rows(path: Path) -> int:
    """Count data rows (excluding header)."""
    with path.open("r", encoding="utf-8", newline="") as f:
        n = -1
        for n, _ in enumerate(f):
            pass
    return max(0, n)


class ImportPipeline:
    """
    Runs the movie import and then the rating import.

    Ratings reference movies by id, so movies must be loaded first; the
    pipeline stops at the first routine that fails. Each routine gets its
    own executor, closed when the routine ends however it ends.
    """

    def __init__(self, settings: Settings, executor_factory: Optional[ExecutorFactory] = None):
        self.settings = settings
        self.executor_factory = executor_factory or create_executor

    def plan(self, only: ImportTarget = "all") -> List[Tuple[Type[RowImporter], Path]]:
        steps: List[Tuple[Type[RowImporter], Path]] = []
        if only in ("all", "movies"):
            steps.append((MovieImporter, self.settings.movies_csv))
        if only in ("all", "ratings"):
            steps.append((RatingImporter, self.settings.ratings_csv))
        return steps

    def validate_inputs(self, only: ImportTarget = "all") -> None:
        for _, path in self.plan(only):
            if not path.exists():
                raise FileNotFoundError(f"CSV file not found: {path}")
            logger.info("Found %s rows=%d", path, count_csv_rows(path))

    def run_step(self, importer_cls: Type[RowImporter], path: Path) -> ImportReport:
        with self.executor_factory(self.settings) as executor:
            return importer_cls(executor, self.settings).run(path)

    def run(self, only: ImportTarget = "all") -> RunSummary:
        self.validate_inputs(only)
        summary = RunSummary(status="running", dry_run=self.settings.dry_run)
        for importer_cls, path in self.plan(only):
            report = self.run_step(importer_cls, path)
            summary.reports.append(report)
            if not report.ok:
                logger.error("Import of %s failed, skipping remaining steps", report.routine)
                break
        summary.finish()
        logger.info("Done. status=%s", summary.status)
        return summary
