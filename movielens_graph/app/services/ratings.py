from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

from movielens_graph.app.core.errors import BackendError
from movielens_graph.app.models.reports import ImportReport
from movielens_graph.app.models.rows import RatingRow
from movielens_graph.app.services.importer import RowImporter
from movielens_graph.app.services.readers import parse_rating_line

logger = logging.getLogger(__name__)

# A rating whose movie was never imported matches nothing and creates no RATED.
RATE_MOVIE = """
MERGE (u:User {userId: $userId})
WITH u
MATCH (m:Movie {movieId: $movieId})
CREATE (u)-[:RATED {rating: $rating, timestamp: $timestamp}]->(m)
"""

RATE_MOVIES_BATCH = """
UNWIND $rows AS row
MERGE (u:User {userId: row.userId})
WITH u, row
MATCH (m:Movie {movieId: row.movieId})
CREATE (u)-[:RATED {rating: row.rating, timestamp: row.timestamp}]->(m)
"""


class RatingImporter(RowImporter[RatingRow]):
    """Merged User nodes and one RATED relationship per rating row."""

    routine = "ratings"

    def default_path(self) -> Path:
        return self.settings.ratings_csv

    def ensure_schema(self) -> Optional[BackendError]:
        return self.schema.ensure_rating_schema()

    def parse(self, line: str, line_no: int, source: str) -> RatingRow:
        return parse_rating_line(line, source=source, line_no=line_no, delimiter=self.settings.csv_delimiter)

    def write_rows(self, rows: List[RatingRow], report: ImportReport) -> Optional[BackendError]:
        if self.settings.batch_size > 1:
            res = self.execute(RATE_MOVIES_BATCH, {"rows": [r.params() for r in rows]}, report)
            if not res.ok:
                return res.error
            for row in rows:
                self._log_row(row)
            if res.counters:
                report.unmatched_rows += len(rows) - res.counters.get("relationships_created", 0)
            return None

        for row in rows:
            self._log_row(row)
            res = self.execute(RATE_MOVIE, row.params(), report)
            if not res.ok:
                return res.error
            if res.counters and res.counters.get("relationships_created", 0) == 0:
                logger.debug("movieId %d not in graph, rating on line %d dropped", row.movie_id, row.line_no)
                report.unmatched_rows += 1
        return None

    @staticmethod
    def _log_row(row: RatingRow) -> None:
        logger.info(
            "userId: %d - movieId: %d - rating: %s - timestamp: %d",
            row.user_id, row.movie_id, row.rating, row.timestamp,
        )
