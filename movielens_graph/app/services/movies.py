from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

from movielens_graph.app.core.errors import BackendError
from movielens_graph.app.models.reports import ImportReport
from movielens_graph.app.models.rows import MovieRow
from movielens_graph.app.services.importer import RowImporter
from movielens_graph.app.services.readers import parse_movie_line

logger = logging.getLogger(__name__)

CREATE_MOVIE = "CREATE (:Movie {movieId: $movieId, title: $title})"

LINK_GENRE = """
MERGE (g:Genre {name: $genre})
WITH g
MATCH (m:Movie {movieId: $movieId})
CREATE (m)-[:HAS]->(g)
"""

CREATE_MOVIES_BATCH = """
UNWIND $rows AS row
CREATE (:Movie {movieId: row.movieId, title: row.title})
"""

LINK_GENRES_BATCH = """
UNWIND $rows AS row
MERGE (g:Genre {name: row.genre})
WITH g, row
MATCH (m:Movie {movieId: row.movieId})
CREATE (m)-[:HAS]->(g)
"""


class MovieImporter(RowImporter[MovieRow]):
    """Movie nodes plus a HAS relationship to a merged Genre per listed genre."""

    routine = "movies"

    def default_path(self) -> Path:
        return self.settings.movies_csv

    def ensure_schema(self) -> Optional[BackendError]:
        return self.schema.ensure_movie_schema()

    def parse(self, line: str, line_no: int, source: str) -> MovieRow:
        return parse_movie_line(
            line,
            source=source,
            line_no=line_no,
            delimiter=self.settings.csv_delimiter,
            genre_delimiter=self.settings.genre_delimiter,
        )

    def write_rows(self, rows: List[MovieRow], report: ImportReport) -> Optional[BackendError]:
        if self.settings.batch_size == 1:
            for row in rows:
                err = self._write_row(row, report)
                if err is not None:
                    return err
            return None
        return self._write_batch(rows, report)

    def _write_row(self, row: MovieRow, report: ImportReport) -> Optional[BackendError]:
        res = self.execute(CREATE_MOVIE, row.params(), report)
        if not res.ok:
            return res.error
        logger.info("id: %d - title: %s", row.movie_id, row.title)

        for genre in row.genres:
            logger.info("==> movie: %s - genre: %s", row.title, genre)
            res = self.execute(LINK_GENRE, {"genre": genre, "movieId": row.movie_id}, report)
            if not res.ok:
                return res.error
        return None

    def _write_batch(self, rows: List[MovieRow], report: ImportReport) -> Optional[BackendError]:
        # every Movie in the batch is created before any HAS is issued
        res = self.execute(CREATE_MOVIES_BATCH, {"rows": [r.params() for r in rows]}, report)
        if not res.ok:
            return res.error
        for row in rows:
            logger.info("id: %d - title: %s", row.movie_id, row.title)

        pairs = []
        for row in rows:
            for genre in row.genres:
                logger.info("==> movie: %s - genre: %s", row.title, genre)
                pairs.append({"genre": genre, "movieId": row.movie_id})
        if not pairs:
            return None
        res = self.execute(LINK_GENRES_BATCH, {"rows": pairs}, report)
        return res.error
