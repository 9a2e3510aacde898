from __future__ import annotations

import logging
from typing import List, Optional

from movielens_graph.app.core.errors import BackendError
from movielens_graph.app.services.executors.base import StatementExecutor

logger = logging.getLogger(__name__)

MOVIE_CONSTRAINTS = [
    "CREATE CONSTRAINT movie_movie_id IF NOT EXISTS FOR (m:Movie) REQUIRE m.movieId IS UNIQUE",
    "CREATE CONSTRAINT genre_name IF NOT EXISTS FOR (g:Genre) REQUIRE g.name IS UNIQUE",
]

RATING_CONSTRAINTS = [
    "CREATE CONSTRAINT user_user_id IF NOT EXISTS FOR (u:User) REQUIRE u.userId IS UNIQUE",
]

# Returned by servers that ignore or predate IF NOT EXISTS when the rule is already in place.
ALREADY_EXISTS_CODES = frozenset({
    "Neo.ClientError.Schema.EquivalentSchemaRuleAlreadyExists",
    "Neo.ClientError.Schema.ConstraintAlreadyExists",
})


class SchemaInitializer:
    def __init__(self, executor: StatementExecutor):
        self.executor = executor

    def ensure_movie_schema(self) -> Optional[BackendError]:
        return self._apply(MOVIE_CONSTRAINTS)

    def ensure_rating_schema(self) -> Optional[BackendError]:
        return self._apply(RATING_CONSTRAINTS)

    def _apply(self, statements: List[str]) -> Optional[BackendError]:
        """Declare each constraint; returns the first error that is not 'already exists'."""
        logger.info("Creating constraints (IF NOT EXISTS)...")
        for stmt in statements:
            res = self.executor.execute(stmt)
            if res.ok:
                continue
            if res.error.code in ALREADY_EXISTS_CODES:
                logger.info("Constraint already present, skipping: %s", stmt)
                continue
            logger.error("Constraint declaration rejected: %s (%s)", stmt, res.error)
            return res.error
        return None
