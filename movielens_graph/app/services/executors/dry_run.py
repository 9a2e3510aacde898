from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

from movielens_graph.app.services.executors.base import ExecutionResult, StatementExecutor

logger = logging.getLogger(__name__)


class DryRunStatementExecutor(StatementExecutor):
    """Records statements instead of sending them anywhere."""

    def __init__(self) -> None:
        self.statements: List[Tuple[str, Dict[str, Any]]] = []

    def execute(self, statement: str, parameters: Optional[Dict[str, Any]] = None) -> ExecutionResult:
        params = dict(parameters or {})
        self.statements.append((statement, params))
        logger.debug("DRY RUN %s %s", " ".join(statement.split()), params)
        return ExecutionResult.success()

    def close(self) -> None:
        logger.info("Dry run recorded %d statements", len(self.statements))
