from __future__ import annotations

from typing import Any, Dict, Optional

from neo4j import GraphDatabase
from neo4j.exceptions import DriverError, Neo4jError

from movielens_graph.app.core.errors import BackendError
from movielens_graph.app.services.executors.base import ExecutionResult, StatementExecutor


COUNTER_FIELDS = ("nodes_created", "relationships_created", "constraints_added")


class Neo4jStatementExecutor(StatementExecutor):
    """
    Executes statements as auto-commit transactions on one session.

    Auto-commit is used instead of `execute_write` so that the driver does
    not retry failed statements on our behalf.
    """

    def __init__(self, uri: str, user: str, password: str, database: Optional[str] = None):
        self.driver = GraphDatabase.driver(uri, auth=(user, password))
        self.database = database
        self._session = None

    def _get_session(self):
        if self._session is None:
            self._session = self.driver.session(database=self.database)
        return self._session

    def close(self) -> None:
        if self._session is not None:
            self._session.close()
            self._session = None
        if self.driver is not None:
            self.driver.close()
            self.driver = None

    def execute(self, statement: str, parameters: Optional[Dict[str, Any]] = None) -> ExecutionResult:
        params = parameters or {}
        try:
            summary = self._get_session().run(statement, params).consume()
        except Neo4jError as e:
            return ExecutionResult.failure(
                BackendError(e.message or str(e), code=e.code, statement=statement, parameters=params)
            )
        except DriverError as e:
            return ExecutionResult.failure(
                BackendError(str(e) or type(e).__name__, code=type(e).__name__, statement=statement, parameters=params)
            )
        counters = summary.counters
        return ExecutionResult.success({name: getattr(counters, name, 0) for name in COUNTER_FIELDS})
