from __future__ import annotations

from movielens_graph.app.core.settings import Settings
from movielens_graph.app.services.executors.base import StatementExecutor
from movielens_graph.app.services.executors.dry_run import DryRunStatementExecutor
from movielens_graph.app.services.executors.neo4j_executor import Neo4jStatementExecutor


def create_executor(settings: Settings) -> StatementExecutor:
    if settings.executor_type == "dry_run":
        return DryRunStatementExecutor()
    return Neo4jStatementExecutor(
        uri=settings.neo4j_uri,
        user=settings.neo4j_user,
        password=settings.neo4j_password,
        database=settings.neo4j_database,
    )
