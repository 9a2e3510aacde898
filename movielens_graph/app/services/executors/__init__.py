from movielens_graph.app.services.executors.base import ExecutionResult, StatementExecutor
from movielens_graph.app.services.executors.dry_run import DryRunStatementExecutor
from movielens_graph.app.services.executors.factory import create_executor
from movielens_graph.app.services.executors.neo4j_executor import Neo4jStatementExecutor

__all__ = [
    "ExecutionResult",
    "StatementExecutor",
    "DryRunStatementExecutor",
    "Neo4jStatementExecutor",
    "create_executor",
]
