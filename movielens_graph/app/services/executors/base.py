from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from movielens_graph.app.core.errors import BackendError


@dataclass
class ExecutionResult:
    """Either a success carrying the backend's write counters, or a BackendError."""
    counters: Dict[str, int] = field(default_factory=dict)
    error: Optional[BackendError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, counters: Optional[Dict[str, int]] = None) -> "ExecutionResult":
        return cls(counters=counters or {})

    @classmethod
    def failure(cls, error: BackendError) -> "ExecutionResult":
        return cls(error=error)


class StatementExecutor:
    """
    Runs one parameterized write statement per call, each in its own
    transaction against a single database. Implementations never raise for
    backend failures; they return them in the ExecutionResult.
    """

    def execute(self, statement: str, parameters: Optional[Dict[str, Any]] = None) -> ExecutionResult:
        raise NotImplementedError

    def close(self) -> None:
        pass

    def __enter__(self) -> "StatementExecutor":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
