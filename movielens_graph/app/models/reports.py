from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from movielens_graph.app.core.errors import ImportFailure

Routine = Literal["movies", "ratings"]
RunStatus = Literal["running", "success", "failed"]


class WriteSummary(BaseModel):
    nodes_created: int = 0
    relationships_created: int = 0
    constraints_added: int = 0

    def add(self, counters: Dict[str, int]) -> None:
        self.nodes_created += counters.get("nodes_created", 0)
        self.relationships_created += counters.get("relationships_created", 0)
        self.constraints_added += counters.get("constraints_added", 0)


class FailureInfo(BaseModel):
    category: str
    message: str
    details: Dict[str, Any] = {}


class ImportReport(BaseModel):
    """
    Outcome of one import routine (movies or ratings).

    The typed error is kept on the report so callers can either inspect
    `failure` or re-raise with `raise_for_error()`.
    """
    model_config = ConfigDict(arbitrary_types_allowed=True)

    routine: Routine
    source: str
    status: RunStatus = "running"
    rows_read: int = 0
    rows_imported: int = 0
    statements: int = 0
    unmatched_rows: int = 0
    writes: WriteSummary = Field(default_factory=WriteSummary)
    failure: Optional[FailureInfo] = None
    started_at: datetime = Field(default_factory=datetime.utcnow)
    finished_at: Optional[datetime] = None

    error: Optional[ImportFailure] = Field(default=None, exclude=True)

    @property
    def ok(self) -> bool:
        return self.status == "success"

    def succeed(self) -> "ImportReport":
        self.status = "success"
        self.finished_at = datetime.utcnow()
        return self

    def fail(self, error: ImportFailure) -> "ImportReport":
        self.status = "failed"
        self.error = error
        info = error.to_dict()
        self.failure = FailureInfo(
            category=info.pop("category"),
            message=info.pop("message"),
            details=info,
        )
        self.finished_at = datetime.utcnow()
        return self

    def raise_for_error(self) -> None:
        if self.error is not None:
            raise self.error


class RunSummary(BaseModel):
    status: RunStatus = "running"
    dry_run: bool = False
    reports: List[ImportReport] = []

    def finish(self) -> "RunSummary":
        self.status = "success" if all(r.ok for r in self.reports) else "failed"
        return self
