from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Generic, Iterable, Iterator, List, Optional, TypeVar, Union

from movielens_graph.app.core.errors import BackendError, RowParseError
from movielens_graph.app.core.settings import Settings
from movielens_graph.app.models.reports import ImportReport, Routine
from movielens_graph.app.services.executors.base import ExecutionResult, StatementExecutor
from movielens_graph.app.services.readers import iter_data_lines
from movielens_graph.app.services.schema import SchemaInitializer

logger = logging.getLogger(__name__)

T = TypeVar("T")
RowT = TypeVar("RowT")


def chunked(it: Iterable[T], size: int) -> Iterator[List[T]]:
    buf: List[T] = []
    for item in it:
        buf.append(item)
        if len(buf) >= size:
            yield buf
            buf = []
    if buf:
        yield buf


class RowImporter(Generic[RowT]):
    """
    Streams one CSV file into the graph.

    Subclasses provide the schema step, the line parser and the writer for
    a batch of parsed rows. Rows are written strictly in file order; with
    ``batch_size == 1`` every row is written before the next one is read.
    """

    routine: Routine

    def __init__(self, executor: StatementExecutor, settings: Settings):
        self.executor = executor
        self.settings = settings
        self.schema = SchemaInitializer(executor)

    # ---------- hooks ----------

    def default_path(self) -> Path:
        raise NotImplementedError

    def ensure_schema(self) -> Optional[BackendError]:
        raise NotImplementedError

    def parse(self, line: str, line_no: int, source: str) -> RowT:
        raise NotImplementedError

    def write_rows(self, rows: List[RowT], report: ImportReport) -> Optional[BackendError]:
        raise NotImplementedError

    # ---------- shared ----------

    def execute(self, statement: str, params: Dict[str, Any], report: ImportReport) -> ExecutionResult:
        res = self.executor.execute(statement, params)
        report.statements += 1
        if res.ok:
            report.writes.add(res.counters)
        else:
            logger.error(
                "%s import: statement failed: %s | statement=%s | parameters=%s",
                self.routine, res.error, " ".join(statement.split()), params,
            )
        return res

    def run(self, path: Union[str, Path, None] = None) -> ImportReport:
        path = Path(path) if path is not None else self.default_path()
        source = str(path)
        report = ImportReport(routine=self.routine, source=source)

        schema_error = self.ensure_schema()
        if schema_error is not None:
            return report.fail(schema_error)

        lines = iter_data_lines(path)
        try:
            for batch in chunked(lines, self.settings.batch_size):
                rows: List[RowT] = []
                parse_error: Optional[RowParseError] = None
                for line_no, line in batch:
                    report.rows_read += 1
                    try:
                        rows.append(self.parse(line, line_no, source))
                    except RowParseError as e:
                        parse_error = e
                        break

                # rows ahead of a bad line are still written, as in row-at-a-time mode
                if rows:
                    backend_error = self.write_rows(rows, report)
                    if backend_error is not None:
                        return report.fail(backend_error)
                    report.rows_imported += len(rows)

                if parse_error is not None:
                    logger.error("%s import aborted: %s", self.routine, parse_error)
                    return report.fail(parse_error)
        finally:
            lines.close()

        logger.info(
            "Loaded %s from %s: rows=%d statements=%d nodes_created=%d relationships_created=%d",
            self.routine, source, report.rows_imported, report.statements,
            report.writes.nodes_created, report.writes.relationships_created,
        )
        return report.succeed()
