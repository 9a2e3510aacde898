from __future__ import annotations

from typing import Any, Dict, Optional


class ImportFailure(Exception):
    """Base class for everything that aborts an import routine."""

    category = "other"

    def to_dict(self) -> Dict[str, Any]:
        return {"category": self.category, "message": str(self)}


class RowParseError(ImportFailure):
    """A data row could not be turned into typed values."""

    category = "parse_error"

    def __init__(self, message: str, *, source: str = "", line_no: int = 0,
                 column: Optional[str] = None, value: Optional[str] = None):
        self.source = source
        self.line_no = line_no
        self.column = column
        self.value = value
        where = f"{source}:{line_no}" if source else f"line {line_no}"
        super().__init__(f"{where}: {message}")

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update({"source": self.source, "line_no": self.line_no, "column": self.column, "value": self.value})
        return data


class BackendError(ImportFailure):
    """
    A statement was rejected by the graph store, or the store could not be reached.

    `code` is the backend status code when one was reported
    (e.g. ``Neo.ClientError.Schema.ConstraintValidationFailed``).
    """

    category = "backend_error"

    def __init__(self, message: str, *, code: Optional[str] = None, statement: str = "",
                 parameters: Optional[Dict[str, Any]] = None):
        self.code = code
        self.statement = statement
        self.parameters = parameters or {}
        super().__init__(f"[{code}] {message}" if code else message)

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update({"code": self.code, "statement": self.statement})
        return data
