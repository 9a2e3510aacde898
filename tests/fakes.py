"""
In-memory stand-in for Neo4j.

Understands exactly the statements the importers issue and applies the same
semantics the database would: CREATE always adds, MERGE finds or creates,
a MATCH that finds nothing turns the rest of the statement into a no-op,
and unique constraints reject duplicate keys. Each statement is atomic.
"""
from __future__ import annotations

import re
from typing import Any, Callable, Dict, List, Optional, Tuple

from movielens_graph.app.core.errors import BackendError
from movielens_graph.app.services import movies, ratings
from movielens_graph.app.services.executors.base import ExecutionResult, StatementExecutor

CONSTRAINT_RE = re.compile(
    r"CREATE CONSTRAINT (?P<name>\w+)(?P<ine> IF NOT EXISTS)? FOR \(\w+:(?P<label>\w+)\) "
    r"REQUIRE \w+\.(?P<key>\w+) IS UNIQUE"
)

FailureHook = Callable[[str, Dict[str, Any]], Optional[BackendError]]


class _Rollback(Exception):
    def __init__(self, error: BackendError):
        self.error = error


class FakeGraphExecutor(StatementExecutor):
    def __init__(self, fail_when: Optional[FailureHook] = None, legacy_constraints: bool = False):
        self.nodes: Dict[str, List[Dict[str, Any]]] = {}
        self.rels: List[Tuple[str, Dict[str, Any], Dict[str, Any], Dict[str, Any]]] = []
        self.constraints: Dict[str, Tuple[str, str]] = {}
        self.statements: List[Tuple[str, Dict[str, Any]]] = []
        self.fail_when = fail_when
        # servers that answer "already exists" even for IF NOT EXISTS
        self.legacy_constraints = legacy_constraints
        self.close_calls = 0
        self._counters: Dict[str, int] = {}

    # ---------- StatementExecutor ----------

    def close(self) -> None:
        self.close_calls += 1

    def execute(self, statement: str, parameters: Optional[Dict[str, Any]] = None) -> ExecutionResult:
        params = dict(parameters or {})
        self.statements.append((statement, params))
        if self.fail_when is not None:
            err = self.fail_when(statement, params)
            if err is not None:
                return ExecutionResult.failure(err)

        snapshot = ({k: list(v) for k, v in self.nodes.items()}, list(self.rels))
        self._counters = {"nodes_created": 0, "relationships_created": 0, "constraints_added": 0}
        try:
            self._dispatch(statement, params)
        except _Rollback as rb:
            self.nodes, self.rels = snapshot
            return ExecutionResult.failure(rb.error)
        return ExecutionResult.success(dict(self._counters))

    # ---------- queries used by tests ----------

    def find(self, label: str, **props: Any) -> List[Dict[str, Any]]:
        return [n for n in self.nodes.get(label, []) if all(n.get(k) == v for k, v in props.items())]

    def rels_of(self, rel_type: str) -> List[Tuple[Dict[str, Any], Dict[str, Any], Dict[str, Any]]]:
        return [(a, b, p) for t, a, b, p in self.rels if t == rel_type]

    # ---------- statement semantics ----------

    def _dispatch(self, statement: str, params: Dict[str, Any]) -> None:
        m = CONSTRAINT_RE.match(statement)
        if m:
            self._create_constraint(statement, m)
        elif statement == movies.CREATE_MOVIE:
            self._create("Movie", {"movieId": params["movieId"], "title": params["title"]}, statement)
        elif statement == movies.CREATE_MOVIES_BATCH:
            for row in params["rows"]:
                self._create("Movie", {"movieId": row["movieId"], "title": row["title"]}, statement)
        elif statement == movies.LINK_GENRE:
            self._link_genre(params)
        elif statement == movies.LINK_GENRES_BATCH:
            for row in params["rows"]:
                self._link_genre(row)
        elif statement == ratings.RATE_MOVIE:
            self._rate(params)
        elif statement == ratings.RATE_MOVIES_BATCH:
            for row in params["rows"]:
                self._rate(row)
        else:
            raise _Rollback(BackendError("Invalid input", code="Neo.ClientError.Statement.SyntaxError",
                                         statement=statement, parameters=params))

    def _create_constraint(self, statement: str, m: "re.Match[str]") -> None:
        name = m.group("name")
        if name in self.constraints:
            if m.group("ine") and not self.legacy_constraints:
                return
            raise _Rollback(BackendError(
                f"An equivalent constraint already exists, '{name}'",
                code="Neo.ClientError.Schema.EquivalentSchemaRuleAlreadyExists",
                statement=statement,
            ))
        self.constraints[name] = (m.group("label"), m.group("key"))
        self._counters["constraints_added"] += 1

    def _is_unique(self, label: str, key: str) -> bool:
        return (label, key) in self.constraints.values()

    def _create(self, label: str, props: Dict[str, Any], statement: str) -> Dict[str, Any]:
        for key, value in props.items():
            if self._is_unique(label, key) and self.find(label, **{key: value}):
                raise _Rollback(BackendError(
                    f"Node already exists with label `{label}` and property `{key}` = {value!r}",
                    code="Neo.ClientError.Schema.ConstraintValidationFailed",
                    statement=statement,
                    parameters=props,
                ))
        node = dict(props)
        self.nodes.setdefault(label, []).append(node)
        self._counters["nodes_created"] += 1
        return node

    def _merge(self, label: str, key: str, value: Any) -> Dict[str, Any]:
        found = self.find(label, **{key: value})
        if found:
            return found[0]
        return self._create(label, {key: value}, "MERGE")

    def _relate(self, rel_type: str, a: Dict[str, Any], b: Dict[str, Any], props: Dict[str, Any]) -> None:
        self.rels.append((rel_type, a, b, props))
        self._counters["relationships_created"] += 1

    def _link_genre(self, row: Dict[str, Any]) -> None:
        genre = self._merge("Genre", "name", row["genre"])
        for movie in self.find("Movie", movieId=row["movieId"]):
            self._relate("HAS", movie, genre, {})

    def _rate(self, row: Dict[str, Any]) -> None:
        user = self._merge("User", "userId", row["userId"])
        for movie in self.find("Movie", movieId=row["movieId"]):
            self._relate("RATED", user, movie, {"rating": row["rating"], "timestamp": row["timestamp"]})
