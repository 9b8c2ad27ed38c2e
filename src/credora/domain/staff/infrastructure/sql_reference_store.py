"""PostgreSQL implementation of the reference store and staff directory.

Every operation opens its own session and commits (or rolls back) before
returning, so one failed rule never poisons the next. Relation and column
names come from the reference catalog; they are re-checked here against a
plain-identifier pattern and double-quoted before being placed in SQL.
Values are always bound parameters.

SQLSTATE mapping:
- 42P01 undefined_table, 42703 undefined_column, 42883 undefined_function
  -> RelationAbsentError
- 57014 query_canceled (statement_timeout) -> StoreTimeoutError
"""

from __future__ import annotations

import logging
import re
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

from psycopg import errors as pg_errors
from sqlalchemy import text
from sqlalchemy.exc import DBAPIError

from credora.foundation.domain.ports import RelationAbsentError, StoreTimeoutError
from credora.foundation.domain.staff_value_objects import TargetEntity

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

    from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)

_IDENTIFIER_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

_ABSENT_ERRORS = (
    pg_errors.UndefinedTable,
    pg_errors.UndefinedColumn,
    pg_errors.UndefinedFunction,
)

_SET_TIMEOUT_SQL = "SELECT set_config('statement_timeout', :timeout_ms, true)"


def _quote(name: str) -> str:
    if not _IDENTIFIER_PATTERN.match(name):
        msg = f"Unsafe SQL identifier: {name!r}"
        raise ValueError(msg)
    return f'"{name}"'


@contextmanager
def _translate_errors(relation: str) -> Iterator[None]:
    try:
        yield
    except DBAPIError as exc:
        if isinstance(exc.orig, _ABSENT_ERRORS):
            raise RelationAbsentError(relation, str(exc.orig).strip()) from exc
        if isinstance(exc.orig, pg_errors.QueryCanceled):
            raise StoreTimeoutError(f"Statement cancelled on {relation}") from exc
        raise


class SqlReferenceStore:
    """Reference store and staff directory over a PostgreSQL data plane.

    Implements both ``ReferenceStore`` and ``StaffDirectory``.

    Args:
        session_factory: Callable returning a SQLAlchemy Session context manager.
        staff_relation: Table holding staff records.
    """

    def __init__(
        self,
        session_factory: Callable[[], Session],
        *,
        staff_relation: str = "profiles",
    ) -> None:
        self._session_factory = session_factory
        self._staff_relation = _quote(staff_relation)
        self._staff_relation_name = staff_relation

    # -- ReferenceStore --

    def delete_rows(
        self,
        relation: str,
        column: str,
        value: str,
        *,
        timeout: float | None = None,
    ) -> int:
        sql = f"DELETE FROM {_quote(relation)} WHERE {_quote(column)} = :value"
        return self._mutate(relation, sql, {"value": value}, timeout)

    def update_rows(
        self,
        relation: str,
        column: str,
        value: str,
        new_value: str | None,
        *,
        timeout: float | None = None,
    ) -> int:
        quoted = _quote(column)
        sql = f"UPDATE {_quote(relation)} SET {quoted} = :new_value WHERE {quoted} = :value"
        return self._mutate(relation, sql, {"value": value, "new_value": new_value}, timeout)

    def call_procedure(
        self,
        procedure: str,
        argument: str,
        value: str,
        *,
        timeout: float | None = None,
    ) -> object:
        sql = f"SELECT {_quote(procedure)}({_quote(argument)} => :value)"
        with _translate_errors(procedure), self._session_factory() as session:
            self._apply_timeout(session, timeout)
            result = session.execute(text(sql), {"value": value}).scalar()
            session.commit()
        return result

    def count_rows(self, relation: str, column: str, value: str) -> int:
        sql = f"SELECT count(*) FROM {_quote(relation)} WHERE {_quote(column)} = :value"
        with _translate_errors(relation), self._session_factory() as session:
            count = session.execute(text(sql), {"value": value}).scalar()
        return int(count or 0)

    # -- StaffDirectory --

    def get_target(self, target_id: str) -> TargetEntity | None:
        with _translate_errors(self._staff_relation_name), self._session_factory() as session:
            row = session.execute(
                text(f"""
                    SELECT id, role, email, is_active
                    FROM {self._staff_relation}
                    WHERE id = :target_id
                """),
                {"target_id": target_id},
            ).fetchone()
        if row is None:
            return None
        return TargetEntity.from_row(
            target_id=str(row[0]),
            role=row[1],
            email=row[2],
            is_active=row[3],
        )

    def count_role_holders(self, role: str) -> int:
        with _translate_errors(self._staff_relation_name), self._session_factory() as session:
            count = session.execute(
                text(f"""
                    SELECT count(*)
                    FROM {self._staff_relation}
                    WHERE role = :role AND is_active IS NOT FALSE
                """),
                {"role": role},
            ).scalar()
        return int(count or 0)

    def remove_record(self, target_id: str, *, timeout: float | None = None) -> int:
        sql = f"DELETE FROM {self._staff_relation} WHERE id = :target_id"
        return self._mutate(self._staff_relation_name, sql, {"target_id": target_id}, timeout)

    def record_exists(self, target_id: str) -> bool:
        with _translate_errors(self._staff_relation_name), self._session_factory() as session:
            row = session.execute(
                text(f"SELECT 1 FROM {self._staff_relation} WHERE id = :target_id"),
                {"target_id": target_id},
            ).fetchone()
        return row is not None

    # -- helpers --

    def _mutate(
        self,
        relation: str,
        sql: str,
        params: dict[str, Any],
        timeout: float | None,
    ) -> int:
        with _translate_errors(relation), self._session_factory() as session:
            self._apply_timeout(session, timeout)
            result = session.execute(text(sql), params)
            rows = max(int(result.rowcount or 0), 0)
            session.commit()
        logger.debug("reference_store_mutation", extra={"relation": relation, "rows": rows})
        return rows

    @staticmethod
    def _apply_timeout(session: Session, timeout: float | None) -> None:
        """Bound the current transaction's statements by the remaining budget."""
        if timeout is None:
            return
        timeout_ms = max(1, int(timeout * 1000))
        session.execute(text(_SET_TIMEOUT_SQL), {"timeout_ms": str(timeout_ms)})
