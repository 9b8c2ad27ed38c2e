"""In-memory data and identity planes.

Used for local development without a database and as the collaborators in
cascade tests. The store keeps a schema per relation so that absent
relations and absent columns behave like the PostgreSQL adapter, and it
records every mutation it performs.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from credora.foundation.domain.ports import (
    IdentityRemovalResult,
    RelationAbsentError,
)
from credora.foundation.domain.staff_value_objects import TargetEntity

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable


@dataclass(frozen=True, slots=True)
class Mutation:
    """One write performed by the in-memory store."""

    operation: str
    relation: str
    column: str | None
    value: str
    rows: int


class InMemoryReferenceStore:
    """Reference store and staff directory backed by dictionaries.

    Args:
        staff_relation: Relation holding staff records (columns ``id``,
            ``role``, ``email``, ``is_active``).
    """

    def __init__(self, *, staff_relation: str = "profiles") -> None:
        self._staff_relation = staff_relation
        self._columns: dict[str, set[str]] = {}
        self._rows: dict[str, list[dict[str, Any]]] = {}
        self._procedures: dict[str, Callable[[str], object]] = {}
        self._failures: dict[str, Exception] = {}
        self.mutations: list[Mutation] = []
        self.create_relation(staff_relation, ("id", "role", "email", "is_active"))

    # -- fixture helpers --

    def create_relation(self, relation: str, columns: Iterable[str]) -> None:
        self._columns.setdefault(relation, set()).update(columns)
        self._rows.setdefault(relation, [])

    def drop_relation(self, relation: str) -> None:
        self._columns.pop(relation, None)
        self._rows.pop(relation, None)

    def add_row(self, relation: str, **values: Any) -> None:
        self.create_relation(relation, values)
        self._rows[relation].append(dict(values))

    def add_staff(
        self,
        target_id: str,
        role: str,
        *,
        email: str | None = None,
        is_active: bool = True,
    ) -> None:
        self.add_row(self._staff_relation, id=target_id, role=role, email=email, is_active=is_active)

    def register_procedure(self, name: str, func: Callable[[str], object]) -> None:
        self._procedures[name] = func

    def fail(self, key: str, error: Exception) -> None:
        """Make operations on ``key`` raise ``error``.

        ``key`` is a relation name, a ``relation.column`` rule key, or a
        procedure name.
        """
        self._failures[key] = error

    def clear_failures(self) -> None:
        self._failures.clear()

    def rows(self, relation: str) -> list[dict[str, Any]]:
        return [dict(row) for row in self._rows.get(relation, [])]

    # -- ReferenceStore --

    def delete_rows(
        self,
        relation: str,
        column: str,
        value: str,
        *,
        timeout: float | None = None,
    ) -> int:
        table = self._table(relation, column)
        kept = [row for row in table if row.get(column) != value]
        removed = len(table) - len(kept)
        self._rows[relation] = kept
        self.mutations.append(Mutation("delete", relation, column, value, removed))
        return removed

    def update_rows(
        self,
        relation: str,
        column: str,
        value: str,
        new_value: str | None,
        *,
        timeout: float | None = None,
    ) -> int:
        updated = 0
        for row in self._table(relation, column):
            if row.get(column) == value:
                row[column] = new_value
                updated += 1
        self.mutations.append(Mutation("update", relation, column, value, updated))
        return updated

    def call_procedure(
        self,
        procedure: str,
        argument: str,
        value: str,
        *,
        timeout: float | None = None,
    ) -> object:
        self._raise_injected(procedure)
        if procedure not in self._procedures:
            raise RelationAbsentError(procedure, "function does not exist")
        result = self._procedures[procedure](value)
        self.mutations.append(Mutation("call", procedure, argument, value, 0))
        return result

    def count_rows(self, relation: str, column: str, value: str) -> int:
        return sum(1 for row in self._table(relation, column) if row.get(column) == value)

    # -- StaffDirectory --

    def get_target(self, target_id: str) -> TargetEntity | None:
        self._raise_injected(f"{self._staff_relation}.get_target")
        for row in self._rows.get(self._staff_relation, []):
            if row.get("id") == target_id:
                return TargetEntity.from_row(
                    target_id=target_id,
                    role=row.get("role"),
                    email=row.get("email"),
                    is_active=row.get("is_active"),
                )
        return None

    def count_role_holders(self, role: str) -> int:
        self._raise_injected(f"{self._staff_relation}.count_role_holders")
        return sum(
            1
            for row in self._rows.get(self._staff_relation, [])
            if row.get("role") == role and row.get("is_active") is not False
        )

    def remove_record(self, target_id: str, *, timeout: float | None = None) -> int:
        return self.delete_rows(self._staff_relation, "id", target_id, timeout=timeout)

    def record_exists(self, target_id: str) -> bool:
        return any(row.get("id") == target_id for row in self._rows.get(self._staff_relation, []))

    def _table(self, relation: str, column: str) -> list[dict[str, Any]]:
        self._raise_injected(relation)
        self._raise_injected(f"{relation}.{column}")
        if relation not in self._columns:
            raise RelationAbsentError(relation, "relation does not exist")
        if column not in self._columns[relation]:
            raise RelationAbsentError(relation, f"column {column} does not exist")
        return self._rows[relation]

    def _raise_injected(self, key: str) -> None:
        error = self._failures.get(key)
        if error is not None:
            raise error


class InMemoryIdentityProvider:
    """Identity plane backed by a set of identifiers.

    ``fail_with`` makes every removal return that result instead of
    touching the set; reset it to None to recover.
    """

    def __init__(self, identities: Iterable[str] = ()) -> None:
        self._identities = set(identities)
        self.fail_with: IdentityRemovalResult | None = None
        self.removal_attempts: list[str] = []

    def add(self, target_id: str) -> None:
        self._identities.add(target_id)

    def remove_identity(
        self, target_id: str, *, timeout: float | None = None
    ) -> IdentityRemovalResult:
        self.removal_attempts.append(target_id)
        if self.fail_with is not None:
            return self.fail_with
        if target_id not in self._identities:
            return IdentityRemovalResult.not_found()
        self._identities.discard(target_id)
        return IdentityRemovalResult.ok()

    def identity_exists(self, target_id: str) -> bool:
        return target_id in self._identities
