"""Port interfaces for the data-plane store.

The cascade resolver talks to the data plane through two narrow protocols:
``ReferenceStore`` for the per-relation cleanup primitives the catalog needs,
and ``StaffDirectory`` for reading and removing the staff record itself.
A single adapter usually implements both.

Absence of a relation, column or routine is reported by raising
``RelationAbsentError``; a cancelled or timed-out statement by raising
``StoreTimeoutError``. Every other failure propagates as whatever the adapter
raised, and the step executor classifies it.

Example:
    >>> from credora.foundation.domain.ports import ReferenceStore
    >>> def purge(store: ReferenceStore, user_id: str) -> int:
    ...     return store.delete_rows("notifications", "user_id", user_id)
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from credora.foundation.domain.staff_value_objects import TargetEntity

__all__ = [
    "ReferenceStore",
    "ReferenceStoreError",
    "RelationAbsentError",
    "StaffDirectory",
    "StoreTimeoutError",
]


class ReferenceStoreError(Exception):
    """Base class for store conditions the step executor classifies."""


class RelationAbsentError(ReferenceStoreError):
    """The named relation, column or routine does not exist in this deployment."""

    def __init__(self, relation: str, detail: str = "") -> None:
        self.relation = relation
        self.detail = detail
        message = f"Relation absent: {relation}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


class StoreTimeoutError(ReferenceStoreError):
    """The store cancelled the statement because the deadline elapsed."""


@runtime_checkable
class ReferenceStore(Protocol):
    """Port for the per-relation cleanup primitives.

    All mutating calls are keyed by equality on a single column and return
    the number of rows affected. ``timeout`` is the remaining request budget
    in seconds; None means no deadline.
    """

    def delete_rows(
        self,
        relation: str,
        column: str,
        value: str,
        *,
        timeout: float | None = None,
    ) -> int:
        """Delete rows where ``column = value``.

        Returns:
            Number of rows deleted.

        Raises:
            RelationAbsentError: The relation or column does not exist.
            StoreTimeoutError: The statement was cancelled.
        """
        ...

    def update_rows(
        self,
        relation: str,
        column: str,
        value: str,
        new_value: str | None,
        *,
        timeout: float | None = None,
    ) -> int:
        """Set ``column`` to ``new_value`` on rows where ``column = value``.

        Returns:
            Number of rows updated.

        Raises:
            RelationAbsentError: The relation or column does not exist.
            StoreTimeoutError: The statement was cancelled.
        """
        ...

    def call_procedure(
        self,
        procedure: str,
        argument: str,
        value: str,
        *,
        timeout: float | None = None,
    ) -> object:
        """Invoke a server-side routine with one named argument.

        Returns:
            Whatever the routine returned (None for void routines).

        Raises:
            RelationAbsentError: The routine does not exist.
            StoreTimeoutError: The call was cancelled.
        """
        ...

    def count_rows(self, relation: str, column: str, value: str) -> int:
        """Count rows where ``column = value`` without modifying anything.

        Raises:
            RelationAbsentError: The relation or column does not exist.
        """
        ...


@runtime_checkable
class StaffDirectory(Protocol):
    """Port for the data-plane staff record."""

    def get_target(self, target_id: str) -> TargetEntity | None:
        """Return the staff snapshot, or None if no record exists."""
        ...

    def count_role_holders(self, role: str) -> int:
        """Count live accounts holding ``role``."""
        ...

    def remove_record(self, target_id: str, *, timeout: float | None = None) -> int:
        """Delete the staff record.

        Returns:
            Number of records removed (0 when already absent).
        """
        ...

    def record_exists(self, target_id: str) -> bool:
        """Report whether the staff record is still present."""
        ...
