"""Invariant guard: read-only pre-flight checks before any mutation.

The guard reads the target snapshot once and runs each registered check
against it. Checks never write. When a read a check depends on fails, the
guard refuses the deletion rather than guessing.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

from credora.domain.staff.report import InvariantViolation
from credora.foundation.domain.staff_value_objects import StaffRole

if TYPE_CHECKING:
    from collections.abc import Sequence

    from credora.foundation.domain.ports import StaffDirectory
    from credora.foundation.domain.staff_value_objects import TargetEntity

logger = logging.getLogger(__name__)

LAST_PROTECTED_ROLE_HOLDER = "LAST_PROTECTED_ROLE_HOLDER"
SELF_DELETION = "SELF_DELETION"
INVARIANT_UNVERIFIABLE = "INVARIANT_UNVERIFIABLE"


class InvariantCheck(Protocol):
    """A single pre-flight rule."""

    def __call__(
        self,
        target: TargetEntity,
        directory: StaffDirectory,
        requested_by: str | None,
    ) -> InvariantViolation | None: ...


class LastRoleHolderCheck:
    """Refuses removal of the last live holder of a protected role.

    Args:
        protected_role: Role that must always keep at least one holder.
    """

    def __init__(self, protected_role: StaffRole | str = StaffRole.SUPER_ADMIN) -> None:
        self._role = StaffRole(protected_role)

    def __call__(
        self,
        target: TargetEntity,
        directory: StaffDirectory,
        requested_by: str | None,
    ) -> InvariantViolation | None:
        # An inactive target is not among the live holders it would leave behind.
        if target.role is not self._role or not target.is_active:
            return None
        holders = directory.count_role_holders(str(self._role))
        if holders > 1:
            return None
        return InvariantViolation(
            code=LAST_PROTECTED_ROLE_HOLDER,
            message=f"Cannot delete the last {self._role} account",
            context={"role": str(self._role), "holders": holders},
        )


class SelfDeletionCheck:
    """Refuses an operator removing their own account."""

    def __call__(
        self,
        target: TargetEntity,
        directory: StaffDirectory,
        requested_by: str | None,
    ) -> InvariantViolation | None:
        if requested_by is None or requested_by != target.target_id:
            return None
        return InvariantViolation(
            code=SELF_DELETION,
            message="Operators cannot delete their own account",
            context={"requested_by": requested_by},
        )


@dataclass(frozen=True, slots=True)
class GuardVerdict:
    """Target snapshot and the violations found for it."""

    target: TargetEntity | None
    violations: tuple[InvariantViolation, ...] = ()

    @property
    def allowed(self) -> bool:
        return not self.violations


class InvariantGuard:
    """Runs the pre-flight checks for a deletion request.

    A target with no data-plane record produces no violations, so that a
    retry after a partial success can finish the identity-plane removal.

    Args:
        directory: Read access to staff records.
        checks: Checks to run, in order. Defaults to the last-protected-role
            check followed by the self-deletion check.
    """

    def __init__(
        self,
        directory: StaffDirectory,
        checks: Sequence[InvariantCheck] | None = None,
    ) -> None:
        self._directory = directory
        if checks is None:
            checks = (LastRoleHolderCheck(), SelfDeletionCheck())
        self._checks = tuple(checks)

    def inspect(self, target_id: str, *, requested_by: str | None = None) -> GuardVerdict:
        """Read the target and evaluate every check against it."""
        try:
            target = self._directory.get_target(target_id)
        except Exception as exc:
            logger.warning(
                "invariant_target_read_failed",
                extra={"target_id": target_id, "error": str(exc)},
            )
            return GuardVerdict(None, (_unverifiable("target lookup", exc),))

        if target is None:
            return GuardVerdict(None)

        violations: list[InvariantViolation] = []
        for check in self._checks:
            try:
                violation = check(target, self._directory, requested_by)
            except Exception as exc:
                logger.warning(
                    "invariant_check_failed",
                    extra={
                        "target_id": target_id,
                        "check": type(check).__name__,
                        "error": str(exc),
                    },
                )
                violation = _unverifiable(type(check).__name__, exc)
            if violation is not None:
                violations.append(violation)
        return GuardVerdict(target, tuple(violations))

    def check(self, target_id: str, *, requested_by: str | None = None) -> list[InvariantViolation]:
        """Return the violations for ``target_id``; empty means proceed."""
        return list(self.inspect(target_id, requested_by=requested_by).violations)


def _unverifiable(what: str, exc: Exception) -> InvariantViolation:
    return InvariantViolation(
        code=INVARIANT_UNVERIFIABLE,
        message=f"Could not verify deletion preconditions: {what} failed",
        context={"error": str(exc)},
    )
