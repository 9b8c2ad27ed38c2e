"""Execution ledger and deletion report types.

Everything here is produced once per deletion run and never mutated after
the run finishes. ``to_dict()`` methods give the wire form returned at the
invocation boundary.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Iterator

    from credora.domain.staff.catalog import ReferenceRule
    from credora.foundation.domain.staff_value_objects import TargetEntity

__all__ = [
    "DeletionPreview",
    "DeletionReport",
    "ExecutionLedger",
    "ExecutionStep",
    "InvariantViolation",
    "OverallOutcome",
    "PreviewEntry",
    "StepOutcome",
]


class StepOutcome(StrEnum):
    APPLIED = "applied"
    SKIPPED_RELATION_ABSENT = "skipped_relation_absent"
    SKIPPED_NO_MATCHING_ROWS = "skipped_no_matching_rows"
    FAILED = "failed"


class OverallOutcome(StrEnum):
    """Terminal classification of a deletion run."""

    SUCCESS = "success"
    ABORTED_BY_INVARIANT = "aborted_by_invariant"
    ABORTED_BY_CRITICAL_FAILURE = "aborted_by_critical_failure"
    PARTIAL_SUCCESS = "partial_success"


@dataclass(frozen=True, slots=True)
class InvariantViolation:
    """A pre-flight check that refused the deletion.

    Attributes:
        code: Machine-readable violation code (e.g., ``LAST_PROTECTED_ROLE_HOLDER``).
        message: Human-readable explanation.
        context: Structured details (role, holder count).
    """

    code: str
    message: str
    context: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code, "message": self.message, "context": dict(self.context)}


@dataclass(frozen=True, slots=True)
class ExecutionStep:
    """Result of applying one catalog rule.

    Attributes:
        rule: The rule that was applied.
        outcome: Classification of the attempt.
        rows_affected: Rows touched; 0 for every outcome except APPLIED.
        reason: Failure detail, set only when outcome is FAILED.
    """

    rule: ReferenceRule
    outcome: StepOutcome
    rows_affected: int = 0
    reason: str | None = None

    @classmethod
    def applied(cls, rule: ReferenceRule, rows: int) -> ExecutionStep:
        return cls(rule, StepOutcome.APPLIED, rows)

    @classmethod
    def relation_absent(cls, rule: ReferenceRule) -> ExecutionStep:
        return cls(rule, StepOutcome.SKIPPED_RELATION_ABSENT)

    @classmethod
    def no_matching_rows(cls, rule: ReferenceRule) -> ExecutionStep:
        return cls(rule, StepOutcome.SKIPPED_NO_MATCHING_ROWS)

    @classmethod
    def failed(cls, rule: ReferenceRule, reason: str) -> ExecutionStep:
        return cls(rule, StepOutcome.FAILED, 0, reason)

    @property
    def is_failure(self) -> bool:
        return self.outcome is StepOutcome.FAILED

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "rule": self.rule.key,
            "relation": self.rule.relation,
            "column": self.rule.locator_column,
            "policy": str(self.rule.policy),
            "criticality": str(self.rule.criticality),
            "outcome": str(self.outcome),
            "rows_affected": self.rows_affected,
        }
        if self.reason is not None:
            data["reason"] = self.reason
        return data


class ExecutionLedger:
    """Append-only record of executed steps, in catalog order."""

    def __init__(self) -> None:
        self._steps: list[ExecutionStep] = []

    def append(self, step: ExecutionStep) -> None:
        self._steps.append(step)

    def steps(self) -> tuple[ExecutionStep, ...]:
        return tuple(self._steps)

    def failures(self) -> tuple[ExecutionStep, ...]:
        return tuple(step for step in self._steps if step.is_failure)

    def __iter__(self) -> Iterator[ExecutionStep]:
        return iter(self._steps)

    def __len__(self) -> int:
        return len(self._steps)


@dataclass(frozen=True, slots=True)
class DeletionReport:
    """Outcome of one deletion run.

    Attributes:
        target_id: Account the run targeted.
        invariant_violations: Pre-flight refusals; non-empty only when aborted
            by invariant.
        ledger: Executed steps in catalog order.
        data_record_removed: Whether the data-plane record is gone.
        identity_record_removed: Whether the identity-plane record is gone.
        overall_outcome: Terminal classification.
        failure_reason: Why the run aborted or only partially succeeded.
        verified: Whether post-removal verification ran and confirmed absence.
    """

    target_id: str
    overall_outcome: OverallOutcome
    invariant_violations: tuple[InvariantViolation, ...] = ()
    ledger: tuple[ExecutionStep, ...] = ()
    data_record_removed: bool = False
    identity_record_removed: bool = False
    failure_reason: str | None = None
    verified: bool = False

    @property
    def success(self) -> bool:
        return self.overall_outcome is OverallOutcome.SUCCESS

    @property
    def retryable(self) -> bool:
        """True when re-running the same request can complete the removal."""
        return self.overall_outcome in (
            OverallOutcome.PARTIAL_SUCCESS,
            OverallOutcome.ABORTED_BY_CRITICAL_FAILURE,
        )

    def best_effort_failures(self) -> tuple[ExecutionStep, ...]:
        return tuple(
            step for step in self.ledger if step.is_failure and not step.rule.is_critical
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "outcome": str(self.overall_outcome),
            "target_id": self.target_id,
            "ledger": [step.to_dict() for step in self.ledger],
            "violations": [v.to_dict() for v in self.invariant_violations],
            "data_record_removed": self.data_record_removed,
            "identity_record_removed": self.identity_record_removed,
            "failure_reason": self.failure_reason,
            "verified": self.verified,
        }


@dataclass(frozen=True, slots=True)
class PreviewEntry:
    """Matching-row count for one rule, or why it could not be counted."""

    rule: ReferenceRule
    matching_rows: int | None
    relation_absent: bool = False
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "rule": self.rule.key,
            "policy": str(self.rule.policy),
            "criticality": str(self.rule.criticality),
            "description": self.rule.description,
            "matching_rows": self.matching_rows,
            "relation_absent": self.relation_absent,
            "error": self.error,
        }


@dataclass(frozen=True, slots=True)
class DeletionPreview:
    """Read-only dry run of a deletion.

    Attributes:
        target_id: Account inspected.
        target: Data-plane snapshot, or None when no record exists.
        identity_present: Whether the identity-plane record exists.
        violations: Invariant violations that would abort the run.
        entries: Per-rule matching counts, in catalog order.
    """

    target_id: str
    target: TargetEntity | None
    identity_present: bool
    violations: tuple[InvariantViolation, ...] = ()
    entries: tuple[PreviewEntry, ...] = ()

    @property
    def can_delete(self) -> bool:
        return not self.violations

    @property
    def total_references(self) -> int:
        return sum(entry.matching_rows or 0 for entry in self.entries)

    def to_dict(self) -> dict[str, Any]:
        return {
            "target_id": self.target_id,
            "data_record_present": self.target is not None,
            "identity_record_present": self.identity_present,
            "role": str(self.target.role) if self.target and self.target.role else None,
            "can_delete": self.can_delete,
            "total_references": self.total_references,
            "violations": [v.to_dict() for v in self.violations],
            "references": [entry.to_dict() for entry in self.entries],
        }
