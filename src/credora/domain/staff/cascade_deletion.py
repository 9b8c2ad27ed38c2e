"""Cascade deletion service for staff accounts.

Removes a staff account that many back-office tables point at. The data
plane (``profiles`` and the referencing tables) and the identity plane (the
hosted auth service) share no transaction, so the run is ordered to keep
every intermediate state safe to retry:

1. Invariant guard (reads only). Any violation aborts before mutation.
2. Catalog rules, in order, through the step executor. A failed CRITICAL
   rule aborts; a failed BEST_EFFORT rule is recorded and skipped.
3. Data-plane record removal. Failure aborts with the identity untouched.
4. Identity-plane removal. Failure leaves a retryable partial success.
5. Optional verification of both planes.
6. On success only: audit event and released-email bookkeeping. Neither can
   change the outcome.
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

from opentelemetry import trace

from credora.domain.staff.catalog import CleanupPolicy
from credora.domain.staff.deadline import Deadline
from credora.domain.staff.executor import TIMEOUT_REASON, StepExecutor
from credora.domain.staff.guard import InvariantGuard, LastRoleHolderCheck, SelfDeletionCheck
from credora.domain.staff.report import (
    DeletionPreview,
    DeletionReport,
    ExecutionLedger,
    OverallOutcome,
    PreviewEntry,
)
from credora.domain.staff.verification import DeletionVerifier, VerificationResult
from credora.foundation.domain.exceptions import NotFoundError, ValidationError
from credora.foundation.domain.ports import (
    RelationAbsentError,
    StaffDeletedEvent,
    StoreTimeoutError,
)
from credora.foundation.domain.staff_value_objects import StaffId, StaffRole

if TYPE_CHECKING:
    from collections.abc import Callable

    from credora.domain.staff.catalog import ReferenceCatalog, ReferenceRule
    from credora.foundation.domain.ports import (
        AuditSink,
        DeletedEmailTracker,
        IdentityProvider,
        ReferenceStore,
        StaffDirectory,
    )
    from credora.foundation.domain.staff_value_objects import TargetEntity

logger = logging.getLogger(__name__)
_tracer = trace.get_tracer(__name__)


class StaffDeletionService:
    """Orchestrates the removal of one staff account across both planes.

    Collaborators are injected; the service holds no connection of its own
    and keeps no state between runs.

    Args:
        catalog: Ordered reference rules.
        store: Data-plane store the rules act on.
        directory: Data-plane staff records.
        identity: Identity-plane admin port.
        audit_sink: Receives one event per successful run.
        email_tracker: Records released emails after a successful run.
        guard: Pre-flight checks. Defaults to the last-protected-role and
            self-deletion checks.
        protected_role: Role the default guard protects.
        verify_after_removal: Re-read both planes after the final removals.
        deadline_seconds: Default budget when the caller passes no deadline.
        clock: Monotonic clock used for default deadlines.
    """

    def __init__(
        self,
        catalog: ReferenceCatalog,
        store: ReferenceStore,
        directory: StaffDirectory,
        identity: IdentityProvider,
        *,
        audit_sink: AuditSink | None = None,
        email_tracker: DeletedEmailTracker | None = None,
        guard: InvariantGuard | None = None,
        protected_role: StaffRole | str = StaffRole.SUPER_ADMIN,
        verify_after_removal: bool = True,
        deadline_seconds: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._catalog = catalog
        self._store = store
        self._directory = directory
        self._identity = identity
        self._audit_sink = audit_sink
        self._email_tracker = email_tracker
        self._guard = guard or InvariantGuard(
            directory,
            checks=(LastRoleHolderCheck(protected_role), SelfDeletionCheck()),
        )
        self._executor = StepExecutor(store)
        self._verifier = DeletionVerifier(directory, identity)
        self._verify_after_removal = verify_after_removal
        self._deadline_seconds = deadline_seconds
        self._clock = clock

    def delete_staff(
        self,
        target_id: str,
        *,
        requested_by: str | None = None,
        deadline: Deadline | None = None,
    ) -> DeletionReport:
        """Remove a staff account and every reference the catalog names.

        Args:
            target_id: Account to remove (data-plane and identity-plane id).
            requested_by: Operator asking for the removal, when known.
            deadline: Request deadline. Defaults to ``deadline_seconds`` from now.

        Returns:
            The run's report. Refusals and failures are reported, not raised.

        Raises:
            ValidationError: If ``target_id`` is blank.
        """
        target_id = _validated_id(target_id)
        if deadline is None:
            deadline = Deadline.after(self._deadline_seconds, self._clock)

        with _tracer.start_as_current_span(
            "staff.delete",
            attributes={"staff.target_id": target_id, "staff.rule_count": len(self._catalog)},
        ) as span:
            report = self._run(target_id, requested_by, deadline)
            span.set_attribute("staff.deletion.outcome", str(report.overall_outcome))
            span.set_attribute("staff.deletion.steps", len(report.ledger))
        return report

    def verify(self, target_id: str) -> VerificationResult:
        """Report whether either plane still holds the account. Reads only."""
        return self._verifier.verify(_validated_id(target_id))

    def preview(self, target_id: str) -> DeletionPreview:
        """Dry run: invariant verdict and matching-row counts per rule.

        Raises:
            ValidationError: If ``target_id`` is blank.
            NotFoundError: If neither plane knows the account.
        """
        target_id = _validated_id(target_id)
        verdict = self._guard.inspect(target_id)
        identity_present = self._identity.identity_exists(target_id)
        if verdict.target is None and not identity_present:
            raise NotFoundError("StaffAccount", target_id)

        entries = tuple(self._count_references(rule, target_id) for rule in self._catalog)
        return DeletionPreview(
            target_id=target_id,
            target=verdict.target,
            identity_present=identity_present,
            violations=verdict.violations,
            entries=entries,
        )

    def _run(
        self,
        target_id: str,
        requested_by: str | None,
        deadline: Deadline,
    ) -> DeletionReport:
        logger.info(
            "staff_deletion_started",
            extra={"target_id": target_id, "requested_by": requested_by},
        )

        verdict = self._guard.inspect(target_id, requested_by=requested_by)
        if not verdict.allowed:
            logger.warning(
                "staff_deletion_refused",
                extra={
                    "target_id": target_id,
                    "violations": [v.code for v in verdict.violations],
                },
            )
            return DeletionReport(
                target_id=target_id,
                overall_outcome=OverallOutcome.ABORTED_BY_INVARIANT,
                invariant_violations=verdict.violations,
                failure_reason=verdict.violations[0].message,
            )

        ledger = ExecutionLedger()
        for rule in self._catalog:
            step = self._executor.apply(rule, target_id, deadline)
            ledger.append(step)
            if not step.is_failure:
                continue
            if rule.is_critical:
                logger.error(
                    "staff_deletion_critical_step_failed",
                    extra={"target_id": target_id, "rule": rule.key, "reason": step.reason},
                )
                return DeletionReport(
                    target_id=target_id,
                    overall_outcome=OverallOutcome.ABORTED_BY_CRITICAL_FAILURE,
                    ledger=ledger.steps(),
                    failure_reason=f"critical rule {rule.key} failed: {step.reason}",
                )
            logger.warning(
                "staff_deletion_step_failed",
                extra={"target_id": target_id, "rule": rule.key, "reason": step.reason},
            )

        data_error = self._remove_data_record(target_id, deadline)
        if data_error is not None:
            logger.error(
                "staff_deletion_data_record_failed",
                extra={"target_id": target_id, "reason": data_error},
            )
            return DeletionReport(
                target_id=target_id,
                overall_outcome=OverallOutcome.ABORTED_BY_CRITICAL_FAILURE,
                ledger=ledger.steps(),
                failure_reason=f"data record removal failed: {data_error}",
            )

        identity_error = self._remove_identity(target_id, deadline)
        if identity_error is not None:
            logger.error(
                "staff_deletion_identity_failed",
                extra={"target_id": target_id, "reason": identity_error},
            )
            return DeletionReport(
                target_id=target_id,
                overall_outcome=OverallOutcome.PARTIAL_SUCCESS,
                ledger=ledger.steps(),
                data_record_removed=True,
                failure_reason=f"identity record removal failed: {identity_error}",
            )

        verified = False
        if self._verify_after_removal:
            result = self._verify_quietly(target_id)
            if result is not None and not result.confirmed:
                logger.error("staff_deletion_verification_failed", extra=result.to_dict())
                return DeletionReport(
                    target_id=target_id,
                    overall_outcome=OverallOutcome.PARTIAL_SUCCESS,
                    ledger=ledger.steps(),
                    data_record_removed=not result.data_record_present,
                    identity_record_removed=not result.identity_record_present,
                    failure_reason="verification failed",
                )
            verified = result is not None

        report = DeletionReport(
            target_id=target_id,
            overall_outcome=OverallOutcome.SUCCESS,
            ledger=ledger.steps(),
            data_record_removed=True,
            identity_record_removed=True,
            verified=verified,
        )
        logger.info(
            "staff_deletion_completed",
            extra={
                "target_id": target_id,
                "steps": len(report.ledger),
                "best_effort_failures": len(report.best_effort_failures()),
            },
        )
        self._after_success(report, verdict.target, requested_by)
        return report

    def _remove_data_record(self, target_id: str, deadline: Deadline) -> str | None:
        """Delete the staff record. Returns a failure reason, or None on success.

        An already-absent record counts as removed.
        """
        if deadline.expired:
            return TIMEOUT_REASON
        try:
            self._directory.remove_record(target_id, timeout=deadline.remaining())
        except StoreTimeoutError:
            return TIMEOUT_REASON
        except Exception as exc:
            return str(exc) or exc.__class__.__name__
        return None

    def _remove_identity(self, target_id: str, deadline: Deadline) -> str | None:
        if deadline.expired:
            return TIMEOUT_REASON
        try:
            result = self._identity.remove_identity(target_id, timeout=deadline.remaining())
        except Exception as exc:
            return str(exc) or exc.__class__.__name__
        if result.satisfied:
            return None
        return result.message or str(result.status)

    def _verify_quietly(self, target_id: str) -> VerificationResult | None:
        try:
            return self._verifier.verify(target_id)
        except Exception:
            logger.warning(
                "staff_deletion_verification_unavailable",
                extra={"target_id": target_id},
                exc_info=True,
            )
            return None

    def _after_success(
        self,
        report: DeletionReport,
        target: TargetEntity | None,
        requested_by: str | None,
    ) -> None:
        if self._audit_sink is not None:
            event = StaffDeletedEvent(
                target_id=report.target_id,
                requested_by=requested_by,
                role=str(target.role) if target and target.role else None,
                email=target.email if target else None,
                steps={step.rule.key: str(step.outcome) for step in report.ledger},
            )
            try:
                self._audit_sink.emit(event)
            except Exception:
                logger.warning(
                    "staff_deletion_audit_failed",
                    extra={"target_id": report.target_id},
                    exc_info=True,
                )

        if self._email_tracker is not None and target is not None and target.email:
            try:
                self._email_tracker.track(target.email, report.target_id)
            except Exception:
                logger.warning(
                    "staff_deletion_email_tracking_failed",
                    extra={"target_id": report.target_id},
                    exc_info=True,
                )

    def _count_references(self, rule: ReferenceRule, target_id: str) -> PreviewEntry:
        if rule.policy is CleanupPolicy.IGNORE:
            return PreviewEntry(rule, 0)
        if rule.policy is CleanupPolicy.RUN_PROCEDURE:
            return PreviewEntry(rule, None)
        try:
            count = self._store.count_rows(rule.relation, rule.locator_column, target_id)
        except RelationAbsentError:
            return PreviewEntry(rule, None, relation_absent=True)
        except Exception as exc:
            return PreviewEntry(rule, None, error=str(exc) or exc.__class__.__name__)
        return PreviewEntry(rule, count)


def _validated_id(target_id: str) -> str:
    try:
        return StaffId(target_id.strip() if target_id else "").value
    except ValueError as exc:
        raise ValidationError("target_id", str(exc)) from exc
