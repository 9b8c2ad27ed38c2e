"""Step executor: applies one reference rule and classifies the result.

The executor never raises for an individual rule. Every condition the store
can produce is folded into an ``ExecutionStep`` so the orchestrator can make
the continue-or-abort decision from the rule's criticality alone.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from credora.domain.staff.catalog import CleanupPolicy
from credora.domain.staff.report import ExecutionStep
from credora.foundation.domain.ports import RelationAbsentError, StoreTimeoutError

if TYPE_CHECKING:
    from credora.domain.staff.catalog import ReferenceRule
    from credora.domain.staff.deadline import Deadline
    from credora.foundation.domain.ports import ReferenceStore

logger = logging.getLogger(__name__)

TIMEOUT_REASON = "timeout"


class StepExecutor:
    """Applies catalog rules against a reference store.

    Args:
        store: Data-plane store the rules mutate.
    """

    def __init__(self, store: ReferenceStore) -> None:
        self._store = store

    def apply(
        self,
        rule: ReferenceRule,
        target_id: str,
        deadline: Deadline | None = None,
    ) -> ExecutionStep:
        """Apply ``rule`` for ``target_id``.

        Args:
            rule: Catalog rule to apply.
            target_id: Staff id used as the locator value.
            deadline: Request deadline; an expired deadline fails the step
                without touching the store.

        Returns:
            APPLIED with the affected row count, SKIPPED_NO_MATCHING_ROWS,
            SKIPPED_RELATION_ABSENT, or FAILED with a reason.
        """
        if rule.policy is CleanupPolicy.IGNORE:
            return ExecutionStep.applied(rule, 0)

        timeout = None
        if deadline is not None:
            if deadline.expired:
                return ExecutionStep.failed(rule, TIMEOUT_REASON)
            timeout = deadline.remaining()

        try:
            rows = self._dispatch(rule, target_id, timeout)
        except RelationAbsentError:
            logger.debug("reference_rule_relation_absent", extra={"rule": rule.key})
            return ExecutionStep.relation_absent(rule)
        except StoreTimeoutError:
            return ExecutionStep.failed(rule, TIMEOUT_REASON)
        except Exception as exc:
            logger.debug(
                "reference_rule_failed",
                extra={"rule": rule.key, "error": str(exc)},
            )
            return ExecutionStep.failed(rule, str(exc) or exc.__class__.__name__)

        if rows == 0:
            return ExecutionStep.no_matching_rows(rule)
        return ExecutionStep.applied(rule, rows)

    def _dispatch(self, rule: ReferenceRule, target_id: str, timeout: float | None) -> int:
        policy = rule.policy
        if policy is CleanupPolicy.CASCADE_DELETE:
            return self._store.delete_rows(
                rule.relation, rule.locator_column, target_id, timeout=timeout
            )
        if policy is CleanupPolicy.NULLIFY_COLUMN:
            return self._store.update_rows(
                rule.relation, rule.locator_column, target_id, None, timeout=timeout
            )
        if policy is CleanupPolicy.REPARENT_TO:
            return self._store.update_rows(
                rule.relation, rule.locator_column, target_id, rule.default, timeout=timeout
            )
        result = self._store.call_procedure(
            rule.relation, rule.locator_column, target_id, timeout=timeout
        )
        return _procedure_row_count(result)


def _procedure_row_count(result: object) -> int:
    """Interpret a routine's return value as an affected-row count."""
    if isinstance(result, bool):
        return int(result)
    if isinstance(result, int) and result > 0:
        return result
    return 0
