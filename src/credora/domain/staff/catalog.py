"""Reference catalog for staff account removal.

Declares, per deployment, every relation that can hold a pointer to a staff
account and what to do with those pointers before the account itself is
removed. The catalog is pure data: it performs no I/O and is validated once,
at construction.

Ordering matters. Rules that clear or reassign pointers run before rules that
delete rows from the same downstream tables, and the residual database-side
cleanup routine runs last.

Example:
    >>> catalog = ReferenceCatalog([
    ...     ReferenceRule("logs", "user_id", CleanupPolicy.NULLIFY_COLUMN),
    ... ])
    >>> [rule.key for rule in catalog.rules()]
    ['logs.user_id']
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

from credora.foundation.domain.exceptions import CatalogError

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

__all__ = [
    "DEFAULT_RESIDUAL_PROCEDURE",
    "CleanupPolicy",
    "Criticality",
    "ReferenceCatalog",
    "ReferenceRule",
    "build_default_catalog",
]

_IDENTIFIER_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

DEFAULT_RESIDUAL_PROCEDURE = "cleanup_user_references_simple"


class CleanupPolicy(StrEnum):
    """What to do with rows that reference the target."""

    CASCADE_DELETE = "cascade_delete"
    NULLIFY_COLUMN = "nullify_column"
    REPARENT_TO = "reparent_to"
    IGNORE = "ignore"
    RUN_PROCEDURE = "run_procedure"

    @property
    def mutates(self) -> bool:
        return self is not CleanupPolicy.IGNORE


class Criticality(StrEnum):
    """Whether a failed rule must stop the run."""

    CRITICAL = "critical"
    BEST_EFFORT = "best_effort"


@dataclass(frozen=True, slots=True)
class ReferenceRule:
    """One entry of the reference catalog.

    For ``RUN_PROCEDURE`` rules, ``relation`` names the routine and
    ``locator_column`` names its argument.

    Attributes:
        relation: Table (or routine) name.
        locator_column: Column holding the staff id (or routine argument name).
        policy: Cleanup policy applied to matching rows.
        criticality: CRITICAL stops the run on failure, BEST_EFFORT does not.
        default: Replacement id for ``REPARENT_TO`` rules.
        description: Free text shown in previews.

    Raises:
        CatalogError: If a name is not a plain identifier, or ``default`` is
            missing for ``REPARENT_TO`` or present for any other policy.
    """

    relation: str
    locator_column: str
    policy: CleanupPolicy
    criticality: Criticality = Criticality.BEST_EFFORT
    default: str | None = None
    description: str = ""

    def __post_init__(self) -> None:
        for label, name in (("relation", self.relation), ("column", self.locator_column)):
            if not _IDENTIFIER_PATTERN.match(name):
                raise CatalogError(f"unsafe {label} name {name!r}", rule=self.key)
        if self.policy is CleanupPolicy.REPARENT_TO:
            if not self.default:
                raise CatalogError("reparent rule requires a default", rule=self.key)
        elif self.default is not None:
            raise CatalogError(
                f"default is only valid for {CleanupPolicy.REPARENT_TO} rules",
                rule=self.key,
            )

    @property
    def key(self) -> str:
        """Unique catalog key, ``relation.locator_column``."""
        return f"{self.relation}.{self.locator_column}"

    @property
    def is_critical(self) -> bool:
        return self.criticality is Criticality.CRITICAL


class ReferenceCatalog:
    """Ordered, immutable collection of reference rules.

    Iteration is restartable and always yields rules in definition order.

    Raises:
        CatalogError: If two rules share a key.
    """

    def __init__(self, rules: Iterable[ReferenceRule]) -> None:
        ordered = tuple(rules)
        seen: set[str] = set()
        for rule in ordered:
            if rule.key in seen:
                raise CatalogError("duplicate rule", rule=rule.key)
            seen.add(rule.key)
        self._rules = ordered

    def rules(self) -> tuple[ReferenceRule, ...]:
        return self._rules

    def __iter__(self) -> Iterator[ReferenceRule]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def __repr__(self) -> str:
        return f"ReferenceCatalog({[rule.key for rule in self._rules]!r})"


# Columns whose pointer is cleared while the row itself is kept: loan books,
# payment history and documents must outlive the officer who touched them.
_NULLIFIED_COLUMNS: tuple[tuple[str, str, str], ...] = (
    ("groups", "assigned_officer_id", "Groups assigned to the officer"),
    ("loans", "loan_officer_id", "Loans managed by the officer"),
    ("loans", "approved_by", "Loans approved by the account"),
    ("loans", "created_by", "Loans created by the account"),
    ("loans", "deleted_by", "Loans soft-deleted by the account"),
    ("members", "created_by", "Members registered by the account"),
    ("groups", "created_by", "Groups created by the account"),
    ("branches", "manager_id", "Branches managed by the account"),
    ("branches", "deactivated_by", "Branches deactivated by the account"),
    ("profiles", "created_by", "Staff accounts created by the account"),
    ("profiles", "deactivated_by", "Staff accounts deactivated by the account"),
    ("payments", "recorded_by", "Payments recorded by the account"),
    ("repayments", "received_by", "Repayments received by the account"),
    ("member_documents", "uploaded_by", "Member documents uploaded"),
    ("member_documents", "verified_by", "Member documents verified"),
    ("collateral", "created_by", "Collateral records created"),
    ("expenses", "created_by", "Expenses recorded"),
    ("auth_logs", "user_id", "Authentication log entries"),
)

# Rows that only make sense while the account exists.
_DELETED_ROWS: tuple[tuple[str, str, Criticality, str], ...] = (
    ("audit_log", "user_id", Criticality.BEST_EFFORT, "Audit entries authored"),
    ("communication_logs", "officer_id", Criticality.BEST_EFFORT, "Member communications"),
    ("collection_logs", "officer_id", Criticality.BEST_EFFORT, "Collection visits"),
    ("notifications", "user_id", Criticality.BEST_EFFORT, "Pending notifications"),
    ("user_permissions", "user_id", Criticality.CRITICAL, "Permission grants"),
    ("user_branch_roles", "user_id", Criticality.CRITICAL, "Branch role grants"),
    ("user_roles", "user_id", Criticality.CRITICAL, "Role grants"),
)


def build_default_catalog(
    *,
    reparent_members_to: str | None = None,
    residual_procedure: str | None = DEFAULT_RESIDUAL_PROCEDURE,
) -> ReferenceCatalog:
    """Build the catalog for the microfinance back office.

    Args:
        reparent_members_to: When set, members assigned to the removed officer
            are reassigned to this account instead of being left unassigned.
        residual_procedure: Database routine run last to sweep references the
            catalog does not name. None omits the step.

    Returns:
        The validated catalog.
    """
    if reparent_members_to:
        member_rule = ReferenceRule(
            "members",
            "assigned_officer_id",
            CleanupPolicy.REPARENT_TO,
            default=reparent_members_to,
            description="Members assigned to the officer",
        )
    else:
        member_rule = ReferenceRule(
            "members",
            "assigned_officer_id",
            CleanupPolicy.NULLIFY_COLUMN,
            description="Members assigned to the officer",
        )

    rules = [member_rule]
    rules.extend(
        ReferenceRule(relation, column, CleanupPolicy.NULLIFY_COLUMN, description=text)
        for relation, column, text in _NULLIFIED_COLUMNS
    )
    rules.extend(
        ReferenceRule(relation, column, CleanupPolicy.CASCADE_DELETE, criticality, description=text)
        for relation, column, criticality, text in _DELETED_ROWS
    )
    if residual_procedure:
        rules.append(
            ReferenceRule(
                residual_procedure,
                "user_id_param",
                CleanupPolicy.RUN_PROCEDURE,
                description="Residual reference sweep",
            )
        )
    return ReferenceCatalog(rules)
