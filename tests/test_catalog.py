"""Unit tests for the reference catalog."""

from __future__ import annotations

import pytest

from credora.domain.staff.catalog import (
    DEFAULT_RESIDUAL_PROCEDURE,
    CleanupPolicy,
    Criticality,
    ReferenceCatalog,
    ReferenceRule,
    build_default_catalog,
)
from credora.foundation.domain.exceptions import CatalogError


@pytest.mark.unit
class TestReferenceRule:
    def test_defaults(self) -> None:
        rule = ReferenceRule("loans", "created_by", CleanupPolicy.NULLIFY_COLUMN)
        assert rule.criticality is Criticality.BEST_EFFORT
        assert rule.default is None
        assert rule.is_critical is False

    def test_key(self) -> None:
        rule = ReferenceRule("loans", "created_by", CleanupPolicy.NULLIFY_COLUMN)
        assert rule.key == "loans.created_by"

    def test_reparent_requires_default(self) -> None:
        with pytest.raises(CatalogError, match="requires a default"):
            ReferenceRule("members", "assigned_officer_id", CleanupPolicy.REPARENT_TO)

    def test_default_rejected_for_other_policies(self) -> None:
        with pytest.raises(CatalogError):
            ReferenceRule("loans", "created_by", CleanupPolicy.NULLIFY_COLUMN, default="x")

    @pytest.mark.parametrize("relation", ["loans; DROP TABLE profiles", "1loans", "", 'lo"ans'])
    def test_unsafe_relation_rejected(self, relation: str) -> None:
        with pytest.raises(CatalogError) as exc_info:
            ReferenceRule(relation, "created_by", CleanupPolicy.CASCADE_DELETE)
        assert exc_info.value.error_code == "CATALOG_ERROR"

    def test_unsafe_column_rejected(self) -> None:
        with pytest.raises(CatalogError):
            ReferenceRule("loans", "created by", CleanupPolicy.CASCADE_DELETE)

    def test_frozen(self) -> None:
        rule = ReferenceRule("loans", "created_by", CleanupPolicy.NULLIFY_COLUMN)
        with pytest.raises(AttributeError):
            rule.relation = "members"  # type: ignore[misc]

    def test_ignore_does_not_mutate(self) -> None:
        assert CleanupPolicy.IGNORE.mutates is False
        assert CleanupPolicy.CASCADE_DELETE.mutates is True


@pytest.mark.unit
class TestReferenceCatalog:
    def test_preserves_order(self) -> None:
        rules = [
            ReferenceRule("b", "x", CleanupPolicy.NULLIFY_COLUMN),
            ReferenceRule("a", "x", CleanupPolicy.NULLIFY_COLUMN),
        ]
        catalog = ReferenceCatalog(rules)
        assert [r.relation for r in catalog] == ["b", "a"]
        assert catalog.rules() == tuple(rules)

    def test_iteration_is_restartable(self) -> None:
        catalog = ReferenceCatalog([ReferenceRule("a", "x", CleanupPolicy.IGNORE)])
        assert list(catalog) == list(catalog)

    def test_duplicate_key_rejected(self) -> None:
        with pytest.raises(CatalogError, match="duplicate rule"):
            ReferenceCatalog(
                [
                    ReferenceRule("loans", "created_by", CleanupPolicy.NULLIFY_COLUMN),
                    ReferenceRule("loans", "created_by", CleanupPolicy.CASCADE_DELETE),
                ]
            )

    def test_same_relation_different_columns_allowed(self) -> None:
        catalog = ReferenceCatalog(
            [
                ReferenceRule("loans", "created_by", CleanupPolicy.NULLIFY_COLUMN),
                ReferenceRule("loans", "approved_by", CleanupPolicy.NULLIFY_COLUMN),
            ]
        )
        assert len(catalog) == 2

    def test_empty_catalog(self) -> None:
        assert len(ReferenceCatalog([])) == 0


@pytest.mark.unit
class TestDefaultCatalog:
    def test_members_nullified_by_default(self) -> None:
        first = build_default_catalog().rules()[0]
        assert first.key == "members.assigned_officer_id"
        assert first.policy is CleanupPolicy.NULLIFY_COLUMN

    def test_members_reparented_when_configured(self) -> None:
        first = build_default_catalog(reparent_members_to="manager-1").rules()[0]
        assert first.policy is CleanupPolicy.REPARENT_TO
        assert first.default == "manager-1"

    def test_residual_procedure_is_last_and_best_effort(self) -> None:
        last = build_default_catalog().rules()[-1]
        assert last.relation == DEFAULT_RESIDUAL_PROCEDURE
        assert last.policy is CleanupPolicy.RUN_PROCEDURE
        assert last.criticality is Criticality.BEST_EFFORT

    def test_residual_procedure_can_be_omitted(self) -> None:
        catalog = build_default_catalog(residual_procedure=None)
        assert all(r.policy is not CleanupPolicy.RUN_PROCEDURE for r in catalog)

    def test_permission_grants_are_critical(self) -> None:
        critical = {r.key for r in build_default_catalog() if r.is_critical}
        assert critical == {
            "user_permissions.user_id",
            "user_branch_roles.user_id",
            "user_roles.user_id",
        }

    def test_nullify_rules_precede_deletes(self) -> None:
        policies = [r.policy for r in build_default_catalog(residual_procedure=None)]
        first_delete = policies.index(CleanupPolicy.CASCADE_DELETE)
        assert CleanupPolicy.NULLIFY_COLUMN not in policies[first_delete:]
