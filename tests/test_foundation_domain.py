"""Unit tests for foundation domain exceptions, value objects and ports."""

from __future__ import annotations

import pytest

from credora.domain.staff.infrastructure.in_memory import (
    InMemoryIdentityProvider,
    InMemoryReferenceStore,
)
from credora.foundation.domain import (
    CatalogError,
    DomainError,
    IdentityProvider,
    IdentityRemovalResult,
    IdentityRemovalStatus,
    NotFoundError,
    ReferenceStore,
    RelationAbsentError,
    StaffDirectory,
    StaffId,
    StaffRole,
    TargetEntity,
    ValidationError,
)


class TestExceptions:
    @pytest.mark.unit
    def test_domain_error_str_includes_context(self) -> None:
        exc = DomainError("failed", context={"target_id": "u-1"})
        assert str(exc) == "failed (target_id=u-1)"
        assert exc.error_code == "DOMAIN_ERROR"

    @pytest.mark.unit
    def test_not_found(self) -> None:
        exc = NotFoundError("StaffAccount", "u-1")
        assert exc.message == "StaffAccount not found: u-1"
        assert isinstance(exc, DomainError)

    @pytest.mark.unit
    def test_validation(self) -> None:
        exc = ValidationError("target_id", "must not be blank")
        assert exc.field == "target_id"
        assert exc.context["reason"] == "must not be blank"

    @pytest.mark.unit
    def test_catalog(self) -> None:
        exc = CatalogError("duplicate rule", rule="loans.created_by")
        assert exc.reason == "duplicate rule"
        assert str(exc) == "Invalid reference catalog: duplicate rule (rule=loans.created_by)"

    @pytest.mark.unit
    def test_relation_absent_message(self) -> None:
        exc = RelationAbsentError("legacy", "relation does not exist")
        assert str(exc) == "Relation absent: legacy (relation does not exist)"


class TestStaffValueObjects:
    @pytest.mark.unit
    def test_staff_id_rejects_blank(self) -> None:
        with pytest.raises(ValueError, match="cannot be empty"):
            StaffId("  ")

    @pytest.mark.unit
    @pytest.mark.parametrize("value", ["x/../victim", "..", "a b", "users?x=1", "abc\n"])
    def test_staff_id_rejects_path_characters(self, value: str) -> None:
        with pytest.raises(ValueError, match="invalid characters"):
            StaffId(value)

    @pytest.mark.unit
    def test_staff_id_str(self) -> None:
        assert str(StaffId("u-1")) == "u-1"

    @pytest.mark.unit
    def test_target_from_row(self) -> None:
        target = TargetEntity.from_row("u-1", "teller", "t@credora.test", None)
        assert target.role is StaffRole.TELLER
        assert target.is_active is True

    @pytest.mark.unit
    def test_unknown_role_maps_to_none(self) -> None:
        assert TargetEntity.from_row("u-1", "field_agent").role is None

    @pytest.mark.unit
    def test_inactive(self) -> None:
        assert TargetEntity.from_row("u-1", "admin", is_active=False).is_active is False


class TestIdentityRemovalResult:
    @pytest.mark.unit
    @pytest.mark.parametrize(
        ("result", "satisfied"),
        [
            (IdentityRemovalResult.ok(), True),
            (IdentityRemovalResult.not_found(), True),
            (IdentityRemovalResult.error("boom"), False),
        ],
    )
    def test_satisfied(self, result: IdentityRemovalResult, satisfied: bool) -> None:
        assert result.satisfied is satisfied

    @pytest.mark.unit
    def test_error_message(self) -> None:
        result = IdentityRemovalResult.error("boom")
        assert result.status is IdentityRemovalStatus.ERROR
        assert result.message == "boom"


class TestInMemoryAdapters:
    @pytest.mark.unit
    def test_store_implements_ports(self) -> None:
        store = InMemoryReferenceStore()
        assert isinstance(store, ReferenceStore)
        assert isinstance(store, StaffDirectory)

    @pytest.mark.unit
    def test_identity_implements_port(self) -> None:
        assert isinstance(InMemoryIdentityProvider(), IdentityProvider)

    @pytest.mark.unit
    def test_absent_column(self) -> None:
        store = InMemoryReferenceStore()
        store.create_relation("loans", ("id",))
        with pytest.raises(RelationAbsentError):
            store.count_rows("loans", "created_by", "u-1")

    @pytest.mark.unit
    def test_dropped_relation(self) -> None:
        store = InMemoryReferenceStore()
        store.add_row("logs", user_id="u-1")
        store.drop_relation("logs")
        with pytest.raises(RelationAbsentError):
            store.delete_rows("logs", "user_id", "u-1")

    @pytest.mark.unit
    def test_records_mutations(self) -> None:
        store = InMemoryReferenceStore()
        store.add_row("logs", user_id="u-1")
        store.update_rows("logs", "user_id", "u-1", None)
        assert [(m.operation, m.relation, m.rows) for m in store.mutations] == [
            ("update", "logs", 1)
        ]

    @pytest.mark.unit
    def test_injected_failure_cleared(self) -> None:
        store = InMemoryReferenceStore()
        store.add_row("logs", user_id="u-1")
        store.fail("logs", RuntimeError("locked"))
        with pytest.raises(RuntimeError):
            store.delete_rows("logs", "user_id", "u-1")
        store.clear_failures()
        assert store.delete_rows("logs", "user_id", "u-1") == 1
