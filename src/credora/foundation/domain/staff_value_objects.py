"""Value objects for staff accounts.

Immutable, validated domain primitives. All validation occurs at
construction time.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import StrEnum

_STAFF_ID_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_-]*$")


class StaffRole(StrEnum):
    """Role classification of a back-office staff account.

    Values match the ``profiles.role`` column. Uses StrEnum for native JSON
    serialization.
    """

    SUPER_ADMIN = "super_admin"
    ADMIN = "admin"
    BRANCH_ADMIN = "branch_admin"
    BRANCH_MANAGER = "branch_manager"
    LOAN_OFFICER = "loan_officer"
    TELLER = "teller"
    AUDITOR = "auditor"


@dataclass(frozen=True)
class StaffId:
    """Staff account identifier.

    Shared by the data plane (``profiles.id``) and the identity plane
    (auth user id). Letters, digits, hyphens and underscores only, so the
    value is always a single URL path segment.

    Raises:
        ValueError: If value is empty or holds any other character.

    Example:
        >>> StaffId("9b2f0c1e-7f43-4a55-9a51-2c0d2b1e8f10")
        StaffId(value='9b2f0c1e-7f43-4a55-9a51-2c0d2b1e8f10')
    """

    value: str

    def __post_init__(self) -> None:
        if not self.value or not self.value.strip():
            msg = "Staff ID cannot be empty"
            raise ValueError(msg)
        if not _STAFF_ID_PATTERN.fullmatch(self.value):
            msg = f"Staff ID contains invalid characters: {self.value!r}"
            raise ValueError(msg)

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class TargetEntity:
    """Snapshot of the staff account a deletion run targets.

    Read once from the data plane by the invariant guard. Only the fields
    needed for invariant checks and post-success bookkeeping are carried.

    Attributes:
        target_id: Immutable account identifier.
        role: Role classification, or None when the stored value is unknown.
        email: Login email, used for the deleted-email cooldown.
        is_active: Whether the account is still live.
    """

    target_id: str
    role: StaffRole | None
    email: str | None = None
    is_active: bool = True

    @classmethod
    def from_row(
        cls,
        target_id: str,
        role: str | None,
        email: str | None = None,
        is_active: bool | None = True,
    ) -> TargetEntity:
        """Build a snapshot from raw column values.

        Unknown role strings map to None rather than failing, so a legacy
        role never blocks a deletion on its own.
        """
        try:
            parsed = StaffRole(role) if role else None
        except ValueError:
            parsed = None
        return cls(
            target_id=target_id,
            role=parsed,
            email=email,
            is_active=is_active is not False,
        )
