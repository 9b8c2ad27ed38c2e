"""Post-removal verification of both planes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from credora.foundation.domain.ports import IdentityProvider, StaffDirectory


@dataclass(frozen=True, slots=True)
class VerificationResult:
    target_id: str
    data_record_present: bool
    identity_record_present: bool

    @property
    def confirmed(self) -> bool:
        """True when neither plane still holds the account."""
        return not (self.data_record_present or self.identity_record_present)

    def to_dict(self) -> dict[str, Any]:
        return {
            "target_id": self.target_id,
            "data_record_present": self.data_record_present,
            "identity_record_present": self.identity_record_present,
            "confirmed": self.confirmed,
        }


class DeletionVerifier:
    """Checks that a staff account is absent from both planes.

    Performs reads only and may be called at any time, independently of a
    deletion run.
    """

    def __init__(self, directory: StaffDirectory, identity: IdentityProvider) -> None:
        self._directory = directory
        self._identity = identity

    def verify(self, target_id: str) -> VerificationResult:
        return VerificationResult(
            target_id=target_id,
            data_record_present=self._directory.record_exists(target_id),
            identity_record_present=self._identity.identity_exists(target_id),
        )
