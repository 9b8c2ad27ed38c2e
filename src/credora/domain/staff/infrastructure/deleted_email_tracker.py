"""Released-email tracking for removed staff accounts.

Each removed account's email is recorded in ``deleted_email_tracker`` with a
``can_reuse_after`` timestamp. Recording the same email again refreshes the
cooldown.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlalchemy import text

if TYPE_CHECKING:
    from collections.abc import Callable

    from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)

_TRACK_SQL = """
INSERT INTO deleted_email_tracker
    (original_email, deleted_user_id, deleted_at, can_reuse_after, is_reusable, notes)
VALUES
    (:email, :target_id, NOW(), NOW() + make_interval(hours => :cooldown_hours),
     FALSE, :notes)
ON CONFLICT (original_email) DO UPDATE SET
    deleted_user_id = EXCLUDED.deleted_user_id,
    deleted_at = EXCLUDED.deleted_at,
    can_reuse_after = EXCLUDED.can_reuse_after,
    is_reusable = FALSE,
    notes = EXCLUDED.notes
"""


class SqlDeletedEmailTracker:
    """Upserts released emails into ``deleted_email_tracker``.

    Args:
        session_factory: Callable returning a SQLAlchemy Session context manager.
        cooldown_hours: Hours before the email may be registered again.
    """

    def __init__(
        self,
        session_factory: Callable[[], Session],
        *,
        cooldown_hours: int = 24,
    ) -> None:
        self._session_factory = session_factory
        self._cooldown_hours = cooldown_hours

    def track(self, email: str, target_id: str) -> None:
        with self._session_factory() as session:
            session.execute(
                text(_TRACK_SQL),
                {
                    "email": email.strip().lower(),
                    "target_id": target_id,
                    "cooldown_hours": self._cooldown_hours,
                    "notes": "Staff account removed",
                },
            )
            session.commit()
        logger.info(
            "deleted_email_tracked",
            extra={"target_id": target_id, "cooldown_hours": self._cooldown_hours},
        )
