"""Audit sinks for completed staff removals."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from sqlalchemy import text

from credora.infra.observability.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Callable

    from sqlalchemy.orm import Session

    from credora.foundation.domain.ports import StaffDeletedEvent


class LoggingAuditSink:
    """Writes audit events to the structured log stream."""

    def __init__(self) -> None:
        self._log = get_logger(__name__)

    def emit(self, event: StaffDeletedEvent) -> None:
        payload = event.to_dict()
        event_type = payload.pop("event_type")
        self._log.info(event_type, **payload)


class SqlAuditSink:
    """Records audit events as ``audit_log`` rows.

    One row per removal: ``action='DELETE'``, ``table_name`` set to the staff
    relation, ``record_id`` the removed account, ``user_id`` the requesting
    operator and ``old_values`` the event payload.

    Args:
        session_factory: Callable returning a SQLAlchemy Session context manager.
        staff_relation: Table name recorded in ``table_name``.
    """

    def __init__(
        self,
        session_factory: Callable[[], Session],
        *,
        staff_relation: str = "profiles",
    ) -> None:
        self._session_factory = session_factory
        self._staff_relation = staff_relation
        self._log = get_logger(__name__)

    def emit(self, event: StaffDeletedEvent) -> None:
        with self._session_factory() as session:
            session.execute(
                text("""
                    INSERT INTO audit_log
                        (action, table_name, record_id, user_id, old_values, timestamp)
                    VALUES
                        ('DELETE', :table_name, :record_id, :user_id,
                         CAST(:old_values AS JSONB), :occurred_at)
                """),
                {
                    "table_name": self._staff_relation,
                    "record_id": event.target_id,
                    "user_id": event.requested_by,
                    "old_values": json.dumps(event.to_dict()),
                    "occurred_at": event.occurred_at,
                },
            )
            session.commit()
        self._log.info("staff_deletion_audited", target_id=event.target_id)
