"""Audit log collaborator - fire-and-forget."""

from __future__ import annotations

from typing import Any, Dict, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from rankings.core.logging import get_logger
from rankings.models.audit import AuditLog

log = get_logger("audit")


class AuditLogger:
    """Writes one audit row per call; failures are logged, never raised."""

    def __init__(self, db: Session):
        self.db = db

    def log(
        self,
        action: str,
        metadata: Dict[str, Any],
        actor: Optional[str] = None,
        resource_type: str = "external_rankings",
    ) -> None:
        try:
            self.db.add(AuditLog(action=action, resource_type=resource_type, actor=actor, meta=metadata))
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            log.warning(f"Audit log write failed for {action}: {exc}")
