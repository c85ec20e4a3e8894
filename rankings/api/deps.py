"""API dependencies"""

from typing import Generator, Optional

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from rankings.core.db import SessionLocal
from rankings.services.audit import AuditLogger
from rankings.services.auth import Authorizer, HttpAuthorizer
from rankings.services.ingest_service import RankingIngestService
from rankings.services.repository import SqlRankingRepository


def get_db() -> Generator[Session, None, None]:
    """Database session per request."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_authorizer() -> Authorizer:
    return HttpAuthorizer()


def get_bearer_token(authorization: Optional[str] = Header(default=None)) -> Optional[str]:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer":
        return None
    return token.strip() or None


def get_ingest_service(
    db: Session = Depends(get_db),
    authorizer: Authorizer = Depends(get_authorizer),
) -> RankingIngestService:
    return RankingIngestService(
        repository=SqlRankingRepository(db),
        authorizer=authorizer,
        audit=AuditLogger(db),
    )
