# Services package
from rankings.services.audit import AuditLogger
from rankings.services.auth import Authorizer, HttpAuthorizer, Principal
from rankings.services.data_service import DataService
from rankings.services.ingest_service import IngestSummary, RankingIngestService
from rankings.services.repository import RankingRepository, RunOutcome, SqlRankingRepository

__all__ = [
    "AuditLogger",
    "Authorizer",
    "HttpAuthorizer",
    "Principal",
    "DataService",
    "IngestSummary",
    "RankingIngestService",
    "RankingRepository",
    "RunOutcome",
    "SqlRankingRepository",
]
