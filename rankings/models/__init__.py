from rankings.models.base import Base
from rankings.models.rankings import ExternalRanking
from rankings.models.runs import ScrapingRun
from rankings.models.audit import AuditLog

__all__ = [
    "Base",
    "ExternalRanking",
    "ScrapingRun",
    "AuditLog",
]
