from rankings.api.routes.health import router as health_router
from rankings.api.routes.ingest import router as ingest_router
from rankings.api.routes.rankings import router as rankings_router
from rankings.api.routes.runs import router as runs_router

__all__ = ["health_router", "ingest_router", "rankings_router", "runs_router"]
