"""Top-level API router."""

from fastapi import APIRouter

from targetplan.api.routes.aggregations import router as aggregations_router
from targetplan.api.routes.allocations import router as allocations_router
from targetplan.api.routes.health import router as health_router
from targetplan.api.routes.metrics import router as metrics_router
from targetplan.api.routes.progress import router as progress_router
from targetplan.api.routes.reports import router as reports_router
from targetplan.api.routes.rules import router as rules_router

api_router = APIRouter()
api_router.include_router(health_router, tags=["health"])
api_router.include_router(allocations_router)
api_router.include_router(progress_router)
api_router.include_router(aggregations_router)
api_router.include_router(rules_router)
api_router.include_router(metrics_router)
api_router.include_router(reports_router)
