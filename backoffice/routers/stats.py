"""Dashboard: counts, breakdowns and latest rows for the deployment's entity."""

from fastapi import APIRouter, Depends
from backoffice.config import Settings
from backoffice.database import Store
from backoffice.dependencies import get_settings, get_store, require_session
from backoffice.schemas.stats import StatsOut
from backoffice.services.stats_service import get_stats

router = APIRouter(dependencies=[Depends(require_session)])


@router.get("/stats", response_model=StatsOut, summary="Dashboard statistics")
def dashboard_stats(store: Store = Depends(get_store), app_settings: Settings = Depends(get_settings)):
    return get_stats(store, app_settings.DEPLOYMENT)
