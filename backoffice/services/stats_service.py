"""Dashboard aggregates for the entity a deployment manages."""

from backoffice.database import Store
from backoffice.services import car_service, student_service

STATS_BY_DEPLOYMENT = {
    "cars": car_service.car_stats,
    "students": student_service.student_stats,
}


def get_stats(store: Store, deployment: str) -> dict:
    return STATS_BY_DEPLOYMENT[deployment](store)
