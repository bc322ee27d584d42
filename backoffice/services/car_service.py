"""
Car inventory operations.
Used by the cars router and the dashboard stats.
"""

from typing import Optional

from backoffice.database import Store
from backoffice.services.repository import EntityDefinition, EntityRepository

FUEL_TYPES = ("essence", "diesel", "hybride", "electrique", "gpl")
TRANSMISSIONS = ("manuelle", "automatique")
CAR_STATUSES = ("disponible", "vendu", "reserve", "maintenance")

CARS = EntityDefinition(
    name="Car",
    table="cars",
    columns=(
        "brand", "model", "year", "color", "license_plate", "mileage", "fuel_type",
        "transmission", "price", "doors", "horsepower", "description", "status",
    ),
    required=("brand", "model", "year"),
    defaults={
        "mileage": 0,
        "fuel_type": "essence",
        "transmission": "manuelle",
        "doors": 4,
        "status": "disponible",
    },
    choices={
        "fuel_type": FUEL_TYPES,
        "transmission": TRANSMISSIONS,
        "status": CAR_STATUSES,
    },
    unique="license_plate",
    search_columns=("brand", "model", "license_plate"),
    filters=("status", "brand", "fuel_type"),
    breakdowns=("brand", "fuel_type"),
)

repository = EntityRepository(CARS)


def list_cars(
    store: Store,
    search: Optional[str] = None,
    status: Optional[str] = None,
    brand: Optional[str] = None,
    fuel_type: Optional[str] = None,
) -> list[dict]:
    """Newest first. search matches brand, model or plate; the rest are exact matches."""
    return repository.list(store, search=search, status=status, brand=brand, fuel_type=fuel_type)


def get_car(store: Store, car_id: int) -> Optional[dict]:
    return repository.get(store, car_id)


def create_car(store: Store, data: dict) -> dict:
    return repository.create(store, data)


def update_car(store: Store, car_id: int, data: dict) -> dict:
    return repository.update(store, car_id, data)


def delete_car(store: Store, car_id: int):
    repository.delete(store, car_id)


def car_stats(store: Store) -> dict:
    return repository.stats(store)
