"""Car inventory — CRUD for the cars deployment."""

from fastapi import APIRouter, Depends
from typing import Optional
from backoffice.database import Store
from backoffice.dependencies import get_store, require_session
from backoffice.exceptions import NotFoundError
from backoffice.schemas.car import CarIn, CarOut
from backoffice.services import car_service

router = APIRouter(dependencies=[Depends(require_session)])


@router.get("/cars", response_model=list[CarOut], summary="List cars")
def list_cars(
    search: Optional[str] = None,
    status: Optional[str] = None,
    brand: Optional[str] = None,
    fuel_type: Optional[str] = None,
    store: Store = Depends(get_store),
):
    """Newest first. All filters are optional and combined with AND."""
    return car_service.list_cars(store, search=search, status=status, brand=brand, fuel_type=fuel_type)


@router.post("/cars", response_model=CarOut, status_code=201, summary="Add a car")
def create_car(body: CarIn, store: Store = Depends(get_store)):
    return car_service.create_car(store, body.model_dump(exclude_unset=True))


@router.get("/cars/{car_id}", response_model=CarOut, summary="Get a car")
def get_car(car_id: int, store: Store = Depends(get_store)):
    car = car_service.get_car(store, car_id)
    if car is None:
        raise NotFoundError("Car", car_id)
    return car


@router.put("/cars/{car_id}", response_model=CarOut, summary="Update a car")
def update_car(car_id: int, body: CarIn, store: Store = Depends(get_store)):
    """Only the fields present in the body change."""
    return car_service.update_car(store, car_id, body.model_dump(exclude_unset=True))


@router.delete("/cars/{car_id}", summary="Delete a car")
def delete_car(car_id: int, store: Store = Depends(get_store)):
    car_service.delete_car(store, car_id)
    return {"message": "Car deleted", "id": car_id}
