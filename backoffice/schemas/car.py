# backoffice/schemas/car.py
from pydantic import BaseModel
from typing import Optional


class CarIn(BaseModel):
    """Body for POST and PUT. Required fields are checked by the service (400, not 422)."""
    brand: Optional[str] = None
    model: Optional[str] = None
    year: Optional[int] = None
    color: Optional[str] = None
    license_plate: Optional[str] = None
    mileage: Optional[int] = None
    fuel_type: Optional[str] = None        # essence | diesel | hybride | electrique | gpl
    transmission: Optional[str] = None     # manuelle | automatique
    price: Optional[float] = None
    doors: Optional[int] = None
    horsepower: Optional[int] = None
    description: Optional[str] = None
    status: Optional[str] = None           # disponible | vendu | reserve | maintenance


class CarOut(BaseModel):
    id: int
    brand: str
    model: str
    year: int
    color: Optional[str]
    license_plate: Optional[str]
    mileage: Optional[int]
    fuel_type: Optional[str]
    transmission: Optional[str]
    price: Optional[float]
    doors: Optional[int]
    horsepower: Optional[int]
    description: Optional[str]
    status: Optional[str]
    created_at: Optional[str]
    updated_at: Optional[str]
