# backoffice/schemas/student.py
from pydantic import BaseModel
from typing import Optional


class StudentIn(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    date_of_birth: Optional[str] = None    # YYYY-MM-DD
    gender: Optional[str] = None           # male | female
    phone: Optional[str] = None
    address: Optional[str] = None
    program: Optional[str] = None
    year_level: Optional[int] = None
    status: Optional[str] = None           # active | inactive | graduated | suspended


class StudentOut(BaseModel):
    id: int
    first_name: str
    last_name: str
    email: str
    date_of_birth: Optional[str]
    gender: Optional[str]
    phone: Optional[str]
    address: Optional[str]
    enrollment_date: Optional[str]
    program: Optional[str]
    year_level: Optional[int]
    status: Optional[str]
    created_at: Optional[str]
    updated_at: Optional[str]
