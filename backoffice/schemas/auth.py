# backoffice/schemas/auth.py
from pydantic import BaseModel
from typing import Optional


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class AccountOut(BaseModel):
    id: int
    name: str
    email: str
    role: str
