# backoffice/schemas/stats.py
from pydantic import BaseModel
from typing import Any


class BreakdownRow(BaseModel):
    value: Any
    count: int


class StatsOut(BaseModel):
    entity: str
    total: int
    by_status: dict[str, int]
    breakdowns: dict[str, list[BreakdownRow]]
    recent: list[dict[str, Any]]
