"""Student records operations. email is unique and mandatory."""

from datetime import date
from typing import Optional

from backoffice.database import Store
from backoffice.services.repository import EntityDefinition, EntityRepository

GENDERS = ("male", "female")
STUDENT_STATUSES = ("active", "inactive", "graduated", "suspended")

STUDENTS = EntityDefinition(
    name="Student",
    table="students",
    columns=(
        "first_name", "last_name", "email", "date_of_birth", "gender", "phone",
        "address", "enrollment_date", "program", "year_level", "status",
    ),
    required=("first_name", "last_name", "email"),
    defaults={
        "enrollment_date": lambda: date.today().isoformat(),
        "year_level": 1,
        "status": "active",
    },
    choices={
        "gender": GENDERS,
        "status": STUDENT_STATUSES,
    },
    unique="email",
    search_columns=("first_name", "last_name", "email"),
    filters=("status", "program"),
    breakdowns=("program", "year_level"),
)

repository = EntityRepository(STUDENTS)


def list_students(
    store: Store,
    search: Optional[str] = None,
    status: Optional[str] = None,
    program: Optional[str] = None,
) -> list[dict]:
    return repository.list(store, search=search, status=status, program=program)


def get_student(store: Store, student_id: int) -> Optional[dict]:
    return repository.get(store, student_id)


def create_student(store: Store, data: dict) -> dict:
    return repository.create(store, data)


def update_student(store: Store, student_id: int, data: dict) -> dict:
    return repository.update(store, student_id, data)


def delete_student(store: Store, student_id: int):
    repository.delete(store, student_id)


def student_stats(store: Store) -> dict:
    return repository.stats(store)
