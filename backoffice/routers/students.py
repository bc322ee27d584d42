"""Student records — CRUD for the students deployment."""

from fastapi import APIRouter, Depends
from typing import Optional
from backoffice.database import Store
from backoffice.dependencies import get_store, require_session
from backoffice.exceptions import NotFoundError
from backoffice.schemas.student import StudentIn, StudentOut
from backoffice.services import student_service

router = APIRouter(dependencies=[Depends(require_session)])


@router.get("/students", response_model=list[StudentOut], summary="List students")
def list_students(
    search: Optional[str] = None,
    status: Optional[str] = None,
    program: Optional[str] = None,
    store: Store = Depends(get_store),
):
    return student_service.list_students(store, search=search, status=status, program=program)


@router.post("/students", response_model=StudentOut, status_code=201, summary="Enroll a student")
def create_student(body: StudentIn, store: Store = Depends(get_store)):
    return student_service.create_student(store, body.model_dump(exclude_unset=True))


@router.get("/students/{student_id}", response_model=StudentOut, summary="Get a student")
def get_student(student_id: int, store: Store = Depends(get_store)):
    student = student_service.get_student(store, student_id)
    if student is None:
        raise NotFoundError("Student", student_id)
    return student


@router.put("/students/{student_id}", response_model=StudentOut, summary="Update a student")
def update_student(student_id: int, body: StudentIn, store: Store = Depends(get_store)):
    return student_service.update_student(store, student_id, body.model_dump(exclude_unset=True))


@router.delete("/students/{student_id}", summary="Delete a student")
def delete_student(student_id: int, store: Store = Depends(get_store)):
    student_service.delete_student(store, student_id)
    return {"message": "Student deleted", "id": student_id}
