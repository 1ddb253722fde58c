import secrets
import string

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.orm import Session

from hallpass.api.deps import get_current_staff, require_admin
from hallpass.core.errors import NotFoundError
from hallpass.db.session import get_db
from hallpass.models.classroom import Classroom
from hallpass.models.staff import Staff
from hallpass.models.student import Student
from hallpass.schemas.classes import ClassroomCreateRequest, ClassroomOut, StudentCreateRequest, StudentOut

router = APIRouter(prefix="/classes", tags=["classes"])

_CODE_ALPHABET = string.ascii_uppercase + string.digits


def _generate_class_code(length: int = 8) -> str:
    return "".join(secrets.choice(_CODE_ALPHABET) for _ in range(length))


def _get_classroom(db: Session, class_id: str) -> Classroom:
    classroom = db.get(Classroom, class_id)
    if not classroom:
        raise NotFoundError("Class", class_id)
    return classroom


@router.get("", response_model=list[ClassroomOut], dependencies=[Depends(get_current_staff)])
def list_classes(db: Session = Depends(get_db)):
    return db.scalars(select(Classroom).order_by(Classroom.grade_level, Classroom.name)).all()


@router.post("", response_model=ClassroomOut, dependencies=[Depends(require_admin)])
def create_class(payload: ClassroomCreateRequest, db: Session = Depends(get_db)):
    class_code = (payload.class_code or _generate_class_code()).upper()
    if db.scalar(select(Classroom).where(Classroom.class_code == class_code)):
        raise HTTPException(status_code=409, detail="Class code already in use")
    if payload.teacher_id and not db.get(Staff, payload.teacher_id):
        raise NotFoundError("Teacher", payload.teacher_id)

    classroom = Classroom(
        name=payload.name,
        grade_level=payload.grade_level,
        class_code=class_code,
        teacher_id=payload.teacher_id,
    )
    db.add(classroom)
    db.commit()
    db.refresh(classroom)
    return classroom


@router.get("/{class_id}/students", response_model=list[StudentOut], dependencies=[Depends(get_current_staff)])
def list_students(class_id: str, db: Session = Depends(get_db)):
    _get_classroom(db, class_id)
    return db.scalars(
        select(Student).where(Student.class_id == class_id).order_by(Student.last_name, Student.first_name)
    ).all()


@router.post("/{class_id}/students", response_model=StudentOut, dependencies=[Depends(get_current_staff)])
def add_student(class_id: str, payload: StudentCreateRequest, db: Session = Depends(get_db)):
    classroom = _get_classroom(db, class_id)
    student = Student(first_name=payload.first_name, last_name=payload.last_name, class_id=classroom.id)
    db.add(student)
    db.commit()
    db.refresh(student)
    return student
