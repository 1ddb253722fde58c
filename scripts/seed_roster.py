from pathlib import Path
import sys

from sqlalchemy import select

if __package__ is None or __package__ == "":
    sys.path.append(str(Path(__file__).resolve().parents[1]))

from hallpass.db.session import get_session_factory
from hallpass.models.classroom import Classroom
from hallpass.models.student import Student


DEMO_CLASS_CODE = "DEMO2024"
DEMO_STUDENTS = (
    ("Emma", "Johnson"),
    ("Liam", "Smith"),
    ("Olivia", "Brown"),
    ("Noah", "Davis"),
    ("Ava", "Wilson"),
    ("Mason", "Garcia"),
)


def seed(db) -> tuple[Classroom, int]:
    classroom = db.scalar(select(Classroom).where(Classroom.class_code == DEMO_CLASS_CODE))
    if classroom is None:
        classroom = Classroom(name="Demo Class", grade_level="5th Grade", class_code=DEMO_CLASS_CODE)
        db.add(classroom)
        db.flush()

    existing = {
        (student.first_name, student.last_name)
        for student in db.scalars(select(Student).where(Student.class_id == classroom.id)).all()
    }
    inserted = 0
    for first_name, last_name in DEMO_STUDENTS:
        if (first_name, last_name) in existing:
            continue
        db.add(Student(first_name=first_name, last_name=last_name, class_id=classroom.id))
        inserted += 1
    db.commit()
    return classroom, inserted


def main() -> None:
    session_factory = get_session_factory()
    with session_factory() as db:
        classroom, inserted = seed(db)
        print(f"Class {classroom.name} ({classroom.class_code}): inserted students: {inserted}")


if __name__ == "__main__":
    main()
