from datetime import datetime

from pydantic import BaseModel, Field


class ClassroomOut(BaseModel):
    id: str
    name: str
    grade_level: str
    class_code: str
    teacher_id: str | None
    created_at: datetime

    model_config = {"from_attributes": True}


class ClassroomCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=128)
    grade_level: str = Field(..., min_length=1, max_length=32)
    class_code: str | None = Field(default=None, min_length=4, max_length=16)
    teacher_id: str | None = None


class StudentOut(BaseModel):
    id: str
    first_name: str
    last_name: str
    full_name: str
    initials: str
    class_id: str

    model_config = {"from_attributes": True}


class StudentCreateRequest(BaseModel):
    first_name: str = Field(..., min_length=1, max_length=64)
    last_name: str = Field(..., min_length=1, max_length=64)
