from datetime import datetime

from pydantic import BaseModel, Field


class BehaviorOut(BaseModel):
    id: str
    name: str
    points: int
    color: str
    icon: str
    is_positive: bool

    model_config = {"from_attributes": True}


class BehaviorCatalogOut(BaseModel):
    positive: list[BehaviorOut]
    negative: list[BehaviorOut]


class AwardRequest(BaseModel):
    student_ids: list[str] = Field(..., max_length=200)
    behavior_id: str = Field(..., min_length=1, max_length=64)
    note: str | None = Field(default=None, max_length=512)


class PointRecordOut(BaseModel):
    id: str
    student_id: str
    class_id: str
    behavior_id: str
    behavior_name: str
    points: int
    note: str | None
    awarded_by: str
    awarded_by_name: str
    created_at: datetime

    model_config = {"from_attributes": True}


class SummaryOut(BaseModel):
    student_id: str
    class_id: str
    total_points: int
    positive_count: int
    negative_count: int
    last_awarded_at: datetime | None = None

    model_config = {"from_attributes": True}


class AwardFailureOut(BaseModel):
    student_id: str
    reason: str

    model_config = {"from_attributes": True}


class AwardResponse(BaseModel):
    behavior: BehaviorOut
    created: list[PointRecordOut]
    failed: list[AwardFailureOut]
    summaries: list[SummaryOut]


class StudentPointsOut(BaseModel):
    summary: SummaryOut
    history: list[PointRecordOut]


class ResetResponse(BaseModel):
    deleted: int
    summary: SummaryOut
