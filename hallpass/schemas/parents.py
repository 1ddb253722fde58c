from datetime import datetime

from pydantic import BaseModel, Field


class ParentProfileCreateRequest(BaseModel):
    parent_name: str = Field(..., min_length=1, max_length=128)
    parent_email: str | None = Field(default=None, max_length=255)


class ParentMessageRequest(BaseModel):
    text: str = Field(..., min_length=1, max_length=5000)


class ParentFlagRequest(BaseModel):
    reason: str = Field(..., min_length=1, max_length=512)


class ParentProfileOut(BaseModel):
    id: str
    parent_name: str
    parent_email: str | None
    class_id: str
    positive_messages: int
    neutral_messages: int
    negative_messages: int
    total_messages: int
    hostility_score: float
    hostility_level: str
    is_flagged: bool
    flag_reason: str | None
    flagged_at: datetime | None
    admin_cc_enabled: bool
    should_cc_admin: bool


class ParentMessageResponse(BaseModel):
    sentiment: str
    profile: ParentProfileOut
