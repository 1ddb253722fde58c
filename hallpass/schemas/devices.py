from typing import Literal

from pydantic import BaseModel, Field


class DeviceRegisterRequest(BaseModel):
    fcm_token: str = Field(..., min_length=8, max_length=1024)
    platform: Literal["ios", "android", "web"] = "ios"
    student_id: str | None = None


class DeviceRegisterResponse(BaseModel):
    ok: bool
