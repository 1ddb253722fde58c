from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    login: str = Field(..., min_length=1, max_length=128)
    password: str = Field(..., min_length=1, max_length=256)


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"


class StaffOut(BaseModel):
    id: str
    login: str
    display_name: str
    email: str | None
    role: str

    model_config = {"from_attributes": True}
