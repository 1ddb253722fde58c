from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from hallpass.api.deps import get_current_staff
from hallpass.core.security import create_access_token, verify_password
from hallpass.db.session import get_db
from hallpass.models.staff import Staff
from hallpass.schemas.auth import LoginRequest, StaffOut, TokenResponse

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=TokenResponse)
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    staff = db.scalar(select(Staff).where(Staff.login == payload.login))
    if not staff or not verify_password(payload.password, staff.password_hash):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid login or password")

    token = create_access_token(subject=staff.id, role=staff.role)
    return TokenResponse(access_token=token)


@router.get("/me", response_model=StaffOut)
def me(staff: Staff = Depends(get_current_staff)):
    return staff
