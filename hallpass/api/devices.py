from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.orm import Session

from hallpass.core.errors import NotFoundError
from hallpass.db.session import get_db
from hallpass.models.device import Device
from hallpass.models.student import Student
from hallpass.schemas.devices import DeviceRegisterRequest, DeviceRegisterResponse

router = APIRouter(prefix="/devices", tags=["devices"])


@router.post("/register", response_model=DeviceRegisterResponse)
def register_device(payload: DeviceRegisterRequest, db: Session = Depends(get_db)):
    if payload.student_id and not db.get(Student, payload.student_id):
        raise NotFoundError("Student", payload.student_id)

    existing = db.scalar(select(Device).where(Device.fcm_token == payload.fcm_token))
    if existing:
        existing.platform = payload.platform
        existing.student_id = payload.student_id
        db.add(existing)
    else:
        db.add(Device(fcm_token=payload.fcm_token, platform=payload.platform, student_id=payload.student_id))
    db.commit()
    return DeviceRegisterResponse(ok=True)
