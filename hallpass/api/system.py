from fastapi import APIRouter, Depends
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from hallpass.api.deps import get_current_staff, get_feed, get_push_service
from hallpass.core.config import get_settings
from hallpass.db.session import get_db
from hallpass.models.classroom import Classroom
from hallpass.models.point_record import PointRecord
from hallpass.services.feed import PointsFeed
from hallpass.services.push import PushService

router = APIRouter(tags=["system"])


@router.get("/health")
def health():
    settings = get_settings()
    return {"status": "ok", "version": settings.app_version}


@router.get("/system/info")
def system_info(db: Session = Depends(get_db)):
    settings = get_settings()
    classes_count = db.scalar(select(func.count()).select_from(Classroom)) or 0
    records_count = db.scalar(select(func.count()).select_from(PointRecord)) or 0
    return {
        "app_name": settings.app_name,
        "app_env": settings.app_env,
        "app_version": settings.app_version,
        "classes": classes_count,
        "point_records": records_count,
    }


@router.get("/push/status", dependencies=[Depends(get_current_staff)])
def push_status(db: Session = Depends(get_db), push: PushService = Depends(get_push_service)):
    return push.status(db)


@router.get("/classes/{class_id}/points/live/status", dependencies=[Depends(get_current_staff)])
def live_status(class_id: str, feed: PointsFeed = Depends(get_feed)):
    return {"class_id": class_id, "subscribers": feed.subscriber_count(class_id)}
