from functools import lru_cache

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from hallpass.core.errors import PermissionDeniedError
from hallpass.core.security import decode_access_token
from hallpass.db.session import get_db
from hallpass.models.staff import Staff
from hallpass.services.catalog import DEFAULT_CATALOG, BehaviorCatalog
from hallpass.services.feed import PointsFeed
from hallpass.services.points import PointsService
from hallpass.services.push import PushService

bearer_scheme = HTTPBearer(auto_error=False)


def get_current_staff(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> Staff:
    if credentials is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing authorization token")

    token = credentials.credentials
    try:
        payload = decode_access_token(token)
    except jwt.InvalidTokenError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token") from exc

    staff_id = payload.get("sub")
    if not staff_id:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token payload")

    staff = db.get(Staff, staff_id)
    if not staff:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Staff account not found")
    if payload.get("role") != staff.role:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Token role no longer matches account")
    return staff


def staff_from_token(db: Session, token: str | None) -> Staff | None:
    """Non-raising variant of `get_current_staff` for the WebSocket handshake."""
    if not token:
        return None
    try:
        payload = decode_access_token(token)
    except jwt.InvalidTokenError:
        return None
    staff_id = payload.get("sub")
    staff = db.get(Staff, staff_id) if staff_id else None
    if staff is None or payload.get("role") != staff.role:
        return None
    return staff


def require_admin(staff: Staff = Depends(get_current_staff)) -> Staff:
    if not staff.is_admin:
        raise PermissionDeniedError("Admin role required", details={"role": staff.role})
    return staff


def get_catalog() -> BehaviorCatalog:
    return DEFAULT_CATALOG


@lru_cache(maxsize=1)
def get_feed() -> PointsFeed:
    return PointsFeed()


@lru_cache(maxsize=1)
def get_push_service() -> PushService:
    return PushService()


def get_points_service(
    catalog: BehaviorCatalog = Depends(get_catalog),
    feed: PointsFeed = Depends(get_feed),
    push: PushService = Depends(get_push_service),
) -> PointsService:
    return PointsService(catalog=catalog, feed=feed, push=push)


def reset_service_singletons() -> None:
    get_feed.cache_clear()
    get_push_service.cache_clear()
