from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.orm import Session

from hallpass.api.deps import get_current_staff
from hallpass.core.errors import NotFoundError
from hallpass.db.session import get_db
from hallpass.models.classroom import Classroom
from hallpass.models.parent_profile import ParentProfile
from hallpass.models.staff import Staff
from hallpass.schemas.parents import (
    ParentFlagRequest,
    ParentMessageRequest,
    ParentMessageResponse,
    ParentProfileCreateRequest,
    ParentProfileOut,
)
from hallpass.services import parent_score

router = APIRouter(tags=["parents"], dependencies=[Depends(get_current_staff)])


def _profile_out(profile: ParentProfile) -> ParentProfileOut:
    score = parent_score.profile_score(profile)
    return ParentProfileOut(
        id=profile.id,
        parent_name=profile.parent_name,
        parent_email=profile.parent_email,
        class_id=profile.class_id,
        positive_messages=profile.positive_messages,
        neutral_messages=profile.neutral_messages,
        negative_messages=profile.negative_messages,
        total_messages=profile.total_messages,
        hostility_score=round(score, 1),
        hostility_level=parent_score.level_for_score(score).value,
        is_flagged=profile.is_flagged,
        flag_reason=profile.flag_reason,
        flagged_at=profile.flagged_at,
        admin_cc_enabled=profile.admin_cc_enabled,
        should_cc_admin=parent_score.should_cc_admin(score, profile.is_flagged),
    )


def _get_profile(db: Session, profile_id: str) -> ParentProfile:
    profile = db.get(ParentProfile, profile_id)
    if not profile:
        raise NotFoundError("Parent profile", profile_id)
    return profile


@router.get("/classes/{class_id}/parents", response_model=list[ParentProfileOut])
def list_parent_profiles(class_id: str, flagged: bool | None = None, db: Session = Depends(get_db)):
    if not db.get(Classroom, class_id):
        raise NotFoundError("Class", class_id)
    stmt = select(ParentProfile).where(ParentProfile.class_id == class_id)
    if flagged is not None:
        stmt = stmt.where(ParentProfile.is_flagged == flagged)
    profiles = db.scalars(stmt.order_by(ParentProfile.parent_name)).all()
    return [_profile_out(profile) for profile in profiles]


@router.post("/classes/{class_id}/parents", response_model=ParentProfileOut)
def create_parent_profile(class_id: str, payload: ParentProfileCreateRequest, db: Session = Depends(get_db)):
    if not db.get(Classroom, class_id):
        raise NotFoundError("Class", class_id)
    profile = ParentProfile(
        parent_name=payload.parent_name,
        parent_email=payload.parent_email,
        class_id=class_id,
        positive_messages=0,
        neutral_messages=0,
        negative_messages=0,
        is_flagged=False,
        admin_cc_enabled=False,
    )
    db.add(profile)
    db.commit()
    db.refresh(profile)
    return _profile_out(profile)


@router.post("/parents/{profile_id}/messages", response_model=ParentMessageResponse)
def record_parent_message(profile_id: str, payload: ParentMessageRequest, db: Session = Depends(get_db)):
    profile = _get_profile(db, profile_id)
    sentiment = parent_score.analyze_sentiment(payload.text)
    parent_score.record_message(profile, sentiment)
    db.add(profile)
    db.commit()
    db.refresh(profile)
    return ParentMessageResponse(sentiment=sentiment.value, profile=_profile_out(profile))


@router.post("/parents/{profile_id}/flag", response_model=ParentProfileOut)
def flag_parent(
    profile_id: str,
    payload: ParentFlagRequest,
    db: Session = Depends(get_db),
    staff: Staff = Depends(get_current_staff),
):
    profile = _get_profile(db, profile_id)
    parent_score.flag_profile(profile, staff_id=staff.id, reason=payload.reason)
    db.add(profile)
    db.commit()
    db.refresh(profile)
    return _profile_out(profile)


@router.delete("/parents/{profile_id}/flag", response_model=ParentProfileOut)
def unflag_parent(profile_id: str, db: Session = Depends(get_db)):
    profile = _get_profile(db, profile_id)
    parent_score.unflag_profile(profile)
    db.add(profile)
    db.commit()
    db.refresh(profile)
    return _profile_out(profile)
