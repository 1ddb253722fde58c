import asyncio
import logging

from fastapi import APIRouter, Depends, Query, WebSocket, status
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from hallpass.api.deps import get_catalog, get_current_staff, get_feed, get_points_service, staff_from_token
from hallpass.core.config import get_settings
from hallpass.core.errors import (
    ConfirmationRequiredError,
    HallPassError,
    PermissionDeniedError,
    StudentNotInClassError,
)
from hallpass.db.session import get_db, get_session_factory
from hallpass.models.staff import Staff
from hallpass.services.catalog import BehaviorCatalog
from hallpass.services.feed import PointChange, PointsFeed, SummaryWatcher
from hallpass.services.ledger import StudentPointsSummary
from hallpass.services.points import AwardResult, PointsService
from hallpass.schemas.points import (
    AwardFailureOut,
    AwardRequest,
    AwardResponse,
    BehaviorCatalogOut,
    BehaviorOut,
    PointRecordOut,
    ResetResponse,
    StudentPointsOut,
    SummaryOut,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["points"])


def _history_limit(limit: int | None, default: int) -> int:
    settings = get_settings()
    if limit is None:
        return default
    return max(1, min(limit, settings.max_history_limit))


def _summary_payload(summary: StudentPointsSummary) -> dict:
    return SummaryOut.model_validate(summary).model_dump(mode="json")


@router.get("/behaviors", response_model=BehaviorCatalogOut)
def list_behaviors(catalog: BehaviorCatalog = Depends(get_catalog)):
    return BehaviorCatalogOut(
        positive=[BehaviorOut.model_validate(item) for item in catalog.list_positive()],
        negative=[BehaviorOut.model_validate(item) for item in catalog.list_negative()],
    )


def _award_response(service: PointsService, db: Session, class_id: str, result: AwardResult) -> AwardResponse:
    touched = sorted(set(result.succeeded_ids) | set(result.failed_ids))
    return AwardResponse(
        behavior=BehaviorOut.model_validate(result.behavior),
        created=[PointRecordOut.model_validate(record) for record in result.created],
        failed=[AwardFailureOut.model_validate(failure) for failure in result.failed],
        summaries=[SummaryOut.model_validate(service.student_summary(db, sid, class_id)) for sid in touched],
    )


@router.post("/classes/{class_id}/points", response_model=AwardResponse)
def award_points(
    class_id: str,
    payload: AwardRequest,
    db: Session = Depends(get_db),
    staff: Staff = Depends(get_current_staff),
    service: PointsService = Depends(get_points_service),
):
    result = service.award(
        db,
        student_ids=payload.student_ids,
        class_id=class_id,
        behavior_id=payload.behavior_id,
        actor=staff,
        note=payload.note,
    )
    response = _award_response(service, db, class_id, result)
    if not result.created:
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY,
            content={
                "code": "AWARD_FAILED",
                "message": "No point records were created",
                "details": response.model_dump(mode="json"),
            },
        )
    return response


@router.get(
    "/classes/{class_id}/points/history",
    response_model=list[PointRecordOut],
    dependencies=[Depends(get_current_staff)],
)
def class_points_history(
    class_id: str,
    limit: int | None = Query(default=None, ge=1),
    db: Session = Depends(get_db),
    service: PointsService = Depends(get_points_service),
):
    return service.class_history(db, class_id, limit=_history_limit(limit, get_settings().class_history_limit))


@router.get(
    "/classes/{class_id}/points/summaries",
    response_model=list[SummaryOut],
    dependencies=[Depends(get_current_staff)],
)
def class_points_summaries(
    class_id: str,
    db: Session = Depends(get_db),
    service: PointsService = Depends(get_points_service),
):
    return service.class_summaries(db, class_id)


@router.get(
    "/classes/{class_id}/students/{student_id}/points",
    response_model=StudentPointsOut,
    dependencies=[Depends(get_current_staff)],
)
def student_points(
    class_id: str,
    student_id: str,
    limit: int | None = Query(default=None, ge=1),
    db: Session = Depends(get_db),
    service: PointsService = Depends(get_points_service),
):
    history = service.student_history(
        db,
        student_id,
        class_id,
        limit=_history_limit(limit, get_settings().student_history_limit),
    )
    return StudentPointsOut(
        summary=SummaryOut.model_validate(service.student_summary(db, student_id, class_id)),
        history=[PointRecordOut.model_validate(record) for record in history],
    )


@router.delete(
    "/classes/{class_id}/students/{student_id}/points",
    response_model=ResetResponse,
    dependencies=[Depends(get_current_staff)],
)
def reset_student_points(
    class_id: str,
    student_id: str,
    confirm: bool = Query(default=False),
    db: Session = Depends(get_db),
    service: PointsService = Depends(get_points_service),
):
    if not confirm:
        raise ConfirmationRequiredError(
            "Resetting points deletes the student's history; repeat with confirm=true",
            details={"student_id": student_id, "class_id": class_id},
        )
    result = service.reset(db, student_id, class_id)
    return ResetResponse(deleted=result.deleted, summary=SummaryOut.model_validate(result.summary))


def _open_live_view(
    service: PointsService,
    token: str | None,
    class_id: str,
    student_id: str | None,
    recent_limit: int,
) -> tuple[SummaryWatcher, list[dict]]:
    # short-lived session: an idle socket must not hold a pooled connection
    with get_session_factory()() as db:
        if staff_from_token(db, token) is None:
            raise PermissionDeniedError("Invalid or expired live token")
        student_ids, records = service.load_class_ledger(db, class_id)
        if student_id is not None and student_id not in student_ids:
            raise StudentNotInClassError(student_id, class_id)

        if student_id is None:
            history = service.class_history(db, class_id, limit=recent_limit)
        else:
            history = service.student_history(db, student_id, class_id, limit=recent_limit)
        recent = [PointRecordOut.model_validate(record).model_dump(mode="json") for record in history]
        watcher = SummaryWatcher.from_records(class_id, records, student_ids)
    return watcher, recent


async def _pump_changes(websocket: WebSocket, queue: "asyncio.Queue[PointChange]", watcher: SummaryWatcher) -> None:
    receive_task = asyncio.ensure_future(websocket.receive())
    try:
        while True:
            change_task = asyncio.ensure_future(queue.get())
            done, _ = await asyncio.wait({receive_task, change_task}, return_when=asyncio.FIRST_COMPLETED)

            if change_task in done:
                change = change_task.result()
                summary = watcher.handle(change)
                if summary is not None:
                    await websocket.send_json(
                        {"type": "change", "change": change.to_dict(), "summary": _summary_payload(summary)}
                    )
            else:
                change_task.cancel()

            if receive_task in done:
                message = receive_task.result()
                if message["type"] == "websocket.disconnect":
                    return
                receive_task = asyncio.ensure_future(websocket.receive())
    finally:
        receive_task.cancel()


@router.websocket("/classes/{class_id}/points/live")
async def live_points(
    websocket: WebSocket,
    class_id: str,
    token: str | None = None,
    student_id: str | None = None,
    recent: int | None = None,
    feed: PointsFeed = Depends(get_feed),
    catalog: BehaviorCatalog = Depends(get_catalog),
):
    """Snapshot of summaries and recent records, then one message per change.

    With `student_id` the view is narrowed to that student of the class.
    """
    service = PointsService(catalog=catalog, feed=feed)
    loop = asyncio.get_running_loop()
    queue: asyncio.Queue[PointChange] = asyncio.Queue()

    # subscribe before loading so nothing published in between is lost
    subscription = feed.subscribe(
        class_id,
        lambda change: loop.call_soon_threadsafe(queue.put_nowait, change),
        student_id=student_id,
    )
    try:
        try:
            watcher, recent_records = await run_in_threadpool(
                _open_live_view,
                service,
                token,
                class_id,
                student_id,
                _history_limit(recent, get_settings().live_recent_limit),
            )
        except HallPassError as exc:
            await websocket.close(code=status.WS_1008_POLICY_VIOLATION, reason=exc.message)
            return

        summaries = watcher.summaries if student_id is None else [watcher.summary(student_id)]
        await websocket.accept()
        await websocket.send_json(
            {
                "type": "snapshot",
                "student_id": student_id,
                "summaries": [_summary_payload(item) for item in summaries],
                "recent": recent_records,
            }
        )
        await _pump_changes(websocket, queue, watcher)
    finally:
        subscription.close()
        logger.debug("Live points subscription closed for class %s", class_id)
