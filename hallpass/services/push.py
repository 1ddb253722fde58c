import logging
from pathlib import Path
from typing import Sequence

import firebase_admin
from firebase_admin import credentials, messaging
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from hallpass.core.config import get_settings
from hallpass.models.device import Device
from hallpass.models.point_record import PointRecord

logger = logging.getLogger(__name__)

_INVALID_TOKEN_ERROR_MARKERS = (
    "not a valid fcm registration token",
    "invalid registration token",
    "registration-token-not-registered",
    "requested entity was not found",
    "unregistered",
)


def _notification_title(points: int) -> str:
    unit = "point" if abs(points) == 1 else "points"
    if points > 0:
        return f"+{points} {unit}!"
    return f"{points} {unit}"


def _notification_body(record: PointRecord, student_name: str | None = None) -> str:
    who = student_name or "Your student"
    line = f"{who} · {record.behavior_name}"
    if record.note:
        line = f"{line}\n{record.note}"
    return f"{line}\nfrom {record.awarded_by_name}"


def class_topic(class_id: str) -> str:
    return f"{get_settings().fcm_topic_prefix}{class_id}"


class PushService:
    def __init__(self) -> None:
        self.settings = get_settings()
        self.enabled = False

        creds_path = Path(self.settings.fcm_service_account_json)
        if not creds_path.exists():
            logger.info("FCM service account is missing (%s), push notifications disabled.", creds_path)
            return

        if not firebase_admin._apps:
            cred = credentials.Certificate(str(creds_path))
            firebase_admin.initialize_app(cred)
        self.enabled = True

    def _build_message(
        self,
        record: PointRecord,
        student_name: str | None = None,
        *,
        topic: str | None = None,
        token: str | None = None,
    ):
        return messaging.Message(
            data={
                "record_id": record.id,
                "student_id": record.student_id,
                "class_id": record.class_id,
                "behavior_id": record.behavior_id,
                "behavior_name": record.behavior_name,
                "points": str(record.points),
                "deep_link": f"hallpass://students/{record.student_id}/points",
                "push_title": _notification_title(record.points),
                "push_body": _notification_body(record, student_name),
            },
            apns=messaging.APNSConfig(headers={"apns-priority": "10"}),
            topic=topic,
            token=token,
        )

    def _collect_device_tokens(self, db: Session | None, student_id: str) -> list[str]:
        if db is None:
            return []
        rows: Sequence[str] = db.scalars(select(Device.fcm_token).where(Device.student_id == student_id)).all()
        return list(dict.fromkeys(token for token in rows if token))

    def _is_invalid_token_error(self, exc: Exception) -> bool:
        message = str(exc).lower()
        return any(marker in message for marker in _INVALID_TOKEN_ERROR_MARKERS)

    def _prune_invalid_tokens(self, db: Session | None, tokens: list[str]) -> int:
        if db is None or not tokens:
            return 0

        unique_tokens = list(dict.fromkeys(token for token in tokens if token))
        rows = db.scalars(select(Device).where(Device.fcm_token.in_(unique_tokens))).all()
        for row in rows:
            db.delete(row)
        if rows:
            db.commit()
            logger.info("Removed %d invalid FCM token(s) from devices table.", len(rows))
        return len(rows)

    def _send_to_topic(self, record: PointRecord, student_name: str | None) -> bool:
        topic = class_topic(record.class_id)
        try:
            messaging.send(self._build_message(record, student_name, topic=topic))
            return True
        except Exception as exc:  # pragma: no cover
            logger.warning("FCM topic send failed for record %s topic=%s: %s", record.id, topic, exc)
            return False

    def _send_to_tokens(
        self,
        record: PointRecord,
        student_name: str | None,
        tokens: list[str],
        db: Session | None = None,
    ) -> int:
        delivered = 0
        invalid_tokens: list[str] = []
        for token in tokens:
            try:
                messaging.send(self._build_message(record, student_name, token=token))
                delivered += 1
            except Exception as exc:  # pragma: no cover
                if self._is_invalid_token_error(exc):
                    invalid_tokens.append(token)
                    logger.info("FCM token is invalid/unregistered for record %s token=%s", record.id, token)
                else:
                    logger.warning("FCM token send failed for record %s token=%s: %s", record.id, token, exc)

        self._prune_invalid_tokens(db, invalid_tokens)
        return delivered

    def send_points_awarded(
        self,
        record: PointRecord,
        student_name: str | None = None,
        db: Session | None = None,
    ) -> None:
        if not self.enabled:
            logger.debug("Push skipped for record %s: service disabled.", record.id)
            return

        tokens = self._collect_device_tokens(db, record.student_id)
        delivered = self._send_to_tokens(record, student_name, tokens, db=db) if tokens else 0

        if delivered == 0:
            if self._send_to_topic(record, student_name):
                logger.info("Push sent to topic for record %s student=%s.", record.id, record.student_id)
            else:
                logger.warning("Push not delivered for record %s: topic and token delivery failed.", record.id)
            return

        logger.info("Push sent to %d device(s) for record %s student=%s.", delivered, record.id, record.student_id)

    def status(self, db: Session) -> dict[str, object]:
        creds_path = Path(self.settings.fcm_service_account_json)
        devices_count = db.scalar(select(func.count()).select_from(Device)) or 0
        return {
            "enabled": self.enabled,
            "fcm_service_account_json": str(creds_path),
            "credentials_exists": creds_path.exists(),
            "topic_prefix": self.settings.fcm_topic_prefix,
            "registered_devices": devices_count,
        }
