from dataclasses import dataclass
from typing import Literal

from hallpass.core.config import Settings, get_settings

Role = Literal["admin", "teacher", "parent"]


@dataclass(frozen=True)
class RolePolicy:
    """Guesses an account role from its email address.

    Exact addresses win over substring markers; anything unmatched is a parent.
    """

    teacher_emails: tuple[str, ...] = ()
    teacher_markers: tuple[str, ...] = ()

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "RolePolicy":
        settings = settings or get_settings()
        return cls(
            teacher_emails=tuple(settings.teacher_emails_list),
            teacher_markers=tuple(settings.teacher_email_markers_list),
        )

    def infer(self, email: str) -> Role:
        normalized = email.strip().lower()
        if normalized in self.teacher_emails:
            return "teacher"
        if "@" in normalized:
            domain = normalized.split("@", 1)[1]
            if any(marker in domain for marker in self.teacher_markers if marker.startswith(".")):
                return "teacher"
        if any(marker in normalized for marker in self.teacher_markers if not marker.startswith(".")):
            return "teacher"
        return "parent"
