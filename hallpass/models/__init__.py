from hallpass.models.classroom import Classroom
from hallpass.models.device import Device
from hallpass.models.parent_profile import ParentProfile
from hallpass.models.point_record import PointRecord
from hallpass.models.staff import Staff
from hallpass.models.student import Student

__all__ = [
    "Staff",
    "Classroom",
    "Student",
    "PointRecord",
    "Device",
    "ParentProfile",
]
