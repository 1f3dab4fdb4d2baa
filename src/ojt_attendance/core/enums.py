from __future__ import annotations

from enum import Enum


class DayStatus(str, Enum):
    """Trạng thái trong ngày của một thực tập sinh."""

    NOT_STARTED = "not-started"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


class RosterStatus(str, Enum):
    """Trạng thái hiển thị trên bảng tổng hợp của người hướng dẫn."""

    COMPLETE = "Complete"
    MISSING_TIME_OUT = "Missing Time-Out"
    ABSENT = "Absent"


class Role(str, Enum):
    """Vai trò người dùng dùng cho phân quyền."""

    TRAINEE = "ojt"
    HEAD = "head"
