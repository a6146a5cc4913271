from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class ZoomSettings:
    host_video: bool = False
    participant_video: bool = False
    join_before_host: bool = False
    mute_upon_entry: bool = False
    waiting_room: bool = False


@dataclass(frozen=True)
class ZoomMeeting:
    meeting_id: str = ""
    join_url: str = ""
    start_time: Optional[datetime] = None
    duration: int = 0  # minutes
    topic: str = ""
    password: Optional[str] = None
    settings: ZoomSettings = field(default_factory=ZoomSettings)


@dataclass(frozen=True)
class LMSInfo:
    lms_id: str = ""
    course_code: str = ""
    section: str = ""
    term: str = ""
    instructor_id: str = ""


@dataclass(frozen=True)
class Course:
    id: str = ""
    name: str = ""
    description: str = ""
    start_date: Optional[datetime] = None  # timezone-aware, UTC
    end_date: Optional[datetime] = None
    zoom_meeting: Optional[ZoomMeeting] = None
    lms_info: Optional[LMSInfo] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
