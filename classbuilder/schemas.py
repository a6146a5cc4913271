from __future__ import annotations

from datetime import datetime, timezone
from typing import Annotated, Any, Optional

from pydantic import (
    AfterValidator,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    PlainSerializer,
    StrictBool,
    StrictInt,
    StrictStr,
    model_validator,
)
from pydantic.alias_generators import to_camel

from .models import Course, LMSInfo, ZoomMeeting, ZoomSettings


# Unset timestamps go out as the zero time so dates are always strings on the wire
ZERO_TIME = datetime(1, 1, 1, tzinfo=timezone.utc)


def _timestamp_input(v: Any) -> Any:
    if isinstance(v, (str, datetime)):
        return v
    raise ValueError("expected a timestamp string")


def _to_utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    try:
        return dt.astimezone(timezone.utc)
    except OverflowError:
        raise ValueError("timestamp out of range") from None


def _fmt_timestamp(dt: datetime) -> str:
    return _to_utc(dt).isoformat().replace("+00:00", "Z")


Timestamp = Annotated[
    datetime,
    BeforeValidator(_timestamp_input),
    AfterValidator(_to_utc),
    PlainSerializer(_fmt_timestamp, return_type=str, when_used="json"),
]


class WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    @model_validator(mode="before")
    @classmethod
    def drop_nulls(cls, data: Any) -> Any:
        # null is the same as leaving the field out
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data


class ZoomSettingsSchema(WireModel):
    host_video: StrictBool = False
    participant_video: StrictBool = False
    join_before_host: StrictBool = False
    mute_upon_entry: StrictBool = False
    waiting_room: StrictBool = False

    def to_domain(self) -> ZoomSettings:
        return ZoomSettings(**self.model_dump())

    @classmethod
    def from_domain(cls, settings: ZoomSettings) -> ZoomSettingsSchema:
        return cls(
            host_video=settings.host_video,
            participant_video=settings.participant_video,
            join_before_host=settings.join_before_host,
            mute_upon_entry=settings.mute_upon_entry,
            waiting_room=settings.waiting_room,
        )


class ZoomMeetingSchema(WireModel):
    meeting_id: StrictStr = ""
    join_url: StrictStr = ""
    start_time: Optional[Timestamp] = None
    duration: StrictInt = 0  # minutes
    topic: StrictStr = ""
    password: Optional[StrictStr] = None
    settings: ZoomSettingsSchema = Field(default_factory=ZoomSettingsSchema)

    def to_domain(self) -> ZoomMeeting:
        return ZoomMeeting(
            meeting_id=self.meeting_id,
            join_url=self.join_url,
            start_time=self.start_time,
            duration=self.duration,
            topic=self.topic,
            password=self.password or None,
            settings=self.settings.to_domain(),
        )

    @classmethod
    def from_domain(cls, zm: ZoomMeeting) -> ZoomMeetingSchema:
        return cls(
            meeting_id=zm.meeting_id,
            join_url=zm.join_url,
            start_time=zm.start_time or ZERO_TIME,
            duration=zm.duration,
            topic=zm.topic,
            password=zm.password,
            settings=ZoomSettingsSchema.from_domain(zm.settings),
        )


class LMSInfoSchema(WireModel):
    lms_id: StrictStr = ""
    course_code: StrictStr = ""
    section: StrictStr = ""
    term: StrictStr = ""
    instructor_id: StrictStr = ""

    def to_domain(self) -> LMSInfo:
        return LMSInfo(**self.model_dump())

    @classmethod
    def from_domain(cls, info: LMSInfo) -> LMSInfoSchema:
        return cls(
            lms_id=info.lms_id,
            course_code=info.course_code,
            section=info.section,
            term=info.term,
            instructor_id=info.instructor_id,
        )


class CourseIn(WireModel):
    """Course body accepted on create and update.

    ``id``, ``createdAt`` and ``updatedAt`` are server-owned; unknown keys,
    these included, are ignored.
    """

    name: StrictStr = ""
    description: StrictStr = ""
    start_date: Optional[Timestamp] = None
    end_date: Optional[Timestamp] = None
    zoom_meeting: Optional[ZoomMeetingSchema] = None
    lms_info: Optional[LMSInfoSchema] = None

    def to_course(self) -> Course:
        return Course(
            name=self.name,
            description=self.description,
            start_date=self.start_date,
            end_date=self.end_date,
            zoom_meeting=self.zoom_meeting.to_domain() if self.zoom_meeting is not None else None,
            lms_info=self.lms_info.to_domain() if self.lms_info is not None else None,
        )


class CourseOut(CourseIn):
    id: StrictStr
    created_at: Timestamp
    updated_at: Timestamp

    @classmethod
    def from_course(cls, course: Course) -> CourseOut:
        return cls(
            id=course.id,
            name=course.name,
            description=course.description,
            start_date=course.start_date or ZERO_TIME,
            end_date=course.end_date or ZERO_TIME,
            zoom_meeting=(
                ZoomMeetingSchema.from_domain(course.zoom_meeting)
                if course.zoom_meeting is not None
                else None
            ),
            lms_info=(
                LMSInfoSchema.from_domain(course.lms_info) if course.lms_info is not None else None
            ),
            created_at=course.created_at,
            updated_at=course.updated_at,
        )
