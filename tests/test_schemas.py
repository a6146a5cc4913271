from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from classbuilder.models import Course, LMSInfo, ZoomMeeting, ZoomSettings
from classbuilder.schemas import ZERO_TIME, CourseIn, CourseOut


def _dump(course: Course) -> dict:
    return CourseOut.from_course(course).model_dump(mode="json", by_alias=True, exclude_none=True)


def test_parse_minimal_course():
    course = CourseIn.model_validate(
        {"name": "Algebra I", "startDate": "2024-01-08", "endDate": "2024-05-10"}
    ).to_course()
    assert course.name == "Algebra I"
    assert course.description == ""
    assert course.start_date == datetime(2024, 1, 8, tzinfo=timezone.utc)
    assert course.end_date == datetime(2024, 5, 10, tzinfo=timezone.utc)
    assert course.zoom_meeting is None
    assert course.lms_info is None


def test_parse_ignores_server_owned_fields():
    course = CourseIn.model_validate(
        {
            "id": "abc",
            "name": "x",
            "createdAt": "2020-01-01T00:00:00Z",
            "updatedAt": "2020-01-01T00:00:00Z",
            "unknown": 1,
        }
    ).to_course()
    assert course.id == ""
    assert course.created_at is None
    assert course.updated_at is None


def test_parse_timestamps_normalised_to_utc():
    course = CourseIn.model_validate(
        {
            "startDate": "2024-01-08T09:30:00+01:00",
            "endDate": "2024-05-10T16:00:00",
        }
    ).to_course()
    assert course.start_date == datetime(2024, 1, 8, 8, 30, tzinfo=timezone.utc)
    assert course.start_date.utcoffset() == timedelta(0)
    assert course.end_date == datetime(2024, 5, 10, 16, 0, tzinfo=timezone.utc)


def test_parse_nested_payloads():
    course = CourseIn.model_validate(
        {
            "name": "Algebra I",
            "zoomMeeting": {
                "meetingId": "987",
                "joinUrl": "https://zoom.example/j/987",
                "startTime": "2024-01-08T15:00:00Z",
                "duration": 50,
                "topic": "Algebra",
                "settings": {"hostVideo": True, "muteUponEntry": True},
            },
            "lmsInfo": {
                "lmsId": "c-1",
                "courseCode": "MATH101",
                "section": "02",
                "term": "Spring 2024",
                "instructorId": "i-7",
            },
        }
    ).to_course()
    assert course.zoom_meeting == ZoomMeeting(
        meeting_id="987",
        join_url="https://zoom.example/j/987",
        start_time=datetime(2024, 1, 8, 15, 0, tzinfo=timezone.utc),
        duration=50,
        topic="Algebra",
        password=None,
        settings=ZoomSettings(host_video=True, mute_upon_entry=True),
    )
    assert course.lms_info == LMSInfo(
        lms_id="c-1", course_code="MATH101", section="02", term="Spring 2024", instructor_id="i-7"
    )


def test_parse_nulls_fall_back_to_defaults():
    course = CourseIn.model_validate(
        {"name": None, "startDate": None, "zoomMeeting": None, "lmsInfo": None}
    ).to_course()
    assert course == Course()


def test_empty_password_is_dropped():
    course = CourseIn.model_validate({"zoomMeeting": {"password": ""}}).to_course()
    assert course.zoom_meeting.password is None


@pytest.mark.parametrize(
    "payload, match",
    [
        ([], "valid dictionary"),
        ("text", "valid dictionary"),
        ({"name": 5}, "name"),
        ({"startDate": "next tuesday"}, "startDate"),
        ({"startDate": 1704700800}, "startDate"),
        ({"zoomMeeting": "abc"}, "zoomMeeting"),
        ({"zoomMeeting": {"duration": "60"}}, "zoomMeeting.duration"),
        ({"zoomMeeting": {"duration": True}}, "zoomMeeting.duration"),
        ({"zoomMeeting": {"settings": {"waitingRoom": "yes"}}}, "zoomMeeting.settings.waitingRoom"),
        ({"lmsInfo": {"term": 2024}}, "lmsInfo.term"),
    ],
)
def test_parse_rejects_malformed(payload, match):
    with pytest.raises(ValidationError, match=match):
        CourseIn.model_validate(payload)


def test_timestamp_before_year_one_in_utc_is_rejected():
    with pytest.raises(ValidationError, match="startDate"):
        CourseIn.model_validate({"name": "x", "startDate": "0001-01-01T00:00:00+01:00"})


def test_course_out_field_names():
    course = Course(
        id="c1",
        name="Algebra I",
        description="Intro",
        start_date=datetime(2024, 1, 8, tzinfo=timezone.utc),
        end_date=None,
        created_at=datetime(2024, 1, 1, 12, 0, 0, 5, tzinfo=timezone.utc),
        updated_at=datetime(2024, 1, 1, 12, 0, 0, 5, tzinfo=timezone.utc),
    )
    assert _dump(course) == {
        "id": "c1",
        "name": "Algebra I",
        "description": "Intro",
        "startDate": "2024-01-08T00:00:00Z",
        "endDate": "0001-01-01T00:00:00Z",
        "createdAt": "2024-01-01T12:00:00.000005Z",
        "updatedAt": "2024-01-01T12:00:00.000005Z",
    }


def test_course_out_nested():
    now = datetime(2024, 1, 1, tzinfo=timezone.utc)
    course = Course(
        id="c1",
        zoom_meeting=ZoomMeeting(meeting_id="1", duration=30, password="secret"),
        lms_info=LMSInfo(course_code="MATH101"),
        created_at=now,
        updated_at=now,
    )
    out = _dump(course)
    assert out["zoomMeeting"] == {
        "meetingId": "1",
        "joinUrl": "",
        "startTime": "0001-01-01T00:00:00Z",
        "duration": 30,
        "topic": "",
        "password": "secret",
        "settings": {
            "hostVideo": False,
            "participantVideo": False,
            "joinBeforeHost": False,
            "muteUponEntry": False,
            "waitingRoom": False,
        },
    }
    assert out["lmsInfo"]["courseCode"] == "MATH101"

    bare = _dump(Course(id="c2", zoom_meeting=ZoomMeeting(), created_at=now, updated_at=now))
    assert "password" not in bare["zoomMeeting"]
    assert "lmsInfo" not in bare


def test_zero_time_reads_back():
    course = CourseIn.model_validate({"startDate": "0001-01-01T00:00:00Z"}).to_course()
    assert course.start_date == ZERO_TIME
