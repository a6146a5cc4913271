from __future__ import annotations

import logging
import threading
import uuid
from dataclasses import replace
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from .models import Course


logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


class CourseNotFound(LookupError):
    def __init__(self, course_id: str) -> None:
        super().__init__(f"Course not found: {course_id}")
        self.course_id = course_id


class CourseStore:
    """In-memory course records keyed by id.

    Every operation runs under one lock and is atomic against every other.
    The request handlers call it from the event loop; the lock is only held
    for a dict lookup or a copy of the values and never across an await.
    Records are frozen dataclasses and can be handed out without copying.
    """

    def __init__(self, clock: Optional[Callable[[], datetime]] = None) -> None:
        self._lock = threading.Lock()
        self._courses: dict[str, Course] = {}
        self._clock = clock or _utcnow
        self._last_stamp: Optional[datetime] = None

    def __len__(self) -> int:
        with self._lock:
            return len(self._courses)

    def _stamp(self) -> datetime:
        # Caller holds the lock. Stamps are strictly increasing per store.
        now = self._clock()
        if self._last_stamp is not None and now <= self._last_stamp:
            now = self._last_stamp + timedelta(microseconds=1)
        self._last_stamp = now
        return now

    def _new_id(self) -> str:
        cid = str(uuid.uuid4())
        while cid in self._courses:
            cid = str(uuid.uuid4())
        return cid

    def create(self, draft: Course) -> Course:
        with self._lock:
            now = self._stamp()
            course = replace(draft, id=self._new_id(), created_at=now, updated_at=now)
            self._courses[course.id] = course
        logger.info("Created course %s", course.id)
        return course

    def get(self, course_id: str) -> Course:
        with self._lock:
            course = self._courses.get(course_id)
        if course is None:
            logger.debug("Course %s not found", course_id)
            raise CourseNotFound(course_id)
        return course

    def list(self) -> list[Course]:
        """Snapshot of all live courses in creation order."""
        with self._lock:
            return list(self._courses.values())

    def update(self, course_id: str, draft: Course) -> Course:
        """Replace a course with ``draft``.

        This is a full replace, not a patch: every field comes from ``draft``
        except ``id`` and ``created_at``, which are kept from the stored
        record. Fields the caller leaves at their defaults are stored as such.
        """
        with self._lock:
            existing = self._courses.get(course_id)
            if existing is None:
                raise CourseNotFound(course_id)
            course = replace(
                draft,
                id=existing.id,
                created_at=existing.created_at,
                updated_at=self._stamp(),
            )
            self._courses[course_id] = course
        logger.info("Updated course %s", course_id)
        return course

    def delete(self, course_id: str) -> None:
        with self._lock:
            if self._courses.pop(course_id, None) is None:
                raise CourseNotFound(course_id)
        logger.info("Deleted course %s", course_id)
