"""Application service for course records: orchestrates validate → store → result."""
from __future__ import annotations
import logging
from typing import Any, List, Mapping, Optional

from course_admin.domain.course.models import Course, CourseFilter
from course_admin.domain.course.rules import build_course_draft, validate_course_partial
from course_admin.persistence.interfaces.curriculum_store import CurriculumStore

logger = logging.getLogger(__name__)


class CourseRecordManager:
    """Course metadata (pricing, descriptive lists, status), independent of curriculum."""

    def __init__(self, store: CurriculumStore):
        self._store = store

    # ------------------------------------------------------------------
    # READ
    # ------------------------------------------------------------------
    def list(self, course_filter: Optional[CourseFilter] = None) -> List[Course]:
        courses = self._store.list_courses()
        if course_filter is None:
            return courses
        return [c for c in courses if course_filter.matches(c)]

    def get(self, course_id: str) -> Course:
        return self._store.get_course(course_id)

    # ------------------------------------------------------------------
    # CREATE
    # ------------------------------------------------------------------
    def create(self, data: Mapping[str, Any], identity: str) -> Course:
        draft = build_course_draft(data).unwrap()
        course = self._store.create_course(draft, identity)
        logger.info("Created course %s (%s)", course.id, course.title)
        return course

    # ------------------------------------------------------------------
    # UPDATE
    # ------------------------------------------------------------------
    def update(self, course_id: str, partial: Mapping[str, Any], identity: str) -> Course:
        validate_course_partial(partial).unwrap()
        current = self._store.get_course(course_id)
        draft = build_course_draft(partial, base=current.to_draft()).unwrap()
        course = self._store.update_course(course_id, draft, identity)
        logger.info("Updated course %s", course_id)
        return course

    # ------------------------------------------------------------------
    # DELETE
    # ------------------------------------------------------------------
    def delete(self, course_id: str, identity: str) -> None:
        # The store cascades to sections and lectures; not verified here.
        self._store.delete_course(course_id, identity)
        logger.info("Deleted course %s", course_id)
