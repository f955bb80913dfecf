"""Abstract store interface for courses, sections and lectures.

Implementations raise the typed errors from `domain.common.errors`; they never return
partial results. Write operations take the caller's identity token and must not keep it.
"""
from __future__ import annotations
from abc import ABC, abstractmethod
from typing import List, Optional

from course_admin.domain.course.models import Course, CourseDraft
from course_admin.domain.curriculum.models import (
    Lecture,
    LectureInput,
    LecturePatch,
    Section,
    SectionInput,
    SectionPatch,
)


class CurriculumStore(ABC):

    # ------------------------------------------------------------------
    # Courses
    # ------------------------------------------------------------------
    @abstractmethod
    def list_courses(self) -> List[Course]:
        ...

    @abstractmethod
    def get_course(self, course_id: str) -> Course:
        """Raises NotFound when the store has no such course."""
        ...

    @abstractmethod
    def create_course(self, draft: CourseDraft, identity: str) -> Course:
        ...

    @abstractmethod
    def update_course(self, course_id: str, draft: CourseDraft, identity: str) -> Course:
        ...

    @abstractmethod
    def delete_course(self, course_id: str, identity: str) -> None:
        """The store cascades to the course's sections and lectures."""
        ...

    # ------------------------------------------------------------------
    # Sections
    # ------------------------------------------------------------------
    @abstractmethod
    def list_sections(self, course_id: str, identity: Optional[str] = None) -> List[Section]:
        """Return sections with their lectures populated, in store order."""
        ...

    @abstractmethod
    def create_section(self, course_id: str, data: SectionInput, identity: str) -> Section:
        ...

    @abstractmethod
    def update_section(self, section_id: str, patch: SectionPatch, identity: str) -> Section:
        ...

    @abstractmethod
    def delete_section(self, section_id: str, identity: str) -> None:
        ...

    # ------------------------------------------------------------------
    # Lectures
    # ------------------------------------------------------------------
    @abstractmethod
    def create_lecture(self, section_id: str, data: LectureInput, identity: str) -> Lecture:
        ...

    @abstractmethod
    def update_lecture(self, lecture_id: str, patch: LecturePatch, identity: str) -> Lecture:
        ...

    @abstractmethod
    def delete_lecture(self, lecture_id: str, identity: str) -> None:
        ...
