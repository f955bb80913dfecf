"""Domain service: pure operations over an in-memory curriculum tree.

Every function takes the current list of sections and returns a new list; the input is never
mutated, so a caller can keep the old tree until it decides to commit the new one.
Sorting is stable ascending on the order field: ties keep fetch/insertion order and gaps or
duplicate orders are left as they are.
"""
from __future__ import annotations
import copy
from typing import List

from course_admin.domain.common.result import Result
from course_admin.domain.curriculum.models import CurriculumAggregate, Lecture, LectureType, Section


def format_duration(seconds: int) -> str:
    hours, remainder = divmod(int(seconds or 0), 3600)
    minutes = remainder // 60
    return f"{hours}h {minutes}m" if hours > 0 else f"{minutes}m"


def section_duration_minutes(section: Section) -> int:
    """Whole minutes of video in the section; other lecture types carry no duration."""
    seconds = sum(
        l.video_duration_seconds or 0 for l in section.course_lectures if l.lecture_type is LectureType.VIDEO
    )
    return seconds // 60


class CurriculumDomainService:
    """Pure tree operations, no I/O."""

    def sort_tree(self, sections: List[Section]) -> List[Section]:
        tree = sorted(copy.deepcopy(sections), key=lambda s: s.section_order)
        for section in tree:
            section.course_lectures = sorted(section.course_lectures, key=lambda l: l.lecture_order)
        return tree

    # ------------------------------------------------------------------
    # Sections
    # ------------------------------------------------------------------
    def merge_section(self, sections: List[Section], section: Section) -> List[Section]:
        """Insert `section`, or replace the node with the same id keeping its lectures
        when the store did not send any."""
        tree = copy.deepcopy(sections)
        incoming = copy.deepcopy(section)
        for index, existing in enumerate(tree):
            if existing.id == incoming.id:
                if not incoming.course_lectures:
                    incoming.course_lectures = existing.course_lectures
                    if incoming.duration_minutes is None:
                        incoming.duration_minutes = existing.duration_minutes
                tree[index] = incoming
                break
        else:
            tree.append(incoming)
        return self.sort_tree(tree)

    def remove_section(self, sections: List[Section], section_id: str) -> List[Section]:
        # Lectures go with their section.
        return [copy.deepcopy(s) for s in sections if s.id != section_id]

    # ------------------------------------------------------------------
    # Lectures
    # ------------------------------------------------------------------
    def merge_lecture(self, sections: List[Section], lecture: Lecture) -> List[Section]:
        """Place `lecture` under its owning section, replacing any node with the same id.
        A lecture whose section is not in the tree is dropped from the tree."""
        tree = self.remove_lecture(sections, lecture.id)
        for section in tree:
            if section.id == lecture.section_id:
                section.course_lectures.append(copy.deepcopy(lecture))
                section.duration_minutes = section_duration_minutes(section)
        return self.sort_tree(tree)

    def remove_lecture(self, sections: List[Section], lecture_id: str) -> List[Section]:
        tree = copy.deepcopy(sections)
        for section in tree:
            kept = [l for l in section.course_lectures if l.id != lecture_id]
            if len(kept) != len(section.course_lectures):
                section.course_lectures = kept
                section.duration_minutes = section_duration_minutes(section)
        return tree

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------
    def find_section(self, sections: List[Section], section_id: str) -> Result[Section]:
        for section in sections:
            if section.id == section_id:
                return Result.ok(section)
        return Result.fail(f"Section '{section_id}' not found.", kind="not_found")

    def find_lecture(self, sections: List[Section], lecture_id: str) -> Result[Lecture]:
        for section in sections:
            for lecture in section.course_lectures:
                if lecture.id == lecture_id:
                    return Result.ok(lecture)
        return Result.fail(f"Lecture '{lecture_id}' not found.", kind="not_found")

    def find_lecture_by_title(self, sections: List[Section], section_id: str, title: str) -> Result[Lecture]:
        """Resolve a lecture by title within one section. Refuses to guess between duplicates."""
        section = self.find_section(sections, section_id)
        if not section.is_success:
            return Result.fail(section.error, kind=section.kind)
        wanted = (title or "").strip()
        matches = [l for l in section.value.course_lectures if l.title.strip() == wanted]
        if not matches:
            return Result.fail(f"No lecture titled '{wanted}' in section '{section_id}'.", kind="not_found")
        if len(matches) > 1:
            return Result.fail(
                f"{len(matches)} lectures titled '{wanted}' in section '{section_id}'; "
                "identify the lecture by id.",
                kind="ambiguous",
            )
        return Result.ok(matches[0])

    def aggregate(self, sections: List[Section]) -> CurriculumAggregate:
        """Local view only; never consults the store's denormalized course counters."""
        return CurriculumAggregate(
            section_count=len(sections),
            lecture_count=sum(len(s.course_lectures) for s in sections),
            total_duration_minutes=sum(s.duration_minutes or 0 for s in sections),
        )
