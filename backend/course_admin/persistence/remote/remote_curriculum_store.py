"""Remote implementation of CurriculumStore over the store's REST API."""
from __future__ import annotations
from dataclasses import asdict
from typing import Any, Dict, List, Optional

from course_admin.domain.common.errors import NotFound, StoreError
from course_admin.domain.course.models import Course, CourseDraft
from course_admin.domain.course.rules import split_lines, split_tags, LIST_FIELDS
from course_admin.domain.curriculum.models import (
    Lecture,
    LectureInput,
    LecturePatch,
    LectureType,
    Section,
    SectionInput,
    SectionPatch,
)
from course_admin.persistence.interfaces.curriculum_store import CurriculumStore
from course_admin.persistence.remote.client import StoreClient


def _unwrap(data: Any, key: str) -> Any:
    """Entity payloads arrive either bare or wrapped as {key: ...}."""
    if isinstance(data, dict) and key in data:
        return data[key]
    return data


def _entity(data: Any, key: str) -> Dict[str, Any]:
    row = _unwrap(data, key)
    if not isinstance(row, dict) or "id" not in row:
        raise StoreError(f"Store response did not contain a {key} record.", details=data)
    return row


def _int_or_none(value: Any) -> Optional[int]:
    return int(value) if value is not None else None


def _mapped(mapper, row: Any):
    """Run a row mapper, turning a malformed row into a StoreError."""
    try:
        return mapper(row)
    except (KeyError, ValueError, TypeError, AttributeError) as e:
        raise StoreError(f"Store returned a malformed record: {e!r}.", details=row) from e


def _rows(data: Any, key: str) -> List[Any]:
    rows = _unwrap(data, key) or []
    if not isinstance(rows, list):
        raise StoreError(f"Store response did not contain a {key} list.", details=data)
    return rows


def _row_to_lecture(row: Dict[str, Any]) -> Lecture:
    try:
        lecture_type = LectureType(row.get("lecture_type") or "video")
    except ValueError as e:
        raise StoreError(f"Store returned unknown lecture type {row.get('lecture_type')!r}.") from e
    return Lecture(
        id=str(row["id"]),
        section_id=str(row["section_id"]),
        course_id=str(row.get("course_id") or ""),
        title=row.get("title") or "",
        description=row.get("description"),
        lecture_type=lecture_type,
        video_url=row.get("video_url"),
        video_duration_seconds=_int_or_none(row.get("video_duration_seconds")),
        article_content=row.get("article_content"),
        resource_url=row.get("resource_url"),
        lecture_order=int(row.get("lecture_order") or 0),
        is_preview=bool(row.get("is_preview", False)),
        is_free=bool(row.get("is_free", False)),
    )


def _owned_by(lecture_row: Dict[str, Any], section_row: Dict[str, Any]) -> Dict[str, Any]:
    """Nested lecture rows may leave out the ids of the section they sit in."""
    row = dict(lecture_row)
    row["section_id"] = row.get("section_id") or section_row["id"]
    row["course_id"] = row.get("course_id") or section_row.get("course_id")
    return row


def _row_to_section(row: Dict[str, Any]) -> Section:
    return Section(
        id=str(row["id"]),
        course_id=str(row.get("course_id") or ""),
        title=row.get("title") or "",
        description=row.get("description"),
        section_order=int(row.get("section_order") or 0),
        duration_minutes=_int_or_none(row.get("duration_minutes")),
        course_lectures=[_row_to_lecture(_owned_by(l, row)) for l in row.get("course_lectures") or []],
    )


def _row_to_course(row: Dict[str, Any]) -> Course:
    def _price(value: Any) -> Optional[float]:
        return float(value) if value is not None else None

    return Course(
        id=str(row["id"]),
        title=row.get("title") or "",
        subtitle=row.get("subtitle"),
        description=row.get("description") or "",
        category=row.get("category") or "",
        level=row.get("level") or "",
        language=row.get("language") or "English",
        duration=row.get("duration") or "",
        price=_price(row.get("price")) or 0.0,
        original_price=_price(row.get("original_price")),
        thumbnail_image=row.get("thumbnail_image"),
        preview_video_url=row.get("preview_video_url"),
        instructor_name=row.get("instructor_name") or "",
        instructor_bio=row.get("instructor_bio"),
        tags=split_tags(row.get("tags")),
        status=row.get("status") or "draft",
        featured=bool(row.get("featured", False)),
        created_by=row.get("created_by"),
        created_at=row.get("created_at") or "",
        updated_at=row.get("updated_at") or "",
        total_sections=_int_or_none(row.get("total_sections")),
        total_lectures=_int_or_none(row.get("total_lectures")),
        rating=_price(row.get("rating")),
        total_reviews=_int_or_none(row.get("total_reviews")),
        total_students=_int_or_none(row.get("total_students")),
        **{name: split_lines(row.get(name)) for name in LIST_FIELDS},
    )


def _section_body(title: Optional[str], order: Optional[int], description: Optional[str]) -> Dict[str, Any]:
    body: Dict[str, Any] = {"title": title, "description": description, "section_order": order}
    return {k: v for k, v in body.items() if v is not None}


def _lecture_body(data) -> Dict[str, Any]:
    body = asdict(data)
    body["lecture_order"] = body.pop("order")
    return {k: v for k, v in body.items() if v is not None}


class RemoteCurriculumStore(CurriculumStore):

    def __init__(self, client: StoreClient):
        self._client = client

    # ------------------------------------------------------------------
    # Courses
    # ------------------------------------------------------------------
    def list_courses(self) -> List[Course]:
        data = self._client.get("/courses")
        return [_mapped(_row_to_course, r) for r in _rows(data, "courses")]

    def get_course(self, course_id: str) -> Course:
        row = _unwrap(self._client.get(f"/courses/{course_id}"), "course")
        if not row:
            raise NotFound(f"Course '{course_id}' not found.")
        return _mapped(_row_to_course, row)

    def create_course(self, draft: CourseDraft, identity: str) -> Course:
        data = self._client.write("POST", "/courses", identity, asdict(draft))
        return _mapped(_row_to_course, _entity(data, "course"))

    def update_course(self, course_id: str, draft: CourseDraft, identity: str) -> Course:
        data = self._client.write("PUT", f"/courses/{course_id}", identity, asdict(draft))
        return _mapped(_row_to_course, _entity(data, "course"))

    def delete_course(self, course_id: str, identity: str) -> None:
        self._client.write("DELETE", f"/courses/{course_id}", identity)

    # ------------------------------------------------------------------
    # Sections
    # ------------------------------------------------------------------
    def list_sections(self, course_id: str, identity: Optional[str] = None) -> List[Section]:
        params = {"uid": identity} if identity else None
        data = self._client.get(f"/courses/{course_id}/sections", params=params)
        return [_mapped(_row_to_section, r) for r in _rows(data, "sections")]

    def create_section(self, course_id: str, data: SectionInput, identity: str) -> Section:
        body = _section_body(data.title, data.order, data.description)
        result = self._client.write("POST", f"/courses/{course_id}/sections", identity, body)
        return _mapped(_row_to_section, _entity(result, "section"))

    def update_section(self, section_id: str, patch: SectionPatch, identity: str) -> Section:
        body = _section_body(patch.title, patch.order, patch.description)
        result = self._client.write("PUT", f"/sections/{section_id}", identity, body)
        return _mapped(_row_to_section, _entity(result, "section"))

    def delete_section(self, section_id: str, identity: str) -> None:
        self._client.write("DELETE", f"/sections/{section_id}", identity)

    # ------------------------------------------------------------------
    # Lectures
    # ------------------------------------------------------------------
    def create_lecture(self, section_id: str, data: LectureInput, identity: str) -> Lecture:
        result = self._client.write("POST", f"/sections/{section_id}/lectures", identity, _lecture_body(data))
        row = dict(_entity(result, "lecture"))
        row["section_id"] = row.get("section_id") or section_id
        return _mapped(_row_to_lecture, row)

    def update_lecture(self, lecture_id: str, patch: LecturePatch, identity: str) -> Lecture:
        result = self._client.write("PUT", f"/lectures/{lecture_id}", identity, _lecture_body(patch))
        return _mapped(_row_to_lecture, _entity(result, "lecture"))

    def delete_lecture(self, lecture_id: str, identity: str) -> None:
        self._client.write("DELETE", f"/lectures/{lecture_id}", identity)
