"""Business rules for sections and lectures."""
from __future__ import annotations
from dataclasses import replace
from typing import Optional

from course_admin.domain.common.result import Result
from course_admin.domain.curriculum.models import (
    LectureInput,
    LecturePatch,
    LectureType,
    SectionInput,
    SectionPatch,
)

VALID_LECTURE_TYPES = {t.value for t in LectureType}


def _check_title(title: Optional[str], what: str) -> Result[str]:
    text = (title or "").strip()
    if not text:
        return Result.fail(f"{what} 'title' is required and cannot be empty.")
    return Result.ok(text)


def _check_order(order, field_name: str) -> Result[int]:
    # bool is an int subclass; reject it explicitly
    if isinstance(order, bool) or not isinstance(order, int):
        return Result.fail(f"'{field_name}' must be an integer, got {order!r}.")
    if order < 1:
        return Result.fail(f"'{field_name}' must be >= 1, got {order}.")
    return Result.ok(order)


def _check_lecture_type(lecture_type) -> Result[str]:
    value = getattr(lecture_type, "value", lecture_type)
    if value not in VALID_LECTURE_TYPES:
        return Result.fail(
            f"'{value}' is not a valid lecture type. Must be one of {sorted(VALID_LECTURE_TYPES)}."
        )
    return Result.ok(value)


def _check_duration(seconds) -> Result[Optional[int]]:
    if seconds is None:
        return Result.ok(None)
    if isinstance(seconds, bool) or not isinstance(seconds, int) or seconds < 0:
        return Result.fail(f"'video_duration_seconds' must be a non-negative integer, got {seconds!r}.")
    return Result.ok(seconds)


def validate_section_input(data: SectionInput) -> Result[SectionInput]:
    title = _check_title(data.title, "Section")
    if not title.is_success:
        return title
    order = _check_order(data.order, "section_order")
    if not order.is_success:
        return order
    return Result.ok(replace(data, title=title.value))


def validate_section_patch(patch: SectionPatch) -> Result[SectionPatch]:
    """Same rules as create, applied to the fields the patch carries."""
    if patch.title is not None:
        title = _check_title(patch.title, "Section")
        if not title.is_success:
            return title
        patch = replace(patch, title=title.value)
    if patch.order is not None:
        order = _check_order(patch.order, "section_order")
        if not order.is_success:
            return order
    return Result.ok(patch)


def validate_lecture_input(data: LectureInput) -> Result[LectureInput]:
    title = _check_title(data.title, "Lecture")
    if not title.is_success:
        return title
    lecture_type = _check_lecture_type(data.lecture_type)
    if not lecture_type.is_success:
        return lecture_type
    order = _check_order(data.order, "lecture_order")
    if not order.is_success:
        return order
    duration = _check_duration(data.video_duration_seconds)
    if not duration.is_success:
        return duration
    return Result.ok(replace(data, title=title.value, lecture_type=lecture_type.value))


def validate_lecture_patch(patch: LecturePatch) -> Result[LecturePatch]:
    if patch.title is not None:
        title = _check_title(patch.title, "Lecture")
        if not title.is_success:
            return title
        patch = replace(patch, title=title.value)
    if patch.lecture_type is not None:
        lecture_type = _check_lecture_type(patch.lecture_type)
        if not lecture_type.is_success:
            return lecture_type
        patch = replace(patch, lecture_type=lecture_type.value)
    if patch.order is not None:
        order = _check_order(patch.order, "lecture_order")
        if not order.is_success:
            return order
    duration = _check_duration(patch.video_duration_seconds)
    if not duration.is_success:
        return duration
    return Result.ok(patch)
