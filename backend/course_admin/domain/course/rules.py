"""Business rules for course records: input normalization and required-field checks."""
from __future__ import annotations
import math
from dataclasses import asdict
from typing import Any, Iterable, List, Mapping, Optional, Union

from course_admin.domain.common.result import Result
from course_admin.domain.course.models import CourseDraft, DRAFT_FIELDS

VALID_LEVELS = {"beginner", "intermediate", "advanced", "all-levels"}
VALID_STATUSES = {"draft", "published", "archived"}

LIST_FIELDS = ("what_you_will_learn", "prerequisites", "target_audience", "course_includes")

REQUIRED_TEXT_FIELDS = ("title", "description", "category", "level", "duration", "instructor_name")

TextOrLines = Union[str, Iterable[str], None]


def split_lines(value: TextOrLines) -> List[str]:
    """Newline-delimited text (or a sequence) -> trimmed lines, blanks dropped, order kept."""
    if value is None:
        return []
    items = value.splitlines() if isinstance(value, str) else value
    return [str(item).strip() for item in items if str(item).strip()]


def split_tags(value: TextOrLines) -> List[str]:
    """Comma-delimited text (or a sequence) -> trimmed unique tags in first-seen order."""
    if value is None:
        return []
    items = value.split(",") if isinstance(value, str) else value
    tags: List[str] = []
    for item in items:
        tag = str(item).strip()
        if tag and tag not in tags:
            tags.append(tag)
    return tags


def _as_price(name: str, value: Any) -> Result[Optional[float]]:
    if value is None or value == "":
        return Result.ok(None)
    if isinstance(value, bool):
        return Result.fail(f"'{name}' must be a number.")
    try:
        price = float(value)
    except (TypeError, ValueError):
        return Result.fail(f"'{name}' must be a number, got {value!r}.")
    if not math.isfinite(price):
        return Result.fail(f"'{name}' must be a finite number.")
    if price < 0:
        return Result.fail(f"'{name}' cannot be negative.")
    return Result.ok(price)


def _optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def build_course_draft(data: Mapping[str, Any], base: Optional[CourseDraft] = None) -> Result[CourseDraft]:
    """
    Normalize and validate course input. With `base`, `data` is a partial merged over it.
    Returns Result.ok(CourseDraft) or Result.fail(reason).
    """
    unknown = sorted(set(data) - set(DRAFT_FIELDS))
    if unknown:
        return Result.fail(f"Unknown course field(s): {', '.join(unknown)}.")

    merged = asdict(base) if base is not None else {}
    merged.update(data)

    for name in REQUIRED_TEXT_FIELDS:
        if not str(merged.get(name) or "").strip():
            return Result.fail(f"Course '{name}' is required and cannot be empty.")

    level = str(merged["level"]).strip().lower()
    if level not in VALID_LEVELS:
        return Result.fail(f"'{level}' is not a valid level. Must be one of {sorted(VALID_LEVELS)}.")

    status = str(merged.get("status") or "published").strip().lower()
    if status not in VALID_STATUSES:
        return Result.fail(f"'{status}' is not a valid status. Must be one of {sorted(VALID_STATUSES)}.")

    price = _as_price("price", merged.get("price"))
    if not price.is_success:
        return Result.fail(price.error)
    if price.value is None:
        return Result.fail("Course 'price' is required.")

    original_price = _as_price("original_price", merged.get("original_price"))
    if not original_price.is_success:
        return Result.fail(original_price.error)

    draft = CourseDraft(
        title=str(merged["title"]).strip(),
        subtitle=_optional_text(merged.get("subtitle")),
        description=str(merged["description"]).strip(),
        category=str(merged["category"]).strip(),
        level=level,
        language=_optional_text(merged.get("language")) or "English",
        duration=str(merged["duration"]).strip(),
        price=price.value,
        # The console form submits 0 for "no original price"
        original_price=original_price.value or None,
        thumbnail_image=_optional_text(merged.get("thumbnail_image")),
        preview_video_url=_optional_text(merged.get("preview_video_url")),
        instructor_name=str(merged["instructor_name"]).strip(),
        instructor_bio=_optional_text(merged.get("instructor_bio")),
        tags=split_tags(merged.get("tags")),
        status=status,
        featured=bool(merged.get("featured", False)),
        **{name: split_lines(merged.get(name)) for name in LIST_FIELDS},
    )
    return Result.ok(draft)


# Stand-in for the persisted record so a partial can be checked before it is fetched.
_PARTIAL_BASE = CourseDraft(
    title="-", description="-", category="-", level="beginner",
    duration="-", price=0.0, instructor_name="-",
)


def validate_course_partial(partial: Mapping[str, Any]) -> Result[Mapping[str, Any]]:
    """Check only the fields a partial update carries."""
    result = build_course_draft(partial, base=_PARTIAL_BASE)
    if not result.is_success:
        return Result.fail(result.error)
    return Result.ok(partial)
