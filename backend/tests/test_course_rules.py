"""Unit tests for course input normalization (no store involved)."""
from course_admin.domain.course.models import Course, CourseFilter
from course_admin.domain.course.rules import (
    build_course_draft,
    split_lines,
    split_tags,
    validate_course_partial,
)

VALID = {
    "title": "Intro",
    "description": "desc",
    "category": "programming",
    "level": "beginner",
    "duration": "2h",
    "price": 0,
    "instructor_name": "A",
}


def test_split_lines_trims_and_drops_blanks():
    assert split_lines("  first \n\n second\n   \nthird  ") == ["first", "second", "third"]
    assert split_lines(["a ", "", "  b"]) == ["a", "b"]
    assert split_lines(None) == []


def test_split_tags_dedupes_in_input_order():
    assert split_tags(" python, web ,, python ,api ") == ["python", "web", "api"]


def test_minimal_course_gets_console_defaults():
    result = build_course_draft(VALID)
    assert result.is_success
    draft = result.value
    assert draft.price == 0.0
    assert draft.language == "English"
    assert draft.status == "published"
    assert draft.original_price is None
    assert draft.tags == []


def test_list_attributes_are_normalized():
    data = dict(VALID, what_you_will_learn="Loops\n\n  Functions ", tags="a, b, a")
    draft = build_course_draft(data).value
    assert draft.what_you_will_learn == ["Loops", "Functions"]
    assert draft.tags == ["a", "b"]


def test_missing_required_field_fails():
    for name in ("title", "description", "category", "level", "duration", "instructor_name"):
        result = build_course_draft(dict(VALID, **{name: "   "}))
        assert not result.is_success, name
        assert name in result.error


def test_negative_price_fails():
    result = build_course_draft(dict(VALID, price=-1))
    assert not result.is_success
    assert "negative" in result.error


def test_unknown_level_and_unknown_field_fail():
    assert not build_course_draft(dict(VALID, level="expert")).is_success
    result = build_course_draft(dict(VALID, colour="red"))
    assert not result.is_success
    assert "colour" in result.error


def test_partial_checks_only_supplied_fields():
    assert validate_course_partial({"price": 10}).is_success
    assert not validate_course_partial({"title": ""}).is_success


def test_original_price_only_displayed_when_discounted():
    course = Course(**build_course_draft(dict(VALID, price=50, original_price=100)).value.__dict__, id="c1")
    assert course.display_original_price == 100
    assert course.discount_percent == 50
    course.original_price = 40
    assert course.display_original_price is None
    assert course.discount_percent == 0


def test_filter_composes_with_and():
    course = Course(**build_course_draft(dict(VALID, title="Python Basics")).value.__dict__, id="c1")
    assert CourseFilter(search="PYTHON").matches(course)
    assert CourseFilter(search="python", level="Beginner").matches(course)
    assert not CourseFilter(search="python", category="design").matches(course)
    assert CourseFilter(search="DESC").matches(course)
    assert not CourseFilter(search="rust").matches(course)


def test_non_finite_price_fails():
    for value in (float("nan"), float("inf")):
        result = build_course_draft(dict(VALID, price=value))
        assert not result.is_success
        assert "finite" in result.error
    assert not build_course_draft(dict(VALID, original_price=float("nan"))).is_success
