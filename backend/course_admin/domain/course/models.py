"""Course record domain models, pure Python, no HTTP dependencies."""
from __future__ import annotations
from dataclasses import dataclass, field, fields
from typing import List, Optional


@dataclass
class CourseDraft:
    """Normalized, validated course fields as sent to the store (no identity, no counters)."""
    title: str
    description: str
    category: str
    level: str  # beginner | intermediate | advanced | all-levels
    duration: str
    price: float
    instructor_name: str
    subtitle: Optional[str] = None
    language: str = "English"
    original_price: Optional[float] = None
    thumbnail_image: Optional[str] = None
    preview_video_url: Optional[str] = None
    instructor_bio: Optional[str] = None
    what_you_will_learn: List[str] = field(default_factory=list)
    prerequisites: List[str] = field(default_factory=list)
    target_audience: List[str] = field(default_factory=list)
    course_includes: List[str] = field(default_factory=list)
    tags: List[str] = field(default_factory=list)
    status: str = "published"  # draft | published | archived
    featured: bool = False


DRAFT_FIELDS = tuple(f.name for f in fields(CourseDraft))


@dataclass
class Course(CourseDraft):
    id: str = ""
    created_by: Optional[str] = None
    created_at: str = ""
    updated_at: str = ""
    # Maintained by the store out-of-band; never recomputed here.
    total_sections: Optional[int] = None
    total_lectures: Optional[int] = None
    rating: Optional[float] = None
    total_reviews: Optional[int] = None
    total_students: Optional[int] = None

    @property
    def display_original_price(self) -> Optional[float]:
        """Original price, only when it is an actual discount over `price`."""
        if self.original_price is not None and self.original_price > self.price:
            return self.original_price
        return None

    @property
    def discount_percent(self) -> int:
        original = self.display_original_price
        if original is None:
            return 0
        return round((original - self.price) / original * 100)

    def to_draft(self) -> CourseDraft:
        return CourseDraft(**{name: getattr(self, name) for name in DRAFT_FIELDS})


@dataclass
class CourseFilter:
    search: Optional[str] = None
    category: Optional[str] = None
    level: Optional[str] = None

    def matches(self, course: Course) -> bool:
        if self.search:
            needle = self.search.strip().lower()
            haystack = (course.title, course.description, course.instructor_name)
            if needle and not any(needle in (text or "").lower() for text in haystack):
                return False
        if self.category and (course.category or "").lower() != self.category.strip().lower():
            return False
        if self.level and (course.level or "").lower() != self.level.strip().lower():
            return False
        return True
