"""Curriculum domain models (Section -> Lecture), pure Python, no HTTP dependencies."""
from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Union


class LectureType(str, Enum):
    VIDEO = "video"
    ARTICLE = "article"
    QUIZ = "quiz"
    ASSIGNMENT = "assignment"
    RESOURCE = "resource"


# ------------------------------------------------------------------
# Type-conditional lecture payloads (exactly one is active per lecture)
# ------------------------------------------------------------------
@dataclass(frozen=True)
class VideoContent:
    video_url: Optional[str]
    duration_seconds: int = 0


@dataclass(frozen=True)
class ArticleContent:
    article_content: Optional[str]


@dataclass(frozen=True)
class ResourceContent:
    resource_url: Optional[str]


@dataclass(frozen=True)
class QuizContent:
    pass


@dataclass(frozen=True)
class AssignmentContent:
    pass


LectureContent = Union[VideoContent, ArticleContent, ResourceContent, QuizContent, AssignmentContent]


@dataclass
class Lecture:
    id: str
    section_id: str
    course_id: str
    title: str
    lecture_type: LectureType
    lecture_order: int
    description: Optional[str] = None
    # Raw payload fields; only the one matching lecture_type is read (see `content`).
    video_url: Optional[str] = None
    video_duration_seconds: Optional[int] = None
    article_content: Optional[str] = None
    resource_url: Optional[str] = None
    is_preview: bool = False
    is_free: bool = False

    @property
    def content(self) -> LectureContent:
        if self.lecture_type is LectureType.VIDEO:
            return VideoContent(self.video_url, self.video_duration_seconds or 0)
        if self.lecture_type is LectureType.ARTICLE:
            return ArticleContent(self.article_content)
        if self.lecture_type is LectureType.RESOURCE:
            return ResourceContent(self.resource_url)
        if self.lecture_type is LectureType.QUIZ:
            return QuizContent()
        return AssignmentContent()


@dataclass
class Section:
    id: str
    course_id: str
    title: str
    section_order: int
    description: Optional[str] = None
    duration_minutes: Optional[int] = None  # computed by the store
    course_lectures: List[Lecture] = field(default_factory=list)


# ------------------------------------------------------------------
# Operation inputs: closed structures, validated by rules.py
# ------------------------------------------------------------------
@dataclass
class SectionInput:
    title: str
    order: int
    description: Optional[str] = None


@dataclass
class SectionPatch:
    title: Optional[str] = None
    order: Optional[int] = None
    description: Optional[str] = None


@dataclass
class LectureInput:
    title: str
    lecture_type: str
    order: int
    description: Optional[str] = None
    video_url: Optional[str] = None
    video_duration_seconds: Optional[int] = None
    article_content: Optional[str] = None
    resource_url: Optional[str] = None
    is_preview: bool = False
    is_free: bool = False


@dataclass
class LecturePatch:
    title: Optional[str] = None
    lecture_type: Optional[str] = None
    order: Optional[int] = None
    description: Optional[str] = None
    video_url: Optional[str] = None
    video_duration_seconds: Optional[int] = None
    article_content: Optional[str] = None
    resource_url: Optional[str] = None
    is_preview: Optional[bool] = None
    is_free: Optional[bool] = None


@dataclass(frozen=True)
class CurriculumAggregate:
    section_count: int
    lecture_count: int
    total_duration_minutes: int
