"""Course record API endpoints."""
from __future__ import annotations
from dataclasses import asdict
from typing import List, Optional, Union

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, ConfigDict

from course_admin.api.identity import caller_identity
from course_admin.application.course_app_service import CourseRecordManager
from course_admin.application.curriculum_app_service import CurriculumWorkspace
from course_admin.container import get_course_manager, get_curriculum_workspace
from course_admin.domain.course.models import Course, CourseFilter

router = APIRouter(tags=["courses"])

TextOrLines = Union[str, List[str], None]


# ------------------------------------------------------------------
# Pydantic schemas
# ------------------------------------------------------------------
class CourseBody(BaseModel):
    model_config = ConfigDict(extra="forbid")

    title: str
    subtitle: Optional[str] = None
    description: str
    category: str
    level: str
    language: Optional[str] = None
    duration: str
    price: float
    original_price: Optional[float] = None
    thumbnail_image: Optional[str] = None
    preview_video_url: Optional[str] = None
    instructor_name: str
    instructor_bio: Optional[str] = None
    what_you_will_learn: TextOrLines = None
    prerequisites: TextOrLines = None
    target_audience: TextOrLines = None
    course_includes: TextOrLines = None
    tags: TextOrLines = None
    status: Optional[str] = None
    featured: bool = False


class CoursePatchBody(BaseModel):
    model_config = ConfigDict(extra="forbid")

    title: Optional[str] = None
    subtitle: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    level: Optional[str] = None
    language: Optional[str] = None
    duration: Optional[str] = None
    price: Optional[float] = None
    original_price: Optional[float] = None
    thumbnail_image: Optional[str] = None
    preview_video_url: Optional[str] = None
    instructor_name: Optional[str] = None
    instructor_bio: Optional[str] = None
    what_you_will_learn: TextOrLines = None
    prerequisites: TextOrLines = None
    target_audience: TextOrLines = None
    course_includes: TextOrLines = None
    tags: TextOrLines = None
    status: Optional[str] = None
    featured: Optional[bool] = None


# ------------------------------------------------------------------
# Serializers
# ------------------------------------------------------------------
def serialize_course(c: Course) -> dict:
    data = asdict(c)
    data["display_original_price"] = c.display_original_price
    data["discount_percent"] = c.discount_percent
    return data


# ------------------------------------------------------------------
# Health check
# ------------------------------------------------------------------
@router.get("/health")
def health():
    return {"status": "ok"}


# ------------------------------------------------------------------
# Course endpoints
# ------------------------------------------------------------------
@router.get("/courses")
def list_courses(
    search: Optional[str] = None,
    category: Optional[str] = None,
    level: Optional[str] = None,
    courses: CourseRecordManager = Depends(get_course_manager),
):
    course_filter = CourseFilter(search=search, category=category, level=level)
    return [serialize_course(c) for c in courses.list(course_filter)]


@router.post("/courses", status_code=status.HTTP_201_CREATED)
def create_course(
    body: CourseBody,
    courses: CourseRecordManager = Depends(get_course_manager),
    identity: Optional[str] = Depends(caller_identity),
):
    # Omitted optionals fall back to the record defaults
    course = courses.create(body.model_dump(exclude_none=True), identity)
    return serialize_course(course)


@router.get("/courses/{course_id}")
def get_course(course_id: str, courses: CourseRecordManager = Depends(get_course_manager)):
    return serialize_course(courses.get(course_id))


@router.put("/courses/{course_id}")
def update_course(
    course_id: str,
    body: CoursePatchBody,
    courses: CourseRecordManager = Depends(get_course_manager),
    identity: Optional[str] = Depends(caller_identity),
):
    course = courses.update(course_id, body.model_dump(exclude_unset=True), identity)
    return serialize_course(course)


@router.delete("/courses/{course_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_course(
    course_id: str,
    courses: CourseRecordManager = Depends(get_course_manager),
    workspace: CurriculumWorkspace = Depends(get_curriculum_workspace),
    identity: Optional[str] = Depends(caller_identity),
):
    courses.delete(course_id, identity)
    # The store dropped the curriculum too
    workspace.discard(course_id)
