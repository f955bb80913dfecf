"""Curriculum ("manage content") API endpoints for the sections and lectures of one course."""
from __future__ import annotations
from dataclasses import asdict
from typing import Optional

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, ConfigDict, Field

from course_admin.api.identity import caller_identity
from course_admin.application.curriculum_app_service import CurriculumTreeManager, CurriculumWorkspace
from course_admin.container import get_curriculum_workspace
from course_admin.domain.curriculum.models import (
    Lecture,
    LectureInput,
    LecturePatch,
    Section,
    SectionInput,
    SectionPatch,
)
from course_admin.domain.curriculum.service import format_duration

router = APIRouter(prefix="/courses/{course_id}", tags=["curriculum"])


# ------------------------------------------------------------------
# Pydantic schemas
# ------------------------------------------------------------------
class SectionBody(BaseModel):
    model_config = ConfigDict(extra="forbid")

    title: str
    description: Optional[str] = None
    order: Optional[int] = Field(default=None, description="Defaults to the next free position")


class SectionPatchBody(BaseModel):
    model_config = ConfigDict(extra="forbid")

    title: Optional[str] = None
    description: Optional[str] = None
    order: Optional[int] = None


class LectureBody(BaseModel):
    model_config = ConfigDict(extra="forbid")

    title: str
    lecture_type: str = "video"
    order: Optional[int] = None
    description: Optional[str] = None
    video_url: Optional[str] = None
    video_duration_seconds: Optional[int] = None
    article_content: Optional[str] = None
    resource_url: Optional[str] = None
    is_preview: bool = False
    is_free: bool = False


class LecturePatchBody(BaseModel):
    model_config = ConfigDict(extra="forbid")

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


# ------------------------------------------------------------------
# Serializers
# ------------------------------------------------------------------
def serialize_lecture(lecture: Lecture) -> dict:
    data = asdict(lecture)
    data["lecture_type"] = lecture.lecture_type.value
    data["content"] = {"type": lecture.lecture_type.value, **asdict(lecture.content)}
    if lecture.video_duration_seconds:
        data["duration_label"] = format_duration(lecture.video_duration_seconds)
    return data


def serialize_section(section: Section) -> dict:
    data = asdict(section)
    data["course_lectures"] = [serialize_lecture(l) for l in section.course_lectures]
    return data


def _tree(manager: CurriculumTreeManager) -> dict:
    aggregate = manager.aggregate(manager.course_id)
    return {
        "course_id": manager.course_id,
        "state": manager.state.value,
        "sections": [serialize_section(s) for s in manager.sections],
        "aggregate": asdict(aggregate),
    }


# ------------------------------------------------------------------
# Tree lifecycle
# ------------------------------------------------------------------
@router.get("/curriculum")
def get_curriculum(
    course_id: str,
    workspace: CurriculumWorkspace = Depends(get_curriculum_workspace),
    identity: Optional[str] = Depends(caller_identity),
):
    with workspace.lock_for(course_id):
        return _tree(workspace.open(course_id, identity))


@router.post("/curriculum/reload")
def reload_curriculum(
    course_id: str,
    workspace: CurriculumWorkspace = Depends(get_curriculum_workspace),
    identity: Optional[str] = Depends(caller_identity),
):
    with workspace.lock_for(course_id):
        manager = workspace.open(course_id, identity)
        manager.load_sections(course_id, identity)
        return _tree(manager)


@router.delete("/curriculum", status_code=status.HTTP_204_NO_CONTENT)
def discard_curriculum(course_id: str, workspace: CurriculumWorkspace = Depends(get_curriculum_workspace)):
    workspace.discard(course_id)


@router.get("/curriculum/aggregate")
def get_aggregate(
    course_id: str,
    workspace: CurriculumWorkspace = Depends(get_curriculum_workspace),
    identity: Optional[str] = Depends(caller_identity),
):
    with workspace.lock_for(course_id):
        return asdict(workspace.open(course_id, identity).aggregate(course_id))


# ------------------------------------------------------------------
# Sections
# ------------------------------------------------------------------
@router.post("/sections", status_code=status.HTTP_201_CREATED)
def create_section(
    course_id: str,
    body: SectionBody,
    workspace: CurriculumWorkspace = Depends(get_curriculum_workspace),
    identity: Optional[str] = Depends(caller_identity),
):
    with workspace.lock_for(course_id):
        manager = workspace.open(course_id, identity)
        order = body.order if body.order is not None else manager.next_section_order()
        data = SectionInput(title=body.title, order=order, description=body.description)
        return serialize_section(manager.create_section(course_id, data, identity))


@router.put("/sections/{section_id}")
def update_section(
    course_id: str,
    section_id: str,
    body: SectionPatchBody,
    workspace: CurriculumWorkspace = Depends(get_curriculum_workspace),
    identity: Optional[str] = Depends(caller_identity),
):
    with workspace.lock_for(course_id):
        manager = workspace.open(course_id, identity)
        patch = SectionPatch(**body.model_dump(exclude_unset=True))
        return serialize_section(manager.update_section(section_id, patch, identity))


@router.delete("/sections/{section_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_section(
    course_id: str,
    section_id: str,
    workspace: CurriculumWorkspace = Depends(get_curriculum_workspace),
    identity: Optional[str] = Depends(caller_identity),
):
    with workspace.lock_for(course_id):
        workspace.open(course_id, identity).delete_section(section_id, identity)


# ------------------------------------------------------------------
# Lectures
# ------------------------------------------------------------------
@router.post("/sections/{section_id}/lectures", status_code=status.HTTP_201_CREATED)
def create_lecture(
    course_id: str,
    section_id: str,
    body: LectureBody,
    workspace: CurriculumWorkspace = Depends(get_curriculum_workspace),
    identity: Optional[str] = Depends(caller_identity),
):
    with workspace.lock_for(course_id):
        manager = workspace.open(course_id, identity)
        fields = body.model_dump()
        if fields["order"] is None:
            fields["order"] = manager.next_lecture_order(section_id)
        return serialize_lecture(manager.create_lecture(section_id, LectureInput(**fields), identity))


@router.put("/lectures/{lecture_id}")
def update_lecture(
    course_id: str,
    lecture_id: str,
    body: LecturePatchBody,
    workspace: CurriculumWorkspace = Depends(get_curriculum_workspace),
    identity: Optional[str] = Depends(caller_identity),
):
    with workspace.lock_for(course_id):
        manager = workspace.open(course_id, identity)
        patch = LecturePatch(**body.model_dump(exclude_unset=True))
        return serialize_lecture(manager.update_lecture(lecture_id, patch, identity))


@router.delete("/lectures/{lecture_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_lecture(
    course_id: str,
    lecture_id: str,
    workspace: CurriculumWorkspace = Depends(get_curriculum_workspace),
    identity: Optional[str] = Depends(caller_identity),
):
    with workspace.lock_for(course_id):
        workspace.open(course_id, identity).delete_lecture(lecture_id, identity)
