"""Dependency wiring: builds the store client, adapter and managers once at startup."""
from __future__ import annotations
from dataclasses import dataclass
from typing import Optional

import requests
from fastapi import Request

from course_admin.application.course_app_service import CourseRecordManager
from course_admin.application.curriculum_app_service import CurriculumWorkspace
from course_admin.core.config import STORE_BASE_URL, STORE_TIMEOUT_SECONDS
from course_admin.persistence.interfaces.curriculum_store import CurriculumStore
from course_admin.persistence.remote.client import StoreClient
from course_admin.persistence.remote.remote_curriculum_store import RemoteCurriculumStore


@dataclass
class Container:
    store: CurriculumStore
    courses: CourseRecordManager
    curriculum: CurriculumWorkspace


def build_container(
    store: Optional[CurriculumStore] = None,
    session: Optional[requests.Session] = None,
    base_url: str = STORE_BASE_URL,
) -> Container:
    """Pass `store` to bypass HTTP entirely, or `session` to reuse/replace the transport."""
    if store is None:
        client = StoreClient(base_url, session=session, timeout=STORE_TIMEOUT_SECONDS)
        store = RemoteCurriculumStore(client)
    return Container(
        store=store,
        courses=CourseRecordManager(store),
        curriculum=CurriculumWorkspace(store),
    )


# ------------------------------------------------------------------
# FastAPI dependencies reading the container attached to the app
# ------------------------------------------------------------------
def get_container(request: Request) -> Container:
    return request.app.state.container


def get_course_manager(request: Request) -> CourseRecordManager:
    return get_container(request).courses


def get_curriculum_workspace(request: Request) -> CurriculumWorkspace:
    return get_container(request).curriculum
