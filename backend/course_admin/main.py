"""FastAPI application entry point."""
from __future__ import annotations
import logging
from typing import Optional

import requests
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from course_admin.api import courses, curriculum
from course_admin.api.errors import register_error_handlers
from course_admin.container import build_container
from course_admin.core.config import CORS_ALLOW_ORIGINS, LOG_LEVEL
from course_admin.persistence.interfaces.curriculum_store import CurriculumStore


def create_app(store: Optional[CurriculumStore] = None, session: Optional[requests.Session] = None) -> FastAPI:
    logging.basicConfig(
        level=LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # ------------------------------------------------------------------
    # App creation
    # ------------------------------------------------------------------
    app = FastAPI(
        title="Course Admin API",
        description="Admin console backend for courses and their curriculum",
        version="2.0.0",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ALLOW_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Store client and managers are built once here and shared through app.state
    app.state.container = build_container(store=store, session=session)
    register_error_handlers(app)

    # ------------------------------------------------------------------
    # Routers
    # ------------------------------------------------------------------
    app.include_router(courses.router)
    app.include_router(curriculum.router)
    return app


app = create_app()
