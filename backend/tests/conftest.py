"""Shared fixtures: an in-memory stand-in for the backing store's REST API.

`FakeStoreBackend` quacks like a `requests.Session` (only `.request` is used), so the real
StoreClient / RemoteCurriculumStore code runs unchanged against it.
"""
import json
import re
from datetime import datetime, timezone

import pytest

from course_admin.application.course_app_service import CourseRecordManager
from course_admin.application.curriculum_app_service import CurriculumTreeManager
from course_admin.persistence.remote.client import StoreClient
from course_admin.persistence.remote.remote_curriculum_store import RemoteCurriculumStore

BASE_URL = "http://store.test/api/v2"
ADMIN = "admin-uid"


class FakeResponse:
    def __init__(self, status_code, body):
        self.status_code = status_code
        self._body = body
        self.text = body if isinstance(body, str) else json.dumps(body)

    def json(self):
        if isinstance(self._body, str):
            raise ValueError("not JSON")
        return self._body


def _ok(data, status=200):
    return FakeResponse(status, {"success": True, "data": data})


def _fail(status, error):
    return FakeResponse(status, {"success": False, "error": error})


class FakeStoreBackend:
    def __init__(self):
        self.courses = {}
        self.sections = {}
        self.lectures = {}
        self.calls = []
        self.rejected_uids = set()
        self.queued = []  # FakeResponse or Exception, consumed before routing
        self._seq = 0

    # ------------------------------------------------------------------
    # Seeding helpers
    # ------------------------------------------------------------------
    def _next_id(self, prefix):
        self._seq += 1
        return f"{prefix}-{self._seq}"

    def seed_course(self, **fields):
        now = datetime.now(timezone.utc).isoformat()
        row = {
            "id": self._next_id("course"),
            "title": "Seeded",
            "description": "d",
            "category": "programming",
            "level": "beginner",
            "duration": "1h",
            "price": 0,
            "instructor_name": "I",
            "status": "published",
            "created_at": now,
            "updated_at": now,
            "total_sections": 99,
            "total_lectures": 99,
        }
        row.update(fields)
        self.courses[row["id"]] = row
        return row

    def seed_section(self, course_id, title, order, **fields):
        row = {"id": self._next_id("section"), "course_id": course_id, "title": title, "section_order": order}
        row.update(fields)
        self.sections[row["id"]] = row
        return row

    def seed_lecture(self, section_id, title, order, lecture_type="video", **fields):
        row = {
            "id": self._next_id("lecture"),
            "section_id": section_id,
            "course_id": self.sections[section_id]["course_id"],
            "title": title,
            "lecture_type": lecture_type,
            "lecture_order": order,
            "is_preview": False,
            "is_free": False,
        }
        row.update(fields)
        self.lectures[row["id"]] = row
        return row

    def queue(self, response_or_error):
        self.queued.append(response_or_error)

    # ------------------------------------------------------------------
    # requests.Session surface
    # ------------------------------------------------------------------
    def request(self, method, url, params=None, json=None, headers=None, timeout=None):
        assert url.startswith(BASE_URL)
        path = url[len(BASE_URL):]
        self.calls.append({"method": method, "path": path, "params": params, "json": json})
        if self.queued:
            item = self.queued.pop(0)
            if isinstance(item, Exception):
                raise item
            return item
        body = dict(json or {})
        uid = body.pop("uid", None)
        if method != "GET":
            if not uid or uid in self.rejected_uids:
                return _fail(403, "Admin access required")
        return self._route(method, path, body)

    def _route(self, method, path, body):
        routes = [
            ("GET", r"/courses", self._list_courses),
            ("POST", r"/courses", self._create_course),
            ("GET", r"/courses/([^/]+)", self._get_course),
            ("PUT", r"/courses/([^/]+)", self._update_course),
            ("DELETE", r"/courses/([^/]+)", self._delete_course),
            ("GET", r"/courses/([^/]+)/sections", self._list_sections),
            ("POST", r"/courses/([^/]+)/sections", self._create_section),
            ("PUT", r"/sections/([^/]+)", self._update_section),
            ("DELETE", r"/sections/([^/]+)", self._delete_section),
            ("POST", r"/sections/([^/]+)/lectures", self._create_lecture),
            ("PUT", r"/lectures/([^/]+)", self._update_lecture),
            ("DELETE", r"/lectures/([^/]+)", self._delete_lecture),
        ]
        for route_method, pattern, handler in routes:
            match = re.fullmatch(pattern, path)
            if route_method == method and match:
                return handler(body, *match.groups())
        return _fail(404, f"No route for {method} {path}")

    # ------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------
    def _list_courses(self, body):
        return _ok({"courses": list(self.courses.values())})

    def _get_course(self, body, course_id):
        if course_id not in self.courses:
            return _fail(404, "Course not found")
        return _ok({"course": self.courses[course_id]})

    def _create_course(self, body):
        row = self.seed_course(**body)
        row["total_sections"] = 0
        row["total_lectures"] = 0
        return _ok({"course": row}, status=201)

    def _update_course(self, body, course_id):
        if course_id not in self.courses:
            return _fail(404, "Course not found")
        self.courses[course_id].update(body)
        return _ok({"course": self.courses[course_id]})

    def _delete_course(self, body, course_id):
        if self.courses.pop(course_id, None) is None:
            return _fail(404, "Course not found")
        for section_id in [s for s, row in self.sections.items() if row["course_id"] == course_id]:
            self._delete_section({}, section_id)
        return _ok(None)

    def _section_view(self, row):
        lectures = [dict(l) for l in self.lectures.values() if l["section_id"] == row["id"]]
        view = dict(row)
        view["course_lectures"] = lectures
        if lectures:
            view["duration_minutes"] = sum(l.get("video_duration_seconds") or 0 for l in lectures) // 60
        return view

    def _list_sections(self, body, course_id):
        rows = [self._section_view(s) for s in self.sections.values() if s["course_id"] == course_id]
        return _ok({"sections": rows})

    def _create_section(self, body, course_id):
        if course_id not in self.courses:
            return _fail(404, "Course not found")
        row = self.seed_section(course_id, body["title"], body["section_order"], description=body.get("description"))
        return _ok({"section": dict(row)}, status=201)

    def _update_section(self, body, section_id):
        if section_id not in self.sections:
            return _fail(404, "Section not found")
        self.sections[section_id].update(body)
        return _ok({"section": dict(self.sections[section_id])})

    def _delete_section(self, body, section_id):
        if self.sections.pop(section_id, None) is None:
            return _fail(404, "Section not found")
        for lecture_id in [l for l, row in self.lectures.items() if row["section_id"] == section_id]:
            del self.lectures[lecture_id]
        return _ok(None)

    def _create_lecture(self, body, section_id):
        if section_id not in self.sections:
            return _fail(404, "Section not found")
        fields = dict(body)
        title = fields.pop("title")
        order = fields.pop("lecture_order")
        lecture_type = fields.pop("lecture_type")
        row = self.seed_lecture(section_id, title, order, lecture_type=lecture_type, **fields)
        return _ok({"lecture": dict(row)}, status=201)

    def _update_lecture(self, body, lecture_id):
        if lecture_id not in self.lectures:
            return _fail(404, "Lecture not found")
        self.lectures[lecture_id].update(body)
        return _ok({"lecture": dict(self.lectures[lecture_id])})

    def _delete_lecture(self, body, lecture_id):
        if self.lectures.pop(lecture_id, None) is None:
            return _fail(404, "Lecture not found")
        return _ok(None)


# ------------------------------------------------------------------
# Fixtures
# ------------------------------------------------------------------
@pytest.fixture
def backend():
    return FakeStoreBackend()


@pytest.fixture
def client(backend):
    return StoreClient(BASE_URL, session=backend)


@pytest.fixture
def store(client):
    return RemoteCurriculumStore(client)


@pytest.fixture
def courses(store):
    return CourseRecordManager(store)


@pytest.fixture
def tree(store):
    return CurriculumTreeManager(store)
