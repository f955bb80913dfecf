"""Envelope normalization and failure classification in the store adapter."""
import pytest
import requests

from course_admin.domain.common.errors import Forbidden, NetworkError, NotFound, StoreError
from course_admin.application.curriculum_app_service import TreeState
from course_admin.domain.curriculum.models import LectureInput
from conftest import ADMIN, FakeResponse


def test_success_returns_data(client, backend):
    backend.queue(FakeResponse(200, {"success": True, "data": {"courses": []}}))
    assert client.get("/courses") == {"courses": []}


def test_success_false_is_failure_even_with_200(client, backend):
    backend.queue(FakeResponse(200, {"success": False, "error": "title already taken"}))
    with pytest.raises(StoreError) as exc:
        client.get("/courses")
    assert exc.value.message == "title already taken"
    assert exc.value.status == 200


def test_404_maps_to_not_found(client, backend):
    backend.queue(FakeResponse(404, {"success": False, "error": "Course not found"}))
    with pytest.raises(NotFound):
        client.get("/courses/nope")


@pytest.mark.parametrize("status", [401, 403])
def test_rejected_identity_maps_to_forbidden(client, backend, status):
    backend.queue(FakeResponse(status, {"success": False, "message": "Admin access required"}))
    with pytest.raises(Forbidden) as exc:
        client.write("DELETE", "/courses/c1", "someone")
    assert exc.value.message == "Admin access required"


def test_validation_error_list_is_joined(client, backend):
    backend.queue(FakeResponse(400, {"success": False, "errors": ["title is required", "price is invalid"]}))
    with pytest.raises(StoreError) as exc:
        client.write("POST", "/courses", ADMIN, {})
    assert exc.value.message == "title is required, price is invalid"


def test_transport_failure_is_network_error(client, backend):
    backend.queue(requests.ConnectionError("connection refused"))
    with pytest.raises(NetworkError):
        client.get("/courses")


def test_non_json_body_is_store_error(client, backend):
    backend.queue(FakeResponse(502, "Bad Gateway"))
    with pytest.raises(StoreError) as exc:
        client.get("/courses")
    assert exc.value.message == "Bad Gateway"


def test_missing_envelope_is_store_error(client, backend):
    backend.queue(FakeResponse(200, [{"id": "c1"}]))
    with pytest.raises(StoreError):
        client.get("/courses")


def test_identity_attached_to_body_and_not_retained(client, backend):
    backend.queue(FakeResponse(200, {"success": True, "data": None}))
    client.write("PUT", "/sections/s1", ADMIN, {"title": "T"})
    assert backend.calls[-1]["json"] == {"title": "T", "uid": ADMIN}
    assert ADMIN not in vars(client).values()


def test_write_without_identity_never_reaches_store(client, backend):
    with pytest.raises(Forbidden):
        client.write("POST", "/courses", "  ", {"title": "T"})
    assert backend.calls == []


# ------------------------------------------------------------------
# Record mapping
# ------------------------------------------------------------------
def test_created_lecture_without_owner_ids_uses_request_section(tree, backend):
    course = backend.seed_course()
    section = backend.seed_section(course["id"], "S", 1)
    tree.load_sections(course["id"])
    backend.queue(FakeResponse(201, {
        "success": True,
        "data": {"lecture": {"id": "l-1", "title": "v", "lecture_type": "video", "lecture_order": 1}},
    }))

    lecture = tree.create_lecture(section["id"], LectureInput(title="v", lecture_type="video", order=1), ADMIN)

    assert lecture.section_id == section["id"]
    assert lecture.course_id == course["id"]
    assert [l.id for l in tree.sections[0].course_lectures] == ["l-1"]


def test_nested_lectures_inherit_their_section(store, backend):
    backend.queue(FakeResponse(200, {
        "success": True,
        "data": {"sections": [{
            "id": "s-1", "course_id": "c-1", "title": "S", "section_order": 1,
            "course_lectures": [{"id": "l-1", "title": "v", "lecture_order": 1}],
        }]},
    }))
    lecture = store.list_sections("c-1")[0].course_lectures[0]
    assert (lecture.section_id, lecture.course_id) == ("s-1", "c-1")


def test_malformed_write_response_is_store_error(tree, backend):
    course = backend.seed_course()
    section = backend.seed_section(course["id"], "S", 1)
    tree.load_sections(course["id"])
    backend.queue(FakeResponse(201, {
        "success": True,
        "data": {"lecture": {"id": "l-1", "title": "v", "lecture_order": "first"}},
    }))

    with pytest.raises(StoreError) as exc:
        tree.create_lecture(section["id"], LectureInput(title="v", lecture_type="video", order=1), ADMIN)

    assert exc.value.details["lecture_order"] == "first"
    assert tree.state is TreeState.ERROR
    assert tree.sections[0].course_lectures == []


@pytest.mark.parametrize("data", [
    {"sections": [{"title": "no id"}]},
    {"sections": ["not a record"]},
    {"sections": {"id": "s-1"}},
])
def test_malformed_section_listing_is_store_error(store, backend, data):
    backend.queue(FakeResponse(200, {"success": True, "data": data}))
    with pytest.raises(StoreError):
        store.list_sections("c-1")


def test_malformed_course_listing_is_store_error(store, backend):
    backend.queue(FakeResponse(200, {"success": True, "data": {"courses": [{"title": "no id"}]}}))
    with pytest.raises(StoreError):
        store.list_courses()
