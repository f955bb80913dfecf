"""Application service for one course's curriculum tree (Course -> Sections -> Lectures).

The tree is changed only after the store confirms a write, and only if the tree still belongs
to the same load (a reset or a reload for another course in between discards the response).
A failed call leaves the tree exactly as it was.
"""
from __future__ import annotations
import copy
import logging
import threading
from contextlib import contextmanager
from enum import Enum
from typing import Dict, Iterator, List, Optional

from course_admin.domain.common.errors import CourseAdminError, TreeBusyError, ValidationError
from course_admin.domain.curriculum.models import (
    CurriculumAggregate,
    Lecture,
    LectureInput,
    LecturePatch,
    Section,
    SectionInput,
    SectionPatch,
)
from course_admin.domain.curriculum.rules import (
    validate_lecture_input,
    validate_lecture_patch,
    validate_section_input,
    validate_section_patch,
)
from course_admin.domain.curriculum.service import CurriculumDomainService
from course_admin.persistence.interfaces.curriculum_store import CurriculumStore

logger = logging.getLogger(__name__)


class TreeState(str, Enum):
    EMPTY = "empty"
    LOADING = "loading"
    LOADED = "loaded"
    MUTATING = "mutating"
    ERROR = "error"


class CurriculumTreeManager:
    """Holds the curriculum of exactly one course at a time. Not safe for concurrent
    mutation: a second call while one is in flight raises TreeBusyError."""

    def __init__(self, store: CurriculumStore):
        self._store = store
        self._domain = CurriculumDomainService()
        self._lock = threading.Lock()
        self._state = TreeState.EMPTY
        self._course_id: Optional[str] = None
        self._sections: List[Section] = []
        self._generation = 0
        self._last_error: Optional[CourseAdminError] = None

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------
    @property
    def state(self) -> TreeState:
        return self._state

    @property
    def course_id(self) -> Optional[str]:
        return self._course_id

    @property
    def last_error(self) -> Optional[CourseAdminError]:
        return self._last_error

    @property
    def sections(self) -> List[Section]:
        return copy.deepcopy(self._sections)

    def reset(self) -> None:
        """Discard the tree from any state; in-flight responses will be ignored."""
        with self._lock:
            self._generation += 1
            self._state = TreeState.EMPTY
            self._course_id = None
            self._sections = []
            self._last_error = None
        logger.debug("Curriculum tree reset")

    # ------------------------------------------------------------------
    # Internal: one in-flight operation, commit only if still current
    # ------------------------------------------------------------------
    @contextmanager
    def _operation(self, busy_state: TreeState, course_id: Optional[str] = None) -> Iterator[int]:
        with self._lock:
            if self._state in (TreeState.LOADING, TreeState.MUTATING):
                raise TreeBusyError(
                    f"Curriculum tree is busy ({self._state.value}); wait for the pending operation."
                )
            previous = self._state
            if course_id is not None and course_id != self._course_id:
                # Loading another course invalidates anything still in flight for the old one.
                self._generation += 1
            generation = self._generation
            self._state = busy_state
        logger.debug("Curriculum tree %s -> %s", previous.value, busy_state.value)
        try:
            yield generation
        except CourseAdminError as e:
            with self._lock:
                if generation == self._generation:
                    self._state = TreeState.ERROR
                    self._last_error = e
            raise
        except BaseException:
            with self._lock:
                if generation == self._generation:
                    self._state = previous
            raise
        else:
            with self._lock:
                if generation == self._generation and self._state is busy_state:
                    self._state = TreeState.LOADED if self._course_id is not None else TreeState.EMPTY
                    self._last_error = None

    def _commit(self, generation: int, sections: List[Section], course_id: Optional[str] = None) -> bool:
        with self._lock:
            if generation != self._generation:
                logger.info("Discarding stale curriculum response (tree was reset or reloaded)")
                return False
            if course_id is not None:
                self._course_id = course_id
            self._sections = sections
            return True

    def _owns(self, course_id: str) -> bool:
        return self._course_id == course_id

    # ------------------------------------------------------------------
    # Load
    # ------------------------------------------------------------------
    def load_sections(self, course_id: str, identity: Optional[str] = None) -> List[Section]:
        with self._operation(TreeState.LOADING, course_id=course_id) as generation:
            fetched = self._store.list_sections(course_id, identity)
            tree = self._domain.sort_tree(fetched)
            self._commit(generation, tree, course_id=course_id)
        logger.debug("Loaded %d section(s) for course %s", len(tree), course_id)
        return copy.deepcopy(tree)

    # ------------------------------------------------------------------
    # Sections
    # ------------------------------------------------------------------
    def create_section(self, course_id: str, data: SectionInput, identity: str) -> Section:
        data = validate_section_input(data).unwrap()
        with self._operation(TreeState.MUTATING) as generation:
            section = self._store.create_section(course_id, data, identity)
            if self._owns(course_id):
                self._commit(generation, self._domain.merge_section(self._sections, section))
                self._refetch(generation, course_id, identity)
        return section

    def _refetch(self, generation: int, course_id: str, identity: Optional[str]) -> None:
        """Pick up any store-side renumbering after a create."""
        try:
            fetched = self._store.list_sections(course_id, identity)
        except CourseAdminError as e:
            logger.warning("Section created but re-fetch for course %s failed: %s", course_id, e)
            return
        self._commit(generation, self._domain.sort_tree(fetched))

    def update_section(self, section_id: str, patch: SectionPatch, identity: str) -> Section:
        patch = validate_section_patch(patch).unwrap()
        with self._operation(TreeState.MUTATING) as generation:
            section = self._store.update_section(section_id, patch, identity)
            if self._domain.find_section(self._sections, section_id).is_success:
                self._commit(generation, self._domain.merge_section(self._sections, section))
        return section

    def delete_section(self, section_id: str, identity: str) -> None:
        """Destructive: callers must have confirmed intent. Lectures go with the section."""
        with self._operation(TreeState.MUTATING) as generation:
            self._store.delete_section(section_id, identity)
            self._commit(generation, self._domain.remove_section(self._sections, section_id))
        logger.info("Deleted section %s", section_id)

    # ------------------------------------------------------------------
    # Lectures
    # ------------------------------------------------------------------
    def create_lecture(self, section_id: str, data: LectureInput, identity: str) -> Lecture:
        data = validate_lecture_input(data).unwrap()
        with self._operation(TreeState.MUTATING) as generation:
            lecture = self._store.create_lecture(section_id, data, identity)
            if not lecture.course_id:
                lecture.course_id = self._course_id or ""
            self._commit(generation, self._domain.merge_lecture(self._sections, lecture))
        return lecture

    def update_lecture(self, lecture_id: str, patch: LecturePatch, identity: str) -> Lecture:
        """Lectures are always addressed by id; see find_lecture_by_title for title lookups."""
        if not (lecture_id or "").strip():
            raise ValidationError("An explicit lecture id is required to update a lecture.")
        patch = validate_lecture_patch(patch).unwrap()
        with self._operation(TreeState.MUTATING) as generation:
            lecture = self._store.update_lecture(lecture_id, patch, identity)
            self._commit(generation, self._domain.merge_lecture(self._sections, lecture))
        return lecture

    def delete_lecture(self, lecture_id: str, identity: str) -> None:
        """Destructive: callers must have confirmed intent."""
        with self._operation(TreeState.MUTATING) as generation:
            self._store.delete_lecture(lecture_id, identity)
            self._commit(generation, self._domain.remove_lecture(self._sections, lecture_id))
        logger.info("Deleted lecture %s", lecture_id)

    # ------------------------------------------------------------------
    # Reads over the in-memory tree
    # ------------------------------------------------------------------
    def find_lecture_by_title(self, section_id: str, title: str) -> Lecture:
        return copy.deepcopy(self._domain.find_lecture_by_title(self._sections, section_id, title).unwrap())

    def aggregate(self, course_id: str) -> CurriculumAggregate:
        """Local convenience view. A course that is not the loaded one has an empty tree here."""
        if not self._owns(course_id):
            return CurriculumAggregate(section_count=0, lecture_count=0, total_duration_minutes=0)
        return self._domain.aggregate(self._sections)

    def next_section_order(self) -> int:
        return len(self._sections) + 1

    def next_lecture_order(self, section_id: str) -> int:
        section = self._domain.find_section(self._sections, section_id).unwrap()
        return len(section.course_lectures) + 1


class CurriculumWorkspace:
    """One tree manager per course, created on first "manage content" access and dropped on
    reset. Also hands out the per-course lock that serializes API callers."""

    def __init__(self, store: CurriculumStore):
        self._store = store
        self._managers: Dict[str, CurriculumTreeManager] = {}
        self._locks: Dict[str, threading.Lock] = {}
        self._guard = threading.Lock()

    def lock_for(self, course_id: str) -> threading.Lock:
        with self._guard:
            return self._locks.setdefault(course_id, threading.Lock())

    def open(self, course_id: str, identity: Optional[str] = None) -> CurriculumTreeManager:
        """Return the course's manager, loading its tree the first time."""
        with self._guard:
            manager = self._managers.get(course_id)
            if manager is None:
                manager = CurriculumTreeManager(self._store)
                self._managers[course_id] = manager
        if manager.course_id is None:
            try:
                manager.load_sections(course_id, identity)
            except CourseAdminError:
                with self._guard:
                    if self._managers.get(course_id) is manager:
                        del self._managers[course_id]
                raise
        return manager

    def discard(self, course_id: str) -> None:
        with self._guard:
            manager = self._managers.pop(course_id, None)
            self._locks.pop(course_id, None)
        if manager is not None:
            manager.reset()
