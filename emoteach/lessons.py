"""
Lesson content provider and in-memory progress sink.

Lesson text is read verbatim and never mutated; progress is ephemeral and
only ever moves upward.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Protocol, Tuple

from loguru import logger

from config import SAMPLE_LESSONS
from emoteach.progress import clamp_progress


@dataclass(frozen=True)
class Lesson:
    id: str
    title: str
    full_text: str
    simplified_text: str
    hints: Tuple[str, ...] = field(default_factory=tuple)
    description: str = ""
    category: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> "Lesson":
        return cls(
            id=str(data["id"]),
            title=data["title"],
            full_text=data["full_text"],
            simplified_text=data["simplified_text"],
            hints=tuple(data.get("hints", ())),
            description=data.get("description", ""),
            category=data.get("category", ""),
        )


class ProgressSink(Protocol):
    def report_progress(self, lesson_id: str, progress: int) -> None:
        ...


class LessonCatalog:
    """Serves lessons by id and keeps their progress percentages."""

    def __init__(self, lessons: Optional[List[Lesson]] = None):
        if lessons is None:
            lessons = [Lesson.from_dict(d) for d in SAMPLE_LESSONS]
        self._lessons: Dict[str, Lesson] = {lesson.id: lesson for lesson in lessons}
        self._progress: Dict[str, int] = {lesson_id: 0 for lesson_id in self._lessons}

    def __len__(self):
        return len(self._lessons)

    def __iter__(self):
        return iter(self._lessons.values())

    def get(self, lesson_id: str) -> Lesson:
        return self._lessons[lesson_id]

    def progress(self, lesson_id: str) -> int:
        return self._progress[lesson_id]

    def report_progress(self, lesson_id: str, progress: int) -> None:
        if lesson_id not in self._lessons:
            logger.warning("Progress reported for unknown lesson {}", lesson_id)
            return
        previous = self._progress[lesson_id]
        self._progress[lesson_id] = max(previous, clamp_progress(progress))
        logger.info("Lesson {} progress {} -> {}", lesson_id, previous, self._progress[lesson_id])
