"""
Pytest Configuration and Fixtures.

Shared fakes for the camera and classifier, plus lesson/quiz fixtures.
"""
import sys
from pathlib import Path

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from emoteach.classifiers import ScriptedClassifier, ScriptedStep  # noqa: E402
from emoteach.lesson_session import LessonSession  # noqa: E402
from emoteach.lessons import Lesson, LessonCatalog  # noqa: E402
from emoteach.quiz import Question  # noqa: E402
from emoteach.video_source import STARTED, STOPPED, LifecycleEvents  # noqa: E402


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)


class FakeVideoSource(LifecycleEvents):
    """In-memory video source; optionally goes inactive after N frames."""

    def __init__(self, active=True, frames_before_stop=None):
        super().__init__()
        self._active = active
        self.frames_served = 0
        self.frames_before_stop = frames_before_stop

    @property
    def is_active(self):
        return self._active

    def start(self):
        self._active = True
        self._emit(STARTED)

    def stop(self):
        if self._active:
            self._active = False
            self._emit(STOPPED)

    def current_frame(self):
        if not self._active:
            return None
        if self.frames_before_stop is not None and self.frames_served >= self.frames_before_stop:
            self.stop()
            return None
        self.frames_served += 1
        return f"frame-{self.frames_served}"


class RecordingSink:
    def __init__(self):
        self.reports = []

    def report_progress(self, lesson_id, progress):
        self.reports.append((lesson_id, progress))


@pytest.fixture
def video_source():
    return FakeVideoSource()


@pytest.fixture
def scripted():
    """Factory: scripted((label, confidence, at), None, ...) -> ScriptedClassifier."""

    def _make(*steps, loaded=True):
        built = []
        for step in steps:
            if isinstance(step, ScriptedStep):
                built.append(step)
            elif step is None:
                built.append(ScriptedStep())
            else:
                built.append(ScriptedStep(*step))
        return ScriptedClassifier(built, loaded=loaded)

    return _make


@pytest.fixture
def questions():
    return [
        Question("2 + 2?", ["3", "4"], 1, "Two and two make four."),
        Question("Half of 10?", ["5", "2", "10"], 0, "10 / 2 = 5."),
        Question("1/2 or 1/4, which is bigger?", ["1/4", "1/2"], 1, "Half is bigger."),
    ]


@pytest.fixture
def lesson():
    return Lesson(
        id="fractions-101",
        title="Introduction to Fractions",
        full_text="A fraction represents a part of a whole.",
        simplified_text="A fraction is like a piece of a pie!",
        hints=("Think of pizza slices", "Bottom number is the total"),
    )


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def session(lesson, sink, questions):
    return LessonSession(lesson, sink, initial_progress=0, questions=questions)


@pytest.fixture
def catalog():
    return LessonCatalog()


@pytest.fixture
def make_video_source():
    """Factory for FakeVideoSource with custom activity / frame budget."""
    return FakeVideoSource
