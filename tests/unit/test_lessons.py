"""
Unit tests for the lesson catalog (content provider and progress sink).
"""

from emoteach.lessons import Lesson, LessonCatalog


def test_default_catalog_has_sample_lessons(catalog):
    assert len(catalog) == 3
    titles = [lesson.title for lesson in catalog]
    assert titles[0] == "Introduction to Fractions"
    assert all(catalog.progress(lesson.id) == 0 for lesson in catalog)


def test_lesson_fields_read_verbatim(catalog):
    lesson = catalog.get("2")
    assert lesson.title == "Adding Fractions"
    assert lesson.simplified_text.startswith("When fractions have the same bottom number")
    assert lesson.hints == (
        "Only add the top numbers",
        "Keep the bottom number the same",
        "Check if your answer can be simplified",
    )


def test_report_progress_updates(catalog):
    catalog.report_progress("1", 35)
    assert catalog.progress("1") == 35


def test_report_progress_never_decreases(catalog):
    catalog.report_progress("1", 60)
    catalog.report_progress("1", 20)
    assert catalog.progress("1") == 60


def test_report_progress_clamps(catalog):
    catalog.report_progress("3", 250)
    assert catalog.progress("3") == 100


def test_unknown_lesson_is_ignored(catalog):
    catalog.report_progress("nope", 50)
    assert "nope" not in [lesson.id for lesson in catalog]


def test_custom_lessons():
    lesson = Lesson(id="x", title="X", full_text="full", simplified_text="simple")
    catalog = LessonCatalog([lesson])
    assert catalog.get("x") is lesson
    assert catalog.progress("x") == 0
