import re

import pytest

from pulsa.core.exceptions import NotFoundError
from pulsa.crud import course_crud, progress_crud
from pulsa.models.certificate_model import Certificate
from pulsa.models.progress_model import Progress
from pulsa.schemas.course_schema import CourseCreate


def _empty_course(db, slug, modules=()):
    return course_crud.create_course(db, CourseCreate(
        title="Empty", slug=slug, category="ai", difficulty="beginner", published=True, modules=list(modules),
    ))


def test_completing_a_lesson_records_progress(db, learner, course, lesson_ids):
    result = progress_crud.mark_lesson_complete(db, learner.id, lesson_ids[0])

    assert result.progress.completed is True
    assert result.progress.completed_at is not None
    assert result.progress.lesson.title == "What is AI?"
    assert result.course_id == course.id
    assert result.course_completed is False
    assert result.certificate is None


def test_marking_twice_keeps_one_row_and_first_timestamp(db, learner, lesson_ids):
    first = progress_crud.mark_lesson_complete(db, learner.id, lesson_ids[0])
    second = progress_crud.mark_lesson_complete(db, learner.id, lesson_ids[0])

    rows = db.query(Progress).filter(Progress.user_id == learner.id, Progress.lesson_id == lesson_ids[0]).all()
    assert len(rows) == 1
    assert second.progress.id == first.progress.id
    assert second.progress.completed_at == first.progress.completed_at


def test_unknown_lesson_writes_nothing(db, learner):
    with pytest.raises(NotFoundError):
        progress_crud.mark_lesson_complete(db, learner.id, 9999)
    assert db.query(Progress).count() == 0


def test_course_summary_counts_completed_lessons(db, learner, course, lesson_ids):
    progress_crud.mark_lesson_complete(db, learner.id, lesson_ids[0])
    progress_crud.mark_lesson_complete(db, learner.id, lesson_ids[1])

    summary = progress_crud.get_course_progress(db, learner.id, course.id)

    assert (summary.total_lessons, summary.completed_lessons, summary.percentage) == (3, 2, 67)
    assert [entry.lesson_id for entry in summary.progress] == lesson_ids[:2]
    assert [entry.lesson.title for entry in summary.progress] == ["What is AI?", "A short history"]
    assert summary.progress[0].lesson.module_id == course.modules[0].id


def test_progress_is_per_user(db, learner, other_learner, course, lesson_ids):
    progress_crud.mark_lesson_complete(db, learner.id, lesson_ids[0])
    summary = progress_crud.get_course_progress(db, other_learner.id, course.id)
    assert summary.completed_lessons == 0
    assert summary.percentage == 0


def test_completing_every_lesson_issues_one_certificate(db, learner, course, lesson_ids):
    results = [progress_crud.mark_lesson_complete(db, learner.id, lesson_id) for lesson_id in lesson_ids]

    assert [r.course_completed for r in results] == [False, False, True]
    certificate = results[-1].certificate
    assert certificate is not None
    assert certificate.course_id == course.id
    assert re.fullmatch(r"CERT-[0-9A-F]{8}", certificate.code)
    assert certificate.course.slug == "intro-to-ai"
    assert certificate.course.title == "Introduction to AI"

    again = progress_crud.mark_lesson_complete(db, learner.id, lesson_ids[0])
    assert again.course_completed is True
    assert again.certificate.id == certificate.id
    assert again.certificate.code == certificate.code
    assert again.certificate.issued_at == certificate.issued_at
    assert db.query(Certificate).filter(Certificate.user_id == learner.id).count() == 1


def test_certificate_code_prefix_is_configurable(db, learner, lesson_ids):
    for lesson_id in lesson_ids:
        result = progress_crud.mark_lesson_complete(db, learner.id, lesson_id, code_prefix="PULSA")
    assert result.certificate.code.startswith("PULSA-")


def test_course_without_lessons_reports_zero(db, learner):
    no_modules = _empty_course(db, "no-modules")
    empty_module = _empty_course(db, "empty-module", modules=[{"title": "Coming soon"}])

    for empty in (no_modules, empty_module):
        summary = progress_crud.get_course_progress(db, learner.id, empty.id)
        assert (summary.total_lessons, summary.completed_lessons, summary.percentage) == (0, 0, 0)


def test_unknown_course_progress_is_not_found(db, learner):
    with pytest.raises(NotFoundError):
        progress_crud.get_course_progress(db, learner.id, 9999)


def test_courses_in_progress_lists_started_courses(db, learner, course, lesson_ids):
    _empty_course(db, "never-started")
    assert progress_crud.get_courses_in_progress(db, learner.id) == []

    progress_crud.mark_lesson_complete(db, learner.id, lesson_ids[2])
    my_courses = progress_crud.get_courses_in_progress(db, learner.id)

    assert [item.course.slug for item in my_courses] == ["intro-to-ai"]
    assert my_courses[0].percentage == 33


def test_savepoint_path_keeps_first_completion(db, learner, lesson_ids, without_on_conflict):
    first = progress_crud.mark_lesson_complete(db, learner.id, lesson_ids[0])
    second = progress_crud.mark_lesson_complete(db, learner.id, lesson_ids[0])

    rows = db.query(Progress).filter(Progress.user_id == learner.id, Progress.lesson_id == lesson_ids[0]).all()
    assert len(rows) == 1
    assert second.progress.id == first.progress.id
    assert second.progress.completed_at == first.progress.completed_at


def test_savepoint_path_issues_one_certificate(db, learner, course, lesson_ids, without_on_conflict):
    results = [progress_crud.mark_lesson_complete(db, learner.id, lesson_id) for lesson_id in lesson_ids]

    assert [r.course_completed for r in results] == [False, False, True]
    assert results[-1].certificate.course_id == course.id

    again = progress_crud.mark_lesson_complete(db, learner.id, lesson_ids[1])
    assert again.certificate.code == results[-1].certificate.code
    assert db.query(Progress).filter(Progress.user_id == learner.id).count() == 3
    assert db.query(Certificate).filter(Certificate.user_id == learner.id).count() == 1
