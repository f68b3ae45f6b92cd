# This file makes the 'crud' directory a Python package.

from .user_crud import (
    get_user_by_id,
    get_user_by_email,
    get_user_by_firebase_uid,
    create_user,
)

from .course_crud import (
    create_course, get_course, get_course_by_slug, get_published_courses, update_course, delete_course,
    get_lesson, get_quiz_with_questions
)

from .quiz_crud import (
    PASS_THRESHOLD, is_answer_correct, grade_questions, submit_quiz, get_quiz_results_for_user
)

from .progress_crud import (
    mark_lesson_complete,
    get_progress_for_lesson,
    get_progress_for_course,
    get_course_progress_summary,
    get_course_progress,
    get_courses_in_progress
)

from .certificate_crud import (
    issue_certificate, get_certificate_for_user_course, get_certificate_by_code, get_certificates_for_user
)

from .badge_crud import (
    DEFAULT_BADGES, ensure_badge_catalog, get_badges, get_badge, get_badges_for_user, award_badge
)


__all__ = [
    # User CRUD
    "get_user_by_id", "get_user_by_email", "get_user_by_firebase_uid", "create_user",

    # Course CRUD
    "create_course", "get_course", "get_course_by_slug", "get_published_courses", "update_course", "delete_course",
    "get_lesson", "get_quiz_with_questions",

    # Quiz grading
    "PASS_THRESHOLD", "is_answer_correct", "grade_questions", "submit_quiz", "get_quiz_results_for_user",

    # Progress CRUD
    "mark_lesson_complete", "get_progress_for_lesson", "get_progress_for_course",
    "get_course_progress_summary", "get_course_progress", "get_courses_in_progress",

    # Certificate CRUD
    "issue_certificate", "get_certificate_for_user_course", "get_certificate_by_code", "get_certificates_for_user",

    # Badge CRUD
    "DEFAULT_BADGES", "ensure_badge_catalog", "get_badges", "get_badge", "get_badges_for_user", "award_badge",
]
