from sqlalchemy.orm import Session, selectinload
from sqlalchemy.exc import IntegrityError
from sqlalchemy import func
from typing import List, Optional
from datetime import datetime, timezone
import logging

from pulsa.core.config import Settings
from pulsa.core.database import dialect_insert
from pulsa.core.exceptions import NotFoundError
from pulsa.core.scoring import compute_percentage
from pulsa.crud import course_crud
from pulsa.crud.certificate_crud import issue_certificate
from pulsa.models.course_model import Course, CourseModule, Lesson
from pulsa.models.progress_model import Progress
from pulsa.schemas import progress_schema as schemas
from pulsa.schemas.certificate_schema import CertificateWithCourseDisplay
from pulsa.schemas.course_schema import CourseRef

logger = logging.getLogger(__name__)


def _upsert_completed_progress(db: Session, user_id: int, lesson_id: int, now: datetime) -> None:
    """
    Marks (user, lesson) completed in one statement.
    The first completion timestamp wins; later calls never overwrite it.
    """
    stmt = dialect_insert(db, Progress)
    if stmt is not None:
        stmt = stmt.values(user_id=user_id, lesson_id=lesson_id, completed=True, completed_at=now)
        stmt = stmt.on_conflict_do_update(
            index_elements=["user_id", "lesson_id"],
            set_={
                "completed": True,
                "completed_at": func.coalesce(Progress.__table__.c.completed_at, stmt.excluded.completed_at),
            },
        )
        db.execute(stmt)
        return

    progress = get_progress_for_lesson(db, user_id, lesson_id)
    if progress is None:
        try:
            with db.begin_nested():
                db.add(Progress(user_id=user_id, lesson_id=lesson_id, completed=True, completed_at=now))
            return
        except IntegrityError:
            logger.debug(f"Concurrent progress insert for user {user_id}, lesson {lesson_id}; updating instead.")
            progress = get_progress_for_lesson(db, user_id, lesson_id)
    progress.completed = True
    if progress.completed_at is None:
        progress.completed_at = now

def mark_lesson_complete(
    db: Session,
    user_id: int,
    lesson_id: int,
    code_prefix: str = "CERT",
    app_settings: Optional[Settings] = None,
) -> schemas.LessonCompletionResult:
    """
    Records a lesson as completed for a user, then checks whether the owning course is complete.
    A completed course gets its certificate issued (or the existing one returned).
    Raises NotFoundError for an unknown lesson before anything is written.
    """
    logger.info(f"Marking lesson {lesson_id} complete for user {user_id}")

    lesson = course_crud.get_lesson(db, lesson_id)
    if not lesson:
        logger.warning(f"Lesson with ID {lesson_id} not found.")
        raise NotFoundError("Lesson", lesson_id)
    course_id = lesson.module.course_id

    try:
        _upsert_completed_progress(db, user_id, lesson_id, datetime.now(timezone.utc))
        db.commit()
    except Exception as e:
        db.rollback()
        logger.error(f"Error saving progress for user {user_id}, lesson {lesson_id}: {e}", exc_info=True)
        raise

    progress = (
        db.query(Progress)
        .options(selectinload(Progress.lesson))
        .populate_existing()
        .filter(Progress.user_id == user_id, Progress.lesson_id == lesson_id)
        .one()
    )

    summary = get_course_progress_summary(db, user_id, course_id)
    course_completed = summary.total_lessons > 0 and summary.completed_lessons == summary.total_lessons

    certificate = None
    if course_completed:
        certificate, _ = issue_certificate(
            db, user_id, course_id, code_prefix=code_prefix, app_settings=app_settings
        )

    return schemas.LessonCompletionResult(
        progress=schemas.ProgressDisplay.model_validate(progress),
        course_id=course_id,
        course_completed=course_completed,
        certificate=CertificateWithCourseDisplay.model_validate(certificate) if certificate else None,
    )

def get_progress_for_lesson(db: Session, user_id: int, lesson_id: int) -> Optional[Progress]:
    """Fetches the progress entry for a user and lesson."""
    logger.debug(f"Fetching progress for user_id {user_id}, lesson_id {lesson_id}")
    return db.query(Progress).filter(
        Progress.user_id == user_id,
        Progress.lesson_id == lesson_id
    ).first()

def get_progress_for_course(db: Session, user_id: int, course_id: int) -> List[Progress]:
    """Fetches all progress entries for a user in a course."""
    logger.debug(f"Fetching all progress for user_id {user_id}, course_id {course_id}")
    return (
        db.query(Progress)
        .options(selectinload(Progress.lesson))
        .join(Lesson, Progress.lesson_id == Lesson.id)
        .join(CourseModule, Lesson.module_id == CourseModule.id)
        .filter(Progress.user_id == user_id, CourseModule.course_id == course_id)
        .order_by(CourseModule.order, Lesson.order)
        .all()
    )

def get_course_progress_summary(db: Session, user_id: int, course_id: int) -> schemas.CourseProgressSummary:
    """
    Counts the course's lessons and the ones the user has completed.
    A course without lessons is 0% complete.
    """
    total_lessons = (
        db.query(func.count(Lesson.id))
        .join(CourseModule, Lesson.module_id == CourseModule.id)
        .filter(CourseModule.course_id == course_id)
        .scalar()
    )

    completed_lessons = (
        db.query(func.count(func.distinct(Progress.lesson_id)))
        .join(Lesson, Progress.lesson_id == Lesson.id)
        .join(CourseModule, Lesson.module_id == CourseModule.id)
        .filter(
            Progress.user_id == user_id,
            Progress.completed.is_(True),
            CourseModule.course_id == course_id,
        )
        .scalar()
    )

    percentage = compute_percentage(completed_lessons, total_lessons)
    logger.debug(f"User {user_id} course ID {course_id}: {completed_lessons}/{total_lessons} completed ({percentage}%)")
    return schemas.CourseProgressSummary(
        course_id=course_id,
        total_lessons=total_lessons,
        completed_lessons=completed_lessons,
        percentage=percentage,
    )

def get_course_progress(db: Session, user_id: int, course_id: int) -> schemas.CourseProgressDisplay:
    """Read path for a course's progress. Raises NotFoundError for an unknown course."""
    course_exists = db.query(Course.id).filter(Course.id == course_id).first()
    if not course_exists:
        logger.warning(f"Course with ID {course_id} not found for progress query.")
        raise NotFoundError("Course", course_id)

    summary = get_course_progress_summary(db, user_id, course_id)
    entries = get_progress_for_course(db, user_id, course_id)
    return schemas.CourseProgressDisplay(
        **summary.model_dump(),
        progress=[schemas.ProgressDisplay.model_validate(entry) for entry in entries],
    )

def get_courses_in_progress(db: Session, user_id: int) -> List[schemas.MyCourseDisplay]:
    """Courses where the user has at least one progress entry, with their completion summary."""
    logger.debug(f"Fetching courses with progress for user_id {user_id}")
    courses = (
        db.query(Course)
        .join(CourseModule, CourseModule.course_id == Course.id)
        .join(Lesson, Lesson.module_id == CourseModule.id)
        .join(Progress, Progress.lesson_id == Lesson.id)
        .filter(Progress.user_id == user_id)
        .distinct()
        .order_by(Course.id)
        .all()
    )

    my_courses = []
    for course in courses:
        summary = get_course_progress_summary(db, user_id, course.id)
        my_courses.append(schemas.MyCourseDisplay(**summary.model_dump(), course=CourseRef.model_validate(course)))
    return my_courses
