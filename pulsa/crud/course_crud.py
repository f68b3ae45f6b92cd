from sqlalchemy.orm import Session, selectinload
from sqlalchemy.exc import IntegrityError
from typing import List, Optional
import logging

from pulsa.core.exceptions import ConflictError, NotFoundError
from pulsa.models import enums
from pulsa.models.course_model import (
    Course, CourseModule, Lesson, Quiz, Question, QuestionOption
)
from pulsa.schemas import course_schema as schemas

logger = logging.getLogger(__name__)

# Loader options for a course tree down to question options
_FULL_COURSE_TREE = (
    selectinload(Course.modules)
    .selectinload(CourseModule.lessons)
    .selectinload(Lesson.quiz)
    .selectinload(Quiz.questions)
    .selectinload(Question.options),
)

_REQUIRED_COURSE_FIELDS = {"title", "slug", "category", "difficulty", "published"}

# --- Course building ---
def _build_quiz(quiz_in: schemas.QuizCreate) -> Quiz:
    db_quiz = Quiz(title=quiz_in.title)
    for q_idx, question_in in enumerate(quiz_in.questions):
        db_question = Question(
            text=question_in.text,
            question_type=question_in.question_type,
            order=question_in.order if question_in.order is not None else q_idx + 1,
            explanation=question_in.explanation,
            options=[
                QuestionOption(text=opt_in.text, is_correct=opt_in.is_correct)
                for opt_in in question_in.options
            ],
        )
        db_quiz.questions.append(db_question)
    return db_quiz

def _build_module(module_in: schemas.CourseModuleCreate, position: int) -> CourseModule:
    db_module = CourseModule(
        title=module_in.title,
        description=module_in.description,
        order=module_in.order if module_in.order is not None else position,
    )
    for l_idx, lesson_in in enumerate(module_in.lessons):
        db_lesson = Lesson(
            title=lesson_in.title,
            order=lesson_in.order if lesson_in.order is not None else l_idx + 1,
            lesson_type=lesson_in.lesson_type,
            content=lesson_in.content,
            video_url=lesson_in.video_url,
        )
        if lesson_in.quiz is not None:
            db_lesson.quiz = _build_quiz(lesson_in.quiz)
        db_module.lessons.append(db_lesson)
    return db_module

# --- Course CRUD ---
def create_course(db: Session, course_in: schemas.CourseCreate) -> Course:
    """
    Creates a course with its modules, lessons, quizzes, questions and options
    in a single transaction. Missing `order` values default to the 1-based position.
    """
    logger.debug(f"Creating course '{course_in.slug}' with {len(course_in.modules)} module(s)")
    if get_course_by_slug(db, course_in.slug, published_only=False):
        logger.warning(f"Course creation rejected: slug '{course_in.slug}' already exists.")
        raise ConflictError(f"A course with slug '{course_in.slug}' already exists.")

    db_course = Course(**course_in.model_dump(exclude={"modules"}))
    for m_idx, module_in in enumerate(course_in.modules):
        db_course.modules.append(_build_module(module_in, m_idx + 1))

    try:
        db.add(db_course)
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.warning(f"Integrity error creating course '{course_in.slug}': {e}")
        raise ConflictError(f"A course with slug '{course_in.slug}' already exists.") from e
    except Exception as e:
        db.rollback()
        logger.error(f"Error creating course '{course_in.slug}': {e}", exc_info=True)
        raise

    logger.info(f"Course '{db_course.title}' (ID: {db_course.id}) created successfully.")
    return get_course(db, db_course.id)

def get_course(db: Session, course_id: int) -> Optional[Course]:
    logger.debug(f"Fetching course with ID: {course_id}")
    return (
        db.query(Course)
        .options(*_FULL_COURSE_TREE)
        .filter(Course.id == course_id)
        .first()
    )

def get_course_by_slug(db: Session, slug: str, published_only: bool = True) -> Optional[Course]:
    logger.debug(f"Fetching course by slug: {slug} (published_only={published_only})")
    query = db.query(Course).options(*_FULL_COURSE_TREE).filter(Course.slug == slug)
    if published_only:
        query = query.filter(Course.published.is_(True))
    return query.first()

def get_published_courses(
    db: Session,
    skip: int = 0,
    limit: int = 50,
    category: Optional[str] = None,
    difficulty: Optional[enums.CourseDifficulty] = None,
) -> List[Course]:
    logger.debug(f"Fetching published courses with skip: {skip}, limit: {limit}, category: {category}, difficulty: {difficulty}")
    query = (
        db.query(Course)
        .options(selectinload(Course.modules).selectinload(CourseModule.lessons))
        .filter(Course.published.is_(True))
    )
    if category:
        query = query.filter(Course.category == category)
    if difficulty:
        query = query.filter(Course.difficulty == difficulty)

    return query.order_by(Course.created_at.desc(), Course.id.desc()).offset(skip).limit(limit).all()

def update_course(db: Session, course_id: int, course_in: schemas.CourseUpdate) -> Course:
    db_course = db.query(Course).filter(Course.id == course_id).first()
    if not db_course:
        logger.warning(f"Course with ID {course_id} not found for update.")
        raise NotFoundError("Course", course_id)

    update_data = course_in.model_dump(exclude_unset=True)
    # Only optional columns can be cleared with null
    update_data = {k: v for k, v in update_data.items() if v is not None or k not in _REQUIRED_COURSE_FIELDS}
    logger.debug(f"Updating course ID: {course_id} with data: {update_data}")
    for field, value in update_data.items():
        setattr(db_course, field, value)

    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.warning(f"Integrity error updating course ID {course_id}: {e}")
        raise ConflictError(f"A course with slug '{course_in.slug}' already exists.") from e

    logger.info(f"Course '{db_course.title}' (ID: {db_course.id}) updated successfully.")
    return get_course(db, course_id)

def delete_course(db: Session, course_id: int) -> None:
    db_course = db.query(Course).filter(Course.id == course_id).first()
    if not db_course:
        logger.warning(f"Course with ID {course_id} not found for deletion.")
        raise NotFoundError("Course", course_id)

    logger.debug(f"Deleting course ID: {course_id} ('{db_course.title}')")
    db.delete(db_course)
    db.commit()
    logger.info(f"Course ID: {course_id} deleted with its modules, lessons, quizzes, progress and certificates.")

# --- Lesson / Quiz lookups ---
def get_lesson(db: Session, lesson_id: int) -> Optional[Lesson]:
    logger.debug(f"Fetching lesson with ID: {lesson_id}")
    return (
        db.query(Lesson)
        .options(selectinload(Lesson.module))
        .filter(Lesson.id == lesson_id)
        .first()
    )

def get_quiz_with_questions(db: Session, quiz_id: int) -> Optional[Quiz]:
    logger.debug(f"Fetching quiz with ID: {quiz_id} along with questions and options")
    return (
        db.query(Quiz)
        .options(selectinload(Quiz.questions).selectinload(Question.options))
        .filter(Quiz.id == quiz_id)
        .first()
    )
