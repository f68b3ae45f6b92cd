from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session
from typing import List, Optional
import logging

from pulsa.core.config import Settings
from pulsa.core.database import get_db
from pulsa.core.dependencies import get_current_active_user, get_app_settings
from pulsa.core.exceptions import InvalidInputError, NotFoundError
from pulsa.models.user_model import User # For type hinting current_user
from pulsa.schemas import (
    progress_schema as progress_schemas,
    certificate_schema as cert_schemas,
    quiz_submission_schema as quiz_sub_schemas,
)
from pulsa.crud import (
    progress_crud,
    certificate_crud as cert_crud,
    quiz_crud,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/learn", tags=["Learning & Progress"])


# --- Quiz Grader ---

@router.post("/quizzes/{quiz_id}/submit", response_model=quiz_sub_schemas.QuizResultDisplay)
def submit_user_quiz_answers(
    quiz_id: int,
    submission: quiz_sub_schemas.QuizSubmissionCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
    app_settings: Settings = Depends(get_app_settings)
):
    """
    Submit answers for a quiz. Every question is graded by exact match of the
    selected options against the correct ones; the attempt is stored.
    """
    logger.info(f"User {current_user.email} submitting answers for quiz_id {quiz_id}")
    try:
        return quiz_crud.submit_quiz(
            db, quiz_id, current_user.id, submission, pass_threshold=app_settings.QUIZ_PASS_THRESHOLD
        )
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except InvalidInputError as e:
        logger.warning(f"Invalid quiz submission for quiz {quiz_id} by user {current_user.email}: {e}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

@router.get("/quiz-results", response_model=List[quiz_sub_schemas.QuizResultHistoryItem])
def get_my_quiz_results(
    quiz_id: Optional[int] = Query(None),
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=100),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """
    The current user's quiz attempts, newest first, optionally for one quiz.
    """
    logger.info(f"Fetching quiz results for user {current_user.email} (quiz_id={quiz_id})")
    return quiz_crud.get_quiz_results_for_user(db, current_user.id, quiz_id=quiz_id, skip=skip, limit=limit)


# --- Progress Tracker ---

@router.post("/progress/lessons/{lesson_id}/complete", response_model=progress_schemas.LessonCompletionResult)
def complete_lesson(
    lesson_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
    app_settings: Settings = Depends(get_app_settings)
):
    """
    Mark a lesson as completed. Repeating the call changes nothing.
    Completing the last lesson of a course issues its certificate.
    """
    logger.info(f"User {current_user.email} completing lesson_id {lesson_id}")
    try:
        return progress_crud.mark_lesson_complete(
            db, current_user.id, lesson_id,
            code_prefix=app_settings.CERTIFICATE_CODE_PREFIX,
            app_settings=app_settings,
        )
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))

@router.get("/progress/courses/{course_id}", response_model=progress_schemas.CourseProgressDisplay)
def get_user_progress_in_course(
    course_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """
    Completion summary and progress entries of the current user in a course.
    """
    logger.info(f"User {current_user.email} fetching progress for course_id {course_id}")
    try:
        return progress_crud.get_course_progress(db, current_user.id, course_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))

@router.get("/my-courses", response_model=List[progress_schemas.MyCourseDisplay])
def get_my_courses(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """
    Courses the user has started, with their completion percentage.
    """
    logger.info(f"Fetching 'my-courses' for user {current_user.email} (ID: {current_user.id})")
    return progress_crud.get_courses_in_progress(db, current_user.id)


# --- Certificates ---

@router.get("/certificates/my-certificates", response_model=List[cert_schemas.CertificateWithCourseDisplay])
def get_my_certificates_list(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """
    Lists all certificates issued to the current authenticated user.
    """
    logger.info(f"Fetching certificates for user {current_user.email}")
    return cert_crud.get_certificates_for_user(db, current_user.id)

@router.get("/certificates/verify/{code}", response_model=cert_schemas.CertificateWithCourseDisplay)
def verify_certificate_by_code(
    code: str,
    db: Session = Depends(get_db)
):
    """
    Verifies a certificate by its unique code. Publicly accessible.
    """
    logger.info(f"Verifying certificate with code: {code}")
    certificate = cert_crud.get_certificate_by_code(db, code)
    if not certificate:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Certificate not found or invalid verification code.")
    return certificate
