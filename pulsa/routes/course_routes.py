from fastapi import APIRouter, Depends, HTTPException, status, Query, Response
from sqlalchemy.orm import Session
from typing import List, Optional
import logging

from pulsa.core.database import get_db
from pulsa.core.dependencies import get_current_admin_user
from pulsa.core.exceptions import ConflictError, NotFoundError
from pulsa.models.user_model import User
from pulsa.models import enums as model_enums # For query params
from pulsa.schemas import course_schema as schemas # Alias for clarity
from pulsa.crud import course_crud as crud # Alias for clarity

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/courses", tags=["Course Catalog"])


@router.get("", response_model=List[schemas.CourseSummaryDisplay])
def read_courses_list(
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=100),
    category: Optional[str] = Query(None),
    difficulty: Optional[model_enums.CourseDifficulty] = Query(None),
    db: Session = Depends(get_db)
):
    """
    Get the published courses, newest first. Publicly accessible.
    Supports filtering by category and difficulty.
    """
    logger.debug(f"Listing courses with skip: {skip}, limit: {limit}, category: {category}, difficulty: {difficulty}")
    return crud.get_published_courses(db, skip=skip, limit=limit, category=category, difficulty=difficulty)

@router.get("/{slug}", response_model=schemas.CourseDetailDisplay)
def read_single_course(slug: str, db: Session = Depends(get_db)):
    """
    Get a published course with its modules, lessons and quizzes. Publicly accessible.
    The answer key is never part of this response.
    """
    course = crud.get_course_by_slug(db, slug)
    if not course:
        logger.warning(f"Published course with slug '{slug}' not found.")
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Course '{slug}' not found.")
    return course

@router.post("", response_model=schemas.CourseDetailDisplay, status_code=status.HTTP_201_CREATED)
def create_new_course(
    course_in: schemas.CourseCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin_user) # Only admins can create courses
):
    """
    Create a course together with its modules, lessons and quizzes. (Admin only)
    """
    logger.info(f"Admin user {current_user.email} creating course: {course_in.title}")
    try:
        return crud.create_course(db=db, course_in=course_in)
    except ConflictError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))

@router.patch("/{course_id}", response_model=schemas.CourseDetailDisplay)
def update_existing_course(
    course_id: int,
    course_in: schemas.CourseUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin_user)
):
    """
    Update a course's own fields, including publishing it. (Admin only)
    """
    logger.info(f"Admin user {current_user.email} updating course ID {course_id}")
    try:
        return crud.update_course(db=db, course_id=course_id, course_in=course_in)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ConflictError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))

@router.delete("/{course_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_existing_course(
    course_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin_user)
):
    """
    Delete a course with everything that belongs to it. (Admin only)
    """
    logger.info(f"Admin user {current_user.email} deleting course ID {course_id}")
    try:
        crud.delete_course(db=db, course_id=course_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
