from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
import logging

from pulsa.core.database import get_db
from pulsa.core.dependencies import get_current_admin_user
from pulsa.core.exceptions import NotFoundError
from pulsa.models.user_model import User
from pulsa.schemas import badge_schema
from pulsa.crud import badge_crud


logger = logging.getLogger(__name__)
# Course authoring lives in course_routes behind the same admin dependency.
router = APIRouter(prefix="/admin", tags=["Admin Panel"])


@router.post(
    "/users/{user_id}/badges/{badge_id}",
    response_model=badge_schema.UserBadgeDisplay,
    status_code=status.HTTP_201_CREATED,
)
def admin_award_badge(
    user_id: int,
    badge_id: int,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin_user)
):
    """
    Admin: Record that a user earned a badge. Awarding the same badge again returns the first award.
    """
    logger.info(f"Admin {current_admin.email} awarding badge {badge_id} to user {user_id}")
    try:
        return badge_crud.award_badge(db, user_id=user_id, badge_id=badge_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
