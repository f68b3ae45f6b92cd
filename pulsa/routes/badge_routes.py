from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List
import logging

from pulsa.core.database import get_db
from pulsa.core.dependencies import get_current_active_user
from pulsa.models.user_model import User
from pulsa.schemas import badge_schema as schemas
from pulsa.crud import badge_crud as crud

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/badges", tags=["Badges"])


@router.get("", response_model=List[schemas.BadgeDisplay])
def read_badge_catalog(db: Session = Depends(get_db)):
    """Every badge that can be earned. Publicly accessible."""
    return crud.get_badges(db)

@router.get("/me", response_model=List[schemas.UserBadgeDisplay])
def read_my_badges(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """Badges earned by the current user, newest first."""
    logger.info(f"Fetching badges for user {current_user.email}")
    return crud.get_badges_for_user(db, current_user.id)
