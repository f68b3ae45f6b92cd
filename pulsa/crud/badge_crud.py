from sqlalchemy.orm import Session, selectinload
from sqlalchemy.exc import IntegrityError
from typing import List, Optional
import logging

from pulsa.core.exceptions import NotFoundError
from pulsa.models.badge_model import Badge, UserBadge
from pulsa.models.enums import BadgeCondition
from pulsa.crud.user_crud import get_user_by_id

logger = logging.getLogger(__name__)

# Static catalog; awards are recorded explicitly, there is no automatic awarding engine.
DEFAULT_BADGES = [
    {"name": "First Step", "description": "Complete your first lesson", "icon": "🎯", "condition": BadgeCondition.FIRST_LESSON.value},
    {"name": "Curious", "description": "Start 3 different courses", "icon": "🔍", "condition": BadgeCondition.START_3_COURSES.value},
    {"name": "Quiz Expert", "description": "Score 100% on a quiz", "icon": "🏆", "condition": BadgeCondition.PERFECT_QUIZ.value},
    {"name": "Dedicated", "description": "Complete a full course", "icon": "⭐", "condition": BadgeCondition.COMPLETE_COURSE.value},
    {"name": "AI Master", "description": "Complete every available course", "icon": "🤖", "condition": BadgeCondition.COMPLETE_ALL_COURSES.value},
]


def ensure_badge_catalog(db: Session) -> int:
    """Inserts the default badges that are missing. Returns how many were added."""
    existing = {condition for (condition,) in db.query(Badge.condition).all()}
    missing = [Badge(**data) for data in DEFAULT_BADGES if data["condition"] not in existing]
    if not missing:
        return 0

    try:
        db.add_all(missing)
        db.commit()
    except IntegrityError as e:
        # Another worker seeded the catalog first
        db.rollback()
        logger.info(f"Badge catalog already seeded concurrently: {e}")
        return 0

    logger.info(f"Added {len(missing)} badge(s) to the catalog.")
    return len(missing)

def get_badges(db: Session) -> List[Badge]:
    return db.query(Badge).order_by(Badge.id).all()

def get_badge(db: Session, badge_id: int) -> Optional[Badge]:
    logger.debug(f"Fetching badge with ID: {badge_id}")
    return db.query(Badge).filter(Badge.id == badge_id).first()

def get_badges_for_user(db: Session, user_id: int) -> List[UserBadge]:
    """Badges earned by a user, newest first."""
    logger.debug(f"Fetching badges for user_id {user_id}")
    return (
        db.query(UserBadge)
        .options(selectinload(UserBadge.badge))
        .filter(UserBadge.user_id == user_id)
        .order_by(UserBadge.earned_at.desc(), UserBadge.id.desc())
        .all()
    )

def award_badge(db: Session, user_id: int, badge_id: int) -> UserBadge:
    """
    Records that a user earned a badge. Awarding twice returns the first award.
    Raises NotFoundError for an unknown user or badge.
    """
    if not get_user_by_id(db, user_id):
        raise NotFoundError("User", user_id)
    if not get_badge(db, badge_id):
        raise NotFoundError("Badge", badge_id)

    existing = db.query(UserBadge).filter(UserBadge.user_id == user_id, UserBadge.badge_id == badge_id).first()
    if existing:
        logger.info(f"User {user_id} already holds badge {badge_id}.")
        return existing

    award = UserBadge(user_id=user_id, badge_id=badge_id)
    try:
        db.add(award)
        db.commit()
        db.refresh(award)
    except IntegrityError:
        db.rollback()
        logger.info(f"Badge {badge_id} awarded to user {user_id} concurrently; returning stored award.")
        return db.query(UserBadge).filter(UserBadge.user_id == user_id, UserBadge.badge_id == badge_id).one()

    logger.info(f"Badge {badge_id} awarded to user {user_id} (ID: {award.id}).")
    return award
