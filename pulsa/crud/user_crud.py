from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
import logging
from typing import Optional

from pulsa.core.config import Settings
from pulsa.core.exceptions import ConflictError
from pulsa.models.user_model import User
from pulsa.schemas.user_schema import UserCreateInternal
from pulsa.services import email_service

logger = logging.getLogger(__name__)


def get_user_by_id(db: Session, user_id: int) -> Optional[User]:
    """Fetches a user by their internal database ID."""
    logger.debug(f"Fetching user by ID: {user_id}")
    return db.query(User).filter(User.id == user_id).first()

def get_user_by_email(db: Session, email: str) -> Optional[User]:
    """Fetches a user by their email address."""
    logger.debug(f"Fetching user by email: {email}")
    return db.query(User).filter(User.email == email).first()

def get_user_by_firebase_uid(db: Session, firebase_uid: str) -> Optional[User]:
    """Fetches a user by their Firebase UID."""
    logger.debug(f"Fetching user by Firebase UID: {firebase_uid}")
    return db.query(User).filter(User.firebase_uid == firebase_uid).first()

def create_user(db: Session, user_data: UserCreateInternal, app_settings: Optional[Settings] = None) -> User:
    """
    Creates a new user in the database.
    Assumes firebase_uid and email come from a verified Firebase ID token.
    Raises ConflictError if the UID or email is already registered.
    """
    logger.info(f"Attempting to create user for email: {user_data.email}, Firebase UID: {user_data.firebase_uid}")

    if get_user_by_firebase_uid(db, user_data.firebase_uid):
        logger.warning(f"User creation failed: Firebase UID {user_data.firebase_uid} already exists.")
        raise ConflictError("User with this Firebase UID already exists.")
    if get_user_by_email(db, user_data.email):
        logger.warning(f"User creation failed: Email {user_data.email} already exists.")
        raise ConflictError("User with this email already exists.")

    db_user = User(
        firebase_uid=user_data.firebase_uid,
        email=user_data.email,
        name=user_data.name,
        role=user_data.role,
    )

    try:
        db.add(db_user)
        db.commit()
        db.refresh(db_user)
    except IntegrityError as e:
        # Lost a race against a concurrent registration for the same identity
        db.rollback()
        logger.warning(f"Integrity error creating user {user_data.email}: {e}")
        raise ConflictError("User with this Firebase UID or email already exists.") from e
    except Exception as e:
        db.rollback()
        logger.error(f"Error creating user {user_data.email}: {e}", exc_info=True)
        raise

    logger.info(f"User created successfully: {db_user.email} (ID: {db_user.id}).")

    try:
        email_service.send_templated_email(
            to_email=db_user.email,
            subject="Welcome to Pulsa!",
            html_template_name="welcome.html",
            context={"user_name": db_user.name or db_user.email},
            app_settings=app_settings,
        )
    except Exception as e_mail_exc:
        # Email failure must not undo the registration
        logger.error(f"Failed to send welcome email to {db_user.email}: {e_mail_exc}", exc_info=True)

    return db_user
