from fastapi import Depends, HTTPException, status, Request
from fastapi.security.utils import get_authorization_scheme_param
from sqlalchemy.orm import Session
import logging

from pulsa.core.config import Settings
from pulsa.core.database import get_db # Re-export or use directly
from pulsa.core.security import verify_firebase_id_token
from pulsa.crud.user_crud import get_user_by_firebase_uid
from pulsa.models.user_model import User
from pulsa.schemas.user_schema import TokenData

logger = logging.getLogger(__name__)


def get_app_settings(request: Request) -> Settings:
    """Settings of the application serving the request."""
    return request.app.state.settings


# Dependency to get the current user from a Firebase ID token
async def get_current_user(
    request: Request, db: Session = Depends(get_db)
) -> User:
    """
    Dependency to get the current authenticated user.
    Verifies the Firebase ID token from the Authorization header,
    then fetches the user from the database.
    """
    authorization: str = request.headers.get("Authorization")
    scheme, param = get_authorization_scheme_param(authorization)

    if not authorization or scheme.lower() != "bearer":
        logger.warning("Missing or invalid Bearer token in Authorization header.")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated. Bearer token required.",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        token_data: TokenData = verify_firebase_id_token(param)
    except HTTPException as e:
        logger.warning(f"Token verification failed: {e.detail}")
        raise

    user = get_user_by_firebase_uid(db, firebase_uid=token_data.firebase_uid)
    if user is None:
        # Valid token, but /auth/register was never completed for this identity
        logger.warning(f"User not found in DB for Firebase UID: {token_data.firebase_uid} from token.")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User account not found or not fully registered in the system.",
        )

    logger.debug(f"Authenticated user retrieved: {user.email} (ID: {user.id})")
    return user


async def get_current_active_user(current_user: User = Depends(get_current_user)) -> User:
    """Every registered user is active; kept as the single seam routes depend on."""
    return current_user


async def get_current_admin_user(current_user: User = Depends(get_current_active_user)) -> User:
    """
    Checks if the current user has the admin role.
    """
    if not current_user.is_admin:
        logger.warning(f"Admin access denied for user: {current_user.email} (Role: {current_user.role})")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Operation not permitted: Requires admin privileges.",
        )
    logger.info(f"Admin access granted for user: {current_user.email}")
    return current_user
