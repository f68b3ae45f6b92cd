from fastapi import APIRouter, Depends, HTTPException, status, Body
from sqlalchemy.orm import Session
import logging

from pulsa.core.database import get_db
from pulsa.core.config import Settings
from pulsa.core.dependencies import get_current_active_user, get_app_settings
from pulsa.core.exceptions import ConflictError
from pulsa.core.security import verify_firebase_id_token
from pulsa.crud.user_crud import create_user, get_user_by_firebase_uid
from pulsa.models.enums import UserRole
from pulsa.models.user_model import User
from pulsa.schemas.user_schema import (
    UserRegisterRequest,
    UserLoginRequest,
    UserDisplay,
    AuthResponse,
    UserCreateInternal,
    TokenData
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register_user_after_firebase(
    payload: UserRegisterRequest = Body(...),
    db: Session = Depends(get_db),
    app_settings: Settings = Depends(get_app_settings)
):
    """
    Register a new user in the application's database after successful
    authentication and registration with Firebase on the client-side.

    The client must obtain a Firebase ID token and send it in the request body.
    """
    logger.info("Registration attempt with Firebase ID token.")

    try:
        token_data: TokenData = verify_firebase_id_token(payload.firebase_id_token)
    except HTTPException as e:
        logger.warning(f"Firebase ID token verification failed during registration: {e.detail}")
        raise

    logger.info(f"Token verified for UID: {token_data.firebase_uid}, Email: {token_data.email}")

    user_create_data = UserCreateInternal(
        firebase_uid=token_data.firebase_uid,
        email=token_data.email,
        name=payload.name or token_data.name,
        role=UserRole.LEARNER,
    )

    try:
        db_user = create_user(db, user_data=user_create_data, app_settings=app_settings)
    except ConflictError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))

    logger.info(f"User {db_user.email} (UID: {db_user.firebase_uid}) successfully registered (ID: {db_user.id}).")
    return AuthResponse(
        message="User registered successfully.",
        user=UserDisplay.model_validate(db_user)
    )


@router.post("/login", response_model=AuthResponse)
def login_user_with_firebase(
    payload: UserLoginRequest = Body(...),
    db: Session = Depends(get_db)
):
    """
    Logs in a user who has authenticated with Firebase on the client-side.
    This endpoint verifies the token and confirms the user's existence in the local DB.
    """
    logger.info("Login attempt with Firebase ID token.")

    try:
        token_data: TokenData = verify_firebase_id_token(payload.firebase_id_token)
    except HTTPException as e:
        logger.warning(f"Firebase ID token verification failed during login: {e.detail}")
        raise

    user = get_user_by_firebase_uid(db, firebase_uid=token_data.firebase_uid)
    if not user:
        logger.warning(f"Login failed: User with Firebase UID {token_data.firebase_uid} not found in local database.")
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not registered in our system. Please complete registration.",
        )

    logger.info(f"User {user.email} (Firebase UID: {token_data.firebase_uid}) logged in successfully.")
    return AuthResponse(
        message="Login successful.",
        user=UserDisplay.model_validate(user)
    )


@router.get("/users/me", response_model=UserDisplay)
def read_users_me(current_user: User = Depends(get_current_active_user)):
    """
    Get current authenticated user's details.
    Requires a valid Firebase ID token in the Authorization header.
    """
    logger.info(f"Fetching details for current user: {current_user.email} (ID: {current_user.id})")
    return current_user
