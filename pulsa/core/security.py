import logging
from fastapi import HTTPException, status
from firebase_admin import auth
from firebase_admin.auth import InvalidIdTokenError, ExpiredIdTokenError, RevokedIdTokenError

from pulsa.core.firebase_config import get_firebase_app
from pulsa.schemas.user_schema import TokenData

logger = logging.getLogger(__name__)

def verify_firebase_id_token(id_token: str) -> TokenData:
    """
    Verifies a Firebase ID token and extracts user information.

    Args:
        id_token: The Firebase ID token string.

    Returns:
        TokenData: firebase_uid, email and (optional) display name.

    Raises:
        HTTPException:
            - 401 UNAUTHORIZED if the token is invalid, expired, revoked,
              or is missing the uid/email claims.
            - 500 INTERNAL_SERVER_ERROR for other Firebase Admin SDK errors.
    """
    try:
        get_firebase_app()

        decoded_token = auth.verify_id_token(id_token)

        firebase_uid = decoded_token.get("uid")
        email = decoded_token.get("email")

        if not firebase_uid or not email:
            logger.warning("Firebase ID token is missing 'uid' or 'email' claims.")
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid authentication credentials: Missing essential token claims.",
                headers={"WWW-Authenticate": "Bearer"},
            )

        logger.info(f"Firebase ID token verified successfully for UID: {firebase_uid}")
        return TokenData(firebase_uid=firebase_uid, email=email, name=decoded_token.get("name"))

    except HTTPException:
        raise
    except (InvalidIdTokenError, ExpiredIdTokenError, RevokedIdTokenError) as e:
        logger.warning(f"Firebase ID token verification failed: {e}")
        detail_message = "Invalid or expired authentication token."
        if isinstance(e, ExpiredIdTokenError):
            detail_message = "Authentication token has expired. Please log in again."
        elif isinstance(e, RevokedIdTokenError):
            detail_message = "Authentication token has been revoked. Please log in again."

        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail_message,
            headers={"WWW-Authenticate": "Bearer"},
        )
    except Exception as e:
        logger.error(f"An unexpected error occurred during Firebase ID token verification: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Could not verify authentication token due to a server error.",
        )
