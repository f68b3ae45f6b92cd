import firebase_admin
from firebase_admin import credentials
from typing import Optional
import os
import logging

logger = logging.getLogger(__name__)


def initialize_firebase_app(cred_path: Optional[str] = None):
    """
    Initializes the Firebase Admin SDK using service account credentials.
    The path to the service account JSON file comes from the argument or the
    GOOGLE_APPLICATION_CREDENTIALS environment variable.
    The SDK keeps its own default app registry, so repeated calls return the existing app.
    """
    try:
        return firebase_admin.get_app()
    except ValueError:
        pass # Default app not created yet

    cred_path = cred_path or os.getenv("GOOGLE_APPLICATION_CREDENTIALS")
    if not cred_path:
        logger.error("GOOGLE_APPLICATION_CREDENTIALS environment variable is not set.")
        raise ValueError("GOOGLE_APPLICATION_CREDENTIALS environment variable is not set.")

    if not os.path.exists(cred_path):
        logger.error(f"Firebase service account key file not found at path: {cred_path}")
        raise FileNotFoundError(f"Firebase service account key file not found at path: {cred_path}")

    try:
        cred = credentials.Certificate(cred_path)
        app = firebase_admin.initialize_app(cred)
        logger.info("Firebase Admin SDK initialized successfully.")
        return app
    except Exception as e:
        logger.error(f"Error initializing Firebase Admin SDK: {e}", exc_info=True)
        raise


def get_firebase_app():
    """Returns the initialized Firebase app, initializing it on first use."""
    return initialize_firebase_app()
