import os
from dotenv import load_dotenv
from typing import Optional, List

# Load .env file from the project root (parent of the 'pulsa' package)
dotenv_path = os.path.join(os.path.dirname(os.path.dirname(os.path.dirname(__file__))), '.env')
load_dotenv(dotenv_path)

class Settings:
    """
    Application settings read from the environment.
    A new instance re-reads the environment, so tests can build their own.
    """

    def __init__(self, **overrides):
        self.PROJECT_NAME: str = os.getenv("PROJECT_NAME", "Pulsa Learning Platform API")
        self.API_V1_STR: str = "/api/v1"

        # Database
        self.DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./pulsa.db")
        self.DATABASE_ECHO: bool = os.getenv("DATABASE_ECHO", "false").lower() == "true"
        # Dev convenience; production schema is managed with Alembic
        self.CREATE_TABLES_ON_STARTUP: bool = os.getenv("CREATE_TABLES_ON_STARTUP", "true").lower() == "true"

        # Firebase
        self.GOOGLE_APPLICATION_CREDENTIALS: Optional[str] = os.getenv("GOOGLE_APPLICATION_CREDENTIALS")

        # CORS
        self.CORS_ALLOWED_ORIGINS_STR: str = os.getenv("CORS_ALLOWED_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000")

        # Logging
        self.LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

        # Learning rules
        self.QUIZ_PASS_THRESHOLD: int = int(os.getenv("QUIZ_PASS_THRESHOLD", "70"))
        self.CERTIFICATE_CODE_PREFIX: str = os.getenv("CERTIFICATE_CODE_PREFIX", "CERT")

        # Application settings
        self.APP_FRONTEND_URL: str = os.getenv("APP_FRONTEND_URL", "http://localhost:3000")

        # Email settings
        self.EMAIL_HOST: Optional[str] = os.getenv("EMAIL_HOST")
        self.EMAIL_PORT: int = int(os.getenv("EMAIL_PORT", "587")) # Default to 587 for TLS
        self.EMAIL_USERNAME: Optional[str] = os.getenv("EMAIL_USERNAME")
        self.EMAIL_PASSWORD: Optional[str] = os.getenv("EMAIL_PASSWORD")
        self.EMAIL_FROM_ADDRESS: Optional[str] = os.getenv("EMAIL_FROM_ADDRESS")
        self.EMAIL_FROM_NAME: Optional[str] = os.getenv("EMAIL_FROM_NAME", self.PROJECT_NAME)
        self.EMAIL_USE_TLS: bool = os.getenv("EMAIL_USE_TLS", "true").lower() == "true"
        self.EMAIL_USE_SSL: bool = os.getenv("EMAIL_USE_SSL", "false").lower() == "true"
        self.EMAILS_TEMPLATES_DIR: str = os.getenv(
            "EMAILS_TEMPLATES_DIR",
            os.path.join(os.path.dirname(os.path.dirname(__file__)), "templates", "emails")
        )

        for key, value in overrides.items():
            if not hasattr(self, key):
                raise AttributeError(f"Unknown setting: {key}")
            setattr(self, key, value)

    @property
    def CORS_ALLOWED_ORIGINS(self) -> List[str]:
        return [origin.strip() for origin in self.CORS_ALLOWED_ORIGINS_STR.split(',') if origin.strip()]


def get_settings() -> Settings:
    return Settings()


settings = get_settings()

# Example usage:
# from pulsa.core.config import settings
# threshold = settings.QUIZ_PASS_THRESHOLD
