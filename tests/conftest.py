import pytest
from fastapi import Depends
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from pulsa.core.config import Settings
from pulsa.core.database import get_db
from pulsa.core.dependencies import get_current_user
from pulsa.crud import certificate_crud, course_crud, progress_crud
from pulsa.main import create_app
from pulsa.models.enums import UserRole
from pulsa.models.user_model import User
from pulsa.schemas.course_schema import CourseCreate


@pytest.fixture
def app():
    app_settings = Settings(
        DATABASE_URL="sqlite://",
        CREATE_TABLES_ON_STARTUP=True,
        GOOGLE_APPLICATION_CREDENTIALS=None,
        LOG_LEVEL="WARNING",
    )
    return create_app(app_settings)


@pytest.fixture
def client(app):
    # Entering the client runs startup: tables and the badge catalog
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def db(app, client):
    session = app.state.session_factory()
    try:
        yield session
    finally:
        session.close()


def _make_user(db: Session, uid: str, email: str, role: UserRole = UserRole.LEARNER) -> User:
    user = User(firebase_uid=uid, email=email, name=uid.title(), role=role)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def learner(db):
    return _make_user(db, "learner", "learner@example.com")


@pytest.fixture
def other_learner(db):
    return _make_user(db, "other", "other@example.com")


@pytest.fixture
def admin(db):
    return _make_user(db, "admin", "admin@example.com", role=UserRole.ADMIN)


@pytest.fixture
def login_as(app):
    """Makes the API treat requests as coming from the given user."""
    def _login_as(user: User):
        user_id = user.id

        def _current_user(db: Session = Depends(get_db)) -> User:
            return db.query(User).filter(User.id == user_id).one()

        app.dependency_overrides[get_current_user] = _current_user

    yield _login_as
    app.dependency_overrides.clear()


SAMPLE_COURSE = {
    "title": "Introduction to AI",
    "slug": "intro-to-ai",
    "description": "What machine learning is and is not.",
    "category": "ai",
    "difficulty": "beginner",
    "duration": "2 hours",
    "published": True,
    "modules": [
        {
            "title": "Foundations",
            "lessons": [
                {
                    "title": "What is AI?",
                    "content": "Some text.",
                    "quiz": {
                        "title": "Foundations check",
                        "questions": [
                            {
                                "text": "Which one is a supervised task?",
                                "question_type": "single",
                                "explanation": "Labels make it supervised.",
                                "options": [
                                    {"text": "Classification", "is_correct": True},
                                    {"text": "Clustering", "is_correct": False},
                                ],
                            },
                            {
                                "text": "Which are neural network layers?",
                                "question_type": "multiple",
                                "options": [
                                    {"text": "Dense", "is_correct": False},
                                    {"text": "Convolutional", "is_correct": True},
                                    {"text": "Recurrent", "is_correct": True},
                                ],
                            },
                        ],
                    },
                },
                {"title": "A short history", "lesson_type": "video", "video_url": "https://videos.example.com/history"},
            ],
        },
        {
            "title": "Practice",
            "lessons": [
                {"title": "Your first model", "content": "Train it."},
            ],
        },
    ],
}


@pytest.fixture
def course(db):
    return course_crud.create_course(db, CourseCreate(**SAMPLE_COURSE))


@pytest.fixture
def quiz(course):
    return course.modules[0].lessons[0].quiz


@pytest.fixture
def lesson_ids(course):
    return [lesson.id for module in course.modules for lesson in module.lessons]


@pytest.fixture
def without_on_conflict(monkeypatch):
    """Writes take the SAVEPOINT path used on dialects without INSERT ... ON CONFLICT."""
    monkeypatch.setattr(progress_crud, "dialect_insert", lambda db, model: None)
    monkeypatch.setattr(certificate_crud, "dialect_insert", lambda db, model: None)
