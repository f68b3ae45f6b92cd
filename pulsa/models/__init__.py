# This file makes the 'models' directory a Python package.

from pulsa.core.database import Base # Base must be imported before models that use it

from .enums import ( # Import all enums
    CourseDifficulty, LessonType, QuestionType, UserRole, BadgeCondition
)

from .user_model import User
from .course_model import (
    Course,
    CourseModule,
    Lesson,
    Quiz,
    Question,
    QuestionOption
)
from .progress_model import Progress
from .quiz_result_model import QuizResult
from .certificate_model import Certificate
from .badge_model import Badge, UserBadge


__all__ = [
    "Base",
    # Models
    "User",
    "Course",
    "CourseModule",
    "Lesson",
    "Quiz",
    "Question",
    "QuestionOption",
    "Progress",
    "QuizResult",
    "Certificate",
    "Badge",
    "UserBadge",
    # Enums
    "CourseDifficulty",
    "LessonType",
    "QuestionType",
    "UserRole",
    "BadgeCondition",
]
