import enum

class CourseDifficulty(str, enum.Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"

class LessonType(str, enum.Enum):
    TEXT = "text"
    VIDEO = "video"

class QuestionType(str, enum.Enum):
    SINGLE = "single"     # Exactly one correct option expected
    MULTIPLE = "multiple" # Any number of correct options

class UserRole(str, enum.Enum):
    LEARNER = "learner"
    ADMIN = "admin"

class BadgeCondition(str, enum.Enum):
    FIRST_LESSON = "first_lesson"
    START_3_COURSES = "start_3_courses"
    PERFECT_QUIZ = "perfect_quiz"
    COMPLETE_COURSE = "complete_course"
    COMPLETE_ALL_COURSES = "complete_all_courses"

# Enum columns use `values_callable` so the stored strings are the lowercase values above.
# SQLAlchemy falls back to VARCHAR + CHECK on databases without native enum types.
