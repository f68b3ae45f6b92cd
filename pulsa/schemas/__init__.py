# This file makes the 'schemas' directory a Python package.

from .user_schema import (
    UserBase, UserCreateInternal, UserDisplay, TokenData,
    UserRegisterRequest, UserLoginRequest, AuthResponse
)

from .course_schema import (
    QuestionOptionCreate, QuestionOptionPublic,
    QuestionCreate, QuestionPublic,
    QuizCreate, QuizPublic,
    LessonCreate, LessonDisplay,
    CourseModuleCreate, CourseModuleDisplay, CourseModuleSummary,
    CourseBase, CourseCreate, CourseUpdate, CourseSummaryDisplay, CourseDetailDisplay, CourseRef, LessonRef
)

from .certificate_schema import (
    CertificateDisplay, CertificateWithCourseDisplay
)

from .progress_schema import (
    ProgressDisplay, LessonCompletionResult, CourseProgressSummary, CourseProgressDisplay, MyCourseDisplay
)

from .quiz_submission_schema import (
    QuizAnswer, QuizSubmissionCreate, AnswerFeedback, QuizResultDisplay, QuizResultHistoryItem
)

from .badge_schema import (
    BadgeDisplay, UserBadgeDisplay
)


__all__ = [
    # User Schemas
    "UserBase", "UserCreateInternal", "UserDisplay", "TokenData",
    "UserRegisterRequest", "UserLoginRequest", "AuthResponse",

    # Course Schemas
    "QuestionOptionCreate", "QuestionOptionPublic",
    "QuestionCreate", "QuestionPublic",
    "QuizCreate", "QuizPublic",
    "LessonCreate", "LessonDisplay",
    "CourseModuleCreate", "CourseModuleDisplay", "CourseModuleSummary",
    "CourseBase", "CourseCreate", "CourseUpdate", "CourseSummaryDisplay", "CourseDetailDisplay", "CourseRef", "LessonRef",

    # Certificate Schemas
    "CertificateDisplay", "CertificateWithCourseDisplay",

    # Progress Schemas
    "ProgressDisplay", "LessonCompletionResult", "CourseProgressSummary", "CourseProgressDisplay", "MyCourseDisplay",

    # Quiz Submission Schemas
    "QuizAnswer", "QuizSubmissionCreate", "AnswerFeedback", "QuizResultDisplay", "QuizResultHistoryItem",

    # Badge Schemas
    "BadgeDisplay", "UserBadgeDisplay",
]
