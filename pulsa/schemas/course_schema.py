from pydantic import BaseModel, Field, field_validator, model_validator
from typing import List, Optional
from datetime import datetime

from pulsa.models.enums import CourseDifficulty, LessonType, QuestionType

SLUG_PATTERN = r"^[a-z0-9]+(?:-[a-z0-9]+)*$"


def _check_unique_orders(items, label: str):
    """Explicit `order` values must not repeat within one parent."""
    orders = [item.order for item in items if item.order is not None]
    if len(orders) != len(set(orders)):
        raise ValueError(f"Duplicate order values among {label}.")
    return items

# --- QuestionOption Schemas ---
class QuestionOptionCreate(BaseModel):
    text: str = Field(..., min_length=1, max_length=500, description="Text content of the option")
    is_correct: bool = Field(False, description="Is this one of the correct options?")

class QuestionOptionPublic(BaseModel):
    # The answer key (is_correct) is never sent to learners before submission
    id: int
    text: str

    class Config:
        from_attributes = True

# --- Question Schemas ---
class QuestionCreate(BaseModel):
    text: str = Field(..., min_length=1, description="The text of the question")
    question_type: QuestionType = Field(QuestionType.SINGLE, description="single or multiple")
    order: Optional[int] = Field(None, ge=0, description="Order of the question within the quiz; defaults to its position")
    explanation: Optional[str] = Field(None, max_length=2000, description="Explanation shown when results are reviewed")
    options: List[QuestionOptionCreate] = Field(..., min_length=1, description="Options for this question")

    @model_validator(mode="after")
    def check_correct_options(self):
        correct_count = sum(o.is_correct for o in self.options)
        if correct_count == 0:
            raise ValueError("A question needs at least one correct option.")
        if self.question_type == QuestionType.SINGLE and correct_count > 1:
            raise ValueError("A single-choice question cannot have more than one correct option.")
        return self

class QuestionPublic(BaseModel):
    id: int
    text: str
    question_type: QuestionType
    order: int
    options: List[QuestionOptionPublic] = []

    class Config:
        from_attributes = True

# --- Quiz Schemas ---
class QuizCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255, description="Title of the quiz")
    questions: List[QuestionCreate] = Field(default_factory=list)

    @field_validator("questions")
    @classmethod
    def check_question_orders(cls, v):
        return _check_unique_orders(v, "questions")

class QuizPublic(BaseModel):
    id: int
    lesson_id: int
    title: str
    questions: List[QuestionPublic] = []

    class Config:
        from_attributes = True

# --- Lesson Schemas ---
class LessonCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    order: Optional[int] = Field(None, ge=0, description="Order within the module; defaults to its position")
    lesson_type: LessonType = LessonType.TEXT
    content: Optional[str] = None
    video_url: Optional[str] = Field(None, max_length=255)
    quiz: Optional[QuizCreate] = Field(None, description="Optional quiz attached to this lesson")

class LessonDisplay(BaseModel):
    id: int
    module_id: int
    title: str
    order: int
    lesson_type: LessonType
    content: Optional[str] = None
    video_url: Optional[str] = None
    quiz: Optional[QuizPublic] = None

    class Config:
        from_attributes = True

# --- CourseModule Schemas ---
class CourseModuleCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    order: Optional[int] = Field(None, ge=0, description="Order within the course; defaults to its position")
    lessons: List[LessonCreate] = Field(default_factory=list)

    @field_validator("lessons")
    @classmethod
    def check_lesson_orders(cls, v):
        return _check_unique_orders(v, "lessons")

class CourseModuleDisplay(BaseModel):
    id: int
    course_id: int
    title: str
    description: Optional[str] = None
    order: int
    lessons: List[LessonDisplay] = []

    class Config:
        from_attributes = True

class CourseModuleSummary(BaseModel):
    id: int
    title: str
    description: Optional[str] = None
    order: int
    lesson_count: int

    class Config:
        from_attributes = True

# --- Course Schemas ---
class CourseBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=255, description="Title of the course")
    slug: str = Field(..., min_length=1, max_length=255, pattern=SLUG_PATTERN, description="URL identifier, e.g. intro-to-ai")
    description: Optional[str] = None
    category: str = Field(..., min_length=1, max_length=100)
    difficulty: CourseDifficulty
    duration: Optional[str] = Field(None, max_length=50, description="Free text, e.g. '8 hours'")
    image_url: Optional[str] = Field(None, max_length=255)

class CourseCreate(CourseBase):
    published: bool = False
    modules: List[CourseModuleCreate] = Field(default_factory=list)

    @field_validator("modules")
    @classmethod
    def check_module_orders(cls, v):
        return _check_unique_orders(v, "modules")

class CourseUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    slug: Optional[str] = Field(None, min_length=1, max_length=255, pattern=SLUG_PATTERN)
    description: Optional[str] = None
    category: Optional[str] = Field(None, min_length=1, max_length=100)
    difficulty: Optional[CourseDifficulty] = None
    duration: Optional[str] = Field(None, max_length=50)
    image_url: Optional[str] = Field(None, max_length=255)
    published: Optional[bool] = None

class CourseSummaryDisplay(CourseBase):
    """Catalog entry: modules with lesson counts, no lesson content."""
    id: int
    published: bool
    lesson_count: int
    modules: List[CourseModuleSummary] = []
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class CourseDetailDisplay(CourseBase):
    id: int
    published: bool
    modules: List[CourseModuleDisplay] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class CourseRef(BaseModel):
    """Short course reference embedded in certificates and dashboards."""
    id: int
    title: str
    slug: str
    description: Optional[str] = None
    category: str
    difficulty: CourseDifficulty
    image_url: Optional[str] = None

    class Config:
        from_attributes = True

class LessonRef(BaseModel):
    """Lesson summary shown on progress entries."""
    id: int
    module_id: int
    title: str
    order: int
    lesson_type: LessonType

    class Config:
        from_attributes = True
