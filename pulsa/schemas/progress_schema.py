from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime

from .certificate_schema import CertificateWithCourseDisplay
from .course_schema import CourseRef, LessonRef

class ProgressDisplay(BaseModel):
    id: int
    user_id: int
    lesson_id: int
    completed: bool
    completed_at: Optional[datetime] = Field(None, description="Timestamp of the first completion")
    lesson: LessonRef

    class Config:
        from_attributes = True

class LessonCompletionResult(BaseModel):
    progress: ProgressDisplay
    course_id: int
    course_completed: bool = Field(..., description="True once every lesson of the owning course is completed")
    certificate: Optional[CertificateWithCourseDisplay] = Field(None, description="Present when the course is completed")

class CourseProgressSummary(BaseModel):
    course_id: int
    total_lessons: int = Field(..., ge=0)
    completed_lessons: int = Field(..., ge=0)
    percentage: int = Field(..., ge=0, le=100, description="Rounded completion percentage, 0 for empty courses")

class CourseProgressDisplay(CourseProgressSummary):
    progress: List[ProgressDisplay] = []

class MyCourseDisplay(CourseProgressSummary):
    course: CourseRef
