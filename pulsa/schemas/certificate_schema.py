from pydantic import BaseModel
from datetime import datetime

from .course_schema import CourseRef

class CertificateDisplay(BaseModel):
    id: int
    user_id: int
    course_id: int
    code: str
    issued_at: datetime

    class Config:
        from_attributes = True

class CertificateWithCourseDisplay(CertificateDisplay):
    course: CourseRef
