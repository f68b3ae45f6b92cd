from sqlalchemy import Column, Integer, String, TIMESTAMP, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
import uuid # For generating certificate codes

from pulsa.core.database import Base

def generate_certificate_code(prefix: str = "CERT") -> str:
    """Generates a short human-readable code, e.g. CERT-1A2B3C4D."""
    return f"{prefix}-{uuid.uuid4().hex[:8].upper()}"

class Certificate(Base):
    __tablename__ = "certificates"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    course_id = Column(Integer, ForeignKey("courses.id", ondelete="CASCADE"), nullable=False, index=True)

    code = Column(String(32), unique=True, nullable=False, index=True)
    issued_at = Column(TIMESTAMP(timezone=True), nullable=False)

    # Relationships
    user = relationship("User", back_populates="certificates")
    course = relationship("Course", back_populates="issued_certificates")

    __table_args__ = (
        UniqueConstraint('user_id', 'course_id', name='uq_user_course_certificate'), # One certificate per course
    )

    def __repr__(self):
        return f"<Certificate(id={self.id}, user_id={self.user_id}, course_id={self.course_id}, code='{self.code}')>"
