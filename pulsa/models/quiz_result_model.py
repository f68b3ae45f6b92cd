from sqlalchemy import Column, Integer, Boolean, TIMESTAMP, ForeignKey, JSON
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from pulsa.core.database import Base
from pulsa.core.scoring import compute_percentage

class QuizResult(Base):
    """One row per submission attempt. Rows are never updated."""
    __tablename__ = "quiz_results"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    quiz_id = Column(Integer, ForeignKey("quizzes.id", ondelete="CASCADE"), nullable=False, index=True)

    score = Column(Integer, nullable=False) # Number of correctly answered questions
    total = Column(Integer, nullable=False)
    passed = Column(Boolean, nullable=False)
    # Per-question detail: selected vs correct option ids
    answers = Column(JSON, nullable=False, default=list)

    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())

    # Relationships
    user = relationship("User", back_populates="quiz_results")
    quiz = relationship("Quiz", back_populates="results")

    @property
    def percentage(self) -> int:
        return compute_percentage(self.score, self.total)

    def __repr__(self):
        return f"<QuizResult(id={self.id}, user_id={self.user_id}, quiz_id={self.quiz_id}, score={self.score}/{self.total})>"
