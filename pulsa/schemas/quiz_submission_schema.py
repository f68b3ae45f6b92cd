from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime

# --- Quiz Answer Schemas ---
class QuizAnswer(BaseModel):
    question_id: int = Field(..., description="ID of the question being answered")
    selected_option_ids: List[int] = Field(default_factory=list, description="IDs of every option the user selected")

# --- Quiz Submission Schemas ---
class QuizSubmissionCreate(BaseModel):
    # quiz_id is a path parameter; user_id comes from the authenticated user
    answers: List[QuizAnswer] = Field(..., description="Answers submitted by the user; unanswered questions count as empty selections")

# --- Quiz Result Schemas ---
class AnswerFeedback(BaseModel):
    question_id: int
    selected_option_ids: List[int]
    correct_option_ids: List[int]
    is_correct: bool
    explanation: Optional[str] = None

class QuizResultDisplay(BaseModel):
    result_id: int
    quiz_id: int
    score: int = Field(..., ge=0, description="Number of correctly answered questions")
    total: int = Field(..., ge=0, description="Number of questions in the quiz")
    percentage: int = Field(..., ge=0, le=100)
    passed: bool
    details: List[AnswerFeedback] = []

class QuizResultHistoryItem(BaseModel):
    """Stored attempt, as listed on the dashboard."""
    id: int
    quiz_id: int
    score: int
    total: int
    percentage: int
    passed: bool
    answers: List[AnswerFeedback] = []
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
