from sqlalchemy.orm import Session
from typing import Dict, Iterable, List, Optional, Set
import logging

from pulsa.core.exceptions import InvalidInputError, NotFoundError
from pulsa.core.scoring import compute_percentage
from pulsa.crud.course_crud import get_quiz_with_questions
from pulsa.models.course_model import Question
from pulsa.models.quiz_result_model import QuizResult
from pulsa.schemas import quiz_submission_schema as schemas

logger = logging.getLogger(__name__)

PASS_THRESHOLD = 70 # Percentage needed to pass a quiz


def is_answer_correct(selected_option_ids: Iterable[int], correct_option_ids: Iterable[int]) -> bool:
    """
    All-or-nothing: the selection must equal the correct set exactly.
    A question with no correct option is answered correctly only by an empty selection.
    """
    return set(selected_option_ids) == set(correct_option_ids)

def _selections_by_question(questions: List[Question], answers: List[schemas.QuizAnswer]) -> Dict[int, Set[int]]:
    """Validates answers against the quiz's questions and indexes them by question id."""
    question_ids = {question.id for question in questions}
    selections: Dict[int, Set[int]] = {}
    for answer in answers:
        if answer.question_id not in question_ids:
            raise InvalidInputError(f"Question {answer.question_id} does not belong to this quiz.")
        if answer.question_id in selections:
            raise InvalidInputError(f"Question {answer.question_id} is answered more than once.")
        selections[answer.question_id] = set(answer.selected_option_ids)
    return selections

def grade_questions(questions: List[Question], answers: List[schemas.QuizAnswer]) -> List[schemas.AnswerFeedback]:
    """Per-question verdicts in question order; unanswered questions count as empty selections."""
    selections = _selections_by_question(questions, answers)

    feedback = []
    for question in questions:
        selected = selections.get(question.id, set())
        correct = question.correct_option_ids
        feedback.append(schemas.AnswerFeedback(
            question_id=question.id,
            selected_option_ids=sorted(selected),
            correct_option_ids=sorted(correct),
            is_correct=is_answer_correct(selected, correct),
            explanation=question.explanation,
        ))
    return feedback

def submit_quiz(
    db: Session,
    quiz_id: int,
    user_id: int,
    submission_in: schemas.QuizSubmissionCreate,
    pass_threshold: int = PASS_THRESHOLD,
) -> schemas.QuizResultDisplay:
    """
    Grades a quiz submission and stores the attempt as a new QuizResult row.
    Raises NotFoundError for an unknown quiz and InvalidInputError for answers that
    do not fit the quiz; nothing is written in either case.
    """
    logger.info(f"Processing quiz submission for quiz_id {quiz_id} by user_id {user_id}")

    db_quiz = get_quiz_with_questions(db, quiz_id)
    if not db_quiz:
        logger.warning(f"Quiz with ID {quiz_id} not found for submission.")
        raise NotFoundError("Quiz", quiz_id)

    try:
        feedback = grade_questions(db_quiz.questions, submission_in.answers)
    except InvalidInputError as e:
        logger.warning(f"Rejected submission for quiz {quiz_id} by user {user_id}: {e}")
        raise

    total = len(feedback)
    score = sum(1 for item in feedback if item.is_correct)
    percentage = compute_percentage(score, total)
    passed = percentage >= pass_threshold

    db_result = QuizResult(
        user_id=user_id,
        quiz_id=quiz_id,
        score=score,
        total=total,
        passed=passed,
        answers=[item.model_dump() for item in feedback],
    )
    try:
        db.add(db_result)
        db.commit()
        db.refresh(db_result)
    except Exception as e:
        db.rollback()
        logger.error(f"Error saving quiz result for quiz {quiz_id}, user {user_id}: {e}", exc_info=True)
        raise

    logger.info(f"Quiz {quiz_id} submitted by user {user_id}. Score: {score}/{total} ({percentage}%), passed: {passed}")

    return schemas.QuizResultDisplay(
        result_id=db_result.id,
        quiz_id=quiz_id,
        score=score,
        total=total,
        percentage=percentage,
        passed=passed,
        details=feedback,
    )

def get_quiz_results_for_user(
    db: Session,
    user_id: int,
    quiz_id: Optional[int] = None,
    skip: int = 0,
    limit: int = 50,
) -> List[QuizResult]:
    logger.debug(f"Fetching quiz results for user_id {user_id} (quiz_id={quiz_id})")
    query = db.query(QuizResult).filter(QuizResult.user_id == user_id)
    if quiz_id is not None:
        query = query.filter(QuizResult.quiz_id == quiz_id)
    return query.order_by(QuizResult.created_at.desc(), QuizResult.id.desc()).offset(skip).limit(limit).all()
