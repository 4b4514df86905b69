import logging
import math
import time
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from .models import (
    AnswerFeedback,
    QuestionResult,
    QuizDefinition,
    QuizQuestion,
    QuizResult,
)

logger = logging.getLogger(__name__)

# (minimum percentage, grade), highest first
GRADE_BANDS = [
    (95, "A+"),
    (90, "A"),
    (85, "B+"),
    (80, "B"),
    (75, "C+"),
    (70, "C"),
    (65, "D"),
]


class InvalidQuizDefinition(ValueError):
    """Raised when a quiz definition cannot be used to start a session."""


class SessionStateError(RuntimeError):
    """Raised when an operation is not allowed in the session's current state."""


class SessionState(str, Enum):
    PRESENTING = "presenting"
    FEEDBACK = "feedback"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


TERMINAL_STATES = (SessionState.COMPLETED, SessionState.CANCELLED)


# --- Grading ---
def normalize_answer(answer: Optional[str]) -> str:
    return (answer or "").strip().lower()


def accepted_forms(question: QuizQuestion) -> List[str]:
    """Every accepted answer, whichever field carries it."""
    forms = [question.accepted_answer] if question.accepted_answer else []
    forms.extend(question.accepted_answers or [])
    return [form for form in forms if normalize_answer(form)]


def check_answer(question: QuizQuestion, user_answer: Optional[str]) -> bool:
    """Lenient comparison: surrounding whitespace and case are ignored."""
    normalized = normalize_answer(user_answer)
    if not normalized:
        return False
    return any(normalized == normalize_answer(form) for form in accepted_forms(question))


def grade_for(percentage: int) -> str:
    for minimum, grade in GRADE_BANDS:
        if percentage >= minimum:
            return grade
    return "F"


def validate_definition(definition: QuizDefinition) -> None:
    if not definition.questions:
        raise InvalidQuizDefinition("A quiz needs at least one question.")
    if definition.total_points < definition.passing_score:
        raise InvalidQuizDefinition(
            f"Passing score {definition.passing_score} exceeds total points "
            f"{definition.total_points}."
        )
    ids = [q.id for q in definition.questions]
    if len(set(ids)) != len(ids):
        raise InvalidQuizDefinition("Question ids must be unique.")
    for question in definition.questions:
        if not accepted_forms(question):
            raise InvalidQuizDefinition(f"Question {question.id} has no accepted answer.")


def score_answers(
    definition: QuizDefinition, answers: Dict[str, str], time_spent: int
) -> QuizResult:
    """Grades every question from the stored answers."""
    question_results = []
    score = 0
    for question in definition.questions:
        user_answer = answers.get(question.id, "")
        correct = check_answer(question, user_answer)
        if correct:
            score += question.points
        question_results.append(
            QuestionResult(
                id=question.id,
                correct=correct,
                user_answer=user_answer,
                correct_answer=question.expected_answer,
                explanation=question.explanation,
            )
        )

    total_points = definition.total_points
    percentage = math.floor(score * 100 / total_points + 0.5) if total_points else 0
    return QuizResult(
        question_results=question_results,
        answers=dict(answers),
        correct_answers=sum(1 for r in question_results if r.correct),
        total_questions=len(definition.questions),
        score=score,
        total_points=total_points,
        passing_score=definition.passing_score,
        passed=score >= definition.passing_score,
        percentage=percentage,
        grade=grade_for(percentage),
        time_spent=time_spent,
    )


# --- Session state machine ---
class GrammarTestEngine:
    """
    Walks a user through one quiz definition, one question at a time.

    presenting(i) --submit--> feedback(i) --next--> presenting(i+1) | completed
    presenting(i) --previous--> presenting(i-1)
    any --cancel--> cancelled; any --time limit reached--> completed
    """

    def __init__(
        self,
        definition: QuizDefinition,
        clock: Callable[[], float] = time.monotonic,
    ):
        validate_definition(definition)
        self.definition = definition
        self._clock = clock
        self.started_at = clock()
        self.current_index = 0
        self.state = SessionState.PRESENTING
        self.answers: Dict[str, str] = {}
        self.last_feedback: Optional[AnswerFeedback] = None
        self._result: Optional[QuizResult] = None

    @property
    def total_questions(self) -> int:
        return len(self.definition.questions)

    @property
    def current_question(self) -> QuizQuestion:
        return self.definition.questions[self.current_index]

    @property
    def is_timed(self) -> bool:
        return self.definition.time_limit_seconds is not None

    @property
    def remaining_seconds(self) -> Optional[int]:
        if not self.is_timed:
            return None
        if self.state == SessionState.COMPLETED and self._result is not None:
            return max(0, self.definition.time_limit_seconds - self._result.time_spent)
        return max(0, self.definition.time_limit_seconds - self._elapsed())

    @property
    def is_finished(self) -> bool:
        self.tick()
        return self.state in TERMINAL_STATES

    def stored_answer(self, index: Optional[int] = None) -> str:
        if index is None:
            index = self.current_index
        return self.answers.get(self.definition.questions[index].id, "")

    def tick(self) -> SessionState:
        """Applies the countdown; completes the session once time is up."""
        if (
            self.is_timed
            and self.state not in TERMINAL_STATES
            and self._elapsed() >= self.definition.time_limit_seconds
        ):
            logger.info(f"Time limit reached after {self.definition.time_limit_seconds}s")
            self._complete(time_spent=self.definition.time_limit_seconds)
        return self.state

    def submit(self, answer: Optional[str]) -> AnswerFeedback:
        self._require(SessionState.PRESENTING, SessionState.FEEDBACK)
        question = self.current_question
        user_answer = answer or ""
        self.answers[question.id] = user_answer
        self.last_feedback = AnswerFeedback(
            question_id=question.id,
            correct=check_answer(question, user_answer),
            user_answer=user_answer,
            correct_answer=question.expected_answer,
            explanation=question.explanation,
        )
        self.state = SessionState.FEEDBACK
        return self.last_feedback

    def next(self) -> SessionState:
        self._require(SessionState.FEEDBACK)
        if self.current_index + 1 < self.total_questions:
            self.current_index += 1
            self.state = SessionState.PRESENTING
            self.last_feedback = None
        else:
            self._complete()
        return self.state

    def previous(self) -> SessionState:
        self._require(SessionState.PRESENTING, SessionState.FEEDBACK)
        if self.current_index == 0:
            raise SessionStateError("Already at the first question.")
        self.current_index -= 1
        self.state = SessionState.PRESENTING
        self.last_feedback = None
        return self.state

    def cancel(self) -> None:
        self._require(SessionState.PRESENTING, SessionState.FEEDBACK)
        self.state = SessionState.CANCELLED
        self.last_feedback = None

    @property
    def result(self) -> QuizResult:
        self.tick()
        if self.state != SessionState.COMPLETED:
            raise SessionStateError(f"No result while the session is {self.state.value}.")
        return self._result

    def public_view(self) -> Dict[str, Any]:
        """Session snapshot safe to show before the answer is revealed."""
        self.tick()
        view: Dict[str, Any] = {
            "state": self.state.value,
            "currentIndex": self.current_index,
            "totalQuestions": self.total_questions,
            "remainingSeconds": self.remaining_seconds,
        }
        if self.state in TERMINAL_STATES:
            return view
        view["question"] = self.current_question.model_dump(
            by_alias=True,
            exclude={"accepted_answer", "accepted_answers", "explanation"},
        )
        view["storedAnswer"] = self.stored_answer()
        if self.state == SessionState.FEEDBACK and self.last_feedback is not None:
            view["feedback"] = self.last_feedback.model_dump(by_alias=True)
        return view

    # --- internals ---
    def _elapsed(self) -> int:
        return int(self._clock() - self.started_at)

    def _require(self, *states: SessionState) -> None:
        self.tick()
        if self.state not in states:
            raise SessionStateError(
                f"Operation not allowed while the session is {self.state.value}."
            )

    def _complete(self, time_spent: Optional[int] = None) -> None:
        if time_spent is None:
            time_spent = self._elapsed()
        self._result = score_answers(self.definition, self.answers, time_spent)
        self.state = SessionState.COMPLETED
        self.last_feedback = None
        logger.info(
            f"Quiz completed: {self._result.score}/{self._result.total_points} points, "
            f"{self._result.correct_answers}/{self._result.total_questions} correct"
        )
