from datetime import datetime
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

PARTS_OF_SPEECH = ("Noun", "Verb", "Adjective", "Adverb", "Other")
ARTICLES = ("der", "die", "das", "–")

QuestionType = Literal["multiple-choice", "fill-blank", "free-input"]


class CamelModel(BaseModel):
    """Base model that reads and writes camelCase JSON keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- Words ---
class WordDetails(CamelModel):
    part_of_speech: str = "Other"
    article: str = "–"
    definition: str
    translation: str
    examples: List[str] = Field(default_factory=list)
    alternate_meanings: List[str] = Field(default_factory=list)


class WordRecord(WordDetails):
    id: Optional[int] = None
    german: str
    created_at: datetime


# --- Grammar content ---
class GrammarExample(CamelModel):
    german: str
    english: str
    highlight: Optional[str] = None


class GrammarTopic(CamelModel):
    topic: str
    explanation: str
    rules: List[str] = Field(default_factory=list)
    examples: List[GrammarExample] = Field(default_factory=list)
    tips: List[str] = Field(default_factory=list)


class QuizQuestion(CamelModel):
    id: str
    type: QuestionType = "multiple-choice"
    question: str = ""
    german_context: Optional[str] = None
    options: Optional[List[str]] = None
    accepted_answer: Optional[str] = None
    accepted_answers: Optional[List[str]] = None
    explanation: str = ""
    points: int = Field(1, ge=1)

    @property
    def expected_answer(self) -> str:
        if self.accepted_answer:
            return self.accepted_answer
        if self.accepted_answers:
            return self.accepted_answers[0]
        return ""


class QuizDefinition(CamelModel):
    questions: List[QuizQuestion]
    total_points: Optional[int] = None
    passing_score: int = Field(0, ge=0)
    time_limit_seconds: Optional[int] = Field(None, gt=0)

    @model_validator(mode="after")
    def _default_total_points(self):
        if self.total_points is None:
            self.total_points = sum(q.points for q in self.questions)
        return self


class AnswerFeedback(CamelModel):
    question_id: str
    correct: bool
    user_answer: str
    correct_answer: str
    explanation: str = ""


class QuestionResult(CamelModel):
    model_config = ConfigDict(frozen=True)

    id: str
    correct: bool
    user_answer: str
    correct_answer: str
    explanation: str = ""


class QuizResult(CamelModel):
    model_config = ConfigDict(frozen=True)

    question_results: List[QuestionResult]
    answers: Dict[str, str]
    correct_answers: int
    total_questions: int
    score: int
    total_points: int
    passing_score: int
    passed: bool
    percentage: int
    grade: str
    time_spent: int


class AnswerEvaluation(CamelModel):
    correct: bool = False
    score: int = Field(0, ge=0, le=100)
    feedback: str = "Your answer has been evaluated."
    corrected_answer: str = ""
    alternative_answers: List[str] = Field(default_factory=list)
    grammar_notes: str = ""


# --- Tutor ---
class ConversationTurn(CamelModel):
    role: str
    content: str


class TutorReply(CamelModel):
    response: str
    timestamp: datetime


# --- Request bodies ---
class WordRequest(CamelModel):
    german_word: Optional[str] = None


class DeleteWordRequest(CamelModel):
    german: Optional[str] = None


class TopicRequest(CamelModel):
    topic: Optional[str] = None


class CheckAnswerRequest(CamelModel):
    question: Optional[str] = None
    user_answer: Optional[str] = None
    context: Optional[str] = None


class TutorRequest(CamelModel):
    message: Optional[str] = None
    conversation_history: List[ConversationTurn] = Field(default_factory=list)


class SubmitAnswerRequest(CamelModel):
    answer: str = ""
