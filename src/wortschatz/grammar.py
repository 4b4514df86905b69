import logging
import math
import re
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from .config import settings
from .fallbacks import fallback_test, fallback_topic
from .llm import (
    LanguageModelClient,
    LanguageModelError,
    LanguageModelResponseError,
    generate_json,
)
from .models import AnswerEvaluation, GrammarTopic, QuizDefinition, QuizQuestion
from .prompts import (
    CHECK_ANSWER_PROMPT,
    CHECK_GENERATION,
    GRAMMAR_TEST_PROMPT,
    GRAMMAR_TOPIC_PROMPT,
    TEST_GENERATION,
    TOPIC_GENERATION,
)

logger = logging.getLogger(__name__)

DEFAULT_TIME_LIMIT_MINUTES = 15
PASSING_RATIO = 0.7

QUESTION_TYPES = {
    "mcq": "multiple-choice",
    "multiple-choice": "multiple-choice",
    "fillup": "fill-blank",
    "fill-blank": "fill-blank",
    "fill_blank": "fill-blank",
    "input": "free-input",
    "free-input": "free-input",
}

_ARTICLES = re.compile(r"\b(der|die|das|den|dem|des|ein|eine|einen|einem|eines)\b", re.IGNORECASE)
_COMMON_VERBS = re.compile(
    r"\b(ist|sind|haben|sein|werden|können|müssen|wollen|sollen)\b", re.IGNORECASE
)
_CAPITALIZED_NOUN = re.compile(r"\b[A-ZÄÖÜ][a-zäöüß]+\b")


# --- Payload normalization ---
def _text(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _number(value: Any) -> Optional[float]:
    """Finite JSON numbers only; NaN and Infinity parse but cannot be converted."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return value if math.isfinite(value) else None


def _texts(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [item.strip() for item in value if isinstance(item, str) and item.strip()]


def parse_grammar_topic(data: Any) -> GrammarTopic:
    if not isinstance(data, dict):
        raise LanguageModelResponseError("Grammar topic must be a JSON object.")
    if not (_text(data.get("topic")) and _text(data.get("explanation"))):
        raise LanguageModelResponseError("Grammar topic is missing topic or explanation.")
    if not isinstance(data.get("rules"), list) or not isinstance(data.get("examples"), list):
        raise LanguageModelResponseError("Grammar topic is missing rules or examples.")

    examples = []
    for example in data["examples"]:
        if not isinstance(example, dict):
            continue
        german, english = _text(example.get("german")), _text(example.get("english"))
        if german and english:
            examples.append(
                {"german": german, "english": english, "highlight": _text(example.get("highlight"))}
            )

    return GrammarTopic.model_validate(
        {
            "topic": data["topic"].strip(),
            "explanation": data["explanation"].strip(),
            "rules": _texts(data["rules"]),
            "examples": examples,
            "tips": _texts(data.get("tips")),
        }
    )


def normalize_question(raw: Dict[str, Any], index: int) -> Optional[QuizQuestion]:
    """Fills in missing fields; returns None when the question cannot be graded."""
    question_type = QUESTION_TYPES.get(str(raw.get("type") or "mcq").strip().lower(), "multiple-choice")
    single = _text(raw.get("correctAnswer")) or _text(raw.get("acceptedAnswer"))
    many = _texts(raw.get("correctAnswers")) or _texts(raw.get("acceptedAnswers"))

    if question_type == "free-input":
        accepted_answers = many or ([single] if single else [])
        if not accepted_answers:
            return None
        accepted_answer = None
    else:
        accepted_answer = single or (many[0] if many else None)
        if not accepted_answer:
            return None
        accepted_answers = None

    points = _number(raw.get("points"))
    if points is None or points < 1:
        points = 1

    options = _texts(raw.get("options")) if question_type == "multiple-choice" else None
    return QuizQuestion(
        id=str(raw.get("id") or index + 1),
        type=question_type,
        question=_text(raw.get("question")) or "",
        german_context=_text(raw.get("germanContext")),
        options=options or None,
        accepted_answer=accepted_answer,
        accepted_answers=accepted_answers,
        explanation=_text(raw.get("explanation")) or "",
        points=int(points),
    )


def parse_quiz_definition(data: Any) -> QuizDefinition:
    if not isinstance(data, dict) or not isinstance(data.get("questions"), list):
        raise LanguageModelResponseError("Invalid test structure from API")

    questions = []
    for index, raw in enumerate(data["questions"]):
        if not isinstance(raw, dict):
            continue
        question = normalize_question(raw, index)
        if question is None:
            logger.warning(f"Dropping ungradeable question #{index + 1}")
            continue
        questions.append(question)
    if not questions:
        raise LanguageModelResponseError("Test contains no usable questions.")

    if len({q.id for q in questions}) != len(questions):
        for index, question in enumerate(questions):
            question.id = str(index + 1)

    total_points = sum(q.points for q in questions)
    passing_score = _number(data.get("passingScore"))
    if passing_score is None or not 0 < passing_score <= total_points:
        passing_score = math.ceil(total_points * PASSING_RATIO)

    time_limit = _number(data.get("timeLimit"))
    if time_limit is None or time_limit <= 0:
        time_limit = DEFAULT_TIME_LIMIT_MINUTES

    return QuizDefinition(
        questions=questions,
        total_points=total_points,
        passing_score=int(passing_score),
        time_limit_seconds=int(time_limit * 60),
    )


def basic_answer_check(user_answer: str) -> AnswerEvaluation:
    """Pattern-based evaluation used when the language model is unavailable."""
    answer = user_answer.strip().lower()
    if len(answer) < 3:
        return AnswerEvaluation(
            correct=False,
            score=0,
            feedback="Your answer seems too short. Please provide a complete response.",
            corrected_answer=user_answer,
            grammar_notes="Make sure to write complete sentences or phrases.",
        )

    score = 0
    if _ARTICLES.search(user_answer):
        score += 30
    if _COMMON_VERBS.search(user_answer):
        score += 30
    if _CAPITALIZED_NOUN.search(user_answer):
        score += 20
    if len(answer) > 10:
        score += 20

    if score >= 70:
        feedback = "Your answer appears to be grammatically structured."
    elif score >= 40:
        feedback = "Your answer needs some improvement. Check your grammar and word order."
    else:
        feedback = "Please review German grammar rules and try again."

    return AnswerEvaluation(
        correct=score >= 70,
        score=min(score, 100),
        feedback=feedback,
        corrected_answer=user_answer,
        grammar_notes=(
            "This is a basic evaluation. For detailed feedback, ensure the API key is configured."
        ),
    )


def parse_answer_evaluation(data: Any, user_answer: str) -> AnswerEvaluation:
    if not isinstance(data, dict):
        raise LanguageModelResponseError("Evaluation must be a JSON object.")
    score = _number(data.get("score"))
    if score is None:
        score = 0
    return AnswerEvaluation(
        correct=data.get("correct") is True,
        score=int(max(0, min(100, score))),
        feedback=_text(data.get("feedback")) or "Your answer has been evaluated.",
        corrected_answer=_text(data.get("correctedAnswer")) or user_answer,
        alternative_answers=_texts(data.get("alternativeAnswers")),
        grammar_notes=_text(data.get("grammarNotes")) or "",
    )


# --- Service Layer: Grammar content ---
class GrammarContentService:
    """Topic explanations, generated quizzes and free-text answer checks."""

    def __init__(
        self,
        client: LanguageModelClient,
        timeout: float = settings.AI_TIMEOUT_SECONDS,
    ):
        self.client = client
        self.timeout = timeout

    async def explain_topic(self, topic: str) -> GrammarTopic:
        topic = topic.strip()
        if not self.client.configured:
            logger.info(f"No API key configured, using fallback topic for '{topic}'")
            return fallback_topic(topic)
        try:
            data = await generate_json(
                self.client,
                GRAMMAR_TOPIC_PROMPT.format(topic=topic),
                timeout=self.timeout,
                generation_config=TOPIC_GENERATION,
            )
            return parse_grammar_topic(data)
        except (LanguageModelError, ValidationError) as e:
            logger.warning(f"Grammar explanation failed for '{topic}', using fallback: {e}")
            return fallback_topic(topic)

    async def generate_test(self, topic: str) -> QuizDefinition:
        topic = topic.strip()
        if not self.client.configured:
            logger.info(f"No API key configured, using fallback test for '{topic}'")
            return fallback_test(topic)
        try:
            data = await generate_json(
                self.client,
                GRAMMAR_TEST_PROMPT.format(topic=topic),
                timeout=self.timeout,
                generation_config=TEST_GENERATION,
            )
            definition = parse_quiz_definition(data)
        except (LanguageModelError, ValidationError) as e:
            logger.warning(f"Test generation failed for '{topic}', using fallback: {e}")
            return fallback_test(topic)
        logger.info(f"Generated {len(definition.questions)} questions for '{topic}'")
        return definition

    async def check_answer(
        self, question: str, user_answer: str, context: Optional[str] = None
    ) -> AnswerEvaluation:
        if not self.client.configured:
            return basic_answer_check(user_answer)
        prompt = CHECK_ANSWER_PROMPT.format(
            question=question,
            context_line=f"Context: {context}\n" if context else "",
            answer=user_answer,
        )
        try:
            data = await generate_json(
                self.client, prompt, timeout=self.timeout, generation_config=CHECK_GENERATION
            )
            return parse_answer_evaluation(data, user_answer)
        except (LanguageModelError, ValidationError) as e:
            logger.warning(f"Answer check failed, using basic check: {e}")
            return basic_answer_check(user_answer)
