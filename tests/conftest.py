import asyncio
from typing import Any, Dict, List, Optional

import pytest

from wortschatz.config import Settings
from wortschatz.llm import LanguageModelClient
from wortschatz.models import QuizDefinition, QuizQuestion
from wortschatz.store import SQLiteWordStore


class FakeLanguageModel(LanguageModelClient):
    """Scripted model: returns queued texts in order, or raises ``error``."""

    def __init__(
        self,
        responses: Optional[List[str]] = None,
        error: Optional[Exception] = None,
        delay: float = 0,
        configured: bool = True,
    ):
        self.responses = list(responses or [])
        self.error = error
        self.delay = delay
        self._configured = configured
        self.calls: List[Dict[str, Any]] = []

    @property
    def configured(self) -> bool:
        return self._configured

    async def generate(self, prompt=None, *, contents=None, system_instruction=None, generation_config=None):
        self.calls.append(
            {
                "prompt": prompt,
                "contents": contents,
                "system_instruction": system_instruction,
                "generation_config": generation_config,
            }
        )
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.responses.pop(0)


class FakeClock:
    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


def make_question(qid: str, answer: str = "des", points: int = 1, qtype: str = "fill-blank") -> QuizQuestion:
    if qtype == "free-input":
        return QuizQuestion(id=qid, type=qtype, question=f"Question {qid}", accepted_answers=[answer], points=points)
    return QuizQuestion(id=qid, type=qtype, question=f"Question {qid}", accepted_answer=answer, points=points)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def test_settings(tmp_path):
    settings = Settings()
    settings.LOG_TO_FILE = False
    settings.WORD_STORE = "sqlite"
    settings.SQLITE_PATH = str(tmp_path / "words.db")
    settings.GEMINI_API_KEY = ""
    settings.GEMINI_GRAMMAR_API_KEY = ""
    return settings


@pytest.fixture
def sqlite_store(tmp_path):
    return SQLiteWordStore(str(tmp_path / "words.db"))


@pytest.fixture
def six_question_definition():
    points = [1, 1, 2, 1, 1, 2]
    return QuizDefinition(
        questions=[make_question(str(i + 1), answer=f"answer{i + 1}", points=p) for i, p in enumerate(points)],
        passing_score=6,
    )
