import asyncio

from wortschatz.llm import GeminiClient, LanguageModelResponseError
from wortschatz.models import ConversationTurn
from wortschatz.prompts import TUTOR_APOLOGY, TUTOR_SYSTEM_PROMPT
from wortschatz.tutor import TutorDialogueService

from conftest import FakeLanguageModel


def history(n):
    return [
        ConversationTurn(role="user" if i % 2 == 0 else "assistant", content=f"turn {i}")
        for i in range(n)
    ]


def test_build_contents_keeps_recent_turns():
    tutor = TutorDialogueService(FakeLanguageModel(), history_limit=20)
    contents = tutor.build_contents("Was ist der Dativ?", history(25))

    assert len(contents) == 21
    assert contents[0]["parts"][0]["text"] == "turn 5"
    assert contents[0]["role"] == "model"
    assert contents[1]["role"] == "user"
    assert contents[-1] == {"role": "user", "parts": [{"text": "Was ist der Dativ?"}]}


def test_reply_returns_model_text():
    model = FakeLanguageModel(responses=["Der Dativ ist der dritte Fall."])
    reply = asyncio.run(TutorDialogueService(model, timeout=1).reply("Dativ?", history(2)))

    assert reply.response == "Der Dativ ist der dritte Fall."
    assert model.calls[0]["system_instruction"] == TUTOR_SYSTEM_PROMPT
    assert len(model.calls[0]["contents"]) == 3


def test_reply_apologizes_on_failure():
    model = FakeLanguageModel(error=LanguageModelResponseError("API request failed with status 503"))
    reply = asyncio.run(TutorDialogueService(model, timeout=1).reply("Hallo"))
    assert reply.response == TUTOR_APOLOGY


def test_reply_apologizes_on_empty_text():
    model = FakeLanguageModel(responses=["   "])
    reply = asyncio.run(TutorDialogueService(model, timeout=1).reply("Hallo"))
    assert reply.response == TUTOR_APOLOGY


def test_reply_without_credential():
    reply = asyncio.run(TutorDialogueService(GeminiClient(""), timeout=1).reply("Hallo"))
    assert reply.response == TUTOR_APOLOGY
