import asyncio
import json

import pytest

from wortschatz.dictionary import FallbackDictionary
from wortschatz.enrichment import WordEnrichment, parse_word_details
from wortschatz.llm import GeminiClient, LanguageModelResponseError

from conftest import FakeLanguageModel


@pytest.fixture(scope="module")
def dictionary():
    return FallbackDictionary()


def enrich(model, word, dictionary, timeout=1):
    return asyncio.run(WordEnrichment(model, dictionary, timeout=timeout).enrich(word))


def test_fallback_dictionary_loads_csv(dictionary):
    assert len(dictionary) >= 20
    assert dictionary.get(" Hund ")["translation"] == "dog"


def test_fallback_dictionary_without_file(tmp_path):
    dictionary = FallbackDictionary(str(tmp_path / "missing.csv"))
    assert dictionary.lookup("hund").translation == "dog"


def test_no_credential_uses_fallback(dictionary):
    model = GeminiClient("")
    details = enrich(model, "hund", dictionary)

    assert details.part_of_speech == "Noun"
    assert details.article == "der"
    assert details.translation == "dog"


def test_unknown_word_gets_placeholder(dictionary):
    details = enrich(GeminiClient(""), "Quatschwort", dictionary)

    assert details.part_of_speech == "Other"
    assert details.article == "–"
    assert details.definition == "Definition for quatschwort"
    assert details.translation == "Translation of quatschwort"


def test_non_noun_fallback_has_no_article(dictionary):
    details = enrich(GeminiClient(""), "gehen", dictionary)
    assert details.part_of_speech == "Verb"
    assert details.article == "–"


def test_model_failure_uses_fallback(dictionary):
    model = FakeLanguageModel(error=LanguageModelResponseError("API request failed with status 500"))
    details = enrich(model, "hund", dictionary)

    assert (details.part_of_speech, details.article, details.translation) == ("Noun", "der", "dog")


def test_model_timeout_uses_fallback(dictionary):
    model = FakeLanguageModel(responses=["{}"], delay=1)
    details = enrich(model, "hund", dictionary, timeout=0.01)

    assert details.translation == "dog"


def test_unparsable_reply_uses_fallback(dictionary):
    model = FakeLanguageModel(responses=["Sorry, I cannot help with that."])
    assert enrich(model, "hund", dictionary).translation == "dog"


def test_model_reply_is_used(dictionary):
    reply = {
        "partOfSpeech": "noun",
        "article": "Der",
        "definition": "Ein Tier",
        "translation": "dog",
        "examples": ["Der Hund bellt.", 3],
        "alternateMeanings": ["hound"],
    }
    model = FakeLanguageModel(responses=["```json\n" + json.dumps(reply) + "\n```"])
    details = enrich(model, "Hund", dictionary)

    assert details.part_of_speech == "Noun"
    assert details.article == "der"
    assert details.examples == ["Der Hund bellt."]
    assert details.alternate_meanings == ["hound"]
    assert "hund" in model.calls[0]["prompt"]


def test_parse_word_details_normalizes_fields():
    details = parse_word_details(
        {"partOfSpeech": "Interjection", "article": "der", "definition": "d", "translation": "t"}
    )
    assert details.part_of_speech == "Other"
    assert details.article == "–"
    assert details.examples == []


def test_parse_word_details_requires_definition():
    with pytest.raises(LanguageModelResponseError):
        parse_word_details({"translation": "dog"})
    with pytest.raises(LanguageModelResponseError):
        parse_word_details(["not", "an", "object"])
