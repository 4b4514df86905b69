import logging
from typing import Any, List, Optional

from pydantic import ValidationError

from .config import settings
from .dictionary import FallbackDictionary
from .llm import (
    LanguageModelClient,
    LanguageModelError,
    LanguageModelResponseError,
    generate_json,
)
from .models import ARTICLES, PARTS_OF_SPEECH, WordDetails
from .prompts import WORD_DETAILS_PROMPT

logger = logging.getLogger(__name__)


def _string_list(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [str(item).strip() for item in value if isinstance(item, str) and item.strip()]


def parse_word_details(data: Any) -> WordDetails:
    """Validates the model's JSON, defaulting every optional field."""
    if not isinstance(data, dict):
        raise LanguageModelResponseError("Word details must be a JSON object.")

    for field in ("definition", "translation"):
        if not isinstance(data.get(field), str) or not data[field].strip():
            raise LanguageModelResponseError(f"Word details are missing '{field}'.")

    part_of_speech = str(data.get("partOfSpeech") or "Other").strip().capitalize()
    if part_of_speech not in PARTS_OF_SPEECH:
        part_of_speech = "Other"

    article = str(data.get("article") or "–").strip().lower()
    if part_of_speech != "Noun" or article not in ARTICLES:
        article = "–"

    return WordDetails(
        part_of_speech=part_of_speech,
        article=article,
        definition=data["definition"].strip(),
        translation=data["translation"].strip(),
        examples=_string_list(data.get("examples")),
        alternate_meanings=_string_list(data.get("alternateMeanings")),
    )


class WordEnrichment:
    """Looks up word details from the language model, never failing."""

    def __init__(
        self,
        client: LanguageModelClient,
        dictionary: Optional[FallbackDictionary] = None,
        timeout: float = settings.AI_TIMEOUT_SECONDS,
    ):
        self.client = client
        self.dictionary = dictionary or FallbackDictionary()
        self.timeout = timeout

    async def enrich(self, word: str) -> WordDetails:
        key = word.strip().lower()
        if not self.client.configured:
            logger.info(f"No API key configured, using fallback for '{key}'")
            return self.dictionary.lookup(key)

        try:
            data = await generate_json(
                self.client, WORD_DETAILS_PROMPT.format(word=key), timeout=self.timeout
            )
            details = parse_word_details(data)
        except (LanguageModelError, ValidationError) as e:
            logger.warning(f"AI lookup failed for '{key}', using fallback: {e}")
            return self.dictionary.lookup(key)

        logger.info(f"AI lookup succeeded for '{key}'")
        return details
