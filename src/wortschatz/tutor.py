import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence

from .config import settings
from .llm import LanguageModelClient, LanguageModelError, race_with_timeout
from .models import ConversationTurn, TutorReply
from .prompts import TUTOR_APOLOGY, TUTOR_GENERATION, TUTOR_SYSTEM_PROMPT

logger = logging.getLogger(__name__)


class TutorDialogueService:
    """Forwards a short conversation to the model with the tutor instructions."""

    def __init__(
        self,
        client: LanguageModelClient,
        history_limit: int = settings.TUTOR_HISTORY_LIMIT,
        timeout: float = settings.AI_TIMEOUT_SECONDS,
    ):
        self.client = client
        self.history_limit = history_limit
        self.timeout = timeout

    def build_contents(
        self, message: str, history: Sequence[ConversationTurn]
    ) -> List[Dict[str, Any]]:
        recent = list(history)[-self.history_limit :] if self.history_limit > 0 else []
        contents = [
            {
                "role": "user" if turn.role == "user" else "model",
                "parts": [{"text": turn.content}],
            }
            for turn in recent
        ]
        contents.append({"role": "user", "parts": [{"text": message}]})
        return contents

    async def reply(
        self, message: str, history: Optional[Sequence[ConversationTurn]] = None
    ) -> TutorReply:
        if not self.client.configured:
            logger.info("No API key configured, tutor replies with apology")
            return self._apology()

        contents = self.build_contents(message, history or [])
        try:
            text = await race_with_timeout(
                self.client.generate(
                    contents=contents,
                    system_instruction=TUTOR_SYSTEM_PROMPT,
                    generation_config=TUTOR_GENERATION,
                ),
                self.timeout,
            )
        except LanguageModelError as e:
            logger.warning(f"Tutor request failed: {e}")
            return self._apology()

        if not text or not text.strip():
            logger.warning("Tutor request returned empty text")
            return self._apology()
        return TutorReply(response=text, timestamp=datetime.now(timezone.utc))

    @staticmethod
    def _apology() -> TutorReply:
        return TutorReply(response=TUTOR_APOLOGY, timestamp=datetime.now(timezone.utc))
