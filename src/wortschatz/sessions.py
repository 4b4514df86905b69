import logging
import time
import uuid
from typing import Callable, Dict, Optional, Tuple

from .config import settings
from .engine import GrammarTestEngine
from .models import QuizDefinition

logger = logging.getLogger(__name__)


class SessionManager:
    """In-memory quiz sessions keyed by the session cookie. Nothing is persisted."""

    def __init__(
        self,
        timeout_minutes: int = settings.SESSION_TIMEOUT_MINUTES,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.timeout_seconds = timeout_minutes * 60
        self._clock = clock
        self._sessions: Dict[str, GrammarTestEngine] = {}

    def start(self, definition: QuizDefinition) -> Tuple[str, GrammarTestEngine]:
        self.purge_expired()
        engine = GrammarTestEngine(definition, clock=self._clock)
        session_id = str(uuid.uuid4())
        self._sessions[session_id] = engine
        logger.info(
            f"New session: {session_id} [Questions: {engine.total_questions}, "
            f"Time limit: {definition.time_limit_seconds}]"
        )
        return session_id, engine

    def get(self, session_id: Optional[str]) -> Optional[GrammarTestEngine]:
        if not session_id:
            return None
        engine = self._sessions.get(session_id)
        if engine is None:
            return None
        if self._expired(engine):
            self.discard(session_id)
            return None
        return engine

    def discard(self, session_id: Optional[str]) -> None:
        if session_id and self._sessions.pop(session_id, None) is not None:
            logger.info(f"Session closed: {session_id}")

    def purge_expired(self) -> None:
        for session_id in [sid for sid, e in self._sessions.items() if self._expired(e)]:
            self.discard(session_id)

    def _expired(self, engine: GrammarTestEngine) -> bool:
        return self._clock() - engine.started_at > self.timeout_seconds

    def __len__(self) -> int:
        return len(self._sessions)
