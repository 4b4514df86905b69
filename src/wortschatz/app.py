import logging
import os
from contextlib import asynccontextmanager
from logging.handlers import RotatingFileHandler
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from .config import Settings, settings as default_settings
from .dictionary import FallbackDictionary
from .enrichment import WordEnrichment
from .grammar import GrammarContentService
from .llm import GeminiClient, LanguageModelClient
from .router import router
from .sessions import SessionManager
from .store import StoreFactory, WordStore
from .tutor import TutorDialogueService

STATIC_DIR = os.path.join(os.path.dirname(__file__), "static")

logger = logging.getLogger("wortschatz")


# --- Logging Setup ---
def setup_logging(settings: Settings):
    logger.setLevel(logging.DEBUG if settings.DEBUG else logging.INFO)

    if settings.LOG_TO_FILE and not any(
        isinstance(h, RotatingFileHandler) for h in logger.handlers
    ):
        os.makedirs(settings.LOG_DIR, exist_ok=True)
        log_path = os.path.join(settings.LOG_DIR, settings.LOG_FILE)
        file_handler = RotatingFileHandler(log_path, maxBytes=5_000_000, backupCount=3)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s - %(levelname)s - %(message)s")
        )
        logger.addHandler(file_handler)
    # Also configure root logger to see logs from other libraries
    logging.basicConfig(level=logging.INFO)


# --- Lifecycle ---
@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(
        f"Starting {app.title} [store: {app.state.word_store.backend}, "
        f"AI: {'enabled' if app.state.enrichment.client.configured else 'fallback only'}]"
    )
    yield
    app.state.word_store.close()


async def validation_error_handler(request: Request, exc: RequestValidationError):
    logger.info(f"Rejected request to {request.url.path}: {exc.errors()}")
    return JSONResponse({"error": "Invalid request body"}, status_code=400)


# --- App Factory ---
def create_app(
    settings: Optional[Settings] = None,
    word_store: Optional[WordStore] = None,
    word_model: Optional[LanguageModelClient] = None,
    grammar_model: Optional[LanguageModelClient] = None,
) -> FastAPI:
    settings = settings or default_settings
    setup_logging(settings)

    app = FastAPI(
        title=settings.PROJECT_NAME,
        debug=settings.DEBUG,
        lifespan=lifespan,
        root_path=settings.ROOT_PATH,
    )

    word_model = word_model or GeminiClient(
        settings.GEMINI_API_KEY,
        model=settings.GEMINI_MODEL,
        base_url=settings.GEMINI_BASE_URL,
        timeout=settings.AI_TIMEOUT_SECONDS,
    )
    grammar_model = grammar_model or GeminiClient(
        settings.GEMINI_GRAMMAR_API_KEY,
        model=settings.GEMINI_MODEL,
        base_url=settings.GEMINI_BASE_URL,
        timeout=settings.AI_TIMEOUT_SECONDS,
    )

    app.state.settings = settings
    app.state.word_store = word_store or StoreFactory.create(settings)
    app.state.enrichment = WordEnrichment(
        word_model, FallbackDictionary(), timeout=settings.AI_TIMEOUT_SECONDS
    )
    app.state.grammar = GrammarContentService(
        grammar_model, timeout=settings.AI_TIMEOUT_SECONDS
    )
    app.state.tutor = TutorDialogueService(
        grammar_model,
        history_limit=settings.TUTOR_HISTORY_LIMIT,
        timeout=settings.AI_TIMEOUT_SECONDS,
    )
    app.state.sessions = SessionManager(settings.SESSION_TIMEOUT_MINUTES)

    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")
    app.include_router(router)

    return app
