import logging
import os
from typing import Optional

from fastapi import APIRouter, Cookie, Depends, Request
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.templating import Jinja2Templates

from .browser import ALL, ALPHA_FILTERS, POS_FILTERS, filter_words, paginate
from .config import settings
from .engine import GrammarTestEngine, InvalidQuizDefinition, SessionStateError
from .enrichment import WordEnrichment
from .grammar import GrammarContentService
from .models import (
    CheckAnswerRequest,
    DeleteWordRequest,
    QuizDefinition,
    SubmitAnswerRequest,
    TopicRequest,
    TutorRequest,
    WordRequest,
)
from .sessions import SessionManager
from .store import StorageError, WordStore
from .tutor import TutorDialogueService

logger = logging.getLogger(__name__)

TEMPLATE_DIR = os.path.join(os.path.dirname(__file__), "templates")
templates = Jinja2Templates(directory=TEMPLATE_DIR)

router = APIRouter()


def _error(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


def _blank(value: Optional[str]) -> bool:
    return not value or not value.strip()


def _page_number(value: str) -> int:
    # Unparsable page numbers show the first page; paginate() clamps the rest.
    try:
        return int(value)
    except ValueError:
        return 1


# --- Dependencies ---
def get_word_store(request: Request) -> WordStore:
    return request.app.state.word_store


def get_enrichment(request: Request) -> WordEnrichment:
    return request.app.state.enrichment


def get_grammar_service(request: Request) -> GrammarContentService:
    return request.app.state.grammar


def get_tutor(request: Request) -> TutorDialogueService:
    return request.app.state.tutor


def get_sessions(request: Request) -> SessionManager:
    return request.app.state.sessions


def get_session_id(
    session_id: Optional[str] = Cookie(None, alias=settings.SESSION_COOKIE_NAME),
) -> Optional[str]:
    return session_id


def get_active_session(
    session_id: Optional[str] = Depends(get_session_id),
    sessions: SessionManager = Depends(get_sessions),
) -> Optional[GrammarTestEngine]:
    return sessions.get(session_id)


# --- Pages ---
@router.get("/", response_class=HTMLResponse)
def word_browser(
    request: Request,
    pos: str = ALL,
    alpha: str = ALL,
    q: str = "",
    page: str = "1",
    store: WordStore = Depends(get_word_store),
):
    error = ""
    try:
        words = store.list_all()
    except StorageError:
        words = []
        error = "Failed to fetch words"

    filtered = filter_words(words, pos=pos, alpha=alpha, search=q)
    context = {
        "words_page": paginate(filtered, _page_number(page), settings.WORDS_PER_PAGE),
        "total_words": len(words),
        "filters": {"pos": pos, "alpha": alpha, "q": q},
        "pos_filters": POS_FILTERS,
        "alpha_filters": ALPHA_FILTERS,
        "error": error,
    }
    return templates.TemplateResponse(request, "index.html", context)


@router.get("/grammar", response_class=HTMLResponse)
def grammar_page(request: Request):
    return templates.TemplateResponse(request, "grammar.html", {})


@router.get("/health")
def health(request: Request, store: WordStore = Depends(get_word_store)):
    return {
        "status": "ok",
        "store": store.backend,
        "aiEnabled": request.app.state.enrichment.client.configured,
    }


# --- Words ---
@router.get("/words")
def list_words(store: WordStore = Depends(get_word_store)):
    try:
        words = store.list_all()
    except StorageError:
        return _error("Failed to fetch words", 500)
    return {"words": [w.model_dump(by_alias=True, mode="json") for w in words]}


@router.post("/words")
async def add_word(
    body: WordRequest,
    store: WordStore = Depends(get_word_store),
    enrichment: WordEnrichment = Depends(get_enrichment),
):
    if _blank(body.german_word):
        return _error("German word is required", 400)

    german = body.german_word.strip().lower()
    logger.info(f"Adding word: {german}")
    details = await enrichment.enrich(german)
    try:
        record = store.add(german, details)
    except StorageError as e:
        return _error(f"Failed to add word: {e}", 500)
    return JSONResponse(
        {"word": record.model_dump(by_alias=True, mode="json")}, status_code=201
    )


@router.delete("/words")
def delete_word(body: DeleteWordRequest, store: WordStore = Depends(get_word_store)):
    if _blank(body.german):
        return _error("German word is required", 400)
    try:
        store.delete_by_key(body.german)
    except StorageError:
        return _error("Failed to delete word", 500)
    logger.info(f"Deleted word: {body.german.strip().lower()}")
    return {"message": "Word deleted successfully"}


@router.post("/lookup")
async def lookup_word(
    body: WordRequest, enrichment: WordEnrichment = Depends(get_enrichment)
):
    if _blank(body.german_word):
        return _error("German word is required", 400)
    details = await enrichment.enrich(body.german_word)
    return details.model_dump(by_alias=True, mode="json")


# --- Grammar content ---
@router.post("/grammar/topic")
async def grammar_topic(
    body: TopicRequest, grammar: GrammarContentService = Depends(get_grammar_service)
):
    if _blank(body.topic):
        return _error("Grammar topic is required", 400)
    topic = await grammar.explain_topic(body.topic)
    return topic.model_dump(by_alias=True, mode="json")


@router.post("/grammar/test")
async def grammar_test(
    body: TopicRequest, grammar: GrammarContentService = Depends(get_grammar_service)
):
    if _blank(body.topic):
        return _error("Grammar topic is required", 400)
    definition = await grammar.generate_test(body.topic)
    return definition.model_dump(by_alias=True, mode="json")


@router.post("/grammar/check")
async def grammar_check(
    body: CheckAnswerRequest,
    grammar: GrammarContentService = Depends(get_grammar_service),
):
    if _blank(body.question) or _blank(body.user_answer):
        return _error("Question and user answer are required", 400)
    evaluation = await grammar.check_answer(body.question, body.user_answer, body.context)
    return evaluation.model_dump(by_alias=True, mode="json")


@router.post("/grammar/tutor")
async def grammar_tutor(
    body: TutorRequest, tutor: TutorDialogueService = Depends(get_tutor)
):
    if _blank(body.message):
        return _error("Message is required", 400)
    reply = await tutor.reply(body.message.strip(), body.conversation_history)
    return reply.model_dump(by_alias=True, mode="json")


# --- Quiz sessions ---
@router.post("/grammar/session")
def start_session(
    definition: QuizDefinition, sessions: SessionManager = Depends(get_sessions)
):
    try:
        session_id, engine = sessions.start(definition)
    except InvalidQuizDefinition as e:
        return _error(str(e), 400)

    response = JSONResponse(engine.public_view(), status_code=201)
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=session_id,
        httponly=True,
        samesite="lax",
    )
    return response


@router.get("/grammar/session")
def session_state(engine: Optional[GrammarTestEngine] = Depends(get_active_session)):
    if engine is None:
        return _error("Session invalid", 401)
    return engine.public_view()


@router.post("/grammar/session/answer")
def submit_answer(
    body: SubmitAnswerRequest,
    engine: Optional[GrammarTestEngine] = Depends(get_active_session),
):
    if engine is None:
        return _error("Session invalid", 401)
    try:
        feedback = engine.submit(body.answer)
    except SessionStateError as e:
        return _error(str(e), 409)
    return feedback.model_dump(by_alias=True, mode="json")


@router.post("/grammar/session/next")
def next_question(engine: Optional[GrammarTestEngine] = Depends(get_active_session)):
    if engine is None:
        return _error("Session invalid", 401)
    try:
        engine.next()
    except SessionStateError as e:
        return _error(str(e), 409)
    return engine.public_view()


@router.post("/grammar/session/previous")
def previous_question(
    engine: Optional[GrammarTestEngine] = Depends(get_active_session),
):
    if engine is None:
        return _error("Session invalid", 401)
    try:
        engine.previous()
    except SessionStateError as e:
        return _error(str(e), 409)
    return engine.public_view()


@router.post("/grammar/session/cancel")
def cancel_session(
    session_id: Optional[str] = Depends(get_session_id),
    engine: Optional[GrammarTestEngine] = Depends(get_active_session),
    sessions: SessionManager = Depends(get_sessions),
):
    if engine is None:
        return _error("Session invalid", 401)
    if not engine.is_finished:
        engine.cancel()
    sessions.discard(session_id)
    response = JSONResponse({"status": "cancelled"})
    response.delete_cookie(settings.SESSION_COOKIE_NAME)
    return response


@router.get("/grammar/session/result")
def session_result(
    session_id: Optional[str] = Depends(get_session_id),
    engine: Optional[GrammarTestEngine] = Depends(get_active_session),
    sessions: SessionManager = Depends(get_sessions),
):
    if engine is None:
        return _error("Session invalid", 401)
    try:
        result = engine.result
    except SessionStateError as e:
        return _error(str(e), 409)

    sessions.discard(session_id)
    response = JSONResponse(result.model_dump(by_alias=True, mode="json"))
    response.delete_cookie(settings.SESSION_COOKIE_NAME)
    return response
