import os


def _env_bool(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class Settings:
    PROJECT_NAME: str = "wortschatz"
    DEBUG: bool = _env_bool("DEBUG", False)
    ROOT_PATH: str = os.environ.get("ROOT_PATH", "")
    LOG_DIR: str = os.environ.get("LOG_DIR", "log")
    LOG_FILE: str = "wortschatz.log"
    LOG_TO_FILE: bool = _env_bool("LOG_TO_FILE", True)

    # "sqlite" or "redis"
    WORD_STORE: str = os.environ.get("WORD_STORE", "sqlite")
    SQLITE_PATH: str = os.environ.get("SQLITE_PATH", "deutsche_words.db")
    REDIS_URL: str = os.environ.get("REDIS_URL", "redis://localhost:6379/0")

    GEMINI_API_KEY: str = os.environ.get("GEMINI_API_KEY", "")
    GEMINI_GRAMMAR_API_KEY: str = os.environ.get(
        "GEMINI_GRAMMAR_API_KEY", os.environ.get("GEMINI_API_KEY", "")
    )
    GEMINI_MODEL: str = os.environ.get("GEMINI_MODEL", "gemini-2.0-flash-exp")
    GEMINI_BASE_URL: str = os.environ.get(
        "GEMINI_BASE_URL", "https://generativelanguage.googleapis.com/v1beta"
    )
    AI_TIMEOUT_SECONDS: float = float(os.environ.get("AI_TIMEOUT_SECONDS", "25"))

    TUTOR_HISTORY_LIMIT: int = 20
    WORDS_PER_PAGE: int = 10
    SESSION_COOKIE_NAME: str = "grammar_session_id"
    SESSION_TIMEOUT_MINUTES: int = 120


settings = Settings()
