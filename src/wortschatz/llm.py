import asyncio
import json
import logging
import re
from abc import ABC, abstractmethod
from typing import Any, Awaitable, Dict, List, Optional, TypeVar

import httpx

from .config import settings

logger = logging.getLogger(__name__)

T = TypeVar("T")

_CODE_FENCE = re.compile(r"```(?:json)?", re.IGNORECASE)
_JSON_OBJECT = re.compile(r"\{[\s\S]*\}")


class LanguageModelError(Exception):
    """The language model could not produce a usable answer."""


class MissingCredentialError(LanguageModelError):
    pass


class LanguageModelTimeout(LanguageModelError):
    pass


class LanguageModelResponseError(LanguageModelError):
    pass


async def race_with_timeout(call: Awaitable[T], seconds: float) -> T:
    """
    Runs ``call`` against a timer; whichever settles first wins.

    The losing task is cancelled. Raises LanguageModelTimeout when the
    timer wins; exceptions from ``call`` propagate unchanged.
    """
    call_task = asyncio.ensure_future(call)
    timer_task = asyncio.ensure_future(asyncio.sleep(seconds))
    try:
        done, _ = await asyncio.wait(
            {call_task, timer_task}, return_when=asyncio.FIRST_COMPLETED
        )
    finally:
        for task in (call_task, timer_task):
            if not task.done():
                task.cancel()

    if call_task in done:
        return call_task.result()
    raise LanguageModelTimeout(f"No response within {seconds}s")


def extract_json(text: Optional[str]) -> Any:
    """Parses JSON from model output, tolerating code fences and chatter."""
    cleaned = _CODE_FENCE.sub("", text or "").strip()
    try:
        return json.loads(cleaned)
    except json.JSONDecodeError:
        match = _JSON_OBJECT.search(cleaned)
        if not match:
            raise LanguageModelResponseError("No JSON object in model output.")
        try:
            return json.loads(match.group(0))
        except json.JSONDecodeError as e:
            raise LanguageModelResponseError(f"Unparsable JSON from model: {e}") from e


# --- Strategy Pattern: Language model backends ---
class LanguageModelClient(ABC):
    """Accepts a prompt plus configuration and returns generated text."""

    @abstractmethod
    async def generate(
        self,
        prompt: Optional[str] = None,
        *,
        contents: Optional[List[Dict[str, Any]]] = None,
        system_instruction: Optional[str] = None,
        generation_config: Optional[Dict[str, Any]] = None,
    ) -> str:
        pass

    @property
    def configured(self) -> bool:
        return True


class GeminiClient(LanguageModelClient):
    """Google Generative Language ``generateContent`` over httpx."""

    def __init__(
        self,
        api_key: Optional[str],
        model: str = settings.GEMINI_MODEL,
        base_url: str = settings.GEMINI_BASE_URL,
        timeout: float = settings.AI_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key or ""
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    async def generate(
        self,
        prompt: Optional[str] = None,
        *,
        contents: Optional[List[Dict[str, Any]]] = None,
        system_instruction: Optional[str] = None,
        generation_config: Optional[Dict[str, Any]] = None,
    ) -> str:
        if not self.api_key:
            raise MissingCredentialError("Gemini API key not configured")

        if contents is None:
            contents = [{"role": "user", "parts": [{"text": prompt or ""}]}]
        payload: Dict[str, Any] = {"contents": contents}
        if system_instruction:
            payload["systemInstruction"] = {"parts": [{"text": system_instruction}]}
        if generation_config:
            payload["generationConfig"] = generation_config

        url = f"{self.base_url}/models/{self.model}:generateContent"
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self._transport
            ) as client:
                response = await client.post(
                    url, params={"key": self.api_key}, json=payload
                )
        except httpx.TimeoutException as e:
            raise LanguageModelTimeout(f"Gemini request timed out: {e}") from e
        except httpx.HTTPError as e:
            raise LanguageModelError(f"Gemini request failed: {e}") from e

        if not response.is_success:
            raise LanguageModelResponseError(
                f"API request failed with status {response.status_code}"
            )

        try:
            data = response.json()
            return data["candidates"][0]["content"]["parts"][0]["text"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise LanguageModelResponseError(
                "Invalid response structure from the API."
            ) from e


async def generate_json(
    client: LanguageModelClient,
    prompt: str,
    *,
    timeout: float = settings.AI_TIMEOUT_SECONDS,
    generation_config: Optional[Dict[str, Any]] = None,
) -> Any:
    """One raced model call whose text is parsed as JSON."""
    text = await race_with_timeout(
        client.generate(prompt, generation_config=generation_config), timeout
    )
    return extract_json(text)
