# luxejewel/services/ai_providers.py
"""
HTTP clients for the external vision / embedding models used by AI search.

Groq, Cerebras and OpenRouter speak the OpenAI chat-completions dialect;
Gemini is called through its REST API for both image description and
embeddings. Every failure is reported as ProviderError so the search
orchestrator can move on to the next model.
"""
import json
import re
from typing import List, Sequence

import requests
from pydantic import BaseModel

from luxejewel.domain.errors import ProviderError
from luxejewel.utils.settings import (
    AI_HTTP_TIMEOUT,
    CEREBRAS_API_KEY,
    EMBEDDING_DIMENSIONS,
    GOOGLE_API_KEY,
    GROQ_API_KEY,
    OPENROUTER_API_KEY,
)
from luxejewel.utils.logging import get_logger

logger = get_logger(__name__)

VISION_PROMPT = """You are a professional jewelry appraiser. Analyze this jewelry image for an AI search.
Identify the primary category (must be one of: rings, necklaces, earrings, bracelets).
Provide a highly descriptive search string including:
- Metal/Material (Gold, Silver, Platinum, etc.)
- Stones/Gems (Diamond, Pearl, Emerald, Sapphire, Crystal, CZ, etc.)
- Style (Bohemian, Minimalist, Traditional, Modern, Vintage, etc.)
- Key visual features (Dangle, Stud, Hoop, Choker, Filigree, Locket, etc.)
Return ONLY a JSON object: {"category": "category_name", "description": "detailed professional description"}"""

GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"

_FENCE_RE = re.compile(r"```(?:json)?")


class VisionResult(BaseModel):
    category: str = ""
    description: str


def strip_base64_prefix(image: str) -> str:
    """'data:image/jpeg;base64,AAAA' -> 'AAAA'"""
    return image.split(",", 1)[1] if "," in image else image


def parse_vision_content(content: str) -> VisionResult:
    cleaned = _FENCE_RE.sub("", content).strip()
    try:
        data = json.loads(cleaned)
    except ValueError as e:
        raise ProviderError(f"Model returned malformed JSON: {e}")

    if not isinstance(data, dict) or not data.get("description"):
        raise ProviderError("Model response has no description")

    return VisionResult(category=str(data.get("category") or ""), description=str(data["description"]))


def _error_message(resp: requests.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        return resp.reason or f"HTTP {resp.status_code}"
    error = body.get("error") if isinstance(body, dict) else None
    if isinstance(error, dict):
        return error.get("message") or resp.reason
    if isinstance(error, str):
        return error
    return resp.reason or f"HTTP {resp.status_code}"


def _post_json(session: requests.Session, url: str, timeout: float, **kwargs) -> dict:
    try:
        resp = session.post(url, timeout=timeout, **kwargs)
    except requests.RequestException as e:
        raise ProviderError(f"Request failed: {e}")

    if not resp.ok:
        raise ProviderError(_error_message(resp), status=resp.status_code)

    try:
        return resp.json()
    except ValueError:
        raise ProviderError("Response is not JSON", status=resp.status_code)


class ChatCompletionsProvider:
    """OpenAI-compatible /chat/completions vision provider."""

    name = "chat"
    url = ""
    models: Sequence[str] = ()
    vision_markers: Sequence[str] = ("vision",)
    retry_on_quota = False

    def __init__(
        self,
        api_key: str,
        models: Sequence[str] | None = None,
        session: requests.Session | None = None,
        timeout: float = AI_HTTP_TIMEOUT,
    ):
        self.api_key = (api_key or "").strip()
        if models is not None:
            self.models = tuple(models)
        self.session = session or requests.Session()
        self.timeout = timeout

    def is_vision_model(self, model_id: str) -> bool:
        return any(marker in model_id for marker in self.vision_markers)

    def text_prompt(self) -> str:
        return VISION_PROMPT

    def headers(self) -> dict:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    def build_content(self, model_id: str, image_b64: str):
        if not self.is_vision_model(model_id):
            return self.text_prompt()
        return [
            {"type": "text", "text": VISION_PROMPT},
            {"type": "image_url", "image_url": {"url": f"data:image/jpeg;base64,{image_b64}"}},
        ]

    def describe(self, model_id: str, image_b64: str) -> VisionResult:
        payload = {
            "model": model_id,
            "messages": [{"role": "user", "content": self.build_content(model_id, image_b64)}],
            "response_format": {"type": "json_object"},
        }
        data = _post_json(self.session, self.url, self.timeout, headers=self.headers(), json=payload)

        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError):
            content = None
        if not content:
            raise ProviderError(f"{self.name} {model_id} returned no content")

        return parse_vision_content(content)


class GroqProvider(ChatCompletionsProvider):
    name = "Groq"
    url = "https://api.groq.com/openai/v1/chat/completions"
    models = (
        "meta-llama/llama-4-scout-17b-16e-instruct",
        "meta-llama/llama-4-maverick-17b-128e-instruct",
        "llama-3.2-11b-vision-preview",
        "llama-3.2-90b-vision-preview",
    )
    vision_markers = ("vision", "scout", "maverick")


class CerebrasProvider(ChatCompletionsProvider):
    name = "Cerebras"
    url = "https://api.cerebras.ai/v1/chat/completions"
    models = ("llama3.2-11b-vision", "llama-3.3-70b")

    def text_prompt(self) -> str:
        return f"{VISION_PROMPT} (Analyze the jewelry description from the provided image context)"


class OpenRouterProvider(ChatCompletionsProvider):
    name = "OpenRouter"
    url = "https://openrouter.ai/api/v1/chat/completions"
    models = (
        "google/gemini-2.0-flash-lite-preview-02-05:free",
        "google/gemini-flash-1.5-8b",
        "openai/gpt-4o-mini",
    )

    def is_vision_model(self, model_id: str) -> bool:
        return True

    def headers(self) -> dict:
        headers = super().headers()
        headers["HTTP-Referer"] = "https://luxejewel.vercel.app"
        headers["X-Title"] = "LuxeJewel AI Search"
        return headers


class GeminiProvider:
    """Gemini generateContent, the last provider in the chain."""

    name = "Gemini"
    models = ("gemini-1.5-flash", "gemini-1.5-pro")
    retry_on_quota = True

    def __init__(
        self,
        api_key: str,
        models: Sequence[str] | None = None,
        session: requests.Session | None = None,
        timeout: float = AI_HTTP_TIMEOUT,
    ):
        self.api_key = (api_key or "").strip()
        if models is not None:
            self.models = tuple(models)
        self.session = session or requests.Session()
        self.timeout = timeout

    def describe(self, model_id: str, image_b64: str) -> VisionResult:
        payload = {
            "contents": [{
                "parts": [
                    {"inline_data": {"mime_type": "image/jpeg", "data": image_b64}},
                    {"text": VISION_PROMPT},
                ]
            }]
        }
        data = _post_json(
            self.session,
            f"{GEMINI_BASE_URL}/models/{model_id}:generateContent",
            self.timeout,
            params={"key": self.api_key},
            json=payload,
        )

        try:
            parts = data["candidates"][0]["content"]["parts"]
            content = "".join(p.get("text", "") for p in parts)
        except (KeyError, IndexError, TypeError):
            content = ""
        if not content:
            raise ProviderError(f"Gemini {model_id} returned no content")

        return parse_vision_content(content)


class GeminiEmbeddingClient:
    model = "gemini-embedding-001"

    def __init__(
        self,
        api_key: str = GOOGLE_API_KEY,
        dimensions: int = EMBEDDING_DIMENSIONS,
        session: requests.Session | None = None,
        timeout: float = AI_HTTP_TIMEOUT,
    ):
        self.api_key = (api_key or "").strip()
        self.dimensions = dimensions
        self.session = session or requests.Session()
        self.timeout = timeout

    def embed(self, text: str) -> List[float]:
        if not self.api_key:
            raise ProviderError("GOOGLE_API_KEY is not configured")

        data = _post_json(
            self.session,
            f"{GEMINI_BASE_URL}/models/{self.model}:embedContent",
            self.timeout,
            params={"key": self.api_key},
            json={
                "model": f"models/{self.model}",
                "content": {"parts": [{"text": text}]},
                "outputDimensionality": self.dimensions,
            },
        )
        try:
            values = data["embedding"]["values"]
        except (KeyError, TypeError):
            raise ProviderError("Embedding API error: response has no embedding")

        if len(values) != self.dimensions:
            logger.warning(f"Unexpected embedding dimensions: {len(values)} (expected {self.dimensions})")
        return [float(v) for v in values]


def default_vision_providers(session: requests.Session | None = None) -> list:
    """Providers in preference order; ones without an API key are skipped at search time."""
    return [
        GroqProvider(GROQ_API_KEY, session=session),
        CerebrasProvider(CEREBRAS_API_KEY, session=session),
        OpenRouterProvider(OPENROUTER_API_KEY, session=session),
        GeminiProvider(GOOGLE_API_KEY, session=session),
    ]
