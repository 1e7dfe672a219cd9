"""Client for the Gemini ``generateContent`` endpoint."""

import logging
import textwrap
from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx

from app.config import Settings
from app.errors import MalformedUpstreamReply, UpstreamRejected, UpstreamUnavailable

logger = logging.getLogger(__name__)

_PROMPT_TEMPLATE = textwrap.dedent(
    """\
    You are a professional SEO blog writer. Write a blog post about "{topic}" in a {tone} tone.
    Format the answer as a single VALID JSON object and nothing else:
    {{
        "title": "Title",
        "content": "HTML body content",
        "meta_title": "SEO Title",
        "meta_description": "SEO Description",
        "tags": "tag1, tag2",
        "slug": "url-friendly-slug",
        "category": "Category",
        "canonical_url": "https://example.com",
        "external_links": ["https://link1.com", "https://link2.com"],
        "image_prompts": ["Short description of an illustration for the post"]
    }}
    Use only HTML tags (h2, h3, p, ul, li, strong, em, a) inside "content" and escape
    every double quote inside string values."""
)


@dataclass
class UpstreamReply:
    text: str
    grounding_metadata: Optional[Dict[str, Any]] = None


def build_prompt(topic: str, tone: Optional[str] = "Professional") -> str:
    """Return the instruction sent to the model for *topic* in *tone*."""
    return _PROMPT_TEMPLATE.format(topic=topic, tone=tone or "Professional")


def _error_message(response: httpx.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        return f"Gemini API returned HTTP {response.status_code}."
    error = data.get("error") if isinstance(data, dict) else None
    if isinstance(error, dict) and error.get("message"):
        return str(error["message"])
    return f"Gemini API returned HTTP {response.status_code}."


def _reply_from_body(data: Any) -> UpstreamReply:
    """Pull the first candidate's text and grounding metadata out of *data*."""
    candidates = data.get("candidates") if isinstance(data, dict) else None
    if not candidates:
        feedback = data.get("promptFeedback", {}) if isinstance(data, dict) else {}
        if isinstance(feedback, dict) and feedback.get("blockReason"):
            raise UpstreamRejected(f"Gemini blocked the prompt: {feedback['blockReason']}.")
        raise MalformedUpstreamReply("Gemini returned no candidates.")

    candidate = candidates[0] if isinstance(candidates[0], dict) else {}
    parts = (candidate.get("content") or {}).get("parts") or []
    text = "".join(p.get("text", "") for p in parts if isinstance(p, dict))
    if not text.strip():
        raise MalformedUpstreamReply("Gemini returned a candidate without text.")

    grounding = candidate.get("groundingMetadata")
    if not isinstance(grounding, dict):
        grounding = None
    return UpstreamReply(text=text, grounding_metadata=grounding)


async def generate_text(
    prompt: str,
    api_key: str,
    *,
    settings: Settings,
    client: Optional[httpx.AsyncClient] = None,
) -> UpstreamReply:
    """Send *prompt* to Gemini and return the generated text.

    A *client* may be supplied (tests pass one with a mock transport);
    otherwise a client is opened for this call only.

    Raises:
        UpstreamUnavailable: on timeouts, network errors and HTTP 5xx.
        UpstreamRejected: on any other non-2xx status or a blocked prompt.
        MalformedUpstreamReply: if the response body has no candidate text.
    """
    url = f"{settings.gemini_base_url}/models/{settings.gemini_model}:generateContent"
    payload: Dict[str, Any] = {"contents": [{"parts": [{"text": prompt}]}]}
    if settings.grounding_enabled:
        payload["tools"] = [{"google_search": {}}]

    if client is None:
        async with httpx.AsyncClient(timeout=settings.gemini_timeout) as own_client:
            return await generate_text(prompt, api_key, settings=settings, client=own_client)

    try:
        response = await client.post(url, headers={"x-goog-api-key": api_key}, json=payload)
    except httpx.TimeoutException as exc:
        logger.error("Timeout calling Gemini model %s", settings.gemini_model)
        raise UpstreamUnavailable("The Gemini API timed out.", timeout=True) from exc
    except httpx.RequestError as exc:
        logger.error("Error calling Gemini model %s: %s", settings.gemini_model, type(exc).__name__)
        raise UpstreamUnavailable("Could not reach the Gemini API.") from exc

    if response.status_code >= 500:
        logger.error("Gemini API server error: HTTP %s", response.status_code)
        raise UpstreamUnavailable(_error_message(response))
    if not response.is_success:
        logger.warning("Gemini API rejected request: HTTP %s", response.status_code)
        raise UpstreamRejected(_error_message(response), status_code=response.status_code)

    try:
        data = response.json()
    except ValueError as exc:
        raise MalformedUpstreamReply("Gemini returned a non-JSON response body.") from exc
    return _reply_from_body(data)
