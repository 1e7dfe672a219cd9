import logging

from fastapi import APIRouter, Depends, HTTPException

from app.config import Settings, get_settings
from app.errors import (
    IncompleteContent,
    MalformedUpstreamReply,
    UpstreamRejected,
    UpstreamUnavailable,
)
from app.models.request import GenerationRequest
from app.models.response import NormalizedContent
from app.services.gemini import build_prompt, generate_text
from app.services.normalizer import normalize

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/generate",
    response_model=NormalizedContent,
    response_model_exclude_none=True,
    summary="Generate an SEO blog post",
    description=(
        "Asks the Gemini model for a blog post about *topic* in the requested "
        "*tone*, then validates the reply, links internal keywords, builds "
        "image URLs from the suggested image prompts and attaches any "
        "grounding sources.\n\n"
        "The caller may pass its own `apiKey`; otherwise the server key is used."
    ),
)
async def generate(
    body: GenerationRequest, settings: Settings = Depends(get_settings)
) -> NormalizedContent:
    """Generate, normalize and return one blog post."""
    logger.info(
        "Generate request received",
        extra={"topic": body.topic, "tone": body.tone, "caller_key": bool(body.api_key)},
    )

    api_key = body.api_key or settings.gemini_api_key
    if not api_key:
        raise HTTPException(status_code=401, detail="Gemini API key missing")

    # ── Step 1: ask the model ────────────────────────────────────────────────
    try:
        reply = await generate_text(
            build_prompt(body.topic, body.tone), api_key, settings=settings
        )
    except UpstreamUnavailable as exc:
        logger.error("Gemini unavailable for topic %r: %s", body.topic, exc)
        raise HTTPException(status_code=504 if exc.timeout else 503, detail=str(exc))
    except UpstreamRejected as exc:
        logger.warning("Gemini rejected topic %r: %s", body.topic, exc)
        raise HTTPException(status_code=502, detail=f"Gemini API error: {exc}")
    except MalformedUpstreamReply as exc:
        logger.error("Unusable Gemini response for topic %r: %s", body.topic, exc)
        raise HTTPException(status_code=502, detail=str(exc))

    # ── Step 2: normalize the reply ──────────────────────────────────────────
    try:
        return normalize(reply.text, settings.link_map, grounding=reply.grounding_metadata)
    except MalformedUpstreamReply as exc:
        logger.error("Malformed reply for topic %r: %s", body.topic, exc)
        raise HTTPException(status_code=502, detail=str(exc))
    except IncompleteContent as exc:
        logger.error("Incomplete reply for topic %r: missing %s", body.topic, exc.missing)
        raise HTTPException(status_code=502, detail=str(exc))
