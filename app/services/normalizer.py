"""Turns a raw upstream reply into validated, link-enriched blog content."""

import json
import logging
import re
from typing import Any, Dict, Mapping, Optional

from pydantic import ValidationError

from app.errors import IncompleteContent, MalformedUpstreamReply
from app.models.response import NormalizedContent
from app.services.citations import extract_sources
from app.services.images import SeedSource, build_image_urls
from app.services.linker import inject_links

logger = logging.getLogger(__name__)

# Opening or closing code fence, with an optional language tag (```json, ```html, ```)
_FENCE_RE = re.compile(r"```[A-Za-z0-9_+\-]*")

REQUIRED_FIELDS = ("title", "content")

# Optional fields that a later stage derives from; a bad shape here is fatal
STRICT_FIELDS = frozenset({"image_prompts"})


def strip_fences(raw: str) -> str:
    """Remove every code-fence marker from *raw* and trim surrounding whitespace.

    Markers are removed until none remain, so the result is stable under
    repeated application.
    """
    text = raw
    while True:
        stripped = _FENCE_RE.sub("", text)
        if stripped == text:
            break
        text = stripped
    return text.strip()


def parse_reply(raw: str) -> Dict[str, Any]:
    """Decode the fence-stripped reply as a JSON object.

    Raises:
        MalformedUpstreamReply: if the text is not JSON or not a JSON object.
    """
    text = strip_fences(raw or "")
    if not text:
        raise MalformedUpstreamReply("The model returned an empty reply.")
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise MalformedUpstreamReply(f"The model did not return valid JSON: {exc.msg}.") from exc
    if not isinstance(data, dict):
        raise MalformedUpstreamReply(
            f"The model returned a JSON {type(data).__name__}, expected an object."
        )
    return data


def validate_content(data: Mapping[str, Any]) -> NormalizedContent:
    """Check required fields and build a :class:`NormalizedContent`.

    Optional fields with an unexpected shape are dropped and logged, except
    ``image_prompts``, which image derivation depends on.

    Raises:
        IncompleteContent: if ``title`` or ``content`` is absent, blank or not a string.
        MalformedUpstreamReply: if ``image_prompts`` is not a list of strings.
    """
    missing = [
        name
        for name in REQUIRED_FIELDS
        if not isinstance(data.get(name), str) or not data[name].strip()
    ]
    if missing:
        raise IncompleteContent(missing)

    # Images and sources are always derived here, never taken from the model
    fields = {k: v for k, v in data.items() if k != "sources"}
    if "image_prompts" in fields:
        fields.pop("images", None)

    try:
        return NormalizedContent.model_validate(fields)
    except ValidationError as exc:
        bad = sorted({str(err["loc"][0]) for err in exc.errors() if err["loc"]})

    fatal = [name for name in bad if name in STRICT_FIELDS]
    if fatal:
        raise MalformedUpstreamReply(
            f"The model returned malformed field(s): {', '.join(fatal)}."
        )

    logger.warning("Dropping malformed optional field(s): %s", ", ".join(bad))
    for name in bad:
        fields.pop(name, None)
    return NormalizedContent.model_validate(fields)


def normalize(
    raw_reply: str,
    link_map: Optional[Mapping[str, str]] = None,
    *,
    grounding: Optional[Mapping[str, Any]] = None,
    seed_source: Optional[SeedSource] = None,
) -> NormalizedContent:
    """Run the full pipeline on one upstream reply.

    Stages: strip fences, parse, validate, inject internal links, derive image
    URLs from ``image_prompts`` and attach grounding sources.  Any failing
    stage raises; a partially populated result is never returned.
    """
    data = parse_reply(raw_reply)
    post = validate_content(data)

    updates: Dict[str, Any] = {"content": inject_links(post.content, link_map)}
    if post.image_prompts is not None:
        updates["images"] = build_image_urls(post.image_prompts, seed_source)
    sources = extract_sources(grounding)
    if sources:
        updates["sources"] = sources

    logger.info(
        "Normalized reply",
        extra={
            "slug": post.slug,
            "images": len(updates.get("images") or []),
            "sources": len(sources),
        },
    )
    return post.model_copy(update=updates)
