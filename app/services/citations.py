"""Source citations from Gemini grounding metadata."""

from typing import Any, List, Mapping, Optional
from urllib.parse import urlparse

from app.models.response import Source


def _usable_uri(uri: Any) -> bool:
    if not isinstance(uri, str):
        return False
    parsed = urlparse(uri.strip())
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def extract_sources(grounding: Optional[Mapping[str, Any]]) -> List[Source]:
    """Return the web sources named in *grounding*, in order.

    Entries without a usable http(s) URI are dropped, as are repeated URIs.
    An entry without a title is labelled with its host name.
    """
    if not grounding:
        return []

    sources: List[Source] = []
    seen: set = set()
    for chunk in grounding.get("groundingChunks") or []:
        if not isinstance(chunk, Mapping):
            continue
        web = chunk.get("web")
        if not isinstance(web, Mapping):
            continue
        uri = web.get("uri")
        if not _usable_uri(uri):
            continue
        uri = uri.strip()
        if uri in seen:
            continue
        seen.add(uri)
        title = web.get("title")
        if not isinstance(title, str) or not title.strip():
            title = urlparse(uri).netloc
        sources.append(Source(title=title.strip(), uri=uri))
    return sources
