"""Environment-driven settings."""

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List

from dotenv import load_dotenv

load_dotenv(Path(__file__).resolve().parents[1] / ".env")

# Keyword -> internal path used when INTERNAL_LINK_MAP is not set
DEFAULT_LINK_MAP: Dict[str, str] = {
    "SEO": "/blog-tools.html",
    "keyword research": "/keyword-research.html",
    "content marketing": "/content-marketing.html",
    "meta description": "/meta-description-generator.html",
    "blog": "/blog.html",
}


@dataclass
class Settings:
    gemini_api_key: str
    gemini_model: str
    gemini_base_url: str
    gemini_timeout: float
    grounding_enabled: bool
    link_map: Dict[str, str] = field(default_factory=dict)
    cors_allow_origins: List[str] = field(default_factory=lambda: ["*"])


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _load_link_map() -> Dict[str, str]:
    """Read INTERNAL_LINK_MAP (a JSON object) or fall back to the built-in map."""
    raw = os.getenv("INTERNAL_LINK_MAP", "").strip()
    if not raw:
        return dict(DEFAULT_LINK_MAP)
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ValueError(f"INTERNAL_LINK_MAP is not valid JSON: {exc}") from exc
    if not isinstance(parsed, dict):
        raise ValueError("INTERNAL_LINK_MAP must be a JSON object of keyword -> path.")
    return {str(k): str(v) for k, v in parsed.items() if str(k).strip()}


def get_settings() -> Settings:
    origins = os.getenv("CORS_ALLOW_ORIGINS", "*")
    return Settings(
        gemini_api_key=os.getenv("GEMINI_API_KEY", ""),
        gemini_model=os.getenv("GEMINI_MODEL", "gemini-1.5-flash"),
        gemini_base_url=os.getenv(
            "GEMINI_BASE_URL", "https://generativelanguage.googleapis.com/v1beta"
        ).rstrip("/"),
        gemini_timeout=float(os.getenv("GEMINI_TIMEOUT", "30")),
        grounding_enabled=_env_flag("GEMINI_GROUNDING"),
        link_map=_load_link_map(),
        cors_allow_origins=[o.strip() for o in origins.split(",") if o.strip()] or ["*"],
    )
