from typing import List, Optional

from pydantic import BaseModel, ConfigDict, field_validator


class Source(BaseModel):
    """A web document cited by the upstream model's grounding metadata."""

    title: str
    uri: str


class NormalizedContent(BaseModel):
    """Validated blog post produced from one upstream reply."""

    # Fields the prompt does not ask for are passed through untouched
    model_config = ConfigDict(extra="allow")

    title: str
    content: str  # HTML fragment
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None
    tags: Optional[List[str]] = None
    slug: Optional[str] = None
    category: Optional[str] = None
    canonical_url: Optional[str] = None
    external_links: Optional[List[str]] = None
    image_prompts: Optional[List[str]] = None
    images: Optional[List[str]] = None
    sources: Optional[List[Source]] = None

    @field_validator("tags", mode="before")
    @classmethod
    def _split_tags(cls, value):
        if isinstance(value, str):
            return [tag.strip() for tag in value.split(",") if tag.strip()]
        return value
