from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class GenerationRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, populate_by_name=True)

    topic: str = Field(min_length=1, description="Subject of the blog post.")
    tone: Optional[str] = Field(
        default="Professional",
        description="Writing tone, e.g. 'Casual'. Null or empty falls back to 'Professional'.",
    )
    api_key: Optional[str] = Field(
        default=None,
        alias="apiKey",
        description="Caller-supplied Gemini API key; the server key is used when omitted.",
    )
    """Optional Gemini credential.

    Accepted as ``apiKey`` (the name used by the browser front-end) or
    ``api_key``.  Never logged.
    """
