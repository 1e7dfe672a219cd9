"""Error taxonomy for the generation pipeline."""

from typing import Iterable, Optional


class GenerationError(Exception):
    """Base class for every failure surfaced by the generation pipeline."""


class MalformedUpstreamReply(GenerationError):
    """The upstream reply could not be parsed as structured content."""


class IncompleteContent(GenerationError):
    """The upstream reply parsed, but required fields are missing or empty."""

    def __init__(self, missing: Iterable[str]):
        self.missing = tuple(missing)
        super().__init__(
            "Generated content is missing required field(s): " + ", ".join(self.missing)
        )


class UpstreamUnavailable(GenerationError):
    """The upstream service could not be reached or failed on its side."""

    def __init__(self, message: str, *, timeout: bool = False):
        self.timeout = timeout
        super().__init__(message)


class UpstreamRejected(GenerationError):
    """The upstream service refused the request (bad key, bad request, blocked prompt)."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)
