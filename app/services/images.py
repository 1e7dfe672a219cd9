"""Image-prompt to image-URL mapping."""

import random
from typing import Callable, List, Optional, Sequence
from urllib.parse import quote, urlencode

IMAGE_BASE_URL = "https://image.pollinations.ai/prompt/"
IMAGE_WIDTH = 1024
IMAGE_HEIGHT = 768
SEED_LIMIT = 100_000

SeedSource = Callable[[], int]


def random_seed() -> int:
    """Return a non-negative seed below :data:`SEED_LIMIT`."""
    return random.randrange(SEED_LIMIT)


def build_image_url(prompt: str, seed: int) -> str:
    """Return the image-generation URL for one *prompt*."""
    query = urlencode(
        {"width": IMAGE_WIDTH, "height": IMAGE_HEIGHT, "seed": seed, "nologo": "true"}
    )
    return f"{IMAGE_BASE_URL}{quote(prompt, safe='')}?{query}"


def build_image_urls(
    prompts: Sequence[str], seed_source: Optional[SeedSource] = None
) -> List[str]:
    """Map each prompt to an image URL, preserving order and length.

    The seed only keeps repeated prompts from producing identical images
    across requests; pass *seed_source* to control it.
    """
    next_seed = seed_source or random_seed
    return [build_image_url(prompt, next_seed()) for prompt in prompts]
