"""Hero banner content: response normalization, fallback slide and carousel."""

import logging
from typing import Any, Optional

from .models import HeroContent

logger = logging.getLogger(__name__)

FALLBACK_HERO_CONTENT = [
    HeroContent(
        id="1",
        title="OFFICIAL MCA COLLECTION",
        subtitle="Authentic Jerseys & Stadium Merchandise",
        button_text="Shop Now",
        media_url=(
            "https://images.unsplash.com/photo-1571019613454-1cb2f99b2d8b?ixlib=rb-4.0.3"
            "&ixid=M3wxMjA3fDB8MHxwaG90by1wYWdlfHx8fGVufDB8fHx8fA%3D%3D&auto=format&fit=crop&w=2070&q=80"
        ),
        media_type="image",
        theme="light",
        is_active=True,
    )
]

_WRAPPER_KEYS = ("data", "heroContents", "items")


def normalize_hero_payload(payload: Any) -> list[dict[str, Any]]:
    """
    Normalize the different hero-content response shapes to a list.

    Handles a bare list, a list wrapped under ``data``, ``heroContents`` or
    ``items``, an empty object, and a single slide object (one carrying
    ``_id``, ``id`` or ``title``). Anything else yields an empty list.
    """
    if isinstance(payload, list):
        return payload
    if not isinstance(payload, dict):
        return []

    for key in _WRAPPER_KEYS:
        if isinstance(payload.get(key), list):
            return payload[key]

    if not payload:
        return []
    if payload.get("_id") or payload.get("id") or payload.get("title"):
        return [payload]
    return []


def parse_hero_contents(payload: Any) -> list[HeroContent]:
    """Normalize a payload and parse each slide, skipping malformed entries."""
    contents = []
    for item in normalize_hero_payload(payload):
        try:
            contents.append(HeroContent.model_validate(item))
        except ValueError as e:
            logger.warning(f"Failed to parse hero content: {e}")
    return contents


class HeroCarousel:
    """Slide navigation for the storefront hero banner."""

    def __init__(self, contents: Optional[list[HeroContent]] = None) -> None:
        self.contents: list[HeroContent] = []
        self.current = 0
        self.is_muted = True
        self.loading = True
        if contents is not None:
            self.load(contents)

    def load(self, contents: list[HeroContent]) -> None:
        """Replace the slides; an empty list falls back to the built-in slide."""
        self.contents = list(contents) if contents else list(FALLBACK_HERO_CONTENT)
        self.current = 0
        self.loading = False

    @property
    def current_content(self) -> Optional[HeroContent]:
        if not self.contents:
            return None
        return self.contents[self.current]

    def next(self) -> None:
        if self.contents:
            self.current = (self.current + 1) % len(self.contents)

    def prev(self) -> None:
        if self.contents:
            self.current = (self.current - 1 + len(self.contents)) % len(self.contents)

    def toggle_mute(self) -> bool:
        self.is_muted = not self.is_muted
        return self.is_muted
