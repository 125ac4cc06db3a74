import pytest

from mca_shop_server.hero import (
    FALLBACK_HERO_CONTENT,
    HeroCarousel,
    normalize_hero_payload,
    parse_hero_contents,
)
from mca_shop_server.models import HeroContent

SLIDE = {"_id": "h1", "title": "New Season", "subtitle": "Jerseys", "mediaType": "video"}


@pytest.mark.parametrize(
    "payload, expected",
    [
        ([SLIDE], [SLIDE]),
        ({"data": [SLIDE]}, [SLIDE]),
        ({"heroContents": [SLIDE]}, [SLIDE]),
        ({"items": [SLIDE]}, [SLIDE]),
        (SLIDE, [SLIDE]),
        ({"id": "h2"}, [{"id": "h2"}]),
        ({"title": "Only a title"}, [{"title": "Only a title"}]),
        ({}, []),
        ([], []),
        ({"success": True}, []),
        (None, []),
        ("unexpected", []),
    ],
)
def test_normalize_hero_payload(payload, expected):
    assert normalize_hero_payload(payload) == expected


def test_wrapped_list_wins_over_single_object_keys():
    payload = {"title": "wrapper", "data": [SLIDE]}
    assert normalize_hero_payload(payload) == [SLIDE]


def test_parse_uses_backend_field_names():
    contents = parse_hero_contents({"data": [SLIDE]})
    assert contents[0].id == "h1"
    assert contents[0].media_type == "video"
    assert contents[0].button_text == "Shop Now"


def test_carousel_falls_back_when_empty():
    carousel = HeroCarousel([])
    assert carousel.contents == FALLBACK_HERO_CONTENT
    assert carousel.current_content.title == "OFFICIAL MCA COLLECTION"
    assert carousel.loading is False


def test_carousel_navigation_wraps():
    slides = [HeroContent(id=str(i), title=f"Slide {i}") for i in range(3)]
    carousel = HeroCarousel(slides)

    carousel.prev()
    assert carousel.current == 2
    carousel.next()
    carousel.next()
    assert carousel.current == 1


def test_carousel_mute_toggle():
    carousel = HeroCarousel()
    assert carousel.is_muted is True
    assert carousel.toggle_mute() is False
    assert carousel.current_content is None
