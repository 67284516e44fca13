"""Text helpers shared by the article gateway and scripts."""
from bs4 import BeautifulSoup

from omninews.config import EXCERPT_MAX_LENGTH

ELLIPSIS = "..."


def truncate_text(text: str, max_length: int) -> str:
    """Cut text so the result, ellipsis included, is at most max_length characters."""
    if len(text) <= max_length:
        return text
    cut = max(max_length - len(ELLIPSIS), 0)
    return text[:cut].rstrip() + ELLIPSIS


def strip_tags(content: str) -> str:
    """Remove any HTML markup, keeping paragraph breaks as typed."""
    return BeautifulSoup(content, "html.parser").get_text()


def extract_excerpt(content: str, max_length: int = EXCERPT_MAX_LENGTH) -> str:
    return truncate_text(strip_tags(content).strip(), max_length)


def is_social_url(url: str) -> dict:
    """Report which supported social platforms a URL points at.

    The admin form only offers AI drafting for TikTok and Instagram links;
    the generator itself accepts anything.
    """
    lowered = url.lower()
    return {
        "is_tiktok": "tiktok.com" in lowered,
        "is_instagram": "instagram.com" in lowered or "instagr.am" in lowered,
    }
