"""
BeautifulSoup helpers shared by the job extractor and the company enricher.
"""
import logging
from typing import Callable, Iterable, Optional

from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)

NON_CONTENT_TAGS = ["script", "style", "noscript", "template"]


def parse_html(html: Optional[str]) -> BeautifulSoup:
    return BeautifulSoup(html or "", "html.parser")


def element_text(element) -> str:
    """Visible text of an element with whitespace collapsed."""
    if element is None:
        return ""
    return " ".join(element.get_text(" ").split())


def page_text(soup: BeautifulSoup) -> str:
    """
    Visible text of a whole document.

    Works on a copy so the caller's tree keeps its <script> tags (JSON-LD is
    read from them).
    """
    copy = BeautifulSoup(str(soup), "html.parser")
    for tag in copy(NON_CONTENT_TAGS):
        tag.decompose()
    body = copy.body or copy
    return element_text(body)


def html_to_text(fragment: str) -> str:
    """Strip markup from an HTML fragment (e.g. a JSON-LD description)."""
    if not fragment:
        return ""
    return element_text(BeautifulSoup(fragment, "html.parser"))


def select_first_text(
    soup: BeautifulSoup,
    selectors: Iterable[str],
    accept: Optional[Callable[[str], bool]] = None,
) -> str:
    """
    Text of the first element, across selectors in order, that passes `accept`.

    Invalid selectors are skipped.
    """
    for selector in selectors:
        try:
            element = soup.select_one(selector)
        except Exception as e:
            logger.debug(f"[dom] Selector {selector!r} failed: {e}")
            continue
        if element is None:
            continue
        text = element_text(element)
        if not text:
            continue
        if accept is None or accept(text):
            return text
    return ""


def meta_content(soup: BeautifulSoup, name: str) -> str:
    """Content of <meta name=...> or <meta property=...>."""
    tag = soup.find("meta", attrs={"name": name}) or soup.find("meta", attrs={"property": name})
    if tag and tag.get("content"):
        return tag["content"].strip()
    return ""


def title_text(soup: BeautifulSoup) -> str:
    if soup.title and soup.title.string:
        return soup.title.string.strip()
    return ""
