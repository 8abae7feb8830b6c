"""Article link extraction from help-center index (folder) pages."""

import logging
from typing import Any, Dict, List, Optional
from urllib.parse import urljoin, urlparse

import aiohttp
from bs4 import BeautifulSoup

from ...core.config import settings
from ...core.errors import NoLinksFoundError
from .base import ArticleLink, fetch_html

logger = logging.getLogger(__name__)


def base_url_for(index_url: str) -> str:
    """Scheme and host of a URL, e.g. ``https://help.example.com``."""
    parsed = urlparse(index_url)
    return f"{parsed.scheme}://{parsed.netloc}"


class LinkExtractor:
    """Finds article anchors on an index page."""

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        self.config = {
            "link_selector": settings.article_link_selector,
            "title_selector": settings.article_title_selector,
            "href_pattern": settings.article_href_pattern,
            **(config or {}),
        }

    def extract(self, soup: BeautifulSoup, base_url: str) -> List[ArticleLink]:
        """Return article links in document order, first occurrence of each URL wins."""
        links: List[ArticleLink] = []
        seen = set()

        for anchor in soup.select(self.config["link_selector"]):
            href = (anchor.get("href") or "").strip()
            title_elem = anchor.select_one(self.config["title_selector"])
            title = title_elem.get_text().strip() if title_elem else ""

            if not href or not title or self.config["href_pattern"] not in href:
                continue

            url = urljoin(base_url, href)
            if url in seen:
                continue
            seen.add(url)
            links.append(ArticleLink(url=url, title=title))

        return links

    async def fetch_links(
        self, session: aiohttp.ClientSession, index_url: str, base_url: str
    ) -> List[ArticleLink]:
        """Fetch an index page and extract its article links.

        Raises:
            FetchError: the page could not be fetched.
            NoLinksFoundError: the page contains no usable article links.
        """
        html = await fetch_html(session, index_url)
        soup = BeautifulSoup(html, "html.parser")

        links = self.extract(soup, base_url)
        if not links:
            raise NoLinksFoundError(index_url)

        logger.info(f"Found {len(links)} articles on: {index_url}")
        return links
