"""Article page to Markdown conversion."""

import logging
from typing import Any, Dict, Optional

import aiohttp
from bs4 import BeautifulSoup
from markdownify import ATX, MarkdownConverter

from ...core.config import settings
from ...core.errors import ContentNotFoundError, FetchError
from .base import ArticleLink, ArticleStorage, ScrapedArticle, fetch_html

logger = logging.getLogger(__name__)

# Nodes that carry behaviour or presentation rather than content
NON_CONTENT_TAGS = ["script", "style", "noscript"]


class HelpCenterMarkdownConverter(MarkdownConverter):
    """Markdown converter with ATX headings, fenced code and a stricter image rule."""

    def __init__(self, **options):
        options.setdefault("heading_style", ATX)
        options.setdefault("bullets", "*")
        super().__init__(**options)

    def convert_img(self, el, text, *args, **kwargs):
        alt = el.attrs.get("alt") or ""
        src = el.attrs.get("src") or ""
        title = el.attrs.get("title") or ""
        if not src:
            return ""

        # markdownify passes parent_tags (a set) in 1.x and convert_as_inline (a bool) before
        context = args[0] if args else kwargs.get("parent_tags", kwargs.get("convert_as_inline"))
        inline = "_inline" in context if isinstance(context, (set, frozenset)) else bool(context)
        parent_name = el.parent.name if el.parent is not None else None
        if inline and parent_name not in self.options.get("keep_inline_images_in", []):
            # Headings and table cells keep only the alt text
            return alt

        title_part = f' "{title}"' if title else ""
        return f"![{alt}]({src}{title_part})"


def html_to_markdown(html: str) -> str:
    return HelpCenterMarkdownConverter().convert(html).strip()


class ArticleConverter:
    """Fetches an article, isolates its content and writes it as Markdown."""

    def __init__(self, storage: ArticleStorage, config: Optional[Dict[str, Any]] = None):
        self.storage = storage
        self.config = {"content_selector": settings.content_selector, **(config or {})}

    def extract_content_html(self, soup: BeautifulSoup) -> str:
        """Inner HTML of the cleaned main content container.

        Raises:
            ContentNotFoundError: the container is missing or empty.
        """
        content_elem = soup.select_one(self.config["content_selector"])
        if content_elem is None:
            raise ContentNotFoundError("Content container not found")

        for unwanted in content_elem.find_all(NON_CONTENT_TAGS):
            unwanted.decompose()
        for styled in content_elem.find_all(attrs={"style": True}):
            del styled["style"]

        content_html = content_elem.decode_contents()
        if not content_html.strip():
            raise ContentNotFoundError("Content container is empty")
        return content_html

    def convert_html(self, link: ArticleLink, html: str) -> ScrapedArticle:
        soup = BeautifulSoup(html, "html.parser")
        content_html = self.extract_content_html(soup)
        return ScrapedArticle(
            title=link.title,
            source_url=link.url,
            markdown=html_to_markdown(content_html),
        )

    async def convert(
        self, session: aiohttp.ClientSession, link: ArticleLink
    ) -> Optional[ScrapedArticle]:
        """Fetch, convert and save one article.

        Returns None when the article is skipped; failures are logged, never raised,
        so a single bad article cannot abort the page it belongs to.
        """
        try:
            html = await fetch_html(session, link.url)
            article = self.convert_html(link, html)
            self.storage.save_article(article)
        except FetchError as e:
            logger.error(f"Failed to fetch {link.url}: {e.reason}")
            return None
        except ContentNotFoundError as e:
            logger.error(f"{e} for {link.url}")
            return None
        except Exception as e:
            logger.error(f"Error processing {link.url}: {e}")
            return None

        logger.info(f"Processed: {link.title}")
        return article
