"""Base classes for the help-center scraping pipeline."""

import asyncio
import logging
import re
import unicodedata
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import aiohttp

from ...core.errors import FetchError

logger = logging.getLogger(__name__)

MAX_FILENAME_LENGTH = 100

FRONTMATTER_PATTERN = re.compile(r"^---\n(.*?)\n---\n\n?(.*)$", re.DOTALL)
TITLE_PATTERN = re.compile(r'^title:\s*"((?:[^"\\]|\\.)*)"', re.MULTILINE)
SOURCE_PATTERN = re.compile(r'^source:\s*"(.*?)"', re.MULTILINE)
SCRAPED_AT_PATTERN = re.compile(r'^scraped_at:\s*"(.*?)"', re.MULTILINE)


def sanitize_filename(title: str) -> str:
    """Map an article title to a filesystem-safe slug.

    Accented letters degrade to their base letter, every run of characters
    outside ``[a-z0-9]`` becomes a single hyphen, and the result is capped at
    100 characters. Distinct titles can map to the same slug; nothing here
    detects that.
    """
    decomposed = unicodedata.normalize("NFD", title.lower())
    without_marks = "".join(c for c in decomposed if not unicodedata.combining(c))
    slug = re.sub(r"[^a-z0-9]+", "-", without_marks).strip("-")
    # Truncation can expose a trailing hyphen; strip again so the slug is a fixed point
    return slug[:MAX_FILENAME_LENGTH].strip("-")


def utc_timestamp() -> str:
    """Current UTC time as ISO-8601 with millisecond precision and a Z suffix."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass(frozen=True)
class ArticleLink:
    """An article discovered on an index page."""

    url: str
    title: str


@dataclass
class IndexPageResult:
    """Outcome of processing one index page."""

    index_url: str
    processed: int = 0
    files: List[str] = field(default_factory=list)
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        result = {"index_url": self.index_url, "processed": self.processed, "files": self.files}
        if self.error:
            result["error"] = self.error
        return result


@dataclass
class AggregateResult:
    """Totals across index pages, in the order the pages were supplied."""

    total_processed: int = 0
    all_files: List[str] = field(default_factory=list)
    pages: List[IndexPageResult] = field(default_factory=list)

    @classmethod
    def from_pages(cls, pages: List[IndexPageResult]) -> "AggregateResult":
        return cls(
            total_processed=sum(page.processed for page in pages),
            all_files=[filename for page in pages for filename in page.files],
            pages=list(pages),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_processed": self.total_processed,
            "all_files": self.all_files,
            "pages": [page.to_dict() for page in self.pages],
        }


class ScrapedArticle:
    """A converted article and its on-disk Markdown representation."""

    def __init__(
        self,
        title: str,
        source_url: str,
        markdown: str,
        scraped_at: Optional[str] = None,
    ):
        self.title = title
        self.source_url = source_url
        self.markdown = markdown
        self.scraped_at = scraped_at or utc_timestamp()

    @property
    def filename(self) -> str:
        """Filename derived from the title only, so same-slug titles overwrite each other."""
        return f"{sanitize_filename(self.title)}.md"

    def to_markdown(self) -> str:
        """Render frontmatter followed by the Markdown body."""
        escaped_title = self.title.replace('"', '\\"')
        frontmatter = (
            "---\n"
            f'title: "{escaped_title}"\n'
            f'source: "{self.source_url}"\n'
            f'scraped_at: "{self.scraped_at}"\n'
            "---\n\n"
        )
        return frontmatter + self.markdown

    @classmethod
    def from_markdown(cls, content: str) -> "ScrapedArticle":
        """Parse a file written by ``to_markdown``.

        Files without a frontmatter block are accepted; the whole content
        becomes the body and title/source stay empty.
        """
        match = FRONTMATTER_PATTERN.match(content)
        if not match:
            return cls(title="", source_url="", markdown=content, scraped_at="")

        header, body = match.group(1), match.group(2)
        title_match = TITLE_PATTERN.search(header)
        source_match = SOURCE_PATTERN.search(header)
        scraped_match = SCRAPED_AT_PATTERN.search(header)

        return cls(
            title=title_match.group(1).replace('\\"', '"') if title_match else "",
            source_url=source_match.group(1) if source_match else "",
            markdown=body,
            scraped_at=scraped_match.group(1) if scraped_match else "",
        )


class ArticleStorage:
    """Manages the Markdown output directory shared by the scrape and embed stages."""

    def __init__(self, base_path: Union[str, Path]):
        self.base_path = Path(base_path)

    def ensure_exists(self) -> None:
        self.base_path.mkdir(parents=True, exist_ok=True)

    def save_article(self, article: ScrapedArticle) -> Path:
        """Write the article, silently replacing any file with the same name."""
        self.ensure_exists()
        file_path = self.base_path / article.filename

        with open(file_path, "w", encoding="utf-8") as f:
            f.write(article.to_markdown())

        logger.debug(f"Saved article: {file_path}")
        return file_path

    def list_markdown_files(self) -> List[str]:
        """Names of all ``.md`` files in the directory, sorted."""
        if not self.base_path.is_dir():
            return []
        return sorted(item.name for item in self.base_path.iterdir() if item.suffix == ".md")

    def load_article(self, filename: str) -> ScrapedArticle:
        with open(self.base_path / filename, "r", encoding="utf-8") as f:
            return ScrapedArticle.from_markdown(f.read())


async def fetch_html(session: aiohttp.ClientSession, url: str) -> str:
    """GET a page and return its body, raising FetchError on any failure."""
    try:
        async with session.get(url) as response:
            if not 200 <= response.status < 300:
                raise FetchError(url, f"HTTP {response.status}")
            return await response.text()
    except (aiohttp.ClientError, asyncio.TimeoutError) as e:
        raise FetchError(url, str(e) or e.__class__.__name__) from e
