"""Help-center scraper: index pages -> article links -> Markdown files."""

import asyncio
import logging
from typing import Any, Dict, List, Optional

import aiohttp

from ...core.config import settings
from ...core.errors import NoLinksFoundError
from .articles import ArticleConverter
from .base import AggregateResult, ArticleStorage, IndexPageResult
from .links import LinkExtractor, base_url_for

logger = logging.getLogger(__name__)


class HelpCenterScraper:
    """Scrapes help-center index pages into the article storage directory.

    Articles of one index page are fetched strictly one after another with a
    fixed pause between them. Index pages themselves run in a bounded pool, and
    every page worker keeps its own pause cadence.
    """

    def __init__(self, storage: ArticleStorage, config: Optional[Dict[str, Any]] = None):
        self.storage = storage
        self.config = {
            "timeout": settings.http_timeout,
            "delay_between_articles": settings.article_delay_seconds,
            "max_concurrent_pages": settings.index_page_concurrency,
            **(config or {}),
        }
        self.link_extractor = LinkExtractor(self.config)
        self.converter = ArticleConverter(storage, self.config)
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def _create_session(self) -> aiohttp.ClientSession:
        timeout = aiohttp.ClientTimeout(total=self.config["timeout"])
        return aiohttp.ClientSession(timeout=timeout)

    async def scrape_index_page(self, index_url: str, base_url: str) -> IndexPageResult:
        """Single-page mode: scrape one index page.

        Raises:
            FetchError: the index page could not be fetched.
            NoLinksFoundError: the index page has no article links.
        """
        async with self._create_session() as session:
            return await self.process_index_url(session, index_url, base_url)

    async def scrape_index_pages(
        self,
        index_urls: List[str],
        stop_event: Optional[asyncio.Event] = None,
    ) -> AggregateResult:
        """Multi-page mode: scrape many index pages with bounded concurrency.

        A page that fails, or has no links, is recorded as zero processed and the
        remaining pages carry on. Results keep the order of ``index_urls``.
        """
        semaphore = asyncio.Semaphore(self.config["max_concurrent_pages"])
        self.logger.info(
            f"Scraping {len(index_urls)} index pages "
            f"(concurrency={self.config['max_concurrent_pages']})"
        )

        async with self._create_session() as session:
            tasks = [
                self._process_index_url_with_semaphore(semaphore, session, url, stop_event)
                for url in index_urls
            ]
            pages = await asyncio.gather(*tasks)

        aggregate = AggregateResult.from_pages(list(pages))
        self.logger.info(
            f"Scraped {aggregate.total_processed} articles from {len(index_urls)} index pages"
        )
        return aggregate

    async def _process_index_url_with_semaphore(
        self,
        semaphore: asyncio.Semaphore,
        session: aiohttp.ClientSession,
        index_url: str,
        stop_event: Optional[asyncio.Event],
    ) -> IndexPageResult:
        async with semaphore:
            if stop_event is not None and stop_event.is_set():
                self.logger.info(f"Stop requested, skipping index page: {index_url}")
                return IndexPageResult(index_url=index_url)

            try:
                return await self.process_index_url(
                    session, index_url, base_url_for(index_url), stop_event
                )
            except NoLinksFoundError as e:
                self.logger.warning(str(e))
                return IndexPageResult(index_url=index_url)
            except Exception as e:
                self.logger.error(f"Failed to scrape index page {index_url}: {e}")
                return IndexPageResult(index_url=index_url, error=str(e))

    async def process_index_url(
        self,
        session: aiohttp.ClientSession,
        index_url: str,
        base_url: str,
        stop_event: Optional[asyncio.Event] = None,
    ) -> IndexPageResult:
        """Extract the page's links, then convert each article in link order."""
        links = await self.link_extractor.fetch_links(session, index_url, base_url)
        result = IndexPageResult(index_url=index_url)

        for position, link in enumerate(links):
            if stop_event is not None and stop_event.is_set():
                self.logger.info(
                    f"Stop requested, {len(links) - position} articles left on {index_url}"
                )
                break

            if position > 0:
                await asyncio.sleep(self.config["delay_between_articles"])

            article = await self.converter.convert(session, link)
            if article is None:
                continue

            result.files.append(article.filename)
            result.processed += 1

        self.logger.info(f"Processed {result.processed}/{len(links)} articles from {index_url}")
        return result
