"""Pipeline orchestrator for scraping and embedding workflows."""

import asyncio
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from ..core.config import settings
from ..core.errors import MissingInputError
from .ingestion.processor import IngestionPipeline
from .scraper.base import ArticleStorage
from .scraper.helpcenter import HelpCenterScraper

logger = logging.getLogger(__name__)


class PipelineOrchestrator:
    """Runs the scrape stage, the embed stage, or both.

    The output directory is the handoff between stages, so an embed run can
    rebuild the index from an earlier scrape without touching the network.
    """

    def __init__(
        self,
        output_dir: Optional[Union[str, Path]] = None,
        config: Optional[Dict[str, Any]] = None,
        vector_store: Any = None,
        vectorizer: Any = None,
    ):
        self.output_dir = Path(output_dir) if output_dir else Path(settings.output_dir)
        self.config = config or {}

        self.storage = ArticleStorage(self.output_dir)
        self.scraper = HelpCenterScraper(self.storage, self.config.get("scraper", {}))
        self.ingestion = IngestionPipeline(
            self.storage,
            self.config.get("ingestion", {}),
            vector_store=vector_store,
            vectorizer=vectorizer,
        )

    async def run_scrape_page(self, index_url: str, base_url: str) -> Dict[str, Any]:
        """Scrape a single index page; any page-level failure propagates.

        Returns:
            ``{"processed": int, "files": [filename, ...]}``
        """
        if not index_url or not base_url:
            raise MissingInputError("Both an index URL and a base URL are required")

        logger.info(f"Scraping index page: {index_url}")
        result = await self.scraper.scrape_index_page(index_url, base_url)
        return {"processed": result.processed, "files": result.files}

    async def run_scraping_pipeline(
        self,
        index_urls: Optional[List[str]] = None,
        stop_event: Optional[asyncio.Event] = None,
    ) -> Dict[str, Any]:
        """Scrape many index pages (defaults to the configured list)."""
        using_configured = not index_urls
        urls = list(index_urls) if index_urls else list(settings.index_urls)
        if not urls:
            raise MissingInputError("No index URLs to scrape")

        started_at = datetime.now(timezone.utc).isoformat()
        aggregate = await self.scraper.scrape_index_pages(urls, stop_event=stop_event)

        if using_configured:
            failed = [page.index_url for page in aggregate.pages if page.error]
            if failed:
                logger.warning(
                    f"{len(failed)} configured index pages failed; check INDEX_URLS: "
                    + ", ".join(failed)
                )

        return {
            "pipeline_type": "scraping",
            "started_at": started_at,
            "completed_at": datetime.now(timezone.utc).isoformat(),
            **aggregate.to_dict(),
        }

    async def run_embed_pipeline(
        self,
        files: Optional[List[str]] = None,
        stop_event: Optional[asyncio.Event] = None,
    ) -> Dict[str, Any]:
        """Re-index the corpus.

        With no file list, every Markdown file in the output directory is used;
        a missing or empty directory raises ``MissingInputError``.
        """
        if files is None:
            files = self.ingestion.discover_files()

        try:
            return await self.ingestion.embed_files(files, stop_event=stop_event)
        except Exception as e:
            logger.error(f"Embedding failed: {e}")
            raise

    async def run_full_pipeline(
        self,
        index_urls: Optional[List[str]] = None,
        stop_event: Optional[asyncio.Event] = None,
    ) -> Dict[str, Any]:
        """Scrape the index pages, then embed exactly the files this scrape wrote."""
        logger.info("Starting full pipeline (scraping + embedding)")

        scraping = await self.run_scraping_pipeline(index_urls, stop_event=stop_event)
        # Same-slug titles collapse to one file on disk; embed each file once
        files = list(dict.fromkeys(scraping["all_files"]))
        embedding = await self.run_embed_pipeline(files, stop_event=stop_event)

        return {
            "pipeline_type": "full",
            "scraping": scraping,
            "embedding": embedding,
            "total_processed": scraping["total_processed"],
            "total_chunks": embedding["total_chunks"],
            "total_embedded": embedding["total_embedded"],
        }

    async def get_pipeline_status(self) -> Dict[str, Any]:
        """Output directory contents and vector index state."""
        index_name = self.ingestion.config["index_name"]
        status = {
            "output_dir": str(self.output_dir),
            "output_dir_exists": self.output_dir.is_dir(),
            "markdown_files": len(self.storage.list_markdown_files()),
            "index_name": index_name,
        }

        try:
            status["index"] = await self.ingestion.vector_store.index_info(index_name)
        except Exception as e:
            logger.warning(f"Could not read vector index status: {e}")
            status["index"] = {"name": index_name, "error": str(e)}

        return status
