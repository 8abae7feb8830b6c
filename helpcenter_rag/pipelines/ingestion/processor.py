"""Chunking and embedding of the Markdown corpus into the vector store."""

import asyncio
import logging
from typing import Any, Dict, Iterator, List, Optional

from ...core.config import settings
from ...core.errors import MissingInputError, ProviderError
from ..scraper.base import ArticleStorage
from .chunker import Chunk, MarkdownChunker

logger = logging.getLogger(__name__)


class IngestionPipeline:
    """Full re-index of the article directory.

    Every run wipes the target index (or creates it) and repopulates it from
    scratch. Chunks are embedded in fixed-size batches that may span files;
    batches run strictly one after another. Embedding or vector-store failures
    abort the run and leave the index partially populated until the next run.
    """

    def __init__(
        self,
        storage: ArticleStorage,
        config: Optional[Dict[str, Any]] = None,
        vector_store: Any = None,
        vectorizer: Any = None,
    ):
        self.storage = storage
        self.config = {
            "index_name": settings.docs_index_name,
            "vector_dim": settings.vector_dim,
            "metric": "cosine",
            "batch_size": settings.embed_batch_size,
            "max_chunk_chars": settings.max_chunk_chars,
            **(config or {}),
        }
        self.chunker = MarkdownChunker(max_chunk_chars=self.config["max_chunk_chars"])
        self._vector_store = vector_store
        self._vectorizer = vectorizer

    @property
    def vector_store(self):
        if self._vector_store is None:
            from ...core.vector_store import VectorStore

            self._vector_store = VectorStore()
        return self._vector_store

    @property
    def vectorizer(self):
        if self._vectorizer is None:
            from ...core.redis import get_vectorizer

            self._vectorizer = get_vectorizer()
        return self._vectorizer

    def discover_files(self) -> List[str]:
        """List the Markdown files to embed.

        Raises:
            MissingInputError: the directory is missing or holds no ``.md`` files.
        """
        if not self.storage.base_path.is_dir():
            raise MissingInputError(
                f"Docs directory not found: {self.storage.base_path}. "
                "Run the scraper first, or place Markdown files there."
            )

        files = self.storage.list_markdown_files()
        if not files:
            raise MissingInputError(
                f"No Markdown files found in {self.storage.base_path}. "
                "Run the scraper first to populate the docs directory."
            )

        logger.info(f"Found {len(files)} Markdown files in {self.storage.base_path}")
        return files

    def chunk_file(self, filename: str) -> List[Chunk]:
        """Chunk one stored article, including empty chunks (callers filter them)."""
        article = self.storage.load_article(filename)
        if not article.markdown.strip():
            return []
        return self.chunker.chunk(
            article.markdown,
            title=article.title,
            source=article.source_url,
            filename=filename,
            drop_empty=False,
        )

    def iter_batches(self, files: List[str], stats: Dict[str, Any]) -> Iterator[List[Chunk]]:
        """Yield non-empty chunks in batches of ``batch_size``, filled file by file.

        ``stats["total_chunks"]`` counts every chunk seen, empty ones included.
        """
        batch_size = self.config["batch_size"]
        pending: List[Chunk] = []

        for filename in files:
            chunks = self.chunk_file(filename)
            stats["total_chunks"] += len(chunks)
            stats["files_processed"] += 1
            pending.extend(chunk for chunk in chunks if chunk.text.strip())

            while len(pending) >= batch_size:
                yield pending[:batch_size]
                pending = pending[batch_size:]

        if pending:
            yield pending

    async def prepare_index(self) -> str:
        """Create the index if absent, otherwise truncate it. Returns what was done."""
        index_name = self.config["index_name"]
        existing = await self.vector_store.list_indexes()

        if index_name in existing:
            await self.vector_store.truncate_index(index_name)
            return "truncated"

        await self.vector_store.create_index(
            index_name, dimension=self.config["vector_dim"], metric=self.config["metric"]
        )
        return "created"

    async def embed_files(
        self, files: List[str], stop_event: Optional[asyncio.Event] = None
    ) -> Dict[str, Any]:
        """Chunk, embed and upsert the given files into a freshly emptied index."""
        if files is None:
            raise MissingInputError("No file list supplied to the embed stage")

        stats: Dict[str, Any] = {
            "index_name": self.config["index_name"],
            "files_processed": 0,
            "batches": 0,
            "total_chunks": 0,
            "total_embedded": 0,
        }
        if not files:
            return stats

        prepared = False
        for batch in self.iter_batches(files, stats):
            if stop_event is not None and stop_event.is_set():
                logger.info("Stop requested, ending embed run early")
                break

            if not prepared:
                action = await self.prepare_index()
                logger.info(f"Vector index {self.config['index_name']} {action}")
                prepared = True

            stats["total_embedded"] += await self._index_batch(batch, stats["total_embedded"])
            stats["batches"] += 1
            logger.info(f"Embedded batch {stats['batches']}: {len(batch)} chunks")

        if not prepared and not (stop_event is not None and stop_event.is_set()):
            # A corpus without content still leaves behind an empty, consistent index
            await self.prepare_index()

        logger.info(
            f"Embedding complete: {stats['total_chunks']} chunks, "
            f"{stats['total_embedded']} embedded"
        )
        return stats

    async def _index_batch(self, chunks: List[Chunk], offset: int) -> int:
        """Embed one batch and upsert it with a single call.

        Args:
            chunks: Non-empty chunks of this batch
            offset: Number of chunks already embedded in this run

        Returns:
            Number of chunks indexed
        """
        texts = [chunk.text for chunk in chunks]

        try:
            embeddings = await self.vectorizer.aembed_many(texts)
        except Exception as e:
            logger.error(f"Failed to embed {len(texts)} chunks: {e}")
            raise ProviderError(f"Embedding request failed: {e}") from e

        if len(embeddings) != len(texts):
            raise ProviderError(
                f"Embedding provider returned {len(embeddings)} vectors for {len(texts)} texts"
            )

        # <filename>-<n>, with n counted across the whole run so straddling files stay unique
        ids = [f"{chunk.filename}-{offset + position}" for position, chunk in enumerate(chunks)]
        metadata = [chunk.to_metadata() for chunk in chunks]

        await self.vector_store.upsert(
            self.config["index_name"], vectors=embeddings, metadata=metadata, ids=ids
        )
        return len(embeddings)
