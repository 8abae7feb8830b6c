"""Helper functions for querying the documentation index."""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from helpcenter_rag.core.config import settings

logger = logging.getLogger(__name__)


async def search_docs_helper(
    query: str,
    limit: int = 5,
    index_name: Optional[str] = None,
    vector_store: Any = None,
    vectorizer: Any = None,
) -> Dict[str, Any]:
    """Search the documentation index by vector similarity.

    Args:
        query: Search query text
        limit: Maximum number of results
        index_name: Index to search (defaults to the configured docs index)

    Returns:
        Dictionary with the query, timestamp and scored results (title, source,
        section headings and a truncated text excerpt).
    """
    from helpcenter_rag.core.vector_store import VectorStore, create_docs_index

    if vector_store is None:
        vector_store = VectorStore()
    if vectorizer is None:
        from helpcenter_rag.core.redis import get_vectorizer

        vectorizer = get_vectorizer()

    index_name = index_name or settings.docs_index_name
    logger.info(f"Searching docs index '{index_name}': '{query}'")

    # A search before the first embed run answers empty instead of failing
    await create_docs_index(vector_store, index_name)

    query_vectors = await vectorizer.aembed_many([query])
    hits = await vector_store.query(index_name, query_vectors[0], limit=limit)

    result = {
        "query": query,
        "index_name": index_name,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "results_count": len(hits),
        "results": [
            {
                "title": hit.get("title", ""),
                "source": hit.get("source", ""),
                "section": " > ".join(
                    hit[level] for level in ("heading1", "heading2", "heading3") if hit.get(level)
                ),
                "text": hit.get("text", "")[:500],  # Truncate for response
                "score": hit.get("score", 0.0),
            }
            for hit in hits
        ],
    }

    logger.info(f"Docs search completed ({len(hits)} results)")
    return result
