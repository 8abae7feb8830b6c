"""Redis connection management - no caching to avoid event loop issues."""

import logging
from typing import Any, Dict, Optional

from redis.asyncio import Redis
from redisvl.extensions.cache.embeddings.embeddings import EmbeddingsCache
from redisvl.utils.vectorize import OpenAITextVectorizer

from helpcenter_rag.core.config import settings

logger = logging.getLogger(__name__)

EMBEDDINGS_CACHE_NAME = "helpcenter_embeddings_cache"

# Metric names accepted by the vector store, mapped to RediSearch distance metrics
DISTANCE_METRICS = {
    "cosine": "cosine",
    "euclidean": "l2",
    "l2": "l2",
    "dotproduct": "ip",
    "ip": "ip",
}


def build_docs_schema(name: str, dimension: int, metric: str = "cosine") -> Dict[str, Any]:
    """Build the RedisVL schema dict for a documentation index."""
    distance_metric = DISTANCE_METRICS.get(metric.lower())
    if distance_metric is None:
        raise ValueError(f"Unsupported metric: {metric}")

    return {
        "index": {
            "name": name,
            "prefix": f"{name}:",
            "storage_type": "hash",
        },
        "fields": [
            {"name": "text", "type": "text"},
            {"name": "title", "type": "text"},
            {"name": "source", "type": "tag"},
            {"name": "filename", "type": "tag"},
            {"name": "heading1", "type": "text"},
            {"name": "heading2", "type": "text"},
            {"name": "heading3", "type": "text"},
            {
                "name": "vector",
                "type": "vector",
                "attrs": {
                    "dims": dimension,
                    "distance_metric": distance_metric,
                    "algorithm": "flat",
                    "datatype": "float32",
                },
            },
        ],
    }


def get_redis_url() -> str:
    """Redis URL from settings, with the password inserted when configured separately."""
    redis_url = settings.redis_url.get_secret_value()
    redis_password = settings.redis_password.get_secret_value() if settings.redis_password else None
    if redis_password and "@" not in redis_url:
        # Insert password into URL: redis://localhost -> redis://:password@localhost
        redis_url = redis_url.replace("redis://", f"redis://:{redis_password}@")
    return redis_url


def get_redis_client(url: Optional[str] = None) -> Redis:
    """Get Redis client (creates fresh client to avoid event loop issues)."""
    return Redis.from_url(
        url=url or get_redis_url(),
        decode_responses=False,  # Keep as bytes for RedisVL compatibility
    )


def get_vectorizer() -> OpenAITextVectorizer:
    """Get OpenAI vectorizer with Redis-backed embeddings cache.

    Callers should use aembed/aembed_many. Cache keys include the model name,
    so switching models never returns stale vectors.
    """
    cache = EmbeddingsCache(
        name=EMBEDDINGS_CACHE_NAME,
        redis_url=get_redis_url(),
        ttl=settings.embeddings_cache_ttl,
    )
    logger.debug(f"Vectorizer created with embeddings cache (ttl={settings.embeddings_cache_ttl}s)")

    return OpenAITextVectorizer(
        model=settings.embedding_model,
        cache=cache,
        api_config={"api_key": settings.openai_api_key},
    )

