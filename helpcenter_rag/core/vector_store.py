"""Vector store facade over RedisVL search indices.

Exposes the small surface the embed pipeline needs: list, create, truncate,
upsert, plus query/info/delete for search and maintenance. Every index is keyed
by name; records live under the ``<name>:`` key prefix as Redis hashes.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence

from redis.asyncio import Redis
from redisvl.index import AsyncSearchIndex
from redisvl.query import VectorQuery
from redisvl.redis.utils import array_to_buffer
from redisvl.schema import IndexSchema

from .config import settings
from .errors import ProviderError
from .redis import build_docs_schema, get_redis_client

logger = logging.getLogger(__name__)

RETURN_FIELDS = ["text", "title", "source", "filename", "heading1", "heading2", "heading3"]


def _decode(value: Any) -> Any:
    return value.decode("utf-8") if isinstance(value, bytes) else value


class VectorStore:
    """Named vector indices stored in Redis."""

    def __init__(self, redis_client: Optional[Redis] = None):
        self.client = redis_client or get_redis_client()

    async def list_indexes(self) -> List[str]:
        """Names of all search indices in the database."""
        try:
            names = await self.client.execute_command("FT._LIST")
        except Exception as e:
            raise ProviderError(f"Failed to list indexes: {e}") from e
        return [_decode(name) for name in names]

    async def create_index(self, name: str, dimension: int, metric: str = "cosine") -> None:
        """Create an index; a no-op if one with this name already exists."""
        schema = IndexSchema.from_dict(build_docs_schema(name, dimension, metric))
        index = AsyncSearchIndex(schema=schema, redis_client=self.client)
        try:
            await index.create(overwrite=False)
        except Exception as e:
            raise ProviderError(f"Failed to create index {name}: {e}") from e
        logger.info(f"Created vector index {name} (dimension={dimension}, metric={metric})")

    async def truncate_index(self, name: str) -> int:
        """Delete every record in the index, keeping the index definition."""
        index = await self._get_index(name)
        try:
            deleted = await index.clear()
        except Exception as e:
            raise ProviderError(f"Failed to truncate index {name}: {e}") from e
        logger.info(f"Truncated vector index {name} ({deleted} records removed)")
        return int(deleted or 0)

    async def delete_index(self, name: str) -> None:
        """Drop the index together with its records."""
        index = await self._get_index(name)
        try:
            await index.delete(drop=True)
        except Exception as e:
            raise ProviderError(f"Failed to delete index {name}: {e}") from e
        logger.info(f"Deleted vector index {name}")

    async def upsert(
        self,
        name: str,
        vectors: Sequence[Sequence[float]],
        metadata: Sequence[Dict[str, Any]],
        ids: Sequence[str],
    ) -> int:
        """Write (vector, metadata, id) triples in one call; existing ids are overwritten."""
        if not (len(vectors) == len(metadata) == len(ids)):
            raise ValueError(
                f"Mismatched upsert arrays: {len(vectors)} vectors, "
                f"{len(metadata)} metadata, {len(ids)} ids"
            )
        if not vectors:
            return 0

        index = await self._get_index(name)
        dimension = index.schema.fields["vector"].attrs.dims

        records = []
        for vector, meta, record_id in zip(vectors, metadata, ids):
            if len(vector) != dimension:
                raise ProviderError(
                    f"Vector for {record_id} has dimension {len(vector)}, "
                    f"index {name} expects {dimension}"
                )
            record = {
                key: ("" if value is None else value)
                for key, value in meta.items()
                if key in RETURN_FIELDS
            }
            record["id"] = record_id
            record["vector"] = array_to_buffer(list(vector), dtype="float32")
            records.append(record)

        try:
            await index.load(records, id_field="id")
        except Exception as e:
            raise ProviderError(f"Failed to upsert {len(records)} records into {name}: {e}") from e
        return len(records)

    async def query(
        self, name: str, vector: Sequence[float], limit: int = 5
    ) -> List[Dict[str, Any]]:
        """Cosine KNN search returning metadata and a similarity score per hit."""
        index = await self._get_index(name)
        vector_query = VectorQuery(
            vector=list(vector),
            vector_field_name="vector",
            return_fields=RETURN_FIELDS,
            num_results=limit,
        )
        try:
            results = await index.query(vector_query)
        except Exception as e:
            raise ProviderError(f"Vector query against {name} failed: {e}") from e

        hits = []
        for doc in results:
            distance = float(doc.get("vector_distance", 0.0) or 0.0)
            hits.append(
                {
                    "id": doc.get("id", ""),
                    **{field: doc.get(field, "") for field in RETURN_FIELDS},
                    "score": 1.0 - distance,
                }
            )
        return hits

    async def index_info(self, name: str) -> Dict[str, Any]:
        """Existence and document count for an index."""
        if name not in await self.list_indexes():
            return {"name": name, "exists": False, "num_docs": 0}

        try:
            raw_info = await self.client.execute_command("FT.INFO", name)
        except Exception as e:
            raise ProviderError(f"Failed to read info for index {name}: {e}") from e

        # Parse the flat list into a dict
        info_dict = {}
        for i in range(0, len(raw_info) - 1, 2):
            info_dict[_decode(raw_info[i])] = raw_info[i + 1]
        num_docs = _decode(info_dict.get("num_docs", 0))
        return {"name": name, "exists": True, "num_docs": int(float(num_docs))}

    async def close(self) -> None:
        await self.client.aclose()

    async def _get_index(self, name: str) -> AsyncSearchIndex:
        try:
            return await AsyncSearchIndex.from_existing(name, redis_client=self.client)
        except Exception as e:
            raise ProviderError(f"Vector index {name} is not available: {e}") from e


async def create_docs_index(
    vector_store: Optional[VectorStore] = None, index_name: Optional[str] = None
) -> bool:
    """Create the docs index if it doesn't exist. Returns True when it was created."""
    store = vector_store or VectorStore()
    index_name = index_name or settings.docs_index_name
    if index_name in await store.list_indexes():
        logger.debug(f"Vector index already exists: {index_name}")
        return False

    await store.create_index(index_name, dimension=settings.vector_dim)
    return True


async def recreate_docs_index(vector_store: Optional[VectorStore] = None) -> None:
    """Drop the docs index with its records and create it again empty."""
    store = vector_store or VectorStore()
    if settings.docs_index_name in await store.list_indexes():
        await store.delete_index(settings.docs_index_name)
    await store.create_index(settings.docs_index_name, dimension=settings.vector_dim)
