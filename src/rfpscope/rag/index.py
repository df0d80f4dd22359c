"""Vector index: one named collection of embedded chunks."""

import logging
from typing import Any, Optional

from pydantic import BaseModel

from ..exceptions import EmbeddingFailure, NotInitializedError, RetrievalFailed
from .base import BaseEmbedding, BaseVectorStore
from .document import Chunk, IndexItem, SearchResult

logger = logging.getLogger(__name__)

DEFAULT_COLLECTION = "rfp_documents"


class IndexStatus(BaseModel):
    """Diagnostics describing how the index is wired."""

    collection_name: Optional[str] = None
    initialized: bool = False
    store_backend: str
    embedding_provider: str
    embedding_variant: str
    embedding_dimension: int


class VectorIndex:
    """Embeds, stores and similarity-searches chunks in one collection.

    The index is constructed explicitly and handed to the ingestion pipeline
    and the analyzer; nothing about it is process-global.

    Example:
        ```python
        index = VectorIndex(HashEmbedding(), MemoryVectorStore())
        await index.initialize("rfp_documents")
        await index.add_documents([IndexItem(id="a", content="...")])
        results = await index.similarity_search("...", limit=5)
        ```
    """

    def __init__(self, embedding: BaseEmbedding, store: BaseVectorStore):
        """Initialize the index.

        Args:
            embedding: Embedding provider for chunk content and queries
            store: Vector store backend
        """
        self.embedding = embedding
        self.store = store
        self._collection_name: Optional[str] = None

    @property
    def is_initialized(self) -> bool:
        return self._collection_name is not None and self.store.is_open

    @property
    def collection_name(self) -> Optional[str]:
        return self._collection_name

    def _require_initialized(self) -> None:
        if not self.is_initialized:
            raise NotInitializedError(
                "Vector index not initialized; call initialize() first"
            )

    async def initialize(self, collection_name: str = DEFAULT_COLLECTION) -> None:
        """Create the collection if needed and attach to it. Idempotent."""
        if self.is_initialized and self._collection_name == collection_name:
            return

        await self.store.open(collection_name)
        self._collection_name = collection_name

        if self.embedding.is_degraded:
            logger.warning(
                f"Vector index '{collection_name}' initialized with degraded "
                f"embeddings ({self.embedding.name}); search results are not meaningful"
            )
        logger.info(f"Vector index initialized on collection '{collection_name}'")

    async def _embed_documents(self, texts: list[str]) -> list[list[float]]:
        try:
            embeddings = await self.embedding.embed_documents(texts)
        except EmbeddingFailure:
            raise
        except Exception as e:
            raise EmbeddingFailure(f"Embedding provider {self.embedding.name} failed: {e}") from e

        if len(embeddings) != len(texts):
            raise EmbeddingFailure(
                f"Embedding provider returned {len(embeddings)} vectors for {len(texts)} texts"
            )
        return embeddings

    async def _embed_query(self, text: str) -> list[float]:
        try:
            return await self.embedding.embed_query(text)
        except Exception as e:
            raise EmbeddingFailure(f"Embedding provider {self.embedding.name} failed: {e}") from e

    async def add_documents(self, items: list[IndexItem]) -> list[str]:
        """Embed and upsert items into the collection.

        Args:
            items: Items with id, content and metadata

        Returns:
            List of upserted ids
        """
        self._require_initialized()
        if not items:
            return []

        embeddings = await self._embed_documents([item.content for item in items])
        chunks = [
            Chunk(
                id=item.id,
                document_id=str(item.metadata.get("document_id", "")),
                content=item.content,
                metadata=item.metadata,
            )
            for item in items
        ]

        ids = await self.store.add(chunks, embeddings)
        logger.info(f"Added {len(ids)} documents to the collection")
        return ids

    async def similarity_search(
        self,
        query: str,
        limit: int = 5,
        filter: Optional[dict[str, Any]] = None,
    ) -> list[SearchResult]:
        """Return the ``limit`` chunks closest to ``query``, best first.

        Args:
            query: Natural-language query
            limit: Number of results (k)
            filter: Optional metadata equality filter

        Returns:
            Results ordered by descending score; empty if nothing matches
        """
        self._require_initialized()
        query_embedding = await self._embed_query(query)

        try:
            results = await self.store.search(query_embedding, k=limit, filter=filter)
        except NotInitializedError:
            raise
        except Exception as e:
            logger.error(f"Error searching documents: {e}")
            raise RetrievalFailed(f"Similarity search failed: {e}") from e

        return sorted(results, key=lambda r: r.score, reverse=True)

    async def delete(self, ids: list[str]) -> None:
        """Delete chunks by id from the attached collection."""
        self._require_initialized()
        await self.store.delete(ids)

    async def delete_collection(self, collection_name: str) -> None:
        """Drop a collection; dropping the attached one uninitializes the index."""
        await self.store.drop(collection_name)
        if collection_name == self._collection_name:
            self._collection_name = None
        logger.info(f"Collection {collection_name} deleted")

    async def get_collection_count(self) -> int:
        """Number of chunks stored in the attached collection."""
        self._require_initialized()
        return await self.store.count()

    def status(self) -> IndexStatus:
        """Describe the collection, store backend and embedding provider."""
        return IndexStatus(
            collection_name=self._collection_name,
            initialized=self.is_initialized,
            store_backend=self.store.backend,
            embedding_provider=self.embedding.name,
            embedding_variant=self.embedding.variant.value,
            embedding_dimension=self.embedding.dimension,
        )
