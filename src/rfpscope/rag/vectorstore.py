"""Vector store implementations.

Both stores measure cosine distance, so ``score = 1 - distance`` is the
cosine similarity of query and chunk.
"""

import asyncio
import logging
import math
from typing import Any, Optional

from ..exceptions import NotInitializedError
from .base import BaseVectorStore
from .document import Chunk, SearchResult

logger = logging.getLogger(__name__)


def cosine_similarity(a: list[float], b: list[float]) -> float:
    """Calculate cosine similarity between two vectors."""
    if len(a) != len(b):
        raise ValueError("Vectors must have the same dimension")

    dot_product = sum(x * y for x, y in zip(a, b))
    norm_a = math.sqrt(sum(x * x for x in a))
    norm_b = math.sqrt(sum(x * x for x in b))

    if norm_a == 0 or norm_b == 0:
        return 0.0

    return dot_product / (norm_a * norm_b)


def cosine_distance(a: list[float], b: list[float]) -> float:
    """Cosine distance in [0, 2]."""
    return 1.0 - cosine_similarity(a, b)


class MemoryVectorStore(BaseVectorStore):
    """In-memory vector store for tests and small datasets.

    Keeps every collection in process memory and performs exact search.
    """

    backend = "memory"

    def __init__(self) -> None:
        self._collections: dict[str, dict[str, tuple[Chunk, list[float]]]] = {}
        self._active: Optional[str] = None

    @property
    def is_open(self) -> bool:
        return self._active is not None

    def _entries(self) -> dict[str, tuple[Chunk, list[float]]]:
        if self._active is None:
            raise NotInitializedError()
        return self._collections[self._active]

    async def open(self, collection_name: str) -> None:
        """Attach to a collection, creating it if needed."""
        if collection_name not in self._collections:
            self._collections[collection_name] = {}
            logger.info(f"Created memory collection '{collection_name}'")
        self._active = collection_name

    async def drop(self, collection_name: str) -> None:
        """Delete a collection."""
        self._collections.pop(collection_name, None)
        if self._active == collection_name:
            self._active = None

    async def add(
        self,
        chunks: list[Chunk],
        embeddings: list[list[float]],
    ) -> list[str]:
        """Upsert chunks with embeddings."""
        if len(chunks) != len(embeddings):
            raise ValueError("Number of chunks must match number of embeddings")

        entries = self._entries()
        ids = []
        for chunk, embedding in zip(chunks, embeddings):
            entries[chunk.id] = (chunk, list(embedding))
            ids.append(chunk.id)

        logger.debug(f"Added {len(ids)} chunks to memory collection '{self._active}'")
        return ids

    async def search(
        self,
        query_embedding: list[float],
        k: int = 5,
        filter: Optional[dict[str, Any]] = None,
    ) -> list[SearchResult]:
        """Search for similar chunks using cosine distance."""
        entries = self._entries()
        if not entries or k <= 0:
            return []

        scored = []
        for chunk, embedding in entries.values():
            # Apply filter if provided
            if filter and not self._matches_filter(chunk, filter):
                continue

            distance = cosine_distance(query_embedding, embedding)
            scored.append((chunk, 1.0 - distance))

        # Sort by score (descending)
        scored.sort(key=lambda x: x[1], reverse=True)

        return [
            SearchResult(
                id=chunk.id,
                content=chunk.content,
                metadata=dict(chunk.metadata),
                score=score,
            )
            for chunk, score in scored[:k]
        ]

    def _matches_filter(self, chunk: Chunk, filter: dict[str, Any]) -> bool:
        """Check if chunk matches the filter criteria."""
        for key, value in filter.items():
            if chunk.metadata.get(key) != value:
                return False
        return True

    async def delete(self, ids: list[str]) -> bool:
        """Delete chunks by their IDs."""
        entries = self._entries()
        for id in ids:
            entries.pop(id, None)
        return True

    async def count(self) -> int:
        """Return the number of chunks."""
        return len(self._entries())


class ChromaVectorStore(BaseVectorStore):
    """ChromaDB vector store implementation.

    Collections are created in cosine space. Embeddings are always computed
    by the caller, never by Chroma's default embedding function.
    """

    backend = "chroma"

    def __init__(
        self,
        mode: str = "memory",
        persist_directory: Optional[str] = None,
        host: str = "localhost",
        port: int = 8000,
        client: Any = None,
    ):
        """Initialize the ChromaDB vector store.

        Args:
            mode: "memory" (ephemeral), "persistent" or "http"
            persist_directory: Directory for persistent storage
            host: Chroma server host for http mode
            port: Chroma server port for http mode
            client: Pre-built chromadb client (overrides mode)
        """
        self.mode = mode
        self.persist_directory = persist_directory
        self.host = host
        self.port = port
        self._client = client
        self._collection = None
        self._collection_name: Optional[str] = None

    @property
    def is_open(self) -> bool:
        return self._collection is not None

    def _get_client(self):
        """Get or create the ChromaDB client."""
        if self._client is None:
            import chromadb

            if self.mode == "persistent":
                if not self.persist_directory:
                    raise ValueError("persist_directory is required for persistent mode")
                self._client = chromadb.PersistentClient(path=self.persist_directory)
            elif self.mode == "http":
                self._client = chromadb.HttpClient(host=self.host, port=self.port)
            else:
                self._client = chromadb.EphemeralClient()
        return self._client

    def _get_collection(self):
        if self._collection is None:
            raise NotInitializedError()
        return self._collection

    async def _run(self, func):
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, func)

    async def open(self, collection_name: str) -> None:
        """Get or create the collection and attach to it."""
        client = self._get_client()
        self._collection = await self._run(
            lambda: client.get_or_create_collection(
                name=collection_name,
                metadata={"hnsw:space": "cosine"},
            )
        )
        self._collection_name = collection_name
        logger.info(f"Attached to ChromaDB collection '{collection_name}'")

    async def drop(self, collection_name: str) -> None:
        """Delete a collection from ChromaDB."""
        client = self._get_client()
        await self._run(lambda: client.delete_collection(name=collection_name))
        if self._collection_name == collection_name:
            self._collection = None
            self._collection_name = None

    async def add(
        self,
        chunks: list[Chunk],
        embeddings: list[list[float]],
    ) -> list[str]:
        """Upsert chunks with embeddings into ChromaDB."""
        if len(chunks) != len(embeddings):
            raise ValueError("Number of chunks must match number of embeddings")

        collection = self._get_collection()
        ids = [chunk.id for chunk in chunks]
        documents = [chunk.content for chunk in chunks]
        metadatas = [{"document_id": chunk.document_id, **chunk.metadata} for chunk in chunks]

        await self._run(
            lambda: collection.upsert(
                ids=ids,
                documents=documents,
                embeddings=embeddings,
                metadatas=metadatas,
            )
        )

        logger.debug(f"Added {len(ids)} chunks to ChromaDB collection '{self._collection_name}'")
        return ids

    async def search(
        self,
        query_embedding: list[float],
        k: int = 5,
        filter: Optional[dict[str, Any]] = None,
    ) -> list[SearchResult]:
        """Search for similar chunks in ChromaDB."""
        collection = self._get_collection()

        total = await self._run(collection.count)
        if total == 0 or k <= 0:
            return []

        results = await self._run(
            lambda: collection.query(
                query_embeddings=[query_embedding],
                n_results=min(k, total),
                where=filter or None,
                include=["documents", "metadatas", "distances"],
            )
        )

        search_results = []
        if results and results["ids"] and results["ids"][0]:
            documents = (results.get("documents") or [[]])[0]
            metadatas = (results.get("metadatas") or [[]])[0]
            distances = (results.get("distances") or [[]])[0]

            for i, chunk_id in enumerate(results["ids"][0]):
                distance = distances[i] if i < len(distances) and distances[i] is not None else 0.0
                search_results.append(SearchResult(
                    id=chunk_id,
                    content=(documents[i] if i < len(documents) else None) or "",
                    metadata=dict((metadatas[i] if i < len(metadatas) else None) or {}),
                    score=1.0 - distance,
                ))

        search_results.sort(key=lambda r: r.score, reverse=True)
        return search_results

    async def delete(self, ids: list[str]) -> bool:
        """Delete chunks from ChromaDB."""
        collection = self._get_collection()
        await self._run(lambda: collection.delete(ids=ids))
        return True

    async def count(self) -> int:
        """Return the number of chunks in the collection."""
        collection = self._get_collection()
        return await self._run(collection.count)
