"""Base classes and abstract interfaces for retrieval components."""

from abc import ABC, abstractmethod
from enum import Enum
from typing import TYPE_CHECKING, Any, Optional

if TYPE_CHECKING:
    from .document import Chunk, SearchResult


class EmbeddingVariant(str, Enum):
    """Which kind of vectors an embedding provider produces."""

    REAL = "real"
    DEGRADED = "degraded"
    DETERMINISTIC = "deterministic"


class BaseEmbedding(ABC):
    """Abstract base class for embedding models.

    Embedding models convert text into dense vector representations.
    """

    name: str = "embedding"
    variant: EmbeddingVariant = EmbeddingVariant.REAL

    @abstractmethod
    async def embed_documents(self, texts: list[str]) -> list[list[float]]:
        """Embed a list of documents.

        Args:
            texts: List of text strings to embed

        Returns:
            One embedding vector per input, in input order
        """
        pass

    @abstractmethod
    async def embed_query(self, text: str) -> list[float]:
        """Embed a single query.

        Args:
            text: Query text to embed

        Returns:
            Embedding vector
        """
        pass

    @property
    @abstractmethod
    def dimension(self) -> int:
        """Return the dimension of the embedding vectors."""
        pass

    @property
    def is_degraded(self) -> bool:
        return self.variant is EmbeddingVariant.DEGRADED


class BaseVectorStore(ABC):
    """Abstract base class for vector store backends.

    A store holds named collections and works against one attached
    collection at a time. Data operations on a store without an attached
    collection raise ``NotInitializedError``.
    """

    backend: str = "base"

    @property
    @abstractmethod
    def is_open(self) -> bool:
        """Whether a collection is attached."""
        pass

    @abstractmethod
    async def open(self, collection_name: str) -> None:
        """Attach to a collection, creating it if it does not exist.

        Args:
            collection_name: Name of the collection
        """
        pass

    @abstractmethod
    async def drop(self, collection_name: str) -> None:
        """Delete a collection and everything stored in it.

        Args:
            collection_name: Name of the collection
        """
        pass

    @abstractmethod
    async def add(
        self,
        chunks: list["Chunk"],
        embeddings: list[list[float]],
    ) -> list[str]:
        """Upsert chunks with their embeddings.

        Args:
            chunks: List of chunks to add
            embeddings: Corresponding embedding vectors

        Returns:
            List of upserted chunk IDs
        """
        pass

    @abstractmethod
    async def search(
        self,
        query_embedding: list[float],
        k: int = 5,
        filter: Optional[dict[str, Any]] = None,
    ) -> list["SearchResult"]:
        """Search for similar chunks.

        Args:
            query_embedding: Query embedding vector
            k: Number of results to return
            filter: Optional metadata equality filter

        Returns:
            List of search results sorted by descending score
        """
        pass

    @abstractmethod
    async def delete(self, ids: list[str]) -> bool:
        """Delete chunks by their IDs."""
        pass

    @abstractmethod
    async def count(self) -> int:
        """Return the number of chunks in the attached collection."""
        pass
