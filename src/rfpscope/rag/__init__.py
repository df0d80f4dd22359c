"""Retrieval core: chunking, embeddings, vector stores and the vector index.

Example:
    ```python
    from rfpscope.rag import HashEmbedding, IndexItem, MemoryVectorStore, VectorIndex

    index = VectorIndex(HashEmbedding(), MemoryVectorStore())
    await index.initialize()
    await index.add_documents([IndexItem(id="a", content="Offerors must be ISO 9001 certified.")])
    results = await index.similarity_search("ISO certification", limit=5)
    ```
"""

from .document import Chunk, DocumentMetadata, IndexItem, RfpMetadata, SearchResult
from .base import BaseEmbedding, BaseVectorStore, EmbeddingVariant
from .chunking import TextChunker, chunk_text, clean_text
from .embeddings import (
    DegradedEmbedding,
    HashEmbedding,
    LocalEmbedding,
    OpenAIEmbedding,
    create_embedding,
)
from .vectorstore import (
    ChromaVectorStore,
    MemoryVectorStore,
    cosine_distance,
    cosine_similarity,
)
from .index import DEFAULT_COLLECTION, IndexStatus, VectorIndex

__all__ = [
    # Data structures
    "Chunk",
    "DocumentMetadata",
    "IndexItem",
    "RfpMetadata",
    "SearchResult",
    # Base classes
    "BaseEmbedding",
    "BaseVectorStore",
    "EmbeddingVariant",
    # Chunking
    "TextChunker",
    "chunk_text",
    "clean_text",
    # Embeddings
    "DegradedEmbedding",
    "HashEmbedding",
    "LocalEmbedding",
    "OpenAIEmbedding",
    "create_embedding",
    # Vector stores
    "ChromaVectorStore",
    "MemoryVectorStore",
    "cosine_distance",
    "cosine_similarity",
    # Index
    "DEFAULT_COLLECTION",
    "IndexStatus",
    "VectorIndex",
]
