"""Document, chunk and search result data structures."""

from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


class RfpMetadata(BaseModel):
    """Caller-supplied description of an RFP being uploaded.

    Attributes:
        title: RFP title
        agency: Issuing agency
        due_date: Optional proposal due date as written by the caller
        rfp_number: Optional solicitation number
    """

    title: str
    agency: str
    due_date: Optional[str] = None
    rfp_number: Optional[str] = None


class DocumentMetadata(RfpMetadata):
    """Document-level metadata recorded at ingestion time.

    Every chunk of the document carries a copy of these fields.

    Attributes:
        document_id: Generated unique id of the document
        file_name: Original file name, if known
        file_type: Mime type the content was extracted with
        file_size: Size of the raw content in bytes
        ingested_at: ISO-8601 UTC timestamp of ingestion
    """

    model_config = ConfigDict(frozen=True)

    document_id: str
    file_name: Optional[str] = None
    file_type: str = "text/plain"
    file_size: int = 0
    ingested_at: str = Field(default_factory=_utc_now)

    def to_chunk_metadata(self, chunk_index: int, total_chunks: int) -> dict[str, Any]:
        """Flatten into the metadata stored alongside each chunk.

        ``None`` values are dropped since vector stores only accept scalars.
        """
        return {
            **self.model_dump(exclude_none=True),
            "chunk_index": chunk_index,
            "total_chunks": total_chunks,
        }


class Chunk(BaseModel):
    """A chunk of a document.

    Chunks are created by the chunker and owned by the vector index once
    upserted.

    Attributes:
        id: ``"<document_id>-chunk-<index>"``
        document_id: ID of the parent document
        content: The text content of the chunk
        metadata: Document metadata plus ``chunk_index``/``total_chunks``
    """

    model_config = ConfigDict(frozen=True)

    id: str
    document_id: str
    content: str
    metadata: dict[str, Any] = Field(default_factory=dict)

    def __repr__(self) -> str:
        content_preview = self.content[:30] + "..." if len(self.content) > 30 else self.content
        return f"Chunk(id={self.id!r}, doc_id={self.document_id!r}, content={content_preview!r})"


class IndexItem(BaseModel):
    """An item handed to the vector index for embedding and upsert."""

    id: str
    content: str
    metadata: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_chunk(cls, chunk: Chunk) -> "IndexItem":
        return cls(id=chunk.id, content=chunk.content, metadata=chunk.metadata)


class SearchResult(BaseModel):
    """A similarity search hit.

    Attributes:
        id: Chunk id
        content: Chunk text
        metadata: Chunk metadata
        score: ``1 - distance``; higher is more similar
    """

    id: str
    content: str
    metadata: dict[str, Any] = Field(default_factory=dict)
    score: float

    @property
    def document_id(self) -> Optional[str]:
        return self.metadata.get("document_id")

    def __repr__(self) -> str:
        return f"SearchResult(id={self.id!r}, score={self.score:.4f})"
