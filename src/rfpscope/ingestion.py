"""Ingestion pipeline: extracted text -> chunks -> vector index."""

import logging
import uuid
from pathlib import Path
from typing import Optional

from .exceptions import IngestionFailed, UnsupportedFileTypeError
from .extraction import detect_kind, extract_text, guess_mime_type
from .rag import DocumentMetadata, IndexItem, RfpMetadata, TextChunker, VectorIndex

logger = logging.getLogger(__name__)


class IngestionPipeline:
    """Process and store RFP documents in the vector index.

    Ingestion is not transactional: if the upsert fails part-way the index
    may already hold some chunks of the aborted document. Pass
    ``atomic=True`` to delete the submitted chunk ids again on failure.
    """

    def __init__(self, index: VectorIndex, chunker: Optional[TextChunker] = None):
        """Initialize the pipeline.

        Args:
            index: Vector index to write chunks into
            chunker: Chunker (default: 1000 characters, 200 overlap)
        """
        self.index = index
        self.chunker = chunker or TextChunker()

    async def ingest(
        self,
        content: bytes | str,
        metadata: RfpMetadata,
        *,
        mime_type: str = "text/plain",
        file_name: Optional[str] = None,
        atomic: bool = False,
    ) -> str:
        """Extract, chunk, embed and store one RFP document.

        Args:
            content: Raw file bytes, or already-extracted text
            metadata: Title, agency, due date and RFP number
            mime_type: Mime type of ``content``
            file_name: Original file name
            atomic: Remove already-submitted chunks if ingestion fails

        Returns:
            The generated document id

        Raises:
            UnsupportedFileTypeError: if ``content`` is bytes of an unsupported type
            IngestionFailed: if any later stage fails
        """
        if isinstance(content, bytes):
            detect_kind(mime_type, file_name)

        document_id = str(uuid.uuid4())
        submitted: list[str] = []

        try:
            text = extract_text(content, mime_type, file_name)

            doc_metadata = DocumentMetadata(
                **metadata.model_dump(),
                document_id=document_id,
                file_name=file_name,
                file_type=mime_type,
                file_size=len(content.encode("utf-8") if isinstance(content, str) else content),
            )

            chunks = self.chunker.chunk(document_id, text, doc_metadata)
            if not chunks or not any(chunk.content for chunk in chunks):
                raise ValueError("document contains no text")

            items = [IndexItem.from_chunk(chunk) for chunk in chunks]
            submitted = [item.id for item in items]
            await self.index.add_documents(items)

        except UnsupportedFileTypeError:
            raise
        except Exception as e:
            logger.error(f"Error ingesting RFP document: {e}")
            if atomic and submitted:
                await self._compensate(document_id, submitted)
            raise IngestionFailed(str(e)) from e

        logger.info(f"RFP document ingested with ID {document_id}, {len(chunks)} chunks created")
        return document_id

    async def ingest_file(
        self,
        path: str | Path,
        metadata: RfpMetadata,
        *,
        mime_type: Optional[str] = None,
        atomic: bool = False,
    ) -> str:
        """Read a file from disk and ingest it."""
        path = Path(path)
        return await self.ingest(
            path.read_bytes(),
            metadata,
            mime_type=mime_type or guess_mime_type(path),
            file_name=path.name,
            atomic=atomic,
        )

    async def _compensate(self, document_id: str, chunk_ids: list[str]) -> None:
        """Best-effort removal of chunks written by a failed ingestion."""
        try:
            await self.index.delete(chunk_ids)
            logger.info(f"Removed {len(chunk_ids)} chunks of aborted document {document_id}")
        except Exception as e:
            logger.error(f"Failed to clean up chunks of aborted document {document_id}: {e}")
