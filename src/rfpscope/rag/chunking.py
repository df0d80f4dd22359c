"""Text normalization and sentence-aware chunking."""

import re
from typing import Any, Optional, Union

from .document import Chunk, DocumentMetadata

_WHITESPACE = re.compile(r"\s+")

SENTENCE_TERMINATORS = (".", "?", "!")
SENTENCE_WINDOW = 100
WORD_WINDOW = 50


def clean_text(text: str) -> str:
    """Collapse runs of whitespace (spaces, newlines, tabs) into single spaces."""
    return _WHITESPACE.sub(" ", text).strip()


def _find_break(text: str, end: int) -> int:
    """Move ``end`` forward to a sentence or word boundary if one is close."""
    breaks = [pos for pos in (text.find(t, end) for t in SENTENCE_TERMINATORS) if pos != -1]
    if breaks and min(breaks) - end < SENTENCE_WINDOW:
        # Keep the punctuation mark in this chunk
        return min(breaks) + 1

    next_space = text.find(" ", end)
    if next_space != -1 and next_space - end < WORD_WINDOW:
        return next_space

    return end


def chunk_text(text: str, size: int = 1000, overlap: int = 200) -> list[str]:
    """Split text into overlapping chunks that try not to cut sentences.

    Each window starts ``size`` characters long and is extended to just past
    the next ``.``, ``?`` or ``!`` if one appears within 100 characters,
    otherwise to the next space within 50 characters. Consecutive chunks
    share ``overlap`` characters.

    Args:
        text: Text to split (normally already passed through clean_text)
        size: Target chunk length in characters
        overlap: Characters shared by consecutive chunks

    Returns:
        List of chunk strings; ``[text]`` when the text fits in one chunk
    """
    if size <= 0:
        raise ValueError("size must be positive")
    if not 0 <= overlap < size:
        raise ValueError("Overlap must be less than size")

    if len(text) <= size:
        return [text]

    chunks = []
    start = 0
    while start < len(text):
        end = start + size
        if end < len(text):
            end = _find_break(text, end)
        end = min(end, len(text))

        chunks.append(text[start:end].strip())
        if end == len(text):
            break
        start = end - overlap

    return chunks


class TextChunker:
    """Chunk cleaned RFP text into ``Chunk`` records.

    Chunk ids have the form ``"<document_id>-chunk-<index>"`` and each chunk's
    metadata is the document metadata plus ``chunk_index``/``total_chunks``.
    """

    def __init__(self, chunk_size: int = 1000, overlap: int = 200):
        if overlap >= chunk_size:
            raise ValueError("Overlap must be less than chunk_size")

        self.chunk_size = chunk_size
        self.overlap = overlap

    def split(self, text: str) -> list[str]:
        """Clean and split raw text."""
        return chunk_text(clean_text(text), self.chunk_size, self.overlap)

    def chunk(
        self,
        document_id: str,
        text: str,
        metadata: Optional[Union[DocumentMetadata, dict[str, Any]]] = None,
    ) -> list[Chunk]:
        """Split text into chunks belonging to ``document_id``.

        Args:
            document_id: ID of the parent document
            text: Raw or cleaned document text
            metadata: A DocumentMetadata, a plain dict, or None

        Returns:
            List of chunks in document order
        """
        pieces = self.split(text)
        total = len(pieces)

        chunks = []
        for index, piece in enumerate(pieces):
            if isinstance(metadata, DocumentMetadata):
                chunk_metadata = metadata.to_chunk_metadata(index, total)
            else:
                chunk_metadata = {
                    **(metadata or {}),
                    "document_id": document_id,
                    "chunk_index": index,
                    "total_chunks": total,
                }

            chunks.append(Chunk(
                id=f"{document_id}-chunk-{index}",
                document_id=document_id,
                content=piece,
                metadata=chunk_metadata,
            ))

        return chunks
