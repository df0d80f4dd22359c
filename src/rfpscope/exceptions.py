"""
rfpscope exceptions.
"""


class RfpScopeError(Exception):
    """Base exception for rfpscope errors."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class UnsupportedFileTypeError(RfpScopeError):
    """Raised when no text extractor handles a file's mime type."""

    def __init__(self, mime_type: str, file_name: str | None = None):
        self.mime_type = mime_type
        self.file_name = file_name
        super().__init__(f"Unsupported file type: {mime_type or 'unknown'}")


class NotInitializedError(RfpScopeError):
    """Raised when the vector index is used before initialize()."""

    def __init__(self, message: str = "Collection not initialized"):
        super().__init__(message)


class EmbeddingFailure(RfpScopeError):
    """Raised when an embedding provider cannot produce vectors."""

    def __init__(self, message: str = "Failed to generate embeddings"):
        super().__init__(message)


class IngestionFailed(RfpScopeError):
    """Raised when any stage of document ingestion fails."""

    def __init__(self, message: str):
        super().__init__(f"Failed to ingest RFP document: {message}")


class RetrievalFailed(RfpScopeError):
    """Raised when a similarity query against the index fails."""

    def __init__(self, message: str = "Similarity search failed"):
        super().__init__(message)


class AnalysisFailed(RfpScopeError):
    """Raised when a specific analysis report cannot be produced."""

    def __init__(self, report: str, message: str):
        self.report = report
        super().__init__(f"Analysis '{report}' failed: {message}")
