"""
rfpscope - Retrieval-augmented analysis of RFP documents.
"""

from rfpscope.exceptions import (
    AnalysisFailed,
    EmbeddingFailure,
    IngestionFailed,
    NotInitializedError,
    RetrievalFailed,
    RfpScopeError,
    UnsupportedFileTypeError,
)
from rfpscope.rag import (
    Chunk,
    DocumentMetadata,
    EmbeddingVariant,
    IndexItem,
    IndexStatus,
    RfpMetadata,
    SearchResult,
    VectorIndex,
    chunk_text,
    clean_text,
)
from rfpscope.analysis import (
    CompanyProfile,
    ExperienceArea,
    QueryScope,
    RfpAnalysis,
    RfpAnalyzer,
)
from rfpscope.answering import BaseAnswerGenerator, PlaceholderAnswerGenerator
from rfpscope.ingestion import IngestionPipeline
from rfpscope.service import RfpService
from rfpscope.utils.config import RfpScopeConfig, load_config

__version__ = "0.1.0"
__all__ = [
    # Errors
    "AnalysisFailed",
    "EmbeddingFailure",
    "IngestionFailed",
    "NotInitializedError",
    "RetrievalFailed",
    "RfpScopeError",
    "UnsupportedFileTypeError",
    # Retrieval
    "Chunk",
    "DocumentMetadata",
    "EmbeddingVariant",
    "IndexItem",
    "IndexStatus",
    "RfpMetadata",
    "SearchResult",
    "VectorIndex",
    "chunk_text",
    "clean_text",
    # Analysis
    "CompanyProfile",
    "ExperienceArea",
    "QueryScope",
    "RfpAnalysis",
    "RfpAnalyzer",
    # Services
    "BaseAnswerGenerator",
    "PlaceholderAnswerGenerator",
    "IngestionPipeline",
    "RfpService",
    "RfpScopeConfig",
    "load_config",
]
