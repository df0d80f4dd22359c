"""RfpService: the entry point wiring configuration, index, ingestion and analysis."""

from typing import Optional

from .analysis import CompanyProfile, QueryScope, QuestionAnswer, RfpAnalysis, RfpAnalyzer
from .analysis.analyzer import apply_scope
from .answering import BaseAnswerGenerator, PlaceholderAnswerGenerator
from .exceptions import RetrievalFailed
from .ingestion import IngestionPipeline
from .rag import (
    BaseEmbedding,
    BaseVectorStore,
    ChromaVectorStore,
    IndexStatus,
    MemoryVectorStore,
    RfpMetadata,
    TextChunker,
    VectorIndex,
    create_embedding,
)
from .utils.config import RfpScopeConfig, StoreConfig
from .utils.logging import get_logger, set_log_level

logger = get_logger(__name__)

QUESTION_LIMIT = 5


def create_store(config: StoreConfig) -> BaseVectorStore:
    """Build the vector store backend named by the configuration."""
    if config.backend == "chroma":
        return ChromaVectorStore(
            mode=config.chroma_mode,
            persist_directory=config.persist_directory,
            host=config.host,
            port=config.port,
        )
    return MemoryVectorStore()


class RfpService:
    """Upload, analyze and query RFP documents.

    Each service owns one vector index; create several services for
    isolated collections.

    Example:
        ```python
        service = RfpService(load_config())
        await service.initialize()
        rfp_id = await service.upload_rfp(pdf_bytes, "application/pdf",
                                          RfpMetadata(title="IT Support", agency="GSA"))
        analysis = await service.analyze_rfp(rfp_id, CompanyProfile(company_name="Acme"))
        ```
    """

    def __init__(
        self,
        config: Optional[RfpScopeConfig] = None,
        *,
        embedding: Optional[BaseEmbedding] = None,
        store: Optional[BaseVectorStore] = None,
        answer_generator: Optional[BaseAnswerGenerator] = None,
    ):
        """Initialize the service.

        Args:
            config: Configuration (defaults if omitted)
            embedding: Embedding provider overriding config.embedding
            store: Vector store overriding config.store
            answer_generator: Answer generator for ask_question
        """
        self.config = config or RfpScopeConfig()
        set_log_level(self.config.log_level)

        self.index = VectorIndex(
            embedding or create_embedding(self.config.embedding),
            store or create_store(self.config.store),
        )
        self.pipeline = IngestionPipeline(
            self.index,
            TextChunker(self.config.chunking.chunk_size, self.config.chunking.overlap),
        )
        self.answer_generator = answer_generator or PlaceholderAnswerGenerator()
        self.scope = QueryScope(self.config.analysis.scope)

    @property
    def collection_name(self) -> str:
        return self.config.store.collection_name

    async def initialize(self) -> None:
        """Create or attach to the configured collection."""
        try:
            await self.index.initialize(self.collection_name)
        except Exception as e:
            logger.error(f"Failed to initialize RAG system: {e}")
            raise

    async def upload_rfp(
        self,
        content: bytes | str,
        mime_type: str,
        metadata: RfpMetadata,
        file_name: Optional[str] = None,
        atomic: bool = False,
    ) -> str:
        """Ingest an RFP and return its document id."""
        return await self.pipeline.ingest(
            content,
            metadata,
            mime_type=mime_type,
            file_name=file_name,
            atomic=atomic,
        )

    def analyzer(self, profile: CompanyProfile) -> RfpAnalyzer:
        return RfpAnalyzer(self.index, profile, scope=self.scope)

    async def analyze_rfp(self, document_id: str, profile: CompanyProfile) -> RfpAnalysis:
        """Produce the summary and every report for one RFP."""
        return await self.analyzer(profile).analyze(document_id)

    async def ask_question(
        self,
        question: str,
        document_id: Optional[str] = None,
    ) -> QuestionAnswer:
        """Retrieve the chunks most relevant to a question and answer it.

        Args:
            question: The question
            document_id: Optional RFP to scope the question to

        Returns:
            Retrieved chunks and the generated answer
        """
        query, filter = apply_scope(question, document_id, self.scope)
        try:
            results = await self.index.similarity_search(query, limit=QUESTION_LIMIT, filter=filter)
        except RetrievalFailed:
            logger.error(f"Failed to answer question: {question}")
            raise

        answer = await self.answer_generator.answer_from(results, question)
        return QuestionAnswer(question=question, results=results, answer=answer)

    async def get_document_count(self) -> int:
        """Number of chunks in the collection."""
        return await self.index.get_collection_count()

    async def reset_database(self) -> None:
        """Drop the collection and recreate it empty."""
        await self.index.delete_collection(self.collection_name)
        await self.index.initialize(self.collection_name)

    def status(self) -> IndexStatus:
        """Index diagnostics, including which embedding variant is active."""
        return self.index.status()
