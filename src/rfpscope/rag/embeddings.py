"""Embedding model implementations."""

import asyncio
import hashlib
import logging
import math
import random
import re
from typing import TYPE_CHECKING, Optional

from ..exceptions import EmbeddingFailure
from .base import BaseEmbedding, EmbeddingVariant

if TYPE_CHECKING:
    from ..utils.config import EmbeddingConfig

logger = logging.getLogger(__name__)

_WORD = re.compile(r"\w+")


class LocalEmbedding(BaseEmbedding):
    """Local embedding model using sentence-transformers.

    Runs a HuggingFace feature-extraction model locally with mean pooling
    and L2 normalization. No API calls required.
    """

    variant = EmbeddingVariant.REAL

    # Known model dimensions
    MODEL_DIMENSIONS = {
        "all-MiniLM-L6-v2": 384,
        "all-mpnet-base-v2": 768,
        "paraphrase-multilingual-MiniLM-L12-v2": 384,
        "multi-qa-mpnet-base-dot-v1": 768,
    }

    def __init__(
        self,
        model_name: str = "all-MiniLM-L6-v2",
        device: Optional[str] = None,
        normalize: bool = True,
    ):
        """Initialize the local embedding model.

        Args:
            model_name: Name of the sentence-transformers model
            device: Device to run on (cuda, cpu, mps). Auto-detected if None.
            normalize: Whether to L2-normalize embeddings
        """
        self.model_name = model_name
        self.device = device
        self.normalize = normalize
        self._model = None

    @property
    def name(self) -> str:
        return f"local:{self.model_name}"

    @property
    def dimension(self) -> int:
        if self._model is not None:
            return self._model.get_sentence_embedding_dimension()
        return self.MODEL_DIMENSIONS.get(self.model_name, 384)

    def load(self) -> "LocalEmbedding":
        """Load the sentence-transformers model now instead of on first use."""
        if self._model is None:
            from sentence_transformers import SentenceTransformer

            self._model = SentenceTransformer(self.model_name, device=self.device)
            logger.info(f"Loaded embedding model: {self.model_name}")
        return self

    async def embed_documents(self, texts: list[str]) -> list[list[float]]:
        """Embed a list of documents using the local model."""
        if not texts:
            return []

        model = self.load()._model

        # Run in thread pool to avoid blocking
        loop = asyncio.get_running_loop()
        embeddings = await loop.run_in_executor(
            None,
            lambda: model.encode(
                texts,
                normalize_embeddings=self.normalize,
                convert_to_numpy=True,
            ),
        )

        return embeddings.tolist()

    async def embed_query(self, text: str) -> list[float]:
        """Embed a single query using the local model."""
        embeddings = await self.embed_documents([text])
        return embeddings[0]


class OpenAIEmbedding(BaseEmbedding):
    """OpenAI embedding model.

    Uses OpenAI's embedding API (text-embedding-3-small/large).
    """

    variant = EmbeddingVariant.REAL

    # Known model dimensions
    MODEL_DIMENSIONS = {
        "text-embedding-3-small": 1536,
        "text-embedding-3-large": 3072,
        "text-embedding-ada-002": 1536,
    }

    def __init__(
        self,
        model: str = "text-embedding-3-small",
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        batch_size: int = 100,
        dimensions: Optional[int] = None,
    ):
        """Initialize the OpenAI embedding model.

        Args:
            model: Model name (text-embedding-3-small, text-embedding-3-large)
            api_key: OpenAI API key (optional, uses env var if not provided)
            base_url: Optional base URL for API
            batch_size: Batch size for embedding documents
            dimensions: Shorten vectors to this size (text-embedding-3 models only)
        """
        self.model = model
        self.api_key = api_key
        self.base_url = base_url
        self.batch_size = batch_size
        self.dimensions = dimensions
        self._client = None

    @property
    def name(self) -> str:
        return f"openai:{self.model}"

    @property
    def dimension(self) -> int:
        if self.dimensions:
            return self.dimensions
        return self.MODEL_DIMENSIONS.get(self.model, 1536)

    def _get_client(self):
        """Get or create the OpenAI client."""
        if self._client is None:
            from openai import AsyncOpenAI

            kwargs = {}
            if self.api_key:
                kwargs["api_key"] = self.api_key
            if self.base_url:
                kwargs["base_url"] = self.base_url

            self._client = AsyncOpenAI(**kwargs)
        return self._client

    async def embed_documents(self, texts: list[str]) -> list[list[float]]:
        """Embed a list of documents using OpenAI API."""
        client = self._get_client()
        all_embeddings = []
        kwargs = {"dimensions": self.dimensions} if self.dimensions else {}

        # Process in batches
        for i in range(0, len(texts), self.batch_size):
            batch = texts[i : i + self.batch_size]
            response = await client.embeddings.create(model=self.model, input=batch, **kwargs)
            all_embeddings.extend(item.embedding for item in response.data)

        return all_embeddings

    async def embed_query(self, text: str) -> list[float]:
        """Embed a single query using OpenAI API."""
        embeddings = await self.embed_documents([text])
        return embeddings[0]


class DegradedEmbedding(BaseEmbedding):
    """Random vectors of the right shape, used when no real model loads.

    Keeps ingestion and analysis running in demo mode. The vectors carry no
    meaning, so retrieval order is arbitrary. Every call logs a warning.
    """

    name = "degraded:random"
    variant = EmbeddingVariant.DEGRADED

    def __init__(self, dimension: int = 384, seed: Optional[int] = None):
        self._dimension = dimension
        self._random = random.Random(seed)

    @property
    def dimension(self) -> int:
        return self._dimension

    def _random_vector(self) -> list[float]:
        return [self._random.random() for _ in range(self._dimension)]

    async def embed_documents(self, texts: list[str]) -> list[list[float]]:
        logger.warning("Using fallback random embeddings (for demo purposes only)")
        return [self._random_vector() for _ in texts]

    async def embed_query(self, text: str) -> list[float]:
        logger.warning("Using fallback random embeddings (for demo purposes only)")
        return self._random_vector()


class HashEmbedding(BaseEmbedding):
    """Deterministic embedding built from hashed word vectors.

    Each word maps to a fixed signed vector derived from its hash; a text is
    the normalized mean of its word vectors. Texts sharing words end up
    close together, identical texts get identical vectors. Needs no model,
    which makes it the provider used in tests and offline runs.
    """

    name = "hash"
    variant = EmbeddingVariant.DETERMINISTIC

    def __init__(self, dimension: int = 384, seed: int = 42):
        self._dimension = dimension
        self.seed = seed

    @property
    def dimension(self) -> int:
        return self._dimension

    def _word_vector(self, word: str) -> list[float]:
        vector = []
        counter = 0
        while len(vector) < self._dimension:
            digest = hashlib.sha256(f"{self.seed}:{counter}:{word}".encode()).digest()
            vector.extend(byte / 127.5 - 1.0 for byte in digest)
            counter += 1
        return vector[: self._dimension]

    def _embed(self, text: str) -> list[float]:
        words = [w.lower() for w in _WORD.findall(text)]
        vector = [0.0] * self._dimension
        for word in words:
            for i, value in enumerate(self._word_vector(word)):
                vector[i] += value

        norm = math.sqrt(sum(v * v for v in vector))
        if norm == 0:
            return vector
        return [v / norm for v in vector]

    async def embed_documents(self, texts: list[str]) -> list[list[float]]:
        return [self._embed(text) for text in texts]

    async def embed_query(self, text: str) -> list[float]:
        return self._embed(text)


def create_embedding(config: "EmbeddingConfig") -> BaseEmbedding:
    """Build the embedding provider named by the configuration.

    A local model that fails to load is replaced by DegradedEmbedding when
    ``allow_degraded`` is set; the substitution is logged and visible via
    the provider's ``variant``.

    Args:
        config: Embedding configuration

    Returns:
        Embedding provider instance
    """
    provider = config.provider

    if provider == "local":
        try:
            return LocalEmbedding(config.model_name, device=config.device).load()
        except Exception as e:
            if not config.allow_degraded:
                raise EmbeddingFailure(
                    f"Failed to load embedding model '{config.model_name}': {e}"
                ) from e
            logger.warning(
                f"Failed to initialize embedding model '{config.model_name}' ({e}); "
                f"falling back to degraded random embeddings"
            )
            return DegradedEmbedding(dimension=config.dimension)

    if provider == "openai":
        # Only an explicitly configured dimension shortens OpenAI vectors
        return OpenAIEmbedding(
            model=config.openai_model,
            api_key=config.api_key,
            base_url=config.base_url,
            dimensions=config.dimension if "dimension" in config.model_fields_set else None,
        )

    if provider == "hash":
        return HashEmbedding(dimension=config.dimension)

    if provider == "degraded":
        return DegradedEmbedding(dimension=config.dimension)

    raise ValueError(f"Unknown embedding provider: {provider}")
