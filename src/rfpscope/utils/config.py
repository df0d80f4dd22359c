"""
Configuration utilities.
"""

import json
import os
from pathlib import Path
from typing import Literal

import yaml

from pydantic import BaseModel, Field, model_validator

CONFIG_ENV_VAR = "RFPSCOPE_CONFIG"


class Config(BaseModel):
    """Base configuration class."""

    @classmethod
    def from_yaml(cls, path: Path) -> "Config":
        """Load configuration from YAML file."""
        with open(path) as f:
            data = yaml.safe_load(f) or {}
        return cls(**data)

    @classmethod
    def from_file(cls, path: str | Path) -> "Config":
        """Load configuration from file (YAML or JSON)."""
        path = Path(path)

        if path.suffix in (".yaml", ".yml"):
            return cls.from_yaml(path)
        elif path.suffix == ".json":
            with open(path) as f:
                data = json.load(f)
            return cls(**data)
        else:
            raise ValueError(f"Unsupported config file format: {path.suffix}")


class ChunkingConfig(BaseModel):
    """Chunk sizing for the ingestion pipeline."""
    chunk_size: int = 1000
    overlap: int = 200

    @model_validator(mode="after")
    def _check_overlap(self) -> "ChunkingConfig":
        if not 0 <= self.overlap < self.chunk_size:
            raise ValueError("overlap must be >= 0 and less than chunk_size")
        return self


class EmbeddingConfig(BaseModel):
    """Embedding provider selection."""
    provider: Literal["local", "openai", "hash", "degraded"] = "local"
    model_name: str = "all-MiniLM-L6-v2"
    dimension: int = 384
    device: str | None = None
    allow_degraded: bool = True

    # OpenAI settings
    openai_model: str = "text-embedding-3-small"
    api_key: str | None = None
    base_url: str | None = None


class StoreConfig(BaseModel):
    """Vector store backend settings."""
    backend: Literal["memory", "chroma"] = "memory"
    collection_name: str = "rfp_documents"

    # Chroma settings
    chroma_mode: Literal["memory", "persistent", "http"] = "memory"
    persist_directory: str | None = None
    host: str = "localhost"
    port: int = 8000


class AnalysisConfig(BaseModel):
    """Analyzer settings."""
    scope: Literal["prefix", "filter", "none"] = "prefix"


class RfpScopeConfig(Config):
    """Top-level rfpscope configuration."""
    chunking: ChunkingConfig = Field(default_factory=ChunkingConfig)
    embedding: EmbeddingConfig = Field(default_factory=EmbeddingConfig)
    store: StoreConfig = Field(default_factory=StoreConfig)
    analysis: AnalysisConfig = Field(default_factory=AnalysisConfig)
    log_level: str = "INFO"


def load_config(path: str | Path | None = None) -> RfpScopeConfig:
    """
    Load rfpscope configuration from file.

    Args:
        path: Path to config file. Falls back to $RFPSCOPE_CONFIG,
            then to ``rfpscope.yaml`` in the working directory.

    Returns:
        RfpScopeConfig instance (defaults when the file does not exist)
    """
    if path is None:
        path = os.environ.get(CONFIG_ENV_VAR, "rfpscope.yaml")
    path = Path(path)

    if not path.exists():
        return RfpScopeConfig()

    return RfpScopeConfig.from_file(path)
