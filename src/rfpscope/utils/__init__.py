"""Configuration and logging helpers."""

from .config import (
    AnalysisConfig,
    ChunkingConfig,
    Config,
    EmbeddingConfig,
    RfpScopeConfig,
    StoreConfig,
    load_config,
)
from .logging import get_logger, set_log_level

__all__ = [
    "AnalysisConfig",
    "ChunkingConfig",
    "Config",
    "EmbeddingConfig",
    "RfpScopeConfig",
    "StoreConfig",
    "load_config",
    "get_logger",
    "set_log_level",
]
