"""
Document Chunking - Token-budgeted, structure-aware document splitting

Splits large normalized documents into overlapping chunks that respect an
estimated token budget, prefer chapter/section/paragraph/word boundaries,
drop trailing reference matter and always terminate with full coverage.

Quick Start:
    from document_chunking import DocumentChunker, ChunkingConfig, TiktokenEstimator

    chunker = DocumentChunker(TiktokenEstimator(), ChunkingConfig(overlap_tokens=500))
    result = chunker.chunk(text, "doc-42")
    for chunk in result.chunks:
        print(chunk.chunk_index, chunk.start_offset, chunk.end_offset)
"""

__version__ = "1.0.0"

from .chunker import ChunkerState, DocumentChunker
from .config import ChunkingServiceConfig
from .exceptions import ChunkingError, TokenEstimatorError
from .models import (
    Chunk,
    ChunkingConfig,
    ChunkingOutcome,
    ChunkingResult,
    ChunkingStats,
    TextSpan,
    TitledChunk,
)
from .sentence_boundary import (
    find_best_split_point,
    find_first_sentence_end,
    find_last_sentence_end,
    is_valid_chunk,
    split_sentences,
)
from .service import ChunkingService
from .titles import ChunkTitleGenerator
from .token_estimator import (
    CharRatioEstimator,
    TiktokenEstimator,
    TokenEstimator,
    count_tokens,
    count_tokens_batch,
)
from .logging_config import get_logger, setup_logging
from .trailing_matter import filter_trailing_matter

__all__ = [
    "__version__",
    "DocumentChunker",
    "ChunkerState",
    "ChunkingService",
    "ChunkingServiceConfig",
    "ChunkingError",
    "TokenEstimatorError",
    "Chunk",
    "ChunkingConfig",
    "ChunkingOutcome",
    "ChunkingResult",
    "ChunkingStats",
    "TextSpan",
    "TitledChunk",
    "ChunkTitleGenerator",
    "find_best_split_point",
    "find_first_sentence_end",
    "find_last_sentence_end",
    "is_valid_chunk",
    "split_sentences",
    "CharRatioEstimator",
    "TiktokenEstimator",
    "TokenEstimator",
    "count_tokens",
    "count_tokens_batch",
    "filter_trailing_matter",
    "setup_logging",
    "get_logger",
]
