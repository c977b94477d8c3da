"""
Data Models for the Document Chunking Engine

Defines:
1. ChunkingConfig - Token budget, overlap, safety valves and filter vocabulary
2. Chunk - An immutable slice of the working text with offsets
3. ChunkingOutcome - Diagnostic status of a chunking run
4. ChunkingResult - Chunks plus diagnostics and statistics
5. TitledChunk - A chunk paired with a human-readable title

Design Principles:
- Pydantic v2 for validation and serialization
- Offsets are Python string indices into the working (filtered) text
- The result carries a diagnostic outcome instead of raising on degraded runs

Usage:
    config = ChunkingConfig(max_single_chunk_tokens=8_000, overlap_tokens=500)
    result = DocumentChunker(estimator, config).chunk(text, "doc-1")
    print(result.outcome, result.total_chunks)
"""

import json
import re
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


DEFAULT_TRAILING_SECTION_MARKERS = [
    r"index",
    r"appendix(?:[ \t]+[A-Z0-9]{1,4})?(?:[ \t]*[:.\-–—][ \t]*[^\n]*)?",
    r"appendices",
    r"bibliography",
    r"references",
    r"glossary",
    r"acknowledge?ments",
    r"about[ \t]+the[ \t]+authors?",
    r"works[ \t]+cited",
]

DEFAULT_IRRELEVANT_KEYWORDS = [
    "index",
    "appendix",
    "bibliography",
    "references",
    "glossary",
    "acknowledgment",
    "acknowledgments",
    "acknowledgement",
    "acknowledgements",
    "page",
    "pages",
    "ibid",
    "about the author",
]


class ChunkingConfig(BaseModel):
    """
    Configuration for a chunking run.

    Token values are converted to character spans through the token
    estimator, so every size here is an approximation.
    """
    max_single_chunk_tokens: int = Field(
        40_000,
        description="Token budget for a single chunk (and for the single-chunk fast path)",
        ge=1,
    )
    max_single_chunk_chars: int = Field(
        150_000,
        description="Character limit; documents above twice this size are logged as oversized",
        ge=1,
    )
    overlap_tokens: int = Field(
        5_000,
        description="Target overlap in tokens between consecutive chunks",
        ge=0,
    )
    aggressive_chunking: bool = Field(
        True,
        description="Verify each chunk against the token budget and shrink oversized ones",
    )
    enable_emergency_chunking: bool = Field(
        True,
        description="Fall back to fixed-size slicing when semantic chunking stalls",
    )
    min_tail_tokens: int = Field(
        0,
        description="A remainder smaller than this is absorbed into the current chunk",
        ge=0,
    )
    boundary_search_ratio: float = Field(
        0.3,
        description="Trailing fraction of each window searched for semantic boundaries",
        gt=0.0,
        le=1.0,
    )
    max_consecutive_stalls: int = Field(
        3,
        description="Consecutive stalled iterations tolerated before emergency chunking",
        ge=0,
    )
    trailing_section_markers: list[str] = Field(
        default_factory=lambda: list(DEFAULT_TRAILING_SECTION_MARKERS),
        description="Regex fragments matching headings of non-substantive trailing sections",
    )
    irrelevant_keywords: list[str] = Field(
        default_factory=lambda: list(DEFAULT_IRRELEVANT_KEYWORDS),
        description="Vocabulary used to detect chunks dominated by reference material",
    )
    irrelevant_density_threshold: float = Field(
        0.3,
        description="Fraction of keyword words above which a chunk is skipped",
        gt=0.0,
        le=1.0,
    )

    def model_post_init(self, __context: Any) -> None:
        for marker in self.trailing_section_markers:
            try:
                re.compile(marker)
            except re.error as exc:
                raise ValueError(
                    f"trailing_section_markers contains an invalid pattern {marker!r}: {exc}"
                ) from exc


class Chunk(BaseModel):
    """
    A contiguous slice of the working text.

    Invariant: end_offset - start_offset == len(text).
    """
    model_config = ConfigDict(frozen=True)

    text: str = Field(..., description="The chunk text content")
    start_offset: int = Field(..., description="Inclusive start offset in the working text", ge=0)
    end_offset: int = Field(..., description="Exclusive end offset in the working text", ge=0)
    chunk_index: int = Field(..., description="Zero-based position within the run", ge=0)

    def model_post_init(self, __context: Any) -> None:
        if self.end_offset - self.start_offset != len(self.text):
            raise ValueError(
                f"offsets [{self.start_offset}, {self.end_offset}) do not match "
                f"text length {len(self.text)}"
            )

    @property
    def length(self) -> int:
        return len(self.text)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json")

    def __str__(self) -> str:
        return f"Chunk[{self.chunk_index}: {self.start_offset}-{self.end_offset}, {self.length} chars]"


class ChunkingOutcome(str, Enum):
    """How a chunking run finished."""
    OK = "ok"
    DEGRADED_EMERGENCY = "degraded_emergency"
    DEGRADED_SINGLE_CHUNK = "degraded_single_chunk"
    DEGRADED_STALLED = "degraded_stalled"


class TextSpan(BaseModel):
    """A half-open [start, end) character range."""
    model_config = ConfigDict(frozen=True)

    start: int = Field(..., ge=0)
    end: int = Field(..., ge=0)

    @property
    def length(self) -> int:
        return self.end - self.start


class ChunkingStats(BaseModel):
    """Statistics about the chunking process."""
    total_chunks: int = 0
    total_tokens: int = 0
    avg_chunk_tokens: float = 0.0
    min_chunk_tokens: int = 0
    max_chunk_tokens: int = 0
    total_sentences: int = 0
    iterations: int = 0
    stalls: int = 0


class ChunkingResult(BaseModel):
    """
    Complete result of chunking a document.

    removed_sections are spans of the caller's original text dropped by
    trailing-matter filtering; skipped_spans are spans of the working text
    that were not emitted because they were dominated by reference vocabulary.
    """
    document_id: str = Field(
        ...,
        description="Caller-supplied identifier, used for logging and correlation",
    )
    chunks: list[Chunk] = Field(
        default_factory=list,
        description="Ordered chunks over the working text",
    )
    outcome: ChunkingOutcome = Field(
        ChunkingOutcome.OK,
        description="Diagnostic status of the run",
    )
    original_length: int = Field(0, description="Length of the caller's text", ge=0)
    working_length: int = Field(0, description="Length of the text after filtering", ge=0)
    removed_sections: list[TextSpan] = Field(
        default_factory=list,
        description="Spans of the original text removed as trailing matter",
    )
    skipped_spans: list[TextSpan] = Field(
        default_factory=list,
        description="Spans of the working text skipped by keyword-density filtering",
    )
    stats: ChunkingStats = Field(
        default_factory=ChunkingStats,
        description="Chunking statistics",
    )

    @property
    def total_chunks(self) -> int:
        return len(self.chunks)

    @property
    def is_degraded(self) -> bool:
        return self.outcome is not ChunkingOutcome.OK

    def get_chunk(self, chunk_index: int) -> Optional[Chunk]:
        """Find a chunk by its index."""
        for chunk in self.chunks:
            if chunk.chunk_index == chunk_index:
                return chunk
        return None

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json")

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, indent=indent)


class TitledChunk(BaseModel):
    """A chunk with a display title and a short subtitle."""
    chunk: Chunk
    title: str
    subtitle: str = ""
