"""
Document Chunker - Core chunking logic

Splits a large normalized document into overlapping, token-budgeted chunks
aligned with document structure, for a downstream generation pipeline.

Algorithm:
1. Null/empty text yields a single empty chunk.
2. Trailing matter (index, appendices, bibliography, ...) is filtered out;
   all offsets refer to the filtered "working" text.
3. A document within the token budget is returned as one chunk.
4. Otherwise a sliding window walks the text. Each window ends at the
   nearest chapter heading, else section heading, else paragraph break,
   else word boundary in its trailing part; failing all, it is cut hard.
5. The next window starts `overlap` characters before the previous end,
   but always advances by at least a tenth of the chunk just produced.
   A keyword-dense window is skipped unless it reaches the end of the text.
6. The run is a small state machine:
       NORMAL -> STALLED_BOUNDARY -> STALLED_OVERLAP -> EMERGENCY
   Too many consecutive stalls, or the iteration ceiling, switch to
   emergency (fixed-size) chunking, or, when that is disabled, return the
   chunks produced so far plus one chunk covering the remainder.

The chunker never raises for malformed input; degraded runs are reported
through ChunkingResult.outcome.

Usage:
    from document_chunking import DocumentChunker, ChunkingConfig, TiktokenEstimator

    chunker = DocumentChunker(TiktokenEstimator(), ChunkingConfig())
    result = chunker.chunk(text, "doc-42")
    for chunk in result.chunks:
        print(chunk)
"""

import logging
import math
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from .headings import find_chapter_headings, find_section_headings
from .models import (
    Chunk,
    ChunkingConfig,
    ChunkingOutcome,
    ChunkingResult,
    ChunkingStats,
    TextSpan,
)
from .sentence_boundary import split_sentences
from .token_estimator import TokenEstimator
from .trailing_matter import filter_trailing_matter

logger = logging.getLogger(__name__)

# How far past a candidate end heading lines are read, so a heading cut by
# the window is not mistaken for a shorter one.
_HEADING_LOOKAHEAD = 256

# Halvings tried when aggressive chunking finds a span over budget.
_MAX_SHRINK_ATTEMPTS = 4

_PARAGRAPH_BREAK = re.compile(r"\n[ \t]*\n\s*")
_WORD_PATTERN = re.compile(r"[a-z]+(?:'[a-z]+)?")


class ChunkerState(str, Enum):
    NORMAL = "normal"
    STALLED_BOUNDARY = "stalled_boundary"
    STALLED_OVERLAP = "stalled_overlap"
    EMERGENCY = "emergency"


class BoundaryType(str, Enum):
    CHAPTER = "chapter"
    SECTION = "section"
    PARAGRAPH = "paragraph"
    WORD = "word"
    DOCUMENT_END = "document_end"
    FORCED = "forced"


@dataclass
class _ChunkingRun:
    chunks: list[Chunk] = field(default_factory=list)
    skipped: list[TextSpan] = field(default_factory=list)
    state: ChunkerState = ChunkerState.NORMAL
    position: int = 0
    iterations: int = 0
    consecutive_stalls: int = 0
    total_stalls: int = 0


class DocumentChunker:
    """
    Splits normalized document text into overlapping chunks that respect
    an estimated token budget and the document's structure.
    """

    def __init__(self, estimator: TokenEstimator, config: Optional[ChunkingConfig] = None):
        self.estimator = estimator
        self.config = config or ChunkingConfig()

        keywords = [k.strip().lower() for k in self.config.irrelevant_keywords if k.strip()]
        self._single_keywords = {k for k in keywords if " " not in k}
        self._phrase_keywords = [k for k in keywords if " " in k]

    def chunk_document(self, text: Optional[str], document_id: str) -> list[Chunk]:
        """
        Chunk a document and return only the chunks.

        Args:
            text: The full document text (may be None).
            document_id: Identifier used for logging.

        Returns:
            Ordered, non-empty list of chunks.
        """
        return self.chunk(text, document_id).chunks

    def chunk(self, text: Optional[str], document_id: str) -> ChunkingResult:
        """
        Chunk a document.

        Args:
            text: The full document text (may be None).
            document_id: Identifier used for logging.

        Returns:
            ChunkingResult with chunks, diagnostic outcome and statistics.
        """
        if not text:
            logger.warning(f"Received null or empty text for chunking document {document_id}")
            return self._single_chunk_result(document_id, "", original_length=0)

        config = self.config
        logger.info(f"Starting document chunking for document {document_id}")
        logger.info(f"  - Input size: {len(text)} characters")
        logger.info(f"  - Max tokens per chunk: {config.max_single_chunk_tokens}")
        logger.info(f"  - Aggressive chunking: {config.aggressive_chunking}")

        filtered = filter_trailing_matter(text, config.trailing_section_markers)
        working = filtered.text
        if filtered.removed:
            logger.info(
                f"Filtered document {document_id} from {len(text)} to {len(working)} characters"
            )

        if not working or not self.estimator.exceeds_token_limit(
            working, config.max_single_chunk_tokens
        ):
            logger.info(f"Document {document_id} fits in a single chunk ({len(working)} chars)")
            return self._single_chunk_result(
                document_id, working, original_length=len(text), removed=filtered.removed
            )

        if len(working) > config.max_single_chunk_chars * 2:
            logger.warning(
                f"Document {document_id} exceeds character limit by a large margin "
                f"({len(working)} chars > {config.max_single_chunk_chars * 2} chars), "
                f"but will be chunked by token count"
            )

        run = self._chunk_semantically(working, document_id)
        chunks = run.chunks
        skipped = run.skipped
        outcome = ChunkingOutcome.OK

        if run.state is ChunkerState.EMERGENCY:
            if config.enable_emergency_chunking:
                chunks = self._emergency_chunks(working, document_id)
                skipped = []
                outcome = ChunkingOutcome.DEGRADED_EMERGENCY
            else:
                logger.error(
                    f"Chunking of document {document_id} stalled at position {run.position} "
                    f"and emergency chunking is disabled; returning partial result"
                )
                chunks = self._cover_remainder(working, chunks, run.position)
                outcome = ChunkingOutcome.DEGRADED_STALLED

        if len(chunks) == 1 and outcome is not ChunkingOutcome.DEGRADED_EMERGENCY:
            logger.error(
                f"Large document {document_id} was not properly chunked: only 1 chunk created"
            )
            if config.enable_emergency_chunking:
                logger.warning("Forcing emergency chunking to prevent token limit issues")
                chunks = self._emergency_chunks(working, document_id)
                skipped = []
                outcome = (
                    ChunkingOutcome.DEGRADED_EMERGENCY
                    if len(chunks) > 1
                    else ChunkingOutcome.DEGRADED_SINGLE_CHUNK
                )
            else:
                logger.error("Emergency chunking is disabled. Document may exceed the token limit!")
                outcome = ChunkingOutcome.DEGRADED_SINGLE_CHUNK

        logger.info(f"Document {document_id} chunked into {len(chunks)} pieces ({outcome.value})")

        return ChunkingResult(
            document_id=document_id,
            chunks=chunks,
            outcome=outcome,
            original_length=len(text),
            working_length=len(working),
            removed_sections=filtered.removed,
            skipped_spans=skipped,
            stats=self._compute_stats(chunks, working, run),
        )

    # -------------------------------------------------------------------------
    # Semantic chunking loop
    # -------------------------------------------------------------------------

    def _chunk_semantically(self, text: str, document_id: str) -> _ChunkingRun:
        config = self.config
        length = len(text)
        safe_chars = max(1, self.estimator.get_configured_safe_chunk_size())
        overlap_chars = max(0, self.estimator.estimate_max_chars_for_tokens(config.overlap_tokens))
        tail_chars = (
            self.estimator.estimate_max_chars_for_tokens(config.min_tail_tokens)
            if config.min_tail_tokens > 0
            else 0
        )
        # Ceiling assumes the smallest advance left after full shrinking.
        min_advance = max(1, safe_chars // (10 * 2 ** _MAX_SHRINK_ATTEMPTS))
        max_iterations = math.ceil(length / min_advance) + 100

        logger.debug(
            f"Chunking {document_id}: window={safe_chars} chars, overlap={overlap_chars} chars, "
            f"iteration ceiling={max_iterations}"
        )

        run = _ChunkingRun()
        while run.position < length:
            run.iterations += 1
            if run.iterations > max_iterations:
                logger.error(
                    f"Too many chunking iterations ({run.iterations}) for document {document_id}"
                )
                run.state = ChunkerState.EMERGENCY
                break

            start = run.position
            end, boundary = self._choose_chunk_end(text, start, safe_chars, tail_chars)
            is_last = end >= length
            run.state = (
                ChunkerState.STALLED_BOUNDARY if boundary is BoundaryType.FORCED else ChunkerState.NORMAL
            )

            chunk_text = text[start:end]
            if not is_last and self._is_irrelevant_chunk(chunk_text):
                logger.warning(
                    f"Skipping chunk [{start}, {end}) of document {document_id}: "
                    f"dominated by reference-material keywords"
                )
                run.skipped.append(TextSpan(start=start, end=end))
                next_position = end
            else:
                run.chunks.append(Chunk(
                    text=chunk_text,
                    start_offset=start,
                    end_offset=end,
                    chunk_index=len(run.chunks),
                ))
                next_position = end
                if not is_last:
                    next_position, forced = self._next_position(
                        start, end, overlap_chars, max(1, (end - start) // 10)
                    )
                    if forced:
                        run.state = ChunkerState.STALLED_OVERLAP

            run.position = next_position
            if is_last:
                break

            if run.state is ChunkerState.NORMAL:
                run.consecutive_stalls = 0
            else:
                run.consecutive_stalls += 1
                run.total_stalls += 1
                logger.debug(f"Chunking {document_id} stalled at {start}: {run.state.value}")

            if run.consecutive_stalls > config.max_consecutive_stalls:
                logger.error(
                    f"Chunking of document {document_id} stalled {run.consecutive_stalls} times in a row"
                )
                run.state = ChunkerState.EMERGENCY
                break

        return run

    def _choose_chunk_end(
        self, text: str, start: int, safe_chars: int, tail_chars: int
    ) -> tuple[int, BoundaryType]:
        """Pick the end of the chunk starting at start, shrinking over-budget spans."""
        length = len(text)
        window = safe_chars

        for attempt in range(_MAX_SHRINK_ATTEMPTS + 1):
            candidate_end = min(start + window, length)
            if attempt == 0 and length - candidate_end < tail_chars:
                candidate_end = length

            if candidate_end >= length:
                end, boundary = length, BoundaryType.DOCUMENT_END
            else:
                end, boundary = self._find_boundary(text, start, candidate_end)

            over_budget = (
                self.config.aggressive_chunking
                and end - start > 1
                and self.estimator.exceeds_token_limit(
                    text[start:end], self.config.max_single_chunk_tokens
                )
            )
            if not over_budget:
                break
            logger.debug(f"Span [{start}, {end}) exceeds the token budget, shrinking")
            window = max(1, (end - start) // 2)

        return end, boundary

    def _find_boundary(self, text: str, start: int, candidate_end: int) -> tuple[int, BoundaryType]:
        """
        Search the trailing part of [start, candidate_end] for a split point.

        Returns:
            (offset, boundary type); the offset is always in (start, candidate_end].
        """
        window = candidate_end - start
        search = max(1, int(window * self.config.boundary_search_ratio))
        region_start = max(start + 1, candidate_end - search)
        lookahead = min(len(text), candidate_end + _HEADING_LOOKAHEAD)

        chapters = [
            h.start for h in find_chapter_headings(text, region_start, lookahead)
            if h.start < candidate_end
        ]
        if chapters:
            return chapters[-1], BoundaryType.CHAPTER

        sections = [
            h.start for h in find_section_headings(text, region_start, lookahead)
            if h.start < candidate_end
        ]
        if sections:
            return sections[-1], BoundaryType.SECTION

        paragraph_end = -1
        for match in _PARAGRAPH_BREAK.finditer(text, region_start, candidate_end):
            paragraph_end = match.end()
        if paragraph_end > start:
            return paragraph_end, BoundaryType.PARAGRAPH

        for position in range(candidate_end, region_start - 1, -1):
            if text[position - 1].isspace():
                return position, BoundaryType.WORD

        return candidate_end, BoundaryType.FORCED

    @staticmethod
    def _next_position(start: int, end: int, overlap_chars: int, min_advance: int) -> tuple[int, bool]:
        """
        Start of the next window: end minus overlap, but at least min_advance
        past start and never past end.

        Returns:
            (next position, whether advancement had to be forced)
        """
        candidate = end - overlap_chars
        next_position = min(max(candidate, start + min_advance), end)
        return next_position, next_position != candidate

    def _is_irrelevant_chunk(self, chunk_text: str) -> bool:
        """Check whether reference-material keywords dominate a chunk."""
        words = _WORD_PATTERN.findall(chunk_text.lower())
        if not words:
            return False

        hits = sum(1 for word in words if word in self._single_keywords)
        if self._phrase_keywords:
            joined = " ".join(words)
            for phrase in self._phrase_keywords:
                hits += joined.count(phrase) * len(phrase.split())

        return hits / len(words) > self.config.irrelevant_density_threshold

    # -------------------------------------------------------------------------
    # Fallbacks
    # -------------------------------------------------------------------------

    def _emergency_chunk_size(self) -> int:
        safe_chars = self.estimator.get_configured_safe_chunk_size()
        budget_chars = self.estimator.estimate_max_chars_for_tokens(self.config.max_single_chunk_tokens)
        candidates = [c for c in (safe_chars, budget_chars, self.config.max_single_chunk_chars) if c > 0]
        return max(1, min(candidates)) if candidates else 1

    def _emergency_chunks(self, text: str, document_id: str) -> list[Chunk]:
        """Fixed-size slicing with overlap clamped to half the slice size."""
        logger.warning(f"Using emergency forced chunking for document {document_id}")

        size = self._emergency_chunk_size()
        overlap_chars = self.estimator.estimate_max_chars_for_tokens(self.config.overlap_tokens)
        overlap = max(0, min(overlap_chars, size // 2))

        chunks: list[Chunk] = []
        position = 0
        while True:
            end = min(position + size, len(text))
            chunks.append(Chunk(
                text=text[position:end],
                start_offset=position,
                end_offset=end,
                chunk_index=len(chunks),
            ))
            if end >= len(text):
                break
            position = end - overlap

        logger.info(f"Emergency chunking complete: {len(chunks)} chunks of up to {size} chars")
        return chunks

    @staticmethod
    def _cover_remainder(text: str, chunks: list[Chunk], position: int) -> list[Chunk]:
        """Append one chunk for text[position:] so nothing is dropped."""
        if position >= len(text):
            return chunks
        return chunks + [Chunk(
            text=text[position:],
            start_offset=position,
            end_offset=len(text),
            chunk_index=len(chunks),
        )]

    # -------------------------------------------------------------------------
    # Results
    # -------------------------------------------------------------------------

    def _single_chunk_result(
        self,
        document_id: str,
        text: str,
        original_length: int,
        removed: Optional[list[TextSpan]] = None,
    ) -> ChunkingResult:
        chunks = [Chunk(text=text, start_offset=0, end_offset=len(text), chunk_index=0)]
        return ChunkingResult(
            document_id=document_id,
            chunks=chunks,
            original_length=original_length,
            working_length=len(text),
            removed_sections=removed or [],
            stats=self._compute_stats(chunks, text, None),
        )

    def _compute_stats(
        self, chunks: list[Chunk], working: str, run: Optional[_ChunkingRun]
    ) -> ChunkingStats:
        token_counts = [self.estimator.estimate_tokens(c.text) for c in chunks]
        return ChunkingStats(
            total_chunks=len(chunks),
            total_tokens=sum(token_counts),
            avg_chunk_tokens=sum(token_counts) / len(token_counts) if token_counts else 0.0,
            min_chunk_tokens=min(token_counts, default=0),
            max_chunk_tokens=max(token_counts, default=0),
            total_sentences=len(split_sentences(working)),
            iterations=run.iterations if run else 0,
            stalls=run.total_stalls if run else 0,
        )
