"""
Chunk title generation.

Keeps the original chapter/section title and appends a part number when a
unit is split across several chunks: "Photosynthesis (Part 2)".
"""

import re
from typing import Optional

from .sentence_boundary import find_first_sentence_end

DEFAULT_TITLE = "Document"
MAX_TITLE_LENGTH = 200

_PART_NUMBER_PATTERN = re.compile(r"\s*\(Part\s+\d+\)\s*$")
_TRAILING_PUNCTUATION = re.compile(r"[.!?]+$")
_NON_CONTENT = re.compile(r"[\s\W_]+")


class ChunkTitleGenerator:
    """Builds display titles and subtitles for chunks."""

    def generate_chunk_title(
        self,
        original_title: Optional[str],
        chunk_index: int,
        total_chunks: int,
        is_multiple_chunks: bool,
    ) -> str:
        if original_title is None or not original_title.strip():
            return self._default_title(chunk_index, is_multiple_chunks)

        clean = self._clean_title(original_title)
        if not is_multiple_chunks:
            return clean
        return f"{clean} (Part {chunk_index + 1})"

    def generate_chapter_chunk_title(
        self,
        chapter_title: Optional[str],
        chapter_number: Optional[int],
        chunk_index: int,
        total_chunks: int,
    ) -> str:
        title = chapter_title if chapter_title is not None else f"Chapter {chapter_number}"
        return self.generate_chunk_title(title, chunk_index, total_chunks, total_chunks > 1)

    def generate_section_chunk_title(
        self,
        section_title: Optional[str],
        chapter_title: Optional[str],
        chapter_number: Optional[int],
        section_number: Optional[int],
        chunk_index: int,
        total_chunks: int,
    ) -> str:
        if section_title and section_title.strip():
            title = section_title
        elif chapter_number is not None and section_number is not None:
            title = f"{chapter_number}.{section_number} {chapter_title or 'Section'}"
        else:
            number = section_number if section_number is not None else chunk_index + 1
            title = f"Section {number}"
        return self.generate_chunk_title(title, chunk_index, total_chunks, total_chunks > 1)

    def generate_document_chunk_title(
        self, document_title: Optional[str], chunk_index: int, total_chunks: int
    ) -> str:
        title = document_title if document_title and document_title.strip() else DEFAULT_TITLE
        return self.generate_chunk_title(title, chunk_index, total_chunks, total_chunks > 1)

    def extract_subtitle(self, content: Optional[str], max_length: int) -> str:
        """
        First sentence of the content if it fits in max_length, otherwise as
        many leading words as fit.
        """
        if content is None or not content.strip():
            return ""

        trimmed = content.strip()
        sentence_end = find_first_sentence_end(trimmed)
        if 0 < sentence_end <= max_length:
            return trimmed[:sentence_end].strip()

        words: list[str] = []
        used = 0
        for word in trimmed.split():
            needed = len(word) + (1 if words else 0)
            if used + needed > max_length:
                break
            words.append(word)
            used += needed
        return " ".join(words)

    def is_valid_chunk_title(self, title: Optional[str]) -> bool:
        if title is None or not title.strip():
            return False
        if len(title) > MAX_TITLE_LENGTH:
            return False
        return bool(_NON_CONTENT.sub("", title))

    def generate_summary_title(self, original_title: Optional[str], total_chunks: int) -> str:
        if original_title is None or not original_title.strip():
            return f"{DEFAULT_TITLE} ({total_chunks} parts)"
        return f"{self._clean_title(original_title)} ({total_chunks} parts)"

    @staticmethod
    def _default_title(chunk_index: int, is_multiple_chunks: bool) -> str:
        if not is_multiple_chunks:
            return DEFAULT_TITLE
        return f"{DEFAULT_TITLE} (Part {chunk_index + 1})"

    @staticmethod
    def _clean_title(title: str) -> str:
        cleaned = _PART_NUMBER_PATTERN.sub("", title).strip()
        return _TRAILING_PUNCTUATION.sub("", cleaned)
