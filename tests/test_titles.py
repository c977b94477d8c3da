"""Tests for document_chunking.titles."""

import pytest

from document_chunking.titles import ChunkTitleGenerator


@pytest.fixture
def titles():
    return ChunkTitleGenerator()


class TestGenerateChunkTitle:
    def test_multiple_chunks_get_part_number(self, titles):
        assert titles.generate_chunk_title("Photosynthesis", 1, 3, True) == "Photosynthesis (Part 2)"

    def test_single_chunk_keeps_title(self, titles):
        assert titles.generate_chunk_title("Photosynthesis", 0, 1, False) == "Photosynthesis"

    def test_missing_title(self, titles):
        assert titles.generate_chunk_title(None, 0, 1, False) == "Document"
        assert titles.generate_chunk_title("   ", 2, 3, True) == "Document (Part 3)"

    def test_existing_part_number_is_replaced(self, titles):
        assert titles.generate_chunk_title("Intro (Part 3)", 0, 2, True) == "Intro (Part 1)"

    def test_trailing_punctuation_removed(self, titles):
        assert titles.generate_chunk_title("Summary.", 0, 1, False) == "Summary"


class TestSpecializedTitles:
    def test_chapter_number_fallback(self, titles):
        assert titles.generate_chapter_chunk_title(None, 4, 0, 1) == "Chapter 4"

    def test_chapter_title_split(self, titles):
        assert titles.generate_chapter_chunk_title("Origins", 1, 1, 2) == "Origins (Part 2)"

    def test_section_title(self, titles):
        assert titles.generate_section_chunk_title("Methods", None, None, None, 0, 1) == "Methods"

    def test_section_numbered_fallback(self, titles):
        assert titles.generate_section_chunk_title(None, "Growth", 2, 3, 0, 1) == "2.3 Growth"

    def test_section_number_only(self, titles):
        assert titles.generate_section_chunk_title(None, None, None, 7, 0, 1) == "Section 7"

    def test_document_title(self, titles):
        assert titles.generate_document_chunk_title(None, 0, 1) == "Document"
        assert titles.generate_document_chunk_title("Report", 0, 2) == "Report (Part 1)"

    def test_summary_title(self, titles):
        assert titles.generate_summary_title("Intro (Part 2)", 3) == "Intro (3 parts)"
        assert titles.generate_summary_title(None, 2) == "Document (2 parts)"


class TestExtractSubtitle:
    def test_first_sentence(self, titles):
        assert titles.extract_subtitle("First sentence here. Second one.", 50) == "First sentence here."

    def test_truncates_to_whole_words(self, titles):
        content = "This is a very long first sentence that goes on."
        assert titles.extract_subtitle(content, 20) == "This is a very long"

    def test_no_terminator(self, titles):
        assert titles.extract_subtitle("  no terminator here  ", 100) == "no terminator here"

    def test_empty_content(self, titles):
        assert titles.extract_subtitle(None, 50) == ""
        assert titles.extract_subtitle("   ", 50) == ""


class TestIsValidChunkTitle:
    @pytest.mark.parametrize("title", [None, "", "   ", "...", "x" * 201])
    def test_invalid(self, titles, title):
        assert not titles.is_valid_chunk_title(title)

    def test_valid(self, titles):
        assert titles.is_valid_chunk_title("Introduction (Part 1)")
