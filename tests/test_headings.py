"""Tests for document_chunking.headings."""

from document_chunking.headings import (
    HeadingKind,
    find_chapter_headings,
    find_headings,
    find_section_headings,
)


class TestChapterHeadings:
    def test_numbered_chapter(self):
        headings = find_chapter_headings("Chapter 1\nSome text.\n")
        assert len(headings) == 1
        assert headings[0].start == 0
        assert headings[0].level == 1
        assert headings[0].kind is HeadingKind.CHAPTER

    def test_roman_part(self):
        text = "Intro.\nPART II The Return\nMore text.\n"
        headings = find_chapter_headings(text)
        assert [h.start for h in headings] == [text.index("PART II")]

    def test_word_prefix_is_not_a_chapter(self):
        assert find_chapter_headings("Chapters are fun to read.\n") == []

    def test_inline_mention_is_not_a_chapter(self):
        assert find_chapter_headings("As shown in Chapter 3 earlier.\n") == []

    def test_markdown_h1_is_chapter(self):
        headings = find_chapter_headings("# Title\n## Sub\n")
        assert len(headings) == 1
        assert headings[0].level == 1

    def test_respects_search_range(self):
        text = "Chapter 1\n" + "x" * 50 + "\nChapter 2\n"
        headings = find_chapter_headings(text, 5)
        assert [h.start for h in headings] == [text.index("Chapter 2")]


class TestSectionHeadings:
    def test_numbered_section_level(self):
        text = "2.3 Methods\n1.2.3 Details\n"
        levels = [h.level for h in find_section_headings(text)]
        assert levels == [2, 3]

    def test_decimal_sentence_is_not_a_heading(self):
        assert find_section_headings("3.14 is close to pi\n") == []

    def test_named_section(self):
        headings = find_section_headings("Section 4 Overview\n")
        assert len(headings) == 1
        assert headings[0].level == 2

    def test_caps_heading(self):
        text = "Intro line\nRESULTS\nbody text\n"
        headings = find_section_headings(text)
        assert [h.start for h in headings] == [11]
        assert headings[0].kind is HeadingKind.SECTION

    def test_markdown_subheadings(self):
        headings = find_section_headings("# Title\n## Sub\n### Deep\n")
        assert [h.level for h in headings] == [2, 3]

    def test_plain_prose_has_no_headings(self):
        assert find_section_headings("This is ordinary prose.\nAnd another line.\n") == []


class TestFindHeadings:
    def test_markdown_levels(self):
        headings = find_headings("# Title\n## Sub\n### Deep\n")
        assert [h.level for h in headings] == [1, 2, 3]

    def test_one_heading_per_line_keeps_lowest_level(self):
        headings = find_headings("CHAPTER 1\nText here.\n")
        assert len(headings) == 1
        assert headings[0].level == 1
        assert headings[0].kind is HeadingKind.CHAPTER

    def test_ordered_by_position(self):
        text = "Chapter 1\nbody\nMETHODS\nbody\n2.1 Setup\nbody\n"
        starts = [h.start for h in find_headings(text)]
        assert starts == sorted(starts)
        assert len(starts) == 3
