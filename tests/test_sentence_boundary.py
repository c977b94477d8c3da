"""Tests for document_chunking.sentence_boundary."""

from document_chunking.sentence_boundary import (
    NOT_FOUND,
    find_best_split_point,
    find_first_sentence_end,
    find_last_sentence_end,
    is_valid_chunk,
    split_sentences,
)


class TestFindLastSentenceEnd:
    def test_none_input(self):
        assert find_last_sentence_end(None) == NOT_FOUND

    def test_empty_string(self):
        assert find_last_sentence_end("") == NOT_FOUND

    def test_no_terminator(self):
        assert find_last_sentence_end("No terminator here") == NOT_FOUND

    def test_skips_title_abbreviation(self):
        text = "Mr. Smith went to the store. He bought milk."
        assert find_last_sentence_end(text) == 44

    def test_decimal_is_not_a_boundary(self):
        text = "The price is 3.50 dollars."
        assert find_last_sentence_end(text) == len(text)

    def test_decimal_followed_by_sentence(self):
        text = "The price is 3.50 dollars. That's expensive."
        assert find_last_sentence_end(text) == 44

    def test_ellipsis_followed_by_sentences(self):
        text = "He paused... Then he continued. The end."
        assert find_last_sentence_end(text) == 40

    def test_trailing_decimal_only(self):
        assert find_last_sentence_end("The price is 3.50 dollars") == NOT_FOUND

    def test_ellipsis_is_not_a_boundary(self):
        assert find_last_sentence_end("Wait... what") == NOT_FOUND

    def test_ellipsis_then_sentence(self):
        text = "He paused... then left."
        assert find_last_sentence_end(text) == len(text)

    def test_respects_limit(self):
        text = "First one. Second one."
        assert find_last_sentence_end(text, limit=15) == 10

    def test_includes_closing_quote(self):
        text = 'He said "Stop." Then'
        assert find_last_sentence_end(text) == len('He said "Stop."')


class TestFindFirstSentenceEnd:
    def test_none_input(self):
        assert find_first_sentence_end(None) == NOT_FOUND

    def test_no_terminator(self):
        assert find_first_sentence_end("No end") == NOT_FOUND

    def test_skips_leading_abbreviation(self):
        assert find_first_sentence_end("Dr. Jones arrived. He sat down.") == 18

    def test_question(self):
        assert find_first_sentence_end("Why? Because.") == 4


class TestSplitSentences:
    def test_empty_string(self):
        assert split_sentences("") == []

    def test_whitespace_only(self):
        assert split_sentences("   ") == []

    def test_none_input(self):
        assert split_sentences(None) == []

    def test_two_sentences(self):
        assert split_sentences("First sentence. Second sentence.") == [
            "First sentence.",
            "Second sentence.",
        ]

    def test_question_and_exclamation(self):
        result = split_sentences("What is this? It is a test! Really.")
        assert result == ["What is this?", "It is a test!", "Really."]

    def test_combined_terminators(self):
        assert split_sentences("What?! Really.") == ["What?!", "Really."]

    def test_dotted_abbreviation(self):
        result = split_sentences("Use a tool, e.g. a hammer. Then stop.")
        assert result == ["Use a tool, e.g. a hammer.", "Then stop."]

    def test_initials(self):
        result = split_sentences("J. R. R. Tolkien wrote books. He was English.")
        assert len(result) == 2

    def test_pronoun_i_ends_sentence(self):
        assert split_sentences("So do I. You agree.") == ["So do I.", "You agree."]

    def test_month_abbreviation(self):
        assert len(split_sentences("It started in Jan. and ended later.")) == 1

    def test_decimal(self):
        assert len(split_sentences("The value is 3.14 today. Next.")) == 2

    def test_ellipsis(self):
        result = split_sentences("Well... I suppose so. Fine.")
        assert result == ["Well... I suppose so.", "Fine."]

    def test_quoted_sentence(self):
        result = split_sentences('He said "Stop." Then he left.')
        assert result == ['He said "Stop."', "Then he left."]

    def test_keeps_trailing_fragment(self):
        assert split_sentences("One. Two without end") == ["One.", "Two without end"]

    def test_strips_whitespace(self):
        result = split_sentences("  First sentence.   Second sentence.  ")
        assert result == ["First sentence.", "Second sentence."]


class TestFindBestSplitPoint:
    def test_none_input(self):
        assert find_best_split_point(None, 100) == 0

    def test_text_that_fits(self):
        assert find_best_split_point("short", 100) == 5

    def test_non_positive_max_length(self):
        assert find_best_split_point("abc def", 0) == 0

    def test_prefers_paragraph_break_near_limit(self):
        text = "a" * 80 + "\n\nNext paragraph continues here for a while."
        assert find_best_split_point(text, 100) == 82

    def test_prefers_numbered_item(self):
        text = "Intro text " * 8 + "\n1. First item in the list\n2. Second item in the list"
        assert find_best_split_point(text, 100) == 88

    def test_falls_back_to_sentence_end(self):
        text = "First sentence here. " + "word " * 40
        assert find_best_split_point(text, 100) == 20

    def test_falls_back_to_word_boundary(self):
        text = "word " * 40
        assert find_best_split_point(text, 98) == 95

    def test_forced_split_without_whitespace(self):
        assert find_best_split_point("x" * 200, 50) == 50


class TestIsValidChunk:
    def test_none_and_empty(self):
        assert is_valid_chunk(None)
        assert is_valid_chunk("")

    def test_complete_sentence(self):
        assert is_valid_chunk("This is a complete sentence.")

    def test_quoted_ending(self):
        assert is_valid_chunk('He said "done."')

    def test_trailing_article(self):
        assert not is_valid_chunk("This sentence ends with the")

    def test_trailing_conjunction(self):
        assert not is_valid_chunk("We went there and")

    def test_trailing_connective_with_comma(self):
        assert not is_valid_chunk("first, second, however,")

    def test_ordinary_last_word(self):
        assert is_valid_chunk("The results were clear")

    def test_whitespace_terminated(self):
        assert is_valid_chunk("this ends with the ")
