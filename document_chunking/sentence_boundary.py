"""
Sentence Boundary Detection for the Chunking Engine

Regex- and scan-based sentence boundary detection for English prose,
without external NLP libraries.

Design:
- A terminator is ".", "!" or "?" followed by whitespace or end of text;
  closing quotes and brackets directly after it belong to the sentence
- A period is not a terminator when it closes a known abbreviation
  (Mr., Dr., e.g., p.m., Ph.D., single initials), sits between digits
  (3.50) or is part of an ellipsis (...)
- All functions are pure; no state is shared between calls

Usage:
    from document_chunking.sentence_boundary import find_last_sentence_end

    find_last_sentence_end("Mr. Smith went to the store. He bought milk.")
    # 44
"""

import re
from typing import Optional

NOT_FOUND = -1

_TERMINATORS = ".!?"
_CLOSERS = "\"')]}”’»"
_OPENERS = "\"'([{“‘«"

# Abbreviations that should NOT end a sentence (compared lower-cased, without the dot).
_ABBREVIATIONS = {
    # Titles
    "mr", "mrs", "ms", "dr", "prof", "sr", "jr", "st", "rev", "gen", "capt",
    # Companies
    "inc", "ltd", "corp", "co", "bros",
    # Common
    "vs", "etc", "approx", "fig", "figs", "vol", "eq", "dept", "est",
    # Months
    "jan", "feb", "mar", "apr", "jun", "jul", "aug", "sep", "sept",
    "oct", "nov", "dec",
}

# Dotted abbreviations: e.g, i.e, a.m, p.m, U.S, U.K, Ph.D, M.A, B.A
_DOTTED_ABBREV_PATTERN = re.compile(r"^(?:[A-Za-z]{1,2}\.)+[A-Za-z]{1,2}$")

# Single capital initial: "J. R. R. Tolkien". The pronoun "I" ends sentences.
_INITIAL_PATTERN = re.compile(r"^[A-HJ-Z]$")

# Natural breaks preferred by find_best_split_point, most specific first.
_NUMBERED_ITEM_PATTERN = re.compile(r"\n[ \t]*\d+[.)][ \t]+[A-Z]")
_BULLET_PATTERN = re.compile(r"\n[ \t]*[•\-*][ \t]+")
_PARAGRAPH_PATTERN = re.compile(r"\n[ \t]*\n")

_TERMINATOR_PATTERN = re.compile(r"[.!?]")

# Words that strongly suggest the text was cut mid-thought.
_INCOMPLETE_INDICATORS = {
    "the", "a", "an", "and", "or", "but", "if", "when", "while", "because",
    "although", "however", "therefore", "thus", "hence", "consequently",
    "of", "to", "with", "for",
}


def _token_before(text: str, position: int) -> str:
    """Return the non-whitespace run ending just before position, minus leading openers."""
    start = position
    while start > 0 and not text[start - 1].isspace():
        start -= 1
    return text[start:position].lstrip(_OPENERS)


def _is_abbreviation(text: str, position: int) -> bool:
    token = _token_before(text, position)
    if not token:
        return False
    return (
        token.lower() in _ABBREVIATIONS
        or bool(_DOTTED_ABBREV_PATTERN.match(token))
        or bool(_INITIAL_PATTERN.match(token))
    )


def _is_decimal(text: str, position: int) -> bool:
    return (
        0 < position < len(text) - 1
        and text[position - 1].isdigit()
        and text[position + 1].isdigit()
    )


def _is_ellipsis(text: str, position: int) -> bool:
    return (position > 0 and text[position - 1] == ".") or (
        position < len(text) - 1 and text[position + 1] == "."
    )


def _sentence_end_after(text: str, position: int) -> int:
    """
    Check whether the character at position terminates a sentence.

    Returns:
        Offset just past the terminator (and any closing quotes/brackets),
        or NOT_FOUND.
    """
    char = text[position]
    if char not in _TERMINATORS:
        return NOT_FOUND

    end = position + 1
    while end < len(text) and text[end] in _CLOSERS:
        end += 1
    if end < len(text) and not text[end].isspace():
        return NOT_FOUND

    if char == "." and (
        _is_ellipsis(text, position)
        or _is_decimal(text, position)
        or _is_abbreviation(text, position)
    ):
        return NOT_FOUND
    return end


def find_last_sentence_end(text: Optional[str], limit: Optional[int] = None) -> int:
    """
    Find the end of the last well-formed sentence.

    Args:
        text: Text to analyze.
        limit: Only consider sentence ends at or before this offset. Characters
            after the limit are still used to decide whether a period is
            really a terminator.

    Returns:
        Offset immediately after the last sentence terminator, or -1.
    """
    if not text:
        return NOT_FOUND

    limit = len(text) if limit is None else min(limit, len(text))
    for position in range(limit - 1, -1, -1):
        if text[position] not in _TERMINATORS:
            continue
        end = _sentence_end_after(text, position)
        if end != NOT_FOUND and end <= limit:
            return end
    return NOT_FOUND


def find_first_sentence_end(text: Optional[str]) -> int:
    """
    Find the end of the first well-formed sentence.

    Returns:
        Offset immediately after the first sentence terminator, or -1.
    """
    if not text:
        return NOT_FOUND
    for match in _TERMINATOR_PATTERN.finditer(text):
        end = _sentence_end_after(text, match.start())
        if end != NOT_FOUND:
            return end
    return NOT_FOUND


def split_sentences(text: Optional[str]) -> list[str]:
    """
    Split text into sentences at proper sentence boundaries.

    Args:
        text: Input text to split into sentences.

    Returns:
        List of stripped sentence strings. Empty/whitespace input returns an
        empty list. A trailing fragment without terminator is kept.
    """
    if not text or not text.strip():
        return []

    sentences = []
    start = 0
    for match in _TERMINATOR_PATTERN.finditer(text):
        if match.start() < start:
            continue
        end = _sentence_end_after(text, match.start())
        if end == NOT_FOUND:
            continue
        sentence = text[start:end].strip()
        if sentence:
            sentences.append(sentence)
        start = end

    tail = text[start:].strip()
    if tail:
        sentences.append(tail)
    return sentences


def _find_natural_break(text: str, search_start: int, limit: int) -> int:
    """Find a list item or paragraph break in text[search_start:limit]."""
    if search_start >= limit:
        return NOT_FOUND

    for pattern, use_end in (
        (_NUMBERED_ITEM_PATTERN, False),
        (_BULLET_PATTERN, False),
        (_PARAGRAPH_PATTERN, True),
    ):
        match = pattern.search(text, search_start, limit)
        if match:
            return match.end() if use_end else match.start()
    return NOT_FOUND


def _find_word_boundary(text: str, target: int) -> int:
    """Last offset <= target that directly follows whitespace, or target itself."""
    if target >= len(text):
        return len(text)
    for position in range(target, 0, -1):
        if text[position - 1].isspace():
            return position
    return target


def find_best_split_point(text: Optional[str], max_length: int) -> int:
    """
    Find the best split point in text that respects sentence boundaries.

    Preference: whole text if it fits, then a list item or paragraph break in
    the last 20% of the window, then the last sentence end, then the last word
    boundary, and finally max_length itself.

    Args:
        text: The text to split.
        max_length: Maximum length of the first piece.

    Returns:
        The split offset.
    """
    if text is None:
        return 0
    if len(text) <= max_length:
        return len(text)
    if max_length <= 0:
        return 0

    search_start = max(0, max_length - max_length // 5)

    natural_break = _find_natural_break(text, search_start, max_length)
    if natural_break > search_start:
        return natural_break

    sentence_end = find_last_sentence_end(text, limit=max_length)
    if sentence_end > 0:
        return sentence_end

    return _find_word_boundary(text, max_length)


def _last_word(text: str) -> Optional[str]:
    words = text.split()
    return words[-1] if words else None


def is_valid_chunk(text: Optional[str]) -> bool:
    """
    Check that a chunk does not end in the middle of a thought.

    Returns:
        True for None, empty or whitespace-terminated text and for text ending
        with a sentence terminator; False when the last word is a trailing
        article, conjunction or connective; True otherwise.
    """
    if not text:
        return True
    if text[-1].isspace():
        return True

    trimmed = text.strip()
    if not trimmed:
        return True
    if trimmed.rstrip(_CLOSERS).endswith(tuple(_TERMINATORS)):
        return True

    last_word = _last_word(trimmed)
    if last_word is None:
        return True
    return last_word.lower().rstrip(",;:") not in _INCOMPLETE_INDICATORS
