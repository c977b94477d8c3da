"""
Heading detection for normalized plain-text and Markdown documents.

Headings are whole lines. Each kind maps to a level (1 = chapter):

- Markdown "#".."######"         -> number of hashes
- "Chapter 3", "Part II", "Book 1" -> 1
- "Section 4", "2.3 Title"       -> 2, or the number of numbering components
- ALL-CAPS lines ("RESULTS")     -> 2

The chunker uses these patterns to find chapter and section boundaries; the
trailing-matter filter uses levels to decide where a removed section ends.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional

MARKDOWN_HEADING = re.compile(r"^[ \t]{0,3}(#{1,6})[ \t]+\S[^\n]*$", re.MULTILINE)

CHAPTER_HEADING = re.compile(
    r"^[ \t]*(?:chapter|part|book)[ \t]+(?:\d+|[ivxlcdm]+)\b[^\n]{0,100}$",
    re.MULTILINE | re.IGNORECASE,
)

NUMBERED_SECTION_HEADING = re.compile(
    r"^[ \t]*(\d+(?:\.\d+)+)\.?[ \t]+[A-Z][^\n]{0,100}$",
    re.MULTILINE,
)

NAMED_SECTION_HEADING = re.compile(
    r"^[ \t]*section[ \t]+\d+(?:\.\d+)*\b[^\n]{0,100}$",
    re.MULTILINE | re.IGNORECASE,
)

CAPS_SECTION_HEADING = re.compile(
    r"^[ \t]*[A-Z][A-Z0-9 \t,:;&'\-]{2,80}$",
    re.MULTILINE,
)


class HeadingKind(str, Enum):
    CHAPTER = "chapter"
    SECTION = "section"


@dataclass(frozen=True)
class Heading:
    start: int
    end: int
    level: int
    kind: HeadingKind


def _markdown_headings(text: str, pos: int, endpos: int) -> list[Heading]:
    headings = []
    for match in MARKDOWN_HEADING.finditer(text, pos, endpos):
        level = len(match.group(1))
        kind = HeadingKind.CHAPTER if level == 1 else HeadingKind.SECTION
        headings.append(Heading(match.start(), match.end(), level, kind))
    return headings


def find_chapter_headings(text: str, pos: int = 0, endpos: Optional[int] = None) -> list[Heading]:
    """Chapter-level headings whose line starts in text[pos:endpos]."""
    endpos = len(text) if endpos is None else endpos
    headings = [
        Heading(m.start(), m.end(), 1, HeadingKind.CHAPTER)
        for m in CHAPTER_HEADING.finditer(text, pos, endpos)
    ]
    headings.extend(h for h in _markdown_headings(text, pos, endpos) if h.level == 1)
    return sorted(headings, key=lambda h: h.start)


def find_section_headings(text: str, pos: int = 0, endpos: Optional[int] = None) -> list[Heading]:
    """Section-level headings whose line starts in text[pos:endpos]."""
    endpos = len(text) if endpos is None else endpos
    headings = []
    for match in NUMBERED_SECTION_HEADING.finditer(text, pos, endpos):
        level = match.group(1).count(".") + 1
        headings.append(Heading(match.start(), match.end(), level, HeadingKind.SECTION))
    for pattern in (NAMED_SECTION_HEADING, CAPS_SECTION_HEADING):
        headings.extend(
            Heading(m.start(), m.end(), 2, HeadingKind.SECTION)
            for m in pattern.finditer(text, pos, endpos)
        )
    headings.extend(h for h in _markdown_headings(text, pos, endpos) if h.level > 1)
    return sorted(headings, key=lambda h: h.start)


def find_headings(text: str, pos: int = 0, endpos: Optional[int] = None) -> list[Heading]:
    """All headings, ordered by position; one heading per line start."""
    seen: dict[int, Heading] = {}
    for heading in find_chapter_headings(text, pos, endpos) + find_section_headings(text, pos, endpos):
        current = seen.get(heading.start)
        if current is None or heading.level < current.level:
            seen[heading.start] = heading
    return [seen[start] for start in sorted(seen)]
