"""
Trailing-matter filtering.

Removes non-substantive reference sections (index, appendices,
bibliography, ...) before chunking. A section starts at a marker heading
line and runs to the next non-marker heading of equal or higher level, or
to the end of the document.

Filtering is idempotent: no marker heading survives a pass, and removed
spans always start and end at line starts, so a second pass finds nothing.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Optional, Sequence

from .headings import find_headings
from .models import DEFAULT_TRAILING_SECTION_MARKERS, TextSpan

logger = logging.getLogger(__name__)

# Markdown headings allow at most three spaces of indentation, plain lines any.
_MARKDOWN_INDENT = r"[ \t]{0,3}"
_MARKDOWN_PREFIX = re.compile(rf"^{_MARKDOWN_INDENT}(#{{1,6}})[ \t]+")


@dataclass
class FilterResult:
    text: str
    removed: list[TextSpan] = field(default_factory=list)

    @property
    def removed_chars(self) -> int:
        return sum(span.length for span in self.removed)


def compile_marker_pattern(markers: Sequence[str]) -> re.Pattern:
    """Build a whole-line, case-insensitive heading pattern from marker fragments."""
    alternatives = "|".join(f"(?:{marker})" for marker in markers)
    return re.compile(
        rf"^(?:{_MARKDOWN_INDENT}#{{1,6}}[ \t]+|[ \t]*)(?:{alternatives})[ \t]*[:.]?[ \t]*$",
        re.MULTILINE | re.IGNORECASE,
    )


def _marker_level(line: str) -> int:
    match = _MARKDOWN_PREFIX.match(line)
    return len(match.group(1)) if match else 1


def _merge(spans: list[tuple[int, int]]) -> list[tuple[int, int]]:
    merged: list[tuple[int, int]] = []
    for start, end in sorted(spans):
        if merged and start <= merged[-1][1]:
            merged[-1] = (merged[-1][0], max(merged[-1][1], end))
        else:
            merged.append((start, end))
    return merged


def find_trailing_sections(text: str, markers: Optional[Sequence[str]] = None) -> list[TextSpan]:
    """
    Locate trailing-matter sections.

    Args:
        text: Document text.
        markers: Regex fragments for marker headings (defaults to the
            standard reference-material headings).

    Returns:
        Merged, ordered spans to remove. When a span runs to the end of the
        document, the whitespace preceding it is included.
    """
    if not text:
        return []

    pattern = compile_marker_pattern(markers or DEFAULT_TRAILING_SECTION_MARKERS)
    marker_matches = list(pattern.finditer(text))
    if not marker_matches:
        return []

    marker_starts = {m.start() for m in marker_matches}
    headings = [h for h in find_headings(text) if h.start not in marker_starts]

    spans: list[tuple[int, int]] = []
    for match in marker_matches:
        level = _marker_level(match.group(0))
        end = len(text)
        for heading in headings:
            if heading.start > match.start() and heading.level <= level:
                end = heading.start
                break
        spans.append((match.start(), end))

    merged = _merge(spans)

    last_start, last_end = merged[-1]
    if last_end == len(text):
        previous_end = merged[-2][1] if len(merged) > 1 else 0
        trimmed_start = max(len(text[:last_start].rstrip()), previous_end)
        merged[-1] = (trimmed_start, last_end)
        merged = _merge(merged)

    return [TextSpan(start=start, end=end) for start, end in merged]


def filter_trailing_matter(text: str, markers: Optional[Sequence[str]] = None) -> FilterResult:
    """
    Remove trailing-matter sections from text.

    Returns:
        FilterResult with the working text and the removed spans, expressed
        as offsets into the input text. Text without marker headings is
        returned unchanged.
    """
    spans = find_trailing_sections(text, markers)
    if not spans:
        return FilterResult(text=text)

    parts = []
    position = 0
    for span in spans:
        parts.append(text[position:span.start])
        position = span.end
    parts.append(text[position:])
    filtered = "".join(parts)

    logger.info(
        f"Filtered {len(spans)} trailing section(s), removing "
        f"{sum(s.length for s in spans)} of {len(text)} characters"
    )
    return FilterResult(text=filtered, removed=spans)
