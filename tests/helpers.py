"""Shared test doubles and text generators."""


class ThirdsEstimator:
    """Deterministic estimator: one token per three characters."""

    def __init__(self, safe_chunk_size: int = 120_000):
        self.safe_chunk_size = safe_chunk_size

    def estimate_tokens(self, text: str) -> int:
        return len(text) // 3

    def exceeds_token_limit(self, text: str, limit: int) -> bool:
        return len(text) // 3 > limit

    def estimate_max_chars_for_tokens(self, tokens: int) -> int:
        return tokens * 3

    def get_configured_safe_chunk_size(self) -> int:
        return self.safe_chunk_size


def generate_text(length: int) -> str:
    """Sentences separated by spaces, with a paragraph break every ten sentences."""
    parts = []
    total = 0
    i = 0
    while total < length:
        sentence = f"This is sentence number {i} of the generated test document."
        separator = "\n\n" if i % 10 == 9 else " "
        parts.append(sentence + separator)
        total += len(sentence) + len(separator)
        i += 1
    return "".join(parts)[:length]


def generate_text_with_chapters(length: int, chapter_every: int = 30_000) -> str:
    body = generate_text(length)
    parts = []
    for offset in range(0, len(body), chapter_every):
        parts.append(f"Chapter {offset // chapter_every + 1}\n")
        parts.append(body[offset:offset + chapter_every])
        parts.append("\n")
    return "".join(parts)


def assert_covers(chunks, length: int) -> None:
    """Chunks start at 0, end at length, and leave no gaps."""
    assert chunks[0].start_offset == 0
    assert chunks[-1].end_offset == length
    for prev, curr in zip(chunks, chunks[1:]):
        assert curr.start_offset <= prev.end_offset
        assert curr.start_offset > prev.start_offset
