"""
Token Estimation for the Chunking Engine

The chunker never measures tokens exactly: it asks an estimator, and treats
every answer as an approximation. Two estimators are provided:

- TiktokenEstimator uses tiktoken with the cl100k_base encoding. It tends to
  count slightly more tokens than SentencePiece-based tokenizers, which gives
  a safe margin when the chunk size is a hard limit.
- CharRatioEstimator is a dependency-free heuristic (characters per token).

Any object implementing the TokenEstimator protocol can be injected.

Usage:
    from document_chunking.token_estimator import TiktokenEstimator, count_tokens

    estimator = TiktokenEstimator(max_chunk_tokens=40_000)
    estimator.exceeds_token_limit(text, 40_000)
    n = count_tokens("This is an example sentence.")
"""

import math
from typing import Protocol, runtime_checkable

import tiktoken

from .exceptions import TokenEstimatorError

DEFAULT_ENCODING = "cl100k_base"
DEFAULT_CHARS_PER_TOKEN = 4.0
DEFAULT_SAFETY_FACTOR = 0.75

# Encoders are expensive to build; one instance per encoding, reused across calls.
_encoders: dict[str, tiktoken.Encoding] = {}


def _get_encoder(encoding_name: str = DEFAULT_ENCODING) -> tiktoken.Encoding:
    """Get or initialize the tiktoken encoder for an encoding name."""
    encoder = _encoders.get(encoding_name)
    if encoder is None:
        try:
            encoder = tiktoken.get_encoding(encoding_name)
        except (KeyError, ValueError, OSError) as exc:
            raise TokenEstimatorError(encoding_name, details=str(exc)) from exc
        _encoders[encoding_name] = encoder
    return encoder


def count_tokens(text: str, encoding_name: str = DEFAULT_ENCODING) -> int:
    """
    Count the number of tokens in a text string.

    Special-token markers in the text are encoded as ordinary text.

    Args:
        text: The text to tokenize.
        encoding_name: tiktoken encoding to use.

    Returns:
        Number of tokens.
    """
    if not text:
        return 0
    return len(_get_encoder(encoding_name).encode(text, disallowed_special=()))


def count_tokens_batch(texts: list[str], encoding_name: str = DEFAULT_ENCODING) -> list[int]:
    """
    Count tokens for a list of texts.

    Args:
        texts: List of text strings.
        encoding_name: tiktoken encoding to use.

    Returns:
        List of token counts, one per input text.
    """
    encoder = _get_encoder(encoding_name)
    return [len(encoder.encode(t, disallowed_special=())) if t else 0 for t in texts]


@runtime_checkable
class TokenEstimator(Protocol):
    """Contract the chunker relies on. All answers are estimates."""

    def estimate_tokens(self, text: str) -> int:
        ...

    def exceeds_token_limit(self, text: str, limit: int) -> bool:
        ...

    def estimate_max_chars_for_tokens(self, tokens: int) -> int:
        ...

    def get_configured_safe_chunk_size(self) -> int:
        ...


class BaseTokenEstimator:
    """
    Shared arithmetic for estimators; subclasses provide estimate_tokens.

    The safe chunk size is the character span for
    ``max_chunk_tokens * safety_factor`` tokens.
    """

    def __init__(
        self,
        max_chunk_tokens: int = 40_000,
        safety_factor: float = DEFAULT_SAFETY_FACTOR,
        chars_per_token: float = DEFAULT_CHARS_PER_TOKEN,
    ):
        if max_chunk_tokens < 1:
            raise ValueError(f"max_chunk_tokens must be >= 1, got {max_chunk_tokens}")
        if not 0 < safety_factor <= 1:
            raise ValueError(f"safety_factor must be in (0, 1], got {safety_factor}")
        if chars_per_token <= 0:
            raise ValueError(f"chars_per_token must be > 0, got {chars_per_token}")
        self.max_chunk_tokens = max_chunk_tokens
        self.safety_factor = safety_factor
        self.chars_per_token = chars_per_token

    def estimate_tokens(self, text: str) -> int:
        raise NotImplementedError

    def exceeds_token_limit(self, text: str, limit: int) -> bool:
        return self.estimate_tokens(text) > limit

    def estimate_max_chars_for_tokens(self, tokens: int) -> int:
        if tokens <= 0:
            return 0
        return max(1, int(tokens * self.chars_per_token))

    def get_configured_safe_chunk_size(self) -> int:
        safe_tokens = max(1, int(self.max_chunk_tokens * self.safety_factor))
        return self.estimate_max_chars_for_tokens(safe_tokens)


class CharRatioEstimator(BaseTokenEstimator):
    """Heuristic estimator: ceil(characters / chars_per_token)."""

    def estimate_tokens(self, text: str) -> int:
        if not text:
            return 0
        return math.ceil(len(text) / self.chars_per_token)


class TiktokenEstimator(BaseTokenEstimator):
    """Estimator backed by a tiktoken encoding, loaded lazily on first use."""

    def __init__(
        self,
        max_chunk_tokens: int = 40_000,
        safety_factor: float = DEFAULT_SAFETY_FACTOR,
        chars_per_token: float = DEFAULT_CHARS_PER_TOKEN,
        encoding_name: str = DEFAULT_ENCODING,
    ):
        super().__init__(max_chunk_tokens, safety_factor, chars_per_token)
        self.encoding_name = encoding_name

    def estimate_tokens(self, text: str) -> int:
        return count_tokens(text, self.encoding_name)

    def exceeds_token_limit(self, text: str, limit: int) -> bool:
        # Byte-level BPE: every token covers at least one UTF-8 byte.
        if len(text.encode("utf-8")) <= limit:
            return False
        return super().exceeds_token_limit(text, limit)
