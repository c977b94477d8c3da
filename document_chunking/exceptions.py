"""
Custom Exceptions for the Document Chunking Engine.

The chunker itself never raises for malformed or adversarial text; it
degrades instead and reports the degradation on the result. These
exceptions cover collaborator and setup failures only.

Exception Hierarchy:
    ChunkingError (base)
    └── TokenEstimatorError

Usage:
    from document_chunking.exceptions import ChunkingError, TokenEstimatorError

    try:
        estimator = TiktokenEstimator(encoding_name="cl100k_base")
        estimator.estimate_tokens(text)
    except TokenEstimatorError as e:
        print(f"Encoding {e.encoding_name} unavailable: {e}")
"""

from __future__ import annotations

from typing import Optional


class ChunkingError(Exception):
    """
    Base exception for all chunking-related errors.

    Attributes:
        message: Human-readable error description
        details: Additional technical details (optional)
    """

    def __init__(
        self,
        message: str = "A chunking error occurred",
        details: Optional[str] = None,
    ):
        self.message = message
        self.details = details

        full_message = message
        if details:
            full_message = f"{message} | Details: {details}"

        super().__init__(full_message)


class TokenEstimatorError(ChunkingError):
    """
    Raised when a token estimator cannot be initialized or used.

    Attributes:
        encoding_name: Name of the tokenizer encoding involved
    """

    def __init__(
        self,
        encoding_name: str,
        message: Optional[str] = None,
        details: Optional[str] = None,
    ):
        self.encoding_name = encoding_name
        super().__init__(
            message or f"Failed to load tokenizer encoding '{encoding_name}'",
            details,
        )
