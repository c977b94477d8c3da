"""Tests for document_chunking.exceptions."""

import pytest

from document_chunking.exceptions import ChunkingError, TokenEstimatorError


class TestChunkingError:
    def test_default_message(self):
        err = ChunkingError()
        assert str(err) == "A chunking error occurred"
        assert err.details is None

    def test_message_with_details(self):
        err = ChunkingError("Estimator failed", details="timeout")
        assert str(err) == "Estimator failed | Details: timeout"
        assert err.message == "Estimator failed"

    def test_is_exception(self):
        with pytest.raises(Exception):
            raise ChunkingError("boom")


class TestTokenEstimatorError:
    def test_default_message(self):
        err = TokenEstimatorError("cl100k_base")
        assert err.encoding_name == "cl100k_base"
        assert "cl100k_base" in str(err)

    def test_custom_message(self):
        err = TokenEstimatorError("x", message="Custom", details="more")
        assert str(err) == "Custom | Details: more"

    def test_inherits_from_base(self):
        with pytest.raises(ChunkingError):
            raise TokenEstimatorError("x")

