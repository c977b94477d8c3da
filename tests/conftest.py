"""
Pytest fixtures for the document chunking tests.
"""

import logging

import pytest

from document_chunking import ChunkingConfig, DocumentChunker
from document_chunking.logging_config import ROOT_LOGGER_NAME
from helpers import ThirdsEstimator


@pytest.fixture
def estimator():
    return ThirdsEstimator()


@pytest.fixture
def chunking_config():
    return ChunkingConfig(
        max_single_chunk_tokens=40_000,
        max_single_chunk_chars=150_000,
        overlap_tokens=5_000,
        aggressive_chunking=True,
        enable_emergency_chunking=True,
    )


@pytest.fixture
def chunker(estimator, chunking_config):
    return DocumentChunker(estimator, chunking_config)


@pytest.fixture
def package_logger():
    """The package logger, with handlers and level restored afterwards."""
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    handlers, level = list(logger.handlers), logger.level
    yield logger
    for handler in logger.handlers:
        if handler not in handlers:
            handler.close()
    logger.handlers[:] = handlers
    logger.setLevel(level)
