from typing import Optional

from .chunker import DocumentChunker
from .config import ChunkingServiceConfig
from .logging_config import get_logger, setup_logging
from .models import Chunk, ChunkingResult, TitledChunk
from .titles import ChunkTitleGenerator
from .token_estimator import TiktokenEstimator, TokenEstimator

logger = get_logger("service")


class ChunkingService:
    def __init__(
        self,
        config: ChunkingServiceConfig | None = None,
        estimator: TokenEstimator | None = None,
    ):
        self.config = config or ChunkingServiceConfig()
        if self.config.log_level:
            setup_logging(self.config.log_level)

        self.estimator = estimator or TiktokenEstimator(
            max_chunk_tokens=self.config.chunking.max_single_chunk_tokens,
            safety_factor=self.config.safety_factor,
            chars_per_token=self.config.chars_per_token,
            encoding_name=self.config.encoding_name,
        )
        self.chunker = DocumentChunker(self.estimator, self.config.chunking)
        self.titles = ChunkTitleGenerator()
        logger.debug(
            f"Chunking service ready: estimator={type(self.estimator).__name__}, "
            f"max tokens={self.config.chunking.max_single_chunk_tokens}"
        )

    def chunk(self, text: Optional[str], document_id: str) -> ChunkingResult:
        result = self.chunker.chunk(text, document_id)
        if result.is_degraded:
            logger.warning(
                f"Document {document_id} chunked with degraded outcome "
                f"{result.outcome.value} ({result.total_chunks} chunks)"
            )
        return result

    def chunk_document(self, text: Optional[str], document_id: str) -> list[Chunk]:
        return self.chunk(text, document_id).chunks

    def titled_chunks(
        self,
        text: Optional[str],
        document_id: str,
        document_title: Optional[str] = None,
    ) -> list[TitledChunk]:
        chunks = self.chunk_document(text, document_id)
        total = len(chunks)
        titled = [
            TitledChunk(
                chunk=chunk,
                title=self.titles.generate_document_chunk_title(document_title, chunk.chunk_index, total),
                subtitle=self.titles.extract_subtitle(chunk.text, self.config.subtitle_length),
            )
            for chunk in chunks
        ]
        logger.info(f"Titled {total} chunks for document {document_id}")
        return titled
