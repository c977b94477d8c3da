from dataclasses import dataclass, field
import os
from typing import Optional

from .models import ChunkingConfig
from .token_estimator import DEFAULT_CHARS_PER_TOKEN, DEFAULT_ENCODING, DEFAULT_SAFETY_FACTOR


@dataclass
class ChunkingServiceConfig:
    encoding_name: str = DEFAULT_ENCODING
    chars_per_token: float = DEFAULT_CHARS_PER_TOKEN
    safety_factor: float = DEFAULT_SAFETY_FACTOR
    subtitle_length: int = 120
    log_level: Optional[str] = None
    chunking: ChunkingConfig = field(default_factory=ChunkingConfig)

    @classmethod
    def from_env(cls) -> "ChunkingServiceConfig":
        def _int(name: str, default: int) -> int:
            value = os.environ.get(name)
            return int(value) if value else default

        def _float(name: str, default: float) -> float:
            value = os.environ.get(name)
            return float(value) if value else default

        def _bool(name: str, default: bool) -> bool:
            value = os.environ.get(name)
            if not value:
                return default
            return value.strip().lower() in {"1", "true", "yes", "on"}

        defaults = ChunkingConfig()
        chunking = ChunkingConfig(
            max_single_chunk_tokens=_int("CHUNKING_MAX_SINGLE_CHUNK_TOKENS", defaults.max_single_chunk_tokens),
            max_single_chunk_chars=_int("CHUNKING_MAX_SINGLE_CHUNK_CHARS", defaults.max_single_chunk_chars),
            overlap_tokens=_int("CHUNKING_OVERLAP_TOKENS", defaults.overlap_tokens),
            aggressive_chunking=_bool("CHUNKING_AGGRESSIVE", defaults.aggressive_chunking),
            enable_emergency_chunking=_bool("CHUNKING_ENABLE_EMERGENCY", defaults.enable_emergency_chunking),
            min_tail_tokens=_int("CHUNKING_MIN_TAIL_TOKENS", defaults.min_tail_tokens),
            max_consecutive_stalls=_int("CHUNKING_MAX_CONSECUTIVE_STALLS", defaults.max_consecutive_stalls),
            irrelevant_density_threshold=_float(
                "CHUNKING_IRRELEVANT_DENSITY_THRESHOLD", defaults.irrelevant_density_threshold
            ),
        )

        return cls(
            encoding_name=os.environ.get("CHUNKING_ENCODING", cls.encoding_name),
            chars_per_token=_float("CHUNKING_CHARS_PER_TOKEN", cls.chars_per_token),
            safety_factor=_float("CHUNKING_SAFETY_FACTOR", cls.safety_factor),
            subtitle_length=_int("CHUNKING_SUBTITLE_LENGTH", cls.subtitle_length),
            log_level=os.environ.get("CHUNKING_LOG_LEVEL") or None,
            chunking=chunking,
        )
