"""Configuration settings for linkrank."""

import os
import logging
from dataclasses import dataclass, field

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)


from typing import TypeVar

T = TypeVar('T', int, float)

def _get_numeric_env(key: str, default: T, min_val: T = 0, conv_func=None) -> T:
    """Safely get numeric value from environment variable with validation."""
    if conv_func is None:
        conv_func = type(default)

    value = os.getenv(key, str(default))
    try:
        result = conv_func(value)
        if result < min_val:
            logger.warning(f"{key}={value} below minimum {min_val}, using {min_val}")
            return min_val
        return result
    except ValueError:
        logger.error(f"Invalid {key}={value}, using default {default}")
        return default

def _get_int_env(key: str, default: int, min_val: int = 0) -> int:
    """Safely get integer from environment variable with validation."""
    return _get_numeric_env(key, default, min_val, int)

def _get_float_env(key: str, default: float, min_val: float = 0.0) -> float:
    """Safely get float from environment variable with validation."""
    return _get_numeric_env(key, default, min_val, float)


def _get_damping_env(key: str, default: float) -> float:
    """Damping factor from environment, clamped to [0, 1]."""
    value = _get_float_env(key, default, min_val=0.0)
    if value > 1.0:
        logger.warning(f"{key}={value} above maximum 1.0, using 1.0")
        return 1.0
    return value


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    # Database (score storage)
    database_url: str = field(
        default_factory=lambda: os.getenv(
            "LINKRANK_DATABASE_URL", "postgresql://localhost:5432/linkrank"
        )
    )

    # PageRank defaults
    damping_factor: float = field(
        default_factory=lambda: _get_damping_env("PAGERANK_DAMPING_FACTOR", 0.85)
    )
    tolerance: float = field(
        default_factory=lambda: _get_float_env("PAGERANK_TOLERANCE", 1e-6, min_val=0.0)
    )
    max_iterations: int = field(
        default_factory=lambda: _get_int_env("PAGERANK_MAX_ITERATIONS", 100, min_val=1)
    )
    # Seconds; 0 disables the deadline
    time_limit: float = field(
        default_factory=lambda: _get_float_env("PAGERANK_TIME_LIMIT", 0.0, min_val=0.0)
    )

    # Output
    default_top_k: int = field(
        default_factory=lambda: _get_int_env("DEFAULT_TOP_K", 20, min_val=1)
    )
    store_batch_size: int = field(
        default_factory=lambda: _get_int_env("STORE_BATCH_SIZE", 500, min_val=1)
    )

    log_level: str = field(
        default_factory=lambda: os.getenv("LOG_LEVEL", "INFO").upper()
    )


settings = Settings()
