"""
Settings and logging for the HyDE-RAG system.

Includes:
- Pydantic Settings read from the environment or a .env file.
- Loguru sinks (console + rotated file).
- The @timed decorator used on store searches.
"""

import functools
import sys
import time
from collections.abc import Callable
from pathlib import Path
from typing import Any, Literal

from dotenv import load_dotenv
from loguru import logger
from pydantic import Field, SecretStr, ValidationError, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from hyde_rag.exceptions import ConfigurationError

load_dotenv()

# ═══════════════════════════════════════════════════════
# SETTINGS
# ═══════════════════════════════════════════════════════


class Settings(BaseSettings):
    """
    Runtime configuration of the retriever, its store and its models.

    Every field can be overridden by an environment variable of the same name.
    """

    BASE_DIR: Path = Path(__file__).resolve().parent.parent
    CHROMA_PATH: Path = BASE_DIR / "chroma_db"
    DOCUMENTS_MANIFEST: Path = BASE_DIR / "documents.json"

    GROQ_API_KEY: SecretStr = Field(..., min_length=1)

    # Model names are passed to the provider untouched
    LLM_MODEL: str = Field(default="llama-3.3-70b-versatile")
    COMPLETION_MODEL: str = Field(default="llama-3.3-70b-versatile")
    EMBEDDING_MODEL: str = Field(default="paraphrase-multilingual-MiniLM-L12-v2")
    LLM_TEMPERATURE: float = Field(default=0.1, ge=0, le=2)
    LLM_TIMEOUT: float = Field(default=60.0, gt=0)
    LLM_MAX_RETRIES: int = Field(default=0, ge=0)

    # Document store
    VECTOR_BACKEND: Literal["memory", "chroma"] = Field(default="memory")
    COLLECTION_NAME: str = Field(default="documents", min_length=1)
    DEFAULT_TOP_K: int = Field(default=3, ge=0)

    # Ingestion
    CHUNK_SIZE: int = Field(default=1000, gt=0)
    CHUNK_OVERLAP: int = Field(default=200, ge=0)

    # Logging
    LOG_LEVEL: str = Field(default="INFO")
    LOG_RETENTION: str = Field(default="7 days")

    # LangChain tracing, read by LangChain itself from the environment
    LANGCHAIN_TRACING_V2: bool = Field(default=False)
    LANGCHAIN_ENDPOINT: str = Field(default="https://api.smith.langchain.com")
    LANGCHAIN_API_KEY: SecretStr | None = Field(default=None)
    LANGCHAIN_PROJECT: str = Field(default="HyDE_RAG")

    model_config = SettingsConfigDict(
        env_file=BASE_DIR / ".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @model_validator(mode="after")
    def check_chunking(self) -> "Settings":
        if self.CHUNK_OVERLAP >= self.CHUNK_SIZE:
            raise ValueError(
                f"CHUNK_OVERLAP ({self.CHUNK_OVERLAP}) must be smaller than "
                f"CHUNK_SIZE ({self.CHUNK_SIZE})"
            )
        return self

    @property
    def log_dir(self) -> Path:
        return self.BASE_DIR / "logs"


def load_settings() -> Settings:
    """
    Build Settings from the environment.

    Raises:
        ConfigurationError: If a value is missing or invalid.
    """
    try:
        # GROQ_API_KEY comes from the environment, not from the call
        return Settings()  # type: ignore[call-arg]
    except ValidationError as e:
        fields = ", ".join(str(err["loc"][0]) for err in e.errors() if err["loc"])
        raise ConfigurationError(
            f"Invalid configuration ({fields or 'settings'})", original_error=e
        )


# ═══════════════════════════════════════════════════════
# LOGGING (Loguru)
# ═══════════════════════════════════════════════════════


def configure_logging(config: Settings) -> None:
    """Replace Loguru's default sink with a console sink and a daily file."""
    config.log_dir.mkdir(exist_ok=True)
    logger.remove()

    logger.add(
        sys.stdout,
        format=(
            "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>"
        ),
        level=config.LOG_LEVEL,
        colorize=True,
    )

    logger.add(
        config.log_dir / "hyde_{time:YYYY-MM-DD}.log",
        rotation="00:00",
        retention=config.LOG_RETENTION,
        level="DEBUG",
        format=(
            "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | "
            "{name}:{function}:{line} - {message}"
        ),
    )

    if config.LANGCHAIN_TRACING_V2:
        logger.info(
            f"🔭 Tracing to project '{config.LANGCHAIN_PROJECT}' "
            f"@ {config.LANGCHAIN_ENDPOINT}"
        )


settings = load_settings()
configure_logging(settings)


# ═══════════════════════════════════════════════════════
# TIMER DECORATOR
# ═══════════════════════════════════════════════════════


def timed(func: Callable[..., Any]) -> Callable[..., Any]:
    """Log how long ``func`` took, in milliseconds, at DEBUG."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed = (time.perf_counter() - start) * 1000
            logger.debug(f"⏱️  [{func.__name__}] took {elapsed:.2f}ms")

    return wrapper
