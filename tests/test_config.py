import os
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from hyde_rag.config import Settings, configure_logging, load_settings, timed
from hyde_rag.exceptions import ConfigurationError


def test_settings_load_from_env():
    mock_env = {
        "GROQ_API_KEY": "test_key",
        "LANGCHAIN_TRACING_V2": "true",
        "LANGCHAIN_PROJECT": "test_project",
        "VECTOR_BACKEND": "chroma",
        "DEFAULT_TOP_K": "5",
    }

    with patch.dict(os.environ, mock_env):
        settings = Settings()
        assert settings.GROQ_API_KEY.get_secret_value() == "test_key"
        assert settings.LANGCHAIN_TRACING_V2 is True
        assert settings.LANGCHAIN_PROJECT == "test_project"
        assert settings.VECTOR_BACKEND == "chroma"
        assert settings.DEFAULT_TOP_K == 5


def test_settings_defaults():
    settings = Settings()

    assert settings.DEFAULT_TOP_K == 3
    assert settings.LLM_TEMPERATURE == 0.1
    assert settings.LLM_MAX_RETRIES == 0
    assert settings.COLLECTION_NAME == "documents"
    assert settings.DOCUMENTS_MANIFEST.name == "documents.json"


def test_settings_reject_invalid_values():
    with patch.dict(os.environ, {"DEFAULT_TOP_K": "-1"}):
        with pytest.raises(ValidationError):
            Settings()

    with patch.dict(os.environ, {"VECTOR_BACKEND": "redis"}):
        with pytest.raises(ValidationError):
            Settings()


def test_timed_decorator():
    with patch("hyde_rag.config.logger") as mock_logger:

        @timed
        def slow_func():
            return "done"

        result = slow_func()

        assert result == "done"
        mock_logger.debug.assert_called()
        args, _ = mock_logger.debug.call_args
        assert "slow_func" in args[0]


def test_settings_reject_overlap_not_below_chunk_size():
    with patch.dict(os.environ, {"CHUNK_SIZE": "100", "CHUNK_OVERLAP": "100"}):
        with pytest.raises(ValidationError):
            Settings()


def test_load_settings_wraps_validation_error():
    with patch.dict(os.environ, {"GROQ_API_KEY": ""}):
        with pytest.raises(ConfigurationError) as exc_info:
            load_settings()

    assert "GROQ_API_KEY" in exc_info.value.message
    assert isinstance(exc_info.value.original_error, ValidationError)


def test_configure_logging_adds_console_and_file_sinks(tmp_path):
    with patch.dict(os.environ, {"LOG_LEVEL": "DEBUG"}):
        config = Settings(BASE_DIR=tmp_path)

    with patch("hyde_rag.config.logger") as mock_logger:
        configure_logging(config)

    mock_logger.remove.assert_called_once()
    assert mock_logger.add.call_count == 2
    _, console_kwargs = mock_logger.add.call_args_list[0]
    assert console_kwargs["level"] == "DEBUG"
    assert (tmp_path / "logs").is_dir()


def test_settings_expose_only_used_paths():
    assert "DATA_DIR" not in Settings.model_fields
    assert {"BASE_DIR", "CHROMA_PATH", "DOCUMENTS_MANIFEST"} <= set(Settings.model_fields)
