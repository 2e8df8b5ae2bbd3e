"""Tests for settings loading and validation."""

from __future__ import annotations

from pathlib import Path
import textwrap

import pytest

from docsearch.core.settings import (
    DEFAULT_EMBEDDING_ORIGIN,
    DEFAULT_QUEUE_NAME,
    SettingsError,
    load_settings,
)


def _write_yaml(path: Path, content: str) -> None:
    path.write_text(textwrap.dedent(content).strip() + "\n", encoding="utf-8")


def test_load_settings_success(tmp_path: Path) -> None:
    config = """
    server:
      api_key: sk-test
      gpu_server_origin: http://gpu:9000
      reranker_server_origin: http://rerank:8000
      request_timeout: 5
    queue:
      redis_url: redis://cache:6379/1
      max_connections: 4
    audit:
      db_path: ./data/db/audit.db
    observability:
      log_level: DEBUG
      trace_enabled: true
      trace_file: ./logs/traces.jsonl
    """
    settings_path = tmp_path / "settings.yaml"
    _write_yaml(settings_path, config)

    settings = load_settings(settings_path, environ={})

    assert settings.server.api_key == "sk-test"
    assert settings.server.gpu_server_origin == "http://gpu:9000"
    assert settings.server.reranker_server_origin == "http://rerank:8000"
    assert settings.server.sparse_server_origin is None
    assert settings.server.default_embedding_origin == DEFAULT_EMBEDDING_ORIGIN
    assert settings.server.request_timeout == 5.0
    assert settings.queue.redis_url == "redis://cache:6379/1"
    assert settings.queue.queue_name == DEFAULT_QUEUE_NAME
    assert settings.queue.max_connections == 4
    assert settings.audit.db_path == "./data/db/audit.db"
    assert settings.observability.trace_enabled is True


def test_optional_sections_use_defaults(tmp_path: Path) -> None:
    settings_path = tmp_path / "settings.yaml"
    _write_yaml(
        settings_path,
        """
        server:
          api_key: sk-test
          gpu_server_origin: http://gpu:9000
        """,
    )

    settings = load_settings(settings_path, environ={})

    assert settings.queue.queue_name == "files_to_process"
    assert settings.observability.log_level == "INFO"
    assert settings.observability.trace_enabled is False


def test_empty_override_is_treated_as_unset(tmp_path: Path) -> None:
    settings_path = tmp_path / "settings.yaml"
    _write_yaml(
        settings_path,
        """
        server:
          api_key: sk-test
          gpu_server_origin: http://gpu:9000
          sparse_server_origin: ""
        """,
    )

    settings = load_settings(settings_path, environ={})

    assert settings.server.sparse_server_origin is None


def test_environment_overrides_yaml(tmp_path: Path) -> None:
    settings_path = tmp_path / "settings.yaml"
    _write_yaml(
        settings_path,
        """
        server:
          api_key: sk-yaml
          gpu_server_origin: http://gpu:9000
        """,
    )

    settings = load_settings(
        settings_path,
        environ={
            "OPENAI_API_KEY": "sk-env",
            "SPARSE_SERVER_ORIGIN": "http://splade:7000",
            "RERANKER_SERVER_ORIGIN": "",
            "REDIS_URL": "redis://env:6379",
        },
    )

    assert settings.server.api_key == "sk-env"
    assert settings.server.sparse_server_origin == "http://splade:7000"
    assert settings.server.reranker_server_origin is None
    assert settings.queue.redis_url == "redis://env:6379"


def test_api_key_from_environment_only(tmp_path: Path) -> None:
    settings_path = tmp_path / "settings.yaml"
    _write_yaml(
        settings_path,
        """
        server:
          gpu_server_origin: http://gpu:9000
        """,
    )

    settings = load_settings(settings_path, environ={"OPENAI_API_KEY": "sk-env"})

    assert settings.server.api_key == "sk-env"


def test_missing_api_key_raises_error(tmp_path: Path) -> None:
    settings_path = tmp_path / "settings.yaml"
    _write_yaml(
        settings_path,
        """
        server:
          gpu_server_origin: http://gpu:9000
        """,
    )

    with pytest.raises(SettingsError, match="server.api_key"):
        load_settings(settings_path, environ={})


def test_missing_gpu_origin_raises_error(tmp_path: Path) -> None:
    settings_path = tmp_path / "settings.yaml"
    _write_yaml(
        settings_path,
        """
        server:
          api_key: sk-test
          sparse_server_origin: http://splade:7000
        """,
    )

    with pytest.raises(SettingsError, match="server.gpu_server_origin"):
        load_settings(settings_path, environ={})


def test_gpu_origin_optional_when_all_overrides_set(tmp_path: Path) -> None:
    settings_path = tmp_path / "settings.yaml"
    _write_yaml(
        settings_path,
        """
        server:
          api_key: sk-test
          embedding_server_origin: http://embed:8080
          sparse_server_origin: http://splade:7000
          reranker_server_origin: http://rerank:8000
        """,
    )

    settings = load_settings(settings_path, environ={})

    assert settings.server.gpu_server_origin is None


def test_missing_server_section_raises_error(tmp_path: Path) -> None:
    settings_path = tmp_path / "settings.yaml"
    _write_yaml(
        settings_path,
        """
        queue:
          redis_url: redis://localhost:6379
        """,
    )

    with pytest.raises(SettingsError, match="Missing required section: server"):
        load_settings(settings_path, environ={})


def test_invalid_type_raises_error(tmp_path: Path) -> None:
    settings_path = tmp_path / "settings.yaml"
    _write_yaml(
        settings_path,
        """
        server:
          api_key: sk-test
          gpu_server_origin: http://gpu:9000
        queue:
          max_connections: "ten"
        """,
    )

    with pytest.raises(SettingsError, match="queue.max_connections"):
        load_settings(settings_path, environ={})


def test_missing_file_raises_error(tmp_path: Path) -> None:
    with pytest.raises(SettingsError, match="Settings file not found"):
        load_settings(tmp_path / "missing.yaml", environ={})


def test_invalid_yaml_raises_error(tmp_path: Path) -> None:
    settings_path = tmp_path / "settings.yaml"
    settings_path.write_text("server: [unclosed\n", encoding="utf-8")

    with pytest.raises(SettingsError, match="Invalid YAML"):
        load_settings(settings_path, environ={})
