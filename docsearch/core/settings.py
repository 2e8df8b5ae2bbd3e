"""Settings loading and validation.

This module provides a minimal, type-safe configuration loader for the project.

Design principles:
- Fail-fast: missing required fields raise a readable error that includes field path
- No side effects: this module only parses/validates configuration; no network/IO init
- Environment variables fill or override server origins, the API key and the Redis URL
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Mapping

import yaml


class SettingsError(ValueError):
    """Raised when settings are missing or invalid."""


DEFAULT_EMBEDDING_ORIGIN = "https://api.openai.com/v1"
MANAGED_EMBEDDING_MARKER = "https://embedding.trieve.ai"
DEFAULT_EMBEDDING_MODEL = "text-embedding-3-small"
DEFAULT_QUEUE_NAME = "files_to_process"

# settings field -> environment variable
SERVER_ENV_OVERRIDES: dict[str, str] = {
    "api_key": "OPENAI_API_KEY",
    "gpu_server_origin": "GPU_SERVER_ORIGIN",
    "embedding_server_origin": "EMBEDDING_SERVER_ORIGIN",
    "sparse_server_origin": "SPARSE_SERVER_ORIGIN",
    "reranker_server_origin": "RERANKER_SERVER_ORIGIN",
}


@dataclass(frozen=True)
class ServerSettings:
    api_key: str
    gpu_server_origin: str | None = None
    embedding_server_origin: str | None = None
    sparse_server_origin: str | None = None
    reranker_server_origin: str | None = None
    default_embedding_origin: str = DEFAULT_EMBEDDING_ORIGIN
    managed_embedding_marker: str = MANAGED_EMBEDDING_MARKER
    embedding_model: str = DEFAULT_EMBEDDING_MODEL
    request_timeout: float = 30.0


@dataclass(frozen=True)
class QueueSettings:
    redis_url: str = "redis://localhost:6379"
    queue_name: str = DEFAULT_QUEUE_NAME
    max_connections: int = 10


@dataclass(frozen=True)
class AuditSettings:
    db_path: str = "data/db/task_audit.db"


@dataclass(frozen=True)
class ObservabilitySettings:
    log_level: str = "INFO"
    trace_enabled: bool = False
    trace_file: str = "./logs/traces.jsonl"


@dataclass(frozen=True)
class Settings:
    server: ServerSettings
    queue: QueueSettings
    audit: AuditSettings
    observability: ObservabilitySettings


def _require_section(raw: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    value = raw.get(key)
    if value is None or not isinstance(value, Mapping):
        raise SettingsError(f"Missing required section: {key}")
    return value


def _optional_section(raw: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    value = raw.get(key)
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise SettingsError(f"Invalid section type: {key}")
    return value


def _as_str(value: Any, path: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise SettingsError(f"Invalid value for {path}: expected non-empty string")
    return value


def _as_optional_str(value: Any, path: str) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise SettingsError(f"Invalid value for {path}: expected string")
    # empty string means "not set", same as an unset environment variable
    return value.strip() or None


def _as_int(value: Any, path: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise SettingsError(f"Invalid value for {path}: expected int")
    return value


def _as_bool(value: Any, path: str) -> bool:
    if not isinstance(value, bool):
        raise SettingsError(f"Invalid value for {path}: expected bool")
    return value


def _as_float(value: Any, path: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise SettingsError(f"Invalid value for {path}: expected float")
    return float(value)


def apply_env_overrides(settings: Settings, environ: Mapping[str, str] | None = None) -> Settings:
    """Return a copy of settings with non-empty environment values applied."""

    env = os.environ if environ is None else environ

    server_updates: dict[str, str] = {}
    for field_name, env_name in SERVER_ENV_OVERRIDES.items():
        value = env.get(env_name, "").strip()
        if value:
            server_updates[field_name] = value

    queue_updates: dict[str, str] = {}
    redis_url = env.get("REDIS_URL", "").strip()
    if redis_url:
        queue_updates["redis_url"] = redis_url

    return replace(
        settings,
        server=replace(settings.server, **server_updates),
        queue=replace(settings.queue, **queue_updates),
    )


def validate_settings(settings: Settings) -> None:
    """Validate required fields and basic invariants."""

    server = settings.server
    if not server.api_key:
        raise SettingsError("Missing required field: server.api_key")

    # GPU origin is the fallback for every override that is not set.
    needs_gpu = not (
        server.embedding_server_origin
        and server.sparse_server_origin
        and server.reranker_server_origin
    )
    if needs_gpu and not server.gpu_server_origin:
        raise SettingsError(
            "Missing required field: server.gpu_server_origin "
            "(required unless embedding, sparse and reranker origins are all set)"
        )

    if server.request_timeout <= 0:
        raise SettingsError("Invalid value for server.request_timeout: expected > 0")
    if settings.queue.max_connections <= 0:
        raise SettingsError("Invalid value for queue.max_connections: expected > 0")


def _parse_server(raw: Mapping[str, Any]) -> ServerSettings:
    api_key = _as_optional_str(raw.get("api_key"), "server.api_key") or ""
    return ServerSettings(
        api_key=api_key,
        gpu_server_origin=_as_optional_str(raw.get("gpu_server_origin"), "server.gpu_server_origin"),
        embedding_server_origin=_as_optional_str(
            raw.get("embedding_server_origin"), "server.embedding_server_origin"
        ),
        sparse_server_origin=_as_optional_str(
            raw.get("sparse_server_origin"), "server.sparse_server_origin"
        ),
        reranker_server_origin=_as_optional_str(
            raw.get("reranker_server_origin"), "server.reranker_server_origin"
        ),
        default_embedding_origin=_as_str(
            raw.get("default_embedding_origin", DEFAULT_EMBEDDING_ORIGIN),
            "server.default_embedding_origin",
        ),
        managed_embedding_marker=_as_str(
            raw.get("managed_embedding_marker", MANAGED_EMBEDDING_MARKER),
            "server.managed_embedding_marker",
        ),
        embedding_model=_as_str(
            raw.get("embedding_model", DEFAULT_EMBEDDING_MODEL), "server.embedding_model"
        ),
        request_timeout=_as_float(raw.get("request_timeout", 30.0), "server.request_timeout"),
    )


def load_settings(
    path: str | Path,
    *,
    environ: Mapping[str, str] | None = None,
) -> Settings:
    """Load settings from a YAML file, apply environment overrides, validate."""

    settings_path = Path(path)
    if not settings_path.exists():
        raise SettingsError(f"Settings file not found: {settings_path}")

    try:
        raw_obj = yaml.safe_load(settings_path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise SettingsError(f"Invalid YAML in settings file: {settings_path}") from e

    if raw_obj is None or not isinstance(raw_obj, Mapping):
        raise SettingsError(f"Invalid settings root: expected mapping in {settings_path}")

    server_raw = _require_section(raw_obj, "server")
    queue_raw = _optional_section(raw_obj, "queue")
    audit_raw = _optional_section(raw_obj, "audit")
    observability_raw = _optional_section(raw_obj, "observability")

    queue = QueueSettings(
        redis_url=_as_str(queue_raw.get("redis_url", "redis://localhost:6379"), "queue.redis_url"),
        queue_name=_as_str(queue_raw.get("queue_name", DEFAULT_QUEUE_NAME), "queue.queue_name"),
        max_connections=_as_int(queue_raw.get("max_connections", 10), "queue.max_connections"),
    )

    audit = AuditSettings(
        db_path=_as_str(audit_raw.get("db_path", "data/db/task_audit.db"), "audit.db_path"),
    )

    observability = ObservabilitySettings(
        log_level=_as_str(observability_raw.get("log_level", "INFO"), "observability.log_level"),
        trace_enabled=_as_bool(
            observability_raw.get("trace_enabled", False), "observability.trace_enabled"
        ),
        trace_file=_as_str(
            observability_raw.get("trace_file", "./logs/traces.jsonl"), "observability.trace_file"
        ),
    )

    settings = Settings(
        server=_parse_server(server_raw),
        queue=queue,
        audit=audit,
        observability=observability,
    )

    settings = apply_env_overrides(settings, environ)
    validate_settings(settings)
    return settings
