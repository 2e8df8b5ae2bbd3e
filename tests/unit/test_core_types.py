"""Tests for core data types."""

from __future__ import annotations

import json
import uuid
from datetime import datetime, timezone

import pytest

from docsearch.core.errors import ParseFailure, RequestFailure, ValidationError
from docsearch.core.types import (
    ChunkMetadata,
    DatasetConfiguration,
    FileTask,
    ScoreChunk,
    TaskAuditRecord,
    TaskStatus,
    UploadFileRequest,
)


def test_file_task_json_contract():
    task = FileTask(
        id=uuid.UUID("8c9f1a5e-6f6e-4d2b-9a57-3f3c2c1d0b7a"),
        file_name="a.pdf",
        upload_file_data=UploadFileRequest(file_name="a.pdf", base64_file="AAA="),
    )

    payload = json.loads(json.dumps(task.to_dict()))

    assert payload["id"] == "8c9f1a5e-6f6e-4d2b-9a57-3f3c2c1d0b7a"
    assert payload["attempt_number"] == 0
    assert payload["upload_file_data"]["base64_file"] == "AAA="
    assert FileTask.from_dict(payload) == task


def test_score_chunk_content_is_first_metadata_entry():
    chunk = ScoreChunk(
        metadata=[ChunkMetadata(id="1", content="first"), ChunkMetadata(id="2", content="second")],
        score=0.3,
    )
    assert chunk.content == "first"


def test_score_chunk_without_metadata_has_no_content():
    with pytest.raises(ValueError):
        ScoreChunk(metadata=[], score=0.0).content


def test_dataset_configuration_from_server_keys():
    dataset = DatasetConfiguration.from_dict(
        {"EMBEDDING_BASE_URL": "https://embedding.trieve.ai", "EMBEDDING_QUERY_PREFIX": "q: "}
    )
    assert dataset.embedding_base_url == "https://embedding.trieve.ai"
    assert dataset.embedding_query_prefix == "q: "


def test_dataset_configuration_defaults():
    dataset = DatasetConfiguration.from_dict({"EMBEDDING_QUERY_PREFIX": None})
    assert dataset == DatasetConfiguration()


def test_audit_record_rejects_negative_pages():
    with pytest.raises(ValueError, match="pages"):
        TaskAuditRecord(
            id="x",
            file_name="a.pdf",
            pages=-1,
            pages_processed=0,
            status=TaskStatus.CREATED,
            created_at=datetime.now(timezone.utc),
        )


def test_error_taxonomy():
    assert issubclass(ParseFailure, RequestFailure)
    assert ValidationError("empty").to_dict() == {"code": 400, "message": "empty", "data": {}}
