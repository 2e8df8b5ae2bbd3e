"""Core data types shared by the embedding, rerank and task admission layers.

Rules:
- task-facing types are JSON-serializable via to_dict()/from_dict()
- ScoreChunk.metadata[0] carries the text sent to the cross-encoder
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Mapping


class EmbedPurpose(str, Enum):
    """Why a backend origin is being resolved."""

    DOC = "doc"
    QUERY = "query"
    SPARSE = "sparse"
    RERANK = "rerank"


class TaskStatus(str, Enum):
    CREATED = "CREATED"
    PROCESSING_FILE = "PROCESSING_FILE"
    CHUNKING_FILE = "CHUNKING_FILE"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


@dataclass(frozen=True)
class DatasetConfiguration:
    """Per-dataset embedding options."""

    embedding_base_url: str = ""
    embedding_query_prefix: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "DatasetConfiguration":
        return cls(
            embedding_base_url=str(
                data.get("EMBEDDING_BASE_URL", data.get("embedding_base_url", "")) or ""
            ),
            embedding_query_prefix=str(
                data.get("EMBEDDING_QUERY_PREFIX", data.get("embedding_query_prefix", "")) or ""
            ),
        )


@dataclass
class ChunkMetadata:
    id: str
    content: str
    tracking_id: str | None = None
    link: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass
class ScoreChunk:
    """A retrieved chunk (or chunk group) with its current relevance score."""

    metadata: list[ChunkMetadata]
    score: float

    @property
    def content(self) -> str:
        if not self.metadata:
            raise ValueError("ScoreChunk has no metadata entries")
        return self.metadata[0].content


@dataclass
class UploadFileRequest:
    """Upload payload as received from the client; opaque to task admission."""

    file_name: str
    base64_file: str
    provider: str | None = None
    llm_model: str | None = None
    system_prompt: str | None = None
    webhook_url: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "file_name": self.file_name,
            "base64_file": self.base64_file,
            "provider": self.provider,
            "llm_model": self.llm_model,
            "system_prompt": self.system_prompt,
            "webhook_url": self.webhook_url,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "UploadFileRequest":
        return cls(
            file_name=str(data.get("file_name", "")),
            base64_file=str(data.get("base64_file", "")),
            provider=data.get("provider"),
            llm_model=data.get("llm_model"),
            system_prompt=data.get("system_prompt"),
            webhook_url=data.get("webhook_url"),
        )


@dataclass
class FileTask:
    """Unit of work pushed onto the processing queue."""

    id: uuid.UUID
    file_name: str
    upload_file_data: UploadFileRequest
    attempt_number: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": str(self.id),
            "file_name": self.file_name,
            "upload_file_data": self.upload_file_data.to_dict(),
            "attempt_number": self.attempt_number,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "FileTask":
        return cls(
            id=uuid.UUID(str(data["id"])),
            file_name=str(data.get("file_name", "")),
            upload_file_data=UploadFileRequest.from_dict(data.get("upload_file_data", {})),
            attempt_number=int(data.get("attempt_number", 0)),
        )


@dataclass
class TaskAuditRecord:
    id: str
    file_name: str
    pages: int
    pages_processed: int
    status: TaskStatus
    created_at: datetime

    def __post_init__(self) -> None:
        if self.pages < 0:
            raise ValueError("pages must be a non-negative integer")
        if self.pages_processed < 0:
            raise ValueError("pages_processed must be a non-negative integer")


@dataclass
class CreateTaskResponse:
    id: uuid.UUID
    file_name: str
    status: TaskStatus
    pos_in_queue: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": str(self.id),
            "file_name": self.file_name,
            "status": self.status.value,
            "pos_in_queue": self.pos_in_queue,
        }
