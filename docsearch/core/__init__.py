"""
Core Layer - shared contracts.

This package contains:
- Configuration management (settings.py)
- Core data types (types.py) - shared by clients and task admission
- Error taxonomy (errors.py)
- Trace collection
"""

from docsearch.core.errors import (
    ConfigurationError,
    ParseFailure,
    RequestFailure,
    ServiceError,
    ValidationError,
)
from docsearch.core.types import (
    ChunkMetadata,
    CreateTaskResponse,
    DatasetConfiguration,
    EmbedPurpose,
    FileTask,
    ScoreChunk,
    TaskAuditRecord,
    TaskStatus,
    UploadFileRequest,
)

__all__ = [
    "ServiceError",
    "ValidationError",
    "ConfigurationError",
    "RequestFailure",
    "ParseFailure",
    "ChunkMetadata",
    "CreateTaskResponse",
    "DatasetConfiguration",
    "EmbedPurpose",
    "FileTask",
    "ScoreChunk",
    "TaskAuditRecord",
    "TaskStatus",
    "UploadFileRequest",
]
