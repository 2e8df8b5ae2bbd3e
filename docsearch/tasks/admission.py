"""Task admission: audit, serialize and enqueue a document-processing task.

Order is fixed: the audit record is written first and the task is only
pushed once that write succeeds. The reverse gap is accepted: if the push
fails after a successful audit write, the record stays ``CREATED`` with no
queued work, and reconciliation is left to whoever owns the audit store.
"""

from __future__ import annotations

import json
import uuid
from datetime import datetime, timezone

import redis

from docsearch.core.errors import RequestFailure
from docsearch.core.types import (
    CreateTaskResponse,
    FileTask,
    TaskAuditRecord,
    TaskStatus,
    UploadFileRequest,
)
from docsearch.observability.logger import get_logger
from docsearch.tasks.audit_store import AuditStore
from docsearch.tasks.queue import TaskQueue

logger = get_logger(__name__)


class TaskAdmission:
    """Admit upload requests into the processing queue."""

    def __init__(self, audit_store: AuditStore, queue: TaskQueue) -> None:
        self.audit_store = audit_store
        self.queue = queue

    def admit(self, upload_request: UploadFileRequest) -> CreateTaskResponse:
        """Create a task for ``upload_request`` and return its queue position.

        Raises:
            RequestFailure: audit write, serialization or queue push failed.
        """
        record = TaskAuditRecord(
            id=str(uuid.uuid4()),
            file_name=upload_request.file_name,
            pages=0,
            pages_processed=0,
            status=TaskStatus.CREATED,
            created_at=datetime.now(timezone.utc),
        )

        try:
            self.audit_store.insert_task(record)
        except Exception as error:  # noqa: BLE001 - any store backend may be plugged in
            raise RequestFailure(str(error)) from error

        task = FileTask(
            id=uuid.UUID(record.id),
            file_name=record.file_name,
            upload_file_data=upload_request,
            attempt_number=0,
        )

        try:
            message = json.dumps(task.to_dict())
        except (TypeError, ValueError) as error:
            raise RequestFailure("Failed to Serialize FileTask") from error

        try:
            pos_in_queue = self.queue.push(message)
        except redis.RedisError as error:
            logger.error("Task %s audited but not enqueued: %s", task.id, error)
            raise RequestFailure(str(error)) from error

        logger.info("Task %s (%s) queued at position %d", task.id, task.file_name, pos_in_queue)
        return CreateTaskResponse(
            id=task.id,
            file_name=task.file_name,
            status=TaskStatus.CREATED,
            pos_in_queue=pos_in_queue,
        )
