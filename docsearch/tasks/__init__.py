"""
Tasks Layer - admission of document-processing tasks.

Queue consumption and page processing live in the worker, not here.
"""

from docsearch.tasks.admission import TaskAdmission
from docsearch.tasks.audit_store import AuditStore, AuditStoreError, SQLiteAuditStore
from docsearch.tasks.queue import TaskQueue

__all__ = ["TaskAdmission", "AuditStore", "AuditStoreError", "SQLiteAuditStore", "TaskQueue"]
