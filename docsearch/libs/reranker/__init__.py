"""Reranker 统一导出。"""

from docsearch.libs.reranker.cross_encoder_reranker import CrossEncoderReranker

__all__ = ["CrossEncoderReranker"]
