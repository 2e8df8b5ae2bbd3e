"""Embedding 客户端对外导出。

该文件统一导出稠密/稀疏两个客户端，
让上层调用方用稳定路径导入。
"""

from docsearch.libs.embedding.dense_embedding import DenseEmbeddingClient
from docsearch.libs.embedding.sparse_embedding import SparseEmbeddingClient

__all__ = ["DenseEmbeddingClient", "SparseEmbeddingClient"]
