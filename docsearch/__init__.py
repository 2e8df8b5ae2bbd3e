"""docsearch - embedding, rerank and task admission core for document search."""

__version__ = "0.1.0"
