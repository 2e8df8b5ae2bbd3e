"""稀疏向量（SPLADE）客户端。

请求 `POST {origin}/sparse_encode`，请求体 `{"input", "encode_type"}`，
响应 `{"embeddings": [[index, weight], ...]}`。
"""

from __future__ import annotations

from typing import Any

from docsearch.core.errors import ValidationError
from docsearch.core.trace import TraceContext, traced
from docsearch.core.types import EmbedPurpose
from docsearch.libs.backend.http_client import RemoteServiceClient


class SparseEmbeddingClient(RemoteServiceClient):
    """SPLADE 稀疏向量客户端。"""

    def _decode_pairs(self, data: Any) -> list[tuple[int, float]]:
        embeddings = data.get("embeddings") if isinstance(data, dict) else None
        if not isinstance(embeddings, list):
            raise self._parse_error(f"missing 'embeddings' in response: {data!r:.200}")

        pairs: list[tuple[int, float]] = []
        for position, item in enumerate(embeddings):
            if not isinstance(item, (list, tuple)) or len(item) != 2:
                raise self._parse_error(f"embeddings[{position}] is not an [index, weight] pair")
            index, weight = item
            if isinstance(index, bool) or not isinstance(index, int) or index < 0:
                raise self._parse_error(f"embeddings[{position}] has invalid index {index!r}")
            if isinstance(weight, bool) or not isinstance(weight, (int, float)):
                raise self._parse_error(f"embeddings[{position}] has invalid weight {weight!r}")
            pairs.append((index, float(weight)))
        return pairs

    def sparse_embed(
        self,
        text: str,
        encode_type: str = "doc",
        trace: TraceContext | None = None,
    ) -> list[tuple[int, float]]:
        """生成稀疏向量，返回 (term index, weight) 列表，顺序无意义。

        空文本直接抛 ValidationError，不发起任何网络请求。
        """

        if not text:
            raise ValidationError("Cannot encode empty query")

        with traced(trace, "sparse_encode", "Create sparse embedding") as span:
            origin = self.resolver.resolve(EmbedPurpose.SPARSE)
            span["origin"] = origin
            data = self._post_json(
                f"{origin}/sparse_encode",
                {"input": text, "encode_type": encode_type},
            )
            pairs = self._decode_pairs(data)
            span["terms"] = len(pairs)
            return pairs
