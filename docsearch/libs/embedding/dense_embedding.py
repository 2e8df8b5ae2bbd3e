"""稠密向量（Dense Embedding）客户端。

调用 OpenAI 兼容的 `/embeddings` 接口，把单条文本转换为一个向量。

行为约定：
1. `query` 目的的文本会先拼接数据集配置的 query 前缀；`doc` 原样发送。
2. 目标 origin 由 BackendResolver 按数据集配置决定。
3. 返回的 embedding 如果不是浮点数组（例如 base64 字符串），
   按空向量处理并记录告警，不抛异常。
4. 失败不重试，重试策略属于调用方。
"""

from __future__ import annotations

import struct
from typing import Any

from docsearch.core.trace import TraceContext, traced
from docsearch.core.types import DatasetConfiguration, EmbedPurpose
from docsearch.libs.backend.http_client import RemoteServiceClient
from docsearch.observability.logger import get_logger

logger = get_logger(__name__)


def _to_f32(value: float) -> float:
    """把 float64 收窄到 float32 精度（与向量库存储精度一致）。"""

    return struct.unpack("f", struct.pack("f", value))[0]


class DenseEmbeddingClient(RemoteServiceClient):
    """OpenAI 兼容的稠密向量客户端。"""

    @staticmethod
    def prepare_input(text: str, purpose: EmbedPurpose | str, dataset: DatasetConfiguration) -> str:
        """按调用目的变换输入文本。"""

        try:
            purpose = EmbedPurpose(purpose)
        except ValueError:
            return text
        if purpose is EmbedPurpose.QUERY:
            return dataset.embedding_query_prefix + text
        return text

    @staticmethod
    def _decode_vector(embedding: Any) -> list[float]:
        if not isinstance(embedding, list) or not all(
            isinstance(x, (int, float)) and not isinstance(x, bool) for x in embedding
        ):
            # TODO: decide with search consumers whether this should raise ParseFailure instead.
            logger.warning(
                "Embedding output is not a float list (%s); returning empty vector",
                type(embedding).__name__,
            )
            return []
        return [_to_f32(float(x)) for x in embedding]

    def embed(
        self,
        text: str,
        purpose: EmbedPurpose | str = EmbedPurpose.DOC,
        dataset: DatasetConfiguration | None = None,
        trace: TraceContext | None = None,
    ) -> list[float]:
        """生成单条文本的稠密向量。

        参数说明：
        - text: 待向量化文本。
        - purpose: `doc` 或 `query`；其他值按 `doc` 处理。
        - dataset: 数据集配置（base URL 与 query 前缀），缺省为空配置。
        - trace: 可选追踪上下文，记录一次 `create_embedding` span。
        """

        dataset = dataset or DatasetConfiguration()

        with traced(trace, "create_embedding", "Create semantic dense embedding") as span:
            resolve_purpose = (
                EmbedPurpose.QUERY if purpose == EmbedPurpose.QUERY else EmbedPurpose.DOC
            )
            origin = self.resolver.resolve(resolve_purpose, dataset)
            payload = {
                "model": self.settings.embedding_model,
                "input": self.prepare_input(text, purpose, dataset),
            }
            span["origin"] = origin

            data = self._post_json(f"{origin}/embeddings", payload)

            items = data.get("data") if isinstance(data, dict) else None
            if not isinstance(items, list) or not items or not isinstance(items[0], dict):
                raise self._parse_error(f"missing embedding data in response: {data!r:.200}")

            vector = self._decode_vector(items[0].get("embedding"))
            span["dimensions"] = len(vector)
            return vector
