"""后端地址解析器（Backend Resolver）。

这个模块只回答一个问题：本次调用应该把请求发到哪个服务 origin？

解析规则：
1. 稠密向量（doc / query）：
   - 数据集未配置 base URL -> 默认公共 API。
   - base URL 指向托管 embedding 服务 -> 优先 `embedding_server_origin`，
     否则回退到通用 GPU 服务。
   - 其他情况 -> 原样使用数据集配置的 URL。
2. 稀疏向量 / 重排：优先各自的专用 origin，否则回退到通用 GPU 服务。

解析是纯函数：不做任何 IO，唯一的失败是“需要 GPU origin 但未配置”。
"""

from __future__ import annotations

from docsearch.core.errors import ConfigurationError
from docsearch.core.settings import ServerSettings
from docsearch.core.types import DatasetConfiguration, EmbedPurpose


class BackendResolver:
    """按调用目的选择服务 origin。"""

    def __init__(self, server_settings: ServerSettings) -> None:
        self.settings = server_settings

    @staticmethod
    def _non_empty(value: str | None) -> str | None:
        if isinstance(value, str) and value.strip():
            return value.strip().rstrip("/")
        return None

    def _gpu_origin(self) -> str:
        origin = self._non_empty(self.settings.gpu_server_origin)
        if origin is None:
            raise ConfigurationError("GPU_SERVER_ORIGIN should be set if this is called")
        return origin

    def _override_or_gpu(self, override: str | None) -> str:
        return self._non_empty(override) or self._gpu_origin()

    def resolve(
        self,
        purpose: EmbedPurpose | str,
        dataset: DatasetConfiguration | None = None,
    ) -> str:
        """返回本次调用应使用的 origin（不带末尾斜杠）。

        参数说明：
        - purpose: 调用目的，`doc` / `query` / `sparse` / `rerank`。
        - dataset: 稠密向量调用时使用的数据集配置；其余目的忽略。
        """

        purpose = EmbedPurpose(purpose)

        if purpose is EmbedPurpose.SPARSE:
            return self._override_or_gpu(self.settings.sparse_server_origin)
        if purpose is EmbedPurpose.RERANK:
            return self._override_or_gpu(self.settings.reranker_server_origin)

        base_url = (dataset.embedding_base_url if dataset is not None else "").strip()
        if not base_url:
            return self.settings.default_embedding_origin.rstrip("/")
        if self.settings.managed_embedding_marker in base_url:
            return self._override_or_gpu(self.settings.embedding_server_origin)
        return base_url
