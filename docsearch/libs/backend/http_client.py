"""JSON-over-HTTP 调用的公共实现。

稠密向量、稀疏向量和重排三个客户端都遵循同一套约定：
- POST JSON 请求体；
- `Authorization: Bearer <api_key>`；
- 传输失败或非 2xx -> RequestFailure（携带上游错误文本）；
- 响应体不是 JSON -> ParseFailure（详细原因只写日志）。

这里把这套约定集中实现，避免三个客户端各写一遍异常包装。
"""

from __future__ import annotations

from typing import Any

import httpx

from docsearch.core.errors import ParseFailure, RequestFailure
from docsearch.core.settings import ServerSettings
from docsearch.libs.backend.resolver import BackendResolver
from docsearch.observability.logger import get_logger

logger = get_logger(__name__)

PARSE_ERROR_MESSAGE = "Failed parsing response from custom embedding server"


class RemoteServiceClient:
    """带 bearer 鉴权的 JSON POST 客户端基类。

    参数优先级：
    1) 构造函数显式注入的 `http_client`（测试时注入 mock）
    2) 按 `server_settings.request_timeout` 新建的 `httpx.Client`
    """

    def __init__(
        self,
        server_settings: ServerSettings,
        *,
        resolver: BackendResolver | None = None,
        http_client: httpx.Client | None = None,
    ) -> None:
        self.settings = server_settings
        self.resolver = resolver or BackendResolver(server_settings)
        self.api_key = server_settings.api_key
        self._owns_client = http_client is None
        self.http_client = http_client or httpx.Client(timeout=server_settings.request_timeout)

    def close(self) -> None:
        if self._owns_client:
            self.http_client.close()

    def __enter__(self) -> "RemoteServiceClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def _headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key}",
        }

    def _post_json(self, endpoint: str, payload: dict[str, Any]) -> Any:
        """发送请求并返回解析后的 JSON。"""

        try:
            response = self.http_client.post(endpoint, json=payload, headers=self._headers())
        except httpx.HTTPError as error:
            raise RequestFailure(f"Failed making call to server {error!r}") from error

        if response.status_code >= 400:
            raise RequestFailure(
                f"Failed making call to server: HTTP {response.status_code}: {response.text}"
            )

        try:
            return response.json()
        except ValueError as error:
            logger.error("%s %r", PARSE_ERROR_MESSAGE, error)
            raise ParseFailure(PARSE_ERROR_MESSAGE) from error

    @staticmethod
    def _parse_error(detail: str) -> ParseFailure:
        logger.error("%s: %s", PARSE_ERROR_MESSAGE, detail)
        return ParseFailure(PARSE_ERROR_MESSAGE)
