"""后端地址解析与 HTTP 调用公共层统一导出。"""

from docsearch.libs.backend.http_client import RemoteServiceClient
from docsearch.libs.backend.resolver import BackendResolver

__all__ = ["BackendResolver", "RemoteServiceClient"]
