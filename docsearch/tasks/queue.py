"""Redis-backed processing queue (producer side only)."""

from __future__ import annotations

import redis

from docsearch.core.settings import QueueSettings


class TaskQueue:
    """Ordered list keyed by a fixed name; new work is pushed at the head.

    One connection pool is shared by every caller. Each push checks a
    connection out through a context-managed client, so it is returned to
    the pool on every path.
    """

    def __init__(
        self,
        queue_settings: QueueSettings,
        *,
        pool: redis.ConnectionPool | None = None,
    ) -> None:
        self.queue_name = queue_settings.queue_name
        self.pool = pool or redis.ConnectionPool.from_url(
            queue_settings.redis_url,
            max_connections=queue_settings.max_connections,
            decode_responses=True,
        )

    def push(self, message: str) -> int:
        """LPUSH ``message`` and return the list length after the push."""
        with redis.Redis(connection_pool=self.pool) as client:
            return client.lpush(self.queue_name, message)

    def close(self) -> None:
        self.pool.disconnect()
