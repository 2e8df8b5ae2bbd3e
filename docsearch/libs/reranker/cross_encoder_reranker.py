"""远程 Cross-Encoder 重排实现。

实现思路：
1. 取每个候选的主文本（`metadata[0].content`），按原顺序发送到 `/rerank`。
2. 服务返回 `[{"index", "score"}, ...]`，顺序不保证，以 index 为准。
3. 把分数写回对应候选的副本，稳定排序（分数降序，同分保持原顺序）后截断。
4. 任一步失败都抛异常，不返回未重排的原列表。
"""

from __future__ import annotations

import dataclasses
import math
from typing import Any

from docsearch.core.trace import TraceContext, traced
from docsearch.core.types import EmbedPurpose, ScoreChunk
from docsearch.libs.backend.http_client import RemoteServiceClient
from docsearch.observability.logger import get_logger

logger = get_logger(__name__)


class CrossEncoderReranker(RemoteServiceClient):
    """调用远程 cross-encoder 服务的重排器。"""

    @staticmethod
    def _validate_page_size(page_size: int) -> None:
        if isinstance(page_size, bool) or not isinstance(page_size, int) or page_size < 0:
            raise ValueError("page_size must be a non-negative integer")

    @staticmethod
    def _prepare_texts(candidates: list[ScoreChunk]) -> list[str]:
        return [candidate.content for candidate in candidates]

    def _decode_score_pairs(self, data: Any, candidate_count: int) -> list[tuple[int, float]]:
        if not isinstance(data, list):
            raise self._parse_error(f"expected a list of score pairs, got {type(data).__name__}")

        pairs: list[tuple[int, float]] = []
        for position, item in enumerate(data):
            if not isinstance(item, dict):
                raise self._parse_error(f"score pair {position} is not an object")
            index = item.get("index")
            score = item.get("score")
            if isinstance(index, bool) or not isinstance(index, int):
                raise self._parse_error(f"score pair {position} has invalid index {index!r}")
            if not 0 <= index < candidate_count:
                raise self._parse_error(
                    f"score pair {position} index {index} out of range for "
                    f"{candidate_count} candidates"
                )
            if (
                isinstance(score, bool)
                or not isinstance(score, (int, float))
                or not math.isfinite(score)
            ):
                raise self._parse_error(f"score pair {position} has invalid score {score!r}")
            pairs.append((index, float(score)))
        return pairs

    @staticmethod
    def fuse_scores(
        candidates: list[ScoreChunk],
        score_pairs: list[tuple[int, float]],
        page_size: int,
    ) -> list[ScoreChunk]:
        """把 (index, score) 写回候选副本，降序排序并截断到 page_size。

        Python 的 sort 是稳定的：同分候选保持原始顺序。
        """

        results = [dataclasses.replace(candidate) for candidate in candidates]
        for index, score in score_pairs:
            results[index].score = score

        results.sort(key=lambda chunk: chunk.score, reverse=True)
        return results[:page_size]

    def rerank(
        self,
        query: str,
        page_size: int,
        candidates: list[ScoreChunk],
        trace: TraceContext | None = None,
    ) -> list[ScoreChunk]:
        """对候选集合执行重排，返回长度不超过 page_size 的新列表。

        参数说明：
        - query: 用户查询。
        - page_size: 返回条数上限，必须是非负整数。
        - candidates: 检索阶段得到的候选；不会被原地修改。
        - trace: 可选追踪上下文，记录一次 `cross_encoder` span。
        """

        self._validate_page_size(page_size)

        if not candidates:
            return []

        with traced(trace, "cross_encoder", "Cross Encode semantic and hybrid chunks") as span:
            origin = self.resolver.resolve(EmbedPurpose.RERANK)
            endpoint = f"{origin}/rerank"
            logger.info("Reranking %d candidates via %s", len(candidates), endpoint)
            span["origin"] = origin
            span["candidates"] = len(candidates)

            data = self._post_json(
                endpoint,
                {
                    "query": query,
                    "texts": self._prepare_texts(candidates),
                    "truncate": True,
                },
            )
            score_pairs = self._decode_score_pairs(data, len(candidates))
            return self.fuse_scores(candidates, score_pairs, page_size)
