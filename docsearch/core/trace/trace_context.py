"""Trace context for observability around outbound service calls."""

import json
import time
import uuid
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Iterator, Optional


@dataclass
class TraceContext:
    """Trace context for recording and persisting call spans.

    Attributes:
        trace_id: Unique identifier for this trace
        started_at: Timestamp when trace was created
        stages: Dictionary storing data from each recorded span
    """

    trace_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    started_at: datetime = field(default_factory=datetime.now)
    stages: Dict[str, Any] = field(default_factory=dict)
    user_query: str | None = None
    log_file: str | None = None

    def record_stage(self, stage_name: str, data: Dict[str, Any]) -> None:
        """Record data for a stage.

        Args:
            stage_name: Name of the stage (e.g., "create_embedding", "cross_encoder")
            data: Stage-specific data to record
        """
        self.stages[stage_name] = {"timestamp": datetime.now().isoformat(), "data": data}

    def get_stage_data(self, stage_name: str) -> Optional[Dict[str, Any]]:
        """Retrieve recorded data for a specific stage.

        Args:
            stage_name: Name of the stage to retrieve

        Returns:
            Stage data dict or None if stage not found
        """
        return self.stages.get(stage_name)

    @contextmanager
    def span(self, name: str, description: str = "") -> Iterator[Dict[str, Any]]:
        """Bracket a call and record its latency and outcome as a stage.

        The yielded dict can be filled with extra attributes by the caller.
        Exceptions are recorded and re-raised unchanged.
        """
        attributes: Dict[str, Any] = {}
        start = time.perf_counter()
        status = "ok"
        try:
            yield attributes
        except Exception as error:
            status = "error"
            attributes["error"] = type(error).__name__
            raise
        finally:
            self.record_stage(
                name,
                {
                    "description": description,
                    "status": status,
                    "elapsed_ms": round((time.perf_counter() - start) * 1000, 3),
                    **attributes,
                },
            )

    def to_dict(self) -> Dict[str, Any]:
        ended_at = datetime.now()
        return {
            "trace_id": self.trace_id,
            "started_at": self.started_at.isoformat(),
            "ended_at": ended_at.isoformat(),
            "total_latency": (ended_at - self.started_at).total_seconds(),
            "user_query": self.user_query,
            "stages": self.stages,
        }

    def finish(self) -> Dict[str, Any]:
        payload = self.to_dict()
        if self.log_file:
            path = Path(self.log_file)
            path.parent.mkdir(parents=True, exist_ok=True)
            with path.open("a", encoding="utf-8") as f:
                f.write(json.dumps(payload, ensure_ascii=False) + "\n")
        return payload


@contextmanager
def traced(
    trace: Optional[TraceContext], name: str, description: str = ""
) -> Iterator[Dict[str, Any]]:
    """Open a span on ``trace`` if one is given, otherwise a throwaway dict."""
    if trace is None:
        yield {}
        return
    with trace.span(name, description) as attributes:
        yield attributes


def create_trace(observability: Any, user_query: str | None = None) -> Optional[TraceContext]:
    """Build a TraceContext when tracing is enabled in ``settings.observability``."""
    if not getattr(observability, "trace_enabled", False):
        return None
    return TraceContext(user_query=user_query, log_file=getattr(observability, "trace_file", None))
