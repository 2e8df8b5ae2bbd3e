"""
Trace Module.

This package contains tracing components:
- Trace context
- Span helper for optional traces
- Factory honouring observability settings
"""

from docsearch.core.trace.trace_context import TraceContext, create_trace, traced

__all__ = ['TraceContext', 'create_trace', 'traced']
