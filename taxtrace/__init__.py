"""taxtrace: traceable U.S. individual income tax computation."""

from taxtrace.engines.orchestrator import compute
from taxtrace.engines.trace import build_trace, explain

__all__ = ["build_trace", "compute", "explain"]
