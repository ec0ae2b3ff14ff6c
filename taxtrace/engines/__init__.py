"""Tax computation engines."""

from taxtrace.engines.orchestrator import compute
from taxtrace.engines.trace import build_trace, explain, flatten_trace, leaf_sources
from taxtrace.engines.wash_sale import WashSaleMatcher, match_wash_sales

__all__ = [
    "WashSaleMatcher",
    "build_trace",
    "compute",
    "explain",
    "flatten_trace",
    "leaf_sources",
    "match_wash_sales",
]
