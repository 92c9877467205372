"""
Analysis layer: derived measurements for visualization and comparison.

IMPORTANT: This is NOT seen by the engine. One-way derivation only.

- neighbor_counts / dissatisfied_mask: whole-grid satisfaction
- segregation_index: mean same-kind neighbor share
- count_clusters: connected same-kind regions
- summarize: all of the above in one SegregationSummary
"""

from schelling.analysis.metrics import (
    SegregationSummary,
    count_clusters,
    dissatisfied_mask,
    fraction_satisfied,
    neighbor_counts,
    segregation_index,
    summarize,
)

__all__ = [
    "SegregationSummary",
    "count_clusters",
    "dissatisfied_mask",
    "fraction_satisfied",
    "neighbor_counts",
    "segregation_index",
    "summarize",
]
