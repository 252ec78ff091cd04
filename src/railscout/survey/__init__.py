"""Survey reconciliation subpackage.

Public API:
- reconcile_survey: Snap a survey onto the network and merge it
- merge_edge_segments: Merge policy for one edge's condition segments
- copper_coverage: Coppered fraction of an edge
"""

from railscout.survey.reconcile import (
    EdgeDiff,
    Reconciliation,
    apply_reconciliation,
    reconcile_survey,
)
from railscout.survey.segments import (
    OffsetSample,
    build_runs,
    classify_speed,
    coalesce_segments,
    copper_coverage,
    merge_edge_segments,
)

__all__ = [
    "EdgeDiff",
    "OffsetSample",
    "Reconciliation",
    "apply_reconciliation",
    "build_runs",
    "classify_speed",
    "coalesce_segments",
    "copper_coverage",
    "merge_edge_segments",
    "reconcile_survey",
]
