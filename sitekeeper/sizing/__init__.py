"""Source line budgets, split suggestions and mechanical splitting."""

from sitekeeper.sizing.file_splitter import split_file, split_lines
from sitekeeper.sizing.size_governor import (
    SizeGovernor,
    build_alerts,
    classify_lines,
    count_lines,
    measure_file,
    summarize,
)
from sitekeeper.sizing.split_points import find_anchors, suggest_splits, target_lines

__all__ = [
    "SizeGovernor",
    "build_alerts",
    "classify_lines",
    "count_lines",
    "find_anchors",
    "measure_file",
    "split_file",
    "split_lines",
    "suggest_splits",
    "summarize",
    "target_lines",
]
