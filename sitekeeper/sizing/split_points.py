"""Split-point heuristics for oversized source files.

Anchors are found by matching surface syntax line by line; nothing is
parsed. Each line yields at most one anchor, taking the first pattern of
its file kind that matches.
"""

import math
import re

from sitekeeper.consts import SIZE_ERROR_LINES, SPLIT_TOLERANCE
from sitekeeper.models.model_size import AnchorTag, FileKind, SplitAnchor, SplitSuggestion

ANCHOR_PATTERNS: dict[FileKind, list[tuple[AnchorTag, re.Pattern[str]]]] = {
    FileKind.SCRIPT: [
        (AnchorTag.CLASS, re.compile(r"^\s*(export\s+)?(default\s+)?class\s+\w+")),
        (
            AnchorTag.FUNCTION,
            re.compile(
                r"^\s*(export\s+)?(default\s+)?(async\s+)?function\b"
                r"|^\s*(const|let|var)\s+\w+\s*=\s*(async\s+)?(function\b|\([^)]*\)\s*=>)"
            ),
        ),
        (AnchorTag.EXPORT, re.compile(r"^\s*(module\.exports\b|export\s)")),
        (AnchorTag.SECTION_COMMENT, re.compile(r"^\s*//.{18,}")),
    ],
    FileKind.STYLE: [
        (AnchorTag.MEDIA_QUERY, re.compile(r"^\s*@media\b")),
        (AnchorTag.COMPONENT_COMMENT, re.compile(r"^\s*/\*.*\b(Component|Section)\b")),
    ],
    FileKind.MARKUP: [
        (AnchorTag.SECTION_ELEMENT, re.compile(r"^\s*<section\b", re.IGNORECASE)),
        (AnchorTag.SCRIPT_ELEMENT, re.compile(r"^\s*<script\b", re.IGNORECASE)),
        (AnchorTag.STYLE_ELEMENT, re.compile(r"^\s*<style\b", re.IGNORECASE)),
    ],
}

ANCHOR_LABELS = {
    AnchorTag.CLASS: "Class definition",
    AnchorTag.FUNCTION: "Function definition",
    AnchorTag.EXPORT: "Export boundary",
    AnchorTag.SECTION_COMMENT: "Section comment",
    AnchorTag.MEDIA_QUERY: "Media query",
    AnchorTag.COMPONENT_COMMENT: "Component comment",
    AnchorTag.SECTION_ELEMENT: "Section element",
    AnchorTag.SCRIPT_ELEMENT: "Script element",
    AnchorTag.STYLE_ELEMENT: "Style element",
    AnchorTag.LINE_BOUNDARY: "Line boundary",
}


def find_anchors(lines: list[str], kind: FileKind) -> list[SplitAnchor]:
    """Find every anchor line in a file.

    Args:
        lines: File contents split on '\\n'.
        kind: File kind selecting the pattern set.

    Returns:
        Anchors in line order, 1-based.
    """
    anchors = []
    patterns = ANCHOR_PATTERNS[kind]
    for number, line in enumerate(lines, start=1):
        for tag, pattern in patterns:
            if pattern.search(line):
                anchors.append(SplitAnchor(line=number, tag=tag, text=line.strip()))
                break
    return anchors


def describe(tag: AnchorTag, text: str) -> str:
    """One-line human description of a split point."""
    return f"{ANCHOR_LABELS[tag]}: {text[:50]}"


def target_lines(line_count: int, max_lines: int = SIZE_ERROR_LINES) -> list[int]:
    """Evenly spaced lines where an oversized file would ideally be cut.

    A file needs ceil(lines / max_lines) parts, so one cut fewer than that.

    Returns:
        Target line numbers, empty when the file fits in one part.
    """
    parts = math.ceil(line_count / max_lines)
    if parts < 2:
        return []
    span = line_count // parts
    return [span * i for i in range(1, parts)]


def suggest_splits(
    lines: list[str],
    kind: FileKind,
    max_lines: int = SIZE_ERROR_LINES,
    tolerance: float = SPLIT_TOLERANCE,
) -> list[SplitSuggestion]:
    """Pick one split point per target line.

    Each target takes the nearest unused anchor within tolerance * span
    lines of it. When none qualifies the cut falls on the target line itself.

    Args:
        lines: File contents split on '\\n'.
        kind: File kind selecting the anchor patterns.
        max_lines: Error threshold the parts must fit under.
        tolerance: Allowed distance from a target, as a share of the span.

    Returns:
        Suggestions in line order; ceil(len(lines) / max_lines) - 1 of them.
    """
    targets = target_lines(len(lines), max_lines)
    if not targets:
        return []

    span = targets[0]
    max_distance = span * tolerance
    anchors = find_anchors(lines, kind)
    used: set[int] = set()
    suggestions = []

    for target in targets:
        candidates = [
            a for a in anchors if a.line not in used and abs(a.line - target) <= max_distance
        ]
        if candidates:
            best = min(candidates, key=lambda a: (abs(a.line - target), a.line))
            used.add(best.line)
            suggestions.append(
                SplitSuggestion(line=best.line, tag=best.tag, description=describe(best.tag, best.text))
            )
        else:
            text = lines[target - 1].strip() if target <= len(lines) else ""
            suggestions.append(
                SplitSuggestion(
                    line=target,
                    tag=AnchorTag.LINE_BOUNDARY,
                    description=describe(AnchorTag.LINE_BOUNDARY, text or f"line {target}"),
                )
            )

    return sorted(suggestions, key=lambda s: s.line)
