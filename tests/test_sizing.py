"""Tests for line budgets, split suggestions and file splitting."""

import json
from collections.abc import Callable
from datetime import UTC, datetime
from pathlib import Path

import pytest

from sitekeeper.models.model_size import AnchorTag, FileKind, SizeClass
from sitekeeper.sizing.file_splitter import split_file, split_lines
from sitekeeper.sizing.size_governor import (
    SizeGovernor,
    build_alerts,
    classify_lines,
    count_lines,
    measure_file,
)
from sitekeeper.sizing.split_points import find_anchors, suggest_splits, target_lines


def script_with_classes(total: int, class_lines: list[int]) -> str:
    """A script of exactly `total` lines with class definitions at the given lines."""
    lines = []
    for number in range(1, total + 1):
        if number in class_lines:
            lines.append(f"class Widget{number} {{")
        else:
            lines.append(f"  value{number} = {number};")
    return "\n".join(lines)


class TestClassification:
    """Tests for line counting and thresholds."""

    def test_count_lines(self) -> None:
        """Test newline count plus one."""
        assert count_lines("") == 1
        assert count_lines("a\nb") == 2
        assert count_lines("a\nb\n") == 3

    def test_thresholds_are_inclusive(self) -> None:
        """Test exactly 400 warns and exactly 500 errors."""
        assert classify_lines(399) == SizeClass.OK
        assert classify_lines(400) == SizeClass.WARN
        assert classify_lines(499) == SizeClass.WARN
        assert classify_lines(500) == SizeClass.ERROR


class TestSplitPoints:
    """Tests for split-point heuristics."""

    def test_target_lines(self) -> None:
        """Test one target per extra part, evenly spaced."""
        assert target_lines(499) == []
        assert target_lines(612) == [306]
        assert target_lines(1200) == [400, 800]

    def test_find_anchors_first_pattern_wins(self) -> None:
        """Test an exported class is tagged as a class, not an export."""
        anchors = find_anchors(
            ["export class Panel {", "function render() {", "// ===== Helpers section ====="],
            FileKind.SCRIPT,
        )
        assert [a.tag for a in anchors] == [
            AnchorTag.CLASS,
            AnchorTag.FUNCTION,
            AnchorTag.SECTION_COMMENT,
        ]

    def test_style_and_markup_anchors(self) -> None:
        """Test media queries and section elements are anchors."""
        style = find_anchors(["a { }", "@media (max-width: 600px) {"], FileKind.STYLE)
        assert [(a.line, a.tag) for a in style] == [(2, AnchorTag.MEDIA_QUERY)]

        markup = find_anchors(["<div>", '  <SECTION class="x">'], FileKind.MARKUP)
        assert [(a.line, a.tag) for a in markup] == [(2, AnchorTag.SECTION_ELEMENT)]

    def test_oversized_script_splits_at_nearest_class(self) -> None:
        """Test a 612-line script with classes at 40, 260, 480 splits once at 260."""
        text = script_with_classes(612, [40, 260, 480])
        suggestions = suggest_splits(text.split("\n"), FileKind.SCRIPT)

        assert len(suggestions) == 1
        assert suggestions[0].line == 260
        assert suggestions[0].tag == AnchorTag.CLASS
        assert suggestions[0].description.startswith("Class definition: class Widget260")

    def test_falls_back_to_line_boundary(self) -> None:
        """Test a target with no anchor nearby still gets a cut."""
        text = script_with_classes(612, [40])
        suggestions = suggest_splits(text.split("\n"), FileKind.SCRIPT)

        assert len(suggestions) == 1
        assert suggestions[0].line == 306
        assert suggestions[0].tag == AnchorTag.LINE_BOUNDARY

    def test_suggestion_count(self) -> None:
        """Test ceil(lines / 500) - 1 suggestions for larger files."""
        text = script_with_classes(1501, [])
        assert len(suggest_splits(text.split("\n"), FileKind.SCRIPT)) == 3


class TestSizeGovernor:
    """Tests for scanning a site and writing reports."""

    def test_measure_file(self, temp_dir: Path, write_file: Callable[[str, str], Path]) -> None:
        """Test an oversized script is an error with suggestions and excess."""
        write_file("assets/js/app.js", script_with_classes(612, [40, 260, 480]))
        report = measure_file(temp_dir, Path("assets/js/app.js"))

        assert report is not None
        assert report.kind == FileKind.SCRIPT
        assert report.lines == 612
        assert report.classification == SizeClass.ERROR
        assert report.excess == 112
        assert [s.line for s in report.suggestions] == [260]

    def test_measure_file_ignores_other_suffixes(self, temp_dir: Path) -> None:
        """Test non-source files are not measured."""
        assert measure_file(temp_dir, Path("notes.md")) is None

    def test_warn_file_has_no_suggestions(
        self, temp_dir: Path, write_file: Callable[[str, str], Path]
    ) -> None:
        """Test warnings carry no split suggestions."""
        write_file("styles.css", "\n".join(["a { }"] * 450))
        report = measure_file(temp_dir, Path("styles.css"))
        assert report is not None
        assert report.classification == SizeClass.WARN
        assert report.suggestions == []
        assert report.excess == 0

    def test_run_writes_reports(
        self, site_root: Path, write_file: Callable[[str, str], Path]
    ) -> None:
        """Test both report files are written with consistent counts."""
        write_file("assets/js/app.js", script_with_classes(612, [40, 260, 480]))
        write_file("assets/css/big.css", "\n".join(["a { }"] * 420))
        write_file("assets/js/vendor.min.js", script_with_classes(900, []))

        reports = SizeGovernor(site_root).run()
        paths = [r.path for r in reports]
        assert paths == sorted(paths)
        assert "assets/js/vendor.min.js" not in paths
        assert "node_modules/pkg/index.html" not in paths

        size_report = json.loads((site_root / "build-reports" / "file-size-report.json").read_text())
        assert size_report["summary"]["errors"] == 1
        assert size_report["summary"]["warnings"] == 1
        assert size_report["summary"]["total_files"] == len(reports)

        alerts = json.loads((site_root / "build-reports" / "size-alerts.json").read_text())
        assert [a["level"] for a in alerts["alerts"]] == ["error", "warn"]
        assert alerts["summary"]["total"] == 2

    def test_scan_single_file(
        self, site_root: Path, write_file: Callable[[str, str], Path]
    ) -> None:
        """Test restricting the scan to one file."""
        write_file("assets/js/app.js", "let a = 1;\n")
        reports = SizeGovernor(site_root).scan(Path("assets/js/app.js"))
        assert [r.path for r in reports] == ["assets/js/app.js"]

    def test_alert_excess_is_over_violated_threshold(
        self, temp_dir: Path, write_file: Callable[[str, str], Path]
    ) -> None:
        """Test warn excess counts from 400 and error excess from 500."""
        write_file("a.css", "\n".join(["a { }"] * 420))
        write_file("b.js", script_with_classes(612, []))
        reports = [
            measure_file(temp_dir, Path("a.css")),
            measure_file(temp_dir, Path("b.js")),
        ]
        alerts = build_alerts([r for r in reports if r is not None])
        assert [(a.file, a.excess) for a in alerts] == [("b.js", 112), ("a.css", 20)]


class TestFileSplitter:
    """Tests for applying a split."""

    def test_split_lines_covers_every_line(self) -> None:
        """Test segments partition the file."""
        lines = [str(i) for i in range(1, 11)]
        segments = split_lines(lines, [4, 8])
        assert segments == [lines[:3], lines[3:7], lines[7:]]
        assert sum(segments, []) == lines

    def test_split_lines_ignores_out_of_range_cuts(self) -> None:
        """Test cuts at line 1 or past the end do not create empty parts."""
        lines = ["a", "b", "c"]
        assert split_lines(lines, [1, 99]) == [lines]

    def test_split_file(self, temp_dir: Path, write_file: Callable[[str, str], Path]) -> None:
        """Test backup and parts are written and the original is kept."""
        text = script_with_classes(612, [40, 260, 480])
        path = write_file("app.js", text)
        report = measure_file(temp_dir, Path("app.js"))
        assert report is not None

        now = datetime(2026, 10, 17, 8, 30, 0, tzinfo=UTC)
        result = split_file(temp_dir, report, now=now)

        assert result.backup == "app.js.backup.20261017T083000"
        assert result.parts == ["app-part1.js", "app-part2.js"]
        assert path.read_text(encoding="utf-8") == text
        assert (temp_dir / result.backup).read_text(encoding="utf-8") == text

        part2 = (temp_dir / "app-part2.js").read_text(encoding="utf-8")
        assert part2.startswith("class Widget260 {")
        part1 = (temp_dir / "app-part1.js").read_text(encoding="utf-8")
        assert part1 + "\n" + part2 == text

    def test_split_file_refuses_small_files(
        self, temp_dir: Path, write_file: Callable[[str, str], Path]
    ) -> None:
        """Test files within budget are not split."""
        write_file("small.js", "let a = 1;")
        report = measure_file(temp_dir, Path("small.js"))
        assert report is not None
        with pytest.raises(ValueError, match="within its line budget"):
            split_file(temp_dir, report)

    def test_split_file_at_exact_limit(
        self, temp_dir: Path, write_file: Callable[[str, str], Path]
    ) -> None:
        """Test a file of exactly 500 lines is an error but has no split point."""
        write_file("limit.js", script_with_classes(500, [250]))
        report = measure_file(temp_dir, Path("limit.js"))
        assert report is not None
        assert report.classification == SizeClass.ERROR
        assert report.suggestions == []

        with pytest.raises(ValueError, match="no split point exists"):
            split_file(temp_dir, report)
        assert not (temp_dir / "limit-part1.js").exists()
