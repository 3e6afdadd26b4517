# !/usr/bin/python
# coding=utf-8
"""Reduce issue records into counts, summaries and reports."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List

import pythontk as ptk

# From this package:
from componenttk.core_utils.diagnostics.issues import (
    CURRENT_PAGE,
    Analysis,
    IssueRecord,
    Severity,
)


class Aggregator(ptk.LoggingMixin):
    """Pure reductions over a sequence of :class:`IssueRecord`.

    Counts do not depend on record order. Grouped outputs keep first-seen
    order for presentation.
    """

    def __init__(self, log_level: str = "WARNING"):
        super().__init__()
        self.logger.setLevel(log_level)
        self.logger.hide_logger_name(True)

    @staticmethod
    def analyze(records: Iterable[IssueRecord]) -> Analysis:
        """Count records by severity, by issue kind and by page."""
        analysis = Analysis()
        for record in records:
            analysis.total += 1
            severity = record.severity.value
            kind = record.issue_kind.value
            page = record.page_name or CURRENT_PAGE
            analysis.by_severity[severity] = analysis.by_severity.get(severity, 0) + 1
            analysis.by_type[kind] = analysis.by_type.get(kind, 0) + 1
            analysis.by_page[page] = analysis.by_page.get(page, 0) + 1
        return analysis

    @staticmethod
    def summarize(records: Iterable[IssueRecord]) -> Dict[str, int]:
        """Count records by their human-readable issue label."""
        summary: Dict[str, int] = {}
        for record in records:
            summary[record.issue] = summary.get(record.issue, 0) + 1
        return summary

    @staticmethod
    def group_by_page(records: Iterable[IssueRecord]) -> Dict[str, List[IssueRecord]]:
        """Group records by page name, pages in first-seen order."""
        groups: Dict[str, List[IssueRecord]] = {}
        for record in records:
            groups.setdefault(record.page_name or CURRENT_PAGE, []).append(record)
        return groups

    @classmethod
    def summary_text(cls, records: List[IssueRecord], scope_label: str) -> str:
        """One-line result message, e.g. 'Found 3 problems in Current Page'."""
        count = len(records)
        if not count:
            return f"No problems found in {scope_label}."
        noun = "problem" if count == 1 else "problems"
        parts = ", ".join(f"{k}: {v}" for k, v in cls.summarize(records).items())
        return f"Found {count} {noun} in {scope_label} ({parts})."

    @classmethod
    def build_report(
        cls, records: List[IssueRecord], file_name: str = ""
    ) -> Dict[str, Any]:
        """Structured report for external consumption. Read-only."""
        return {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "fileName": file_name,
            "totalProblems": len(records),
            "analysis": cls.analyze(records).to_dict(),
            "problems": [r.to_dict() for r in records],
        }

    @classmethod
    def format_report(cls, records: List[IssueRecord]) -> List[str]:
        """Plain-text detail lines, grouped by page."""
        lines: List[str] = []
        for page, page_records in cls.group_by_page(records).items():
            lines.append(f"{page} ({len(page_records)}):")
            for i, record in enumerate(page_records, start=1):
                lines.append(
                    f"  {i}. {record.name} - {record.issue} [{record.severity.value}]"
                )
        return lines

    def print_report(
        self, records: List[IssueRecord], file_name: str = "", timestamp: str = None
    ) -> None:
        """Prints a formatted report to the logger."""
        analysis = self.analyze(records)
        header_lines = [
            f"Generated: {timestamp or datetime.now().isoformat(timespec='seconds')}",
            f"File: {file_name or '-'}",
            f"Total problems: {analysis.total}",
        ]
        self.logger.log_box("Component Audit Report", header_lines)

        col_width = 24

        self.logger.info("")
        self.logger.notice("By Severity")
        self.logger.log_divider()
        for severity in Severity:
            count = analysis.by_severity.get(severity.value, 0)
            self.logger.log_raw(f"{severity.value:<{col_width}}: {count}")

        self.logger.info("")
        self.logger.notice("By Issue")
        self.logger.log_divider()
        for label, count in self.summarize(records).items():
            self.logger.log_raw(f"{label:<{col_width}}: {count}")

        if records:
            self.logger.info("")
            self.logger.notice("By Page")
            self.logger.log_divider()
            for line in self.format_report(records):
                self.logger.log_raw(line)


# --------------------------------------------------------------------------------------------
# Notes
# --------------------------------------------------------------------------------------------
