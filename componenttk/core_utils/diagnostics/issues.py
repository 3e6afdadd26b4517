# !/usr/bin/python
# coding=utf-8
"""Records produced by a component audit."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional


# Page names used when a record is not tied to a concrete page.
SELECTED_PAGE = "Selected"
CURRENT_PAGE = "Current Page"


class Severity(Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class IssueKind(Enum):
    MISSING_TEMPLATE = "missing-template"
    REMOTE_TEMPLATE = "remote-template"
    STRUCTURAL_DRIFT = "structural-drift"
    UNUSED_TEMPLATE = "unused-template"
    UNUSED_TEMPLATE_SET = "unused-template-set"
    ANALYSIS_ERROR = "analysis-error"

    @property
    def severity(self) -> Severity:
        return _SEVERITY_BY_KIND[self]

    @property
    def label(self) -> str:
        """Human-readable description shown in reports."""
        return _LABEL_BY_KIND[self]

    @classmethod
    def from_value(cls, value: Any) -> "IssueKind":
        """Resolve an issue kind from its value or a legacy plugin name.

        Raises:
            ValueError: If the value names no known issue kind.
        """
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower()
        try:
            return cls(key)
        except ValueError:
            pass
        if key in _LEGACY_KINDS:
            return _LEGACY_KINDS[key]
        raise ValueError(f"Unknown issue kind: {value!r}")


_SEVERITY_BY_KIND = {
    IssueKind.MISSING_TEMPLATE: Severity.HIGH,
    IssueKind.REMOTE_TEMPLATE: Severity.MEDIUM,
    IssueKind.STRUCTURAL_DRIFT: Severity.MEDIUM,
    IssueKind.UNUSED_TEMPLATE: Severity.LOW,
    IssueKind.UNUSED_TEMPLATE_SET: Severity.LOW,
    IssueKind.ANALYSIS_ERROR: Severity.LOW,
}

_LABEL_BY_KIND = {
    IssueKind.MISSING_TEMPLATE: "Missing main component",
    IssueKind.REMOTE_TEMPLATE: "Remote component",
    IssueKind.STRUCTURAL_DRIFT: "Structure changed",
    IssueKind.UNUSED_TEMPLATE: "Unused component",
    IssueKind.UNUSED_TEMPLATE_SET: "Unused component set",
    IssueKind.ANALYSIS_ERROR: "Analysis error",
}

# Type names emitted by earlier versions of the plugin UI.
_LEGACY_KINDS = {
    "missing": IssueKind.MISSING_TEMPLATE,
    "missing-component": IssueKind.MISSING_TEMPLATE,
    "remote": IssueKind.REMOTE_TEMPLATE,
    "remote-component": IssueKind.REMOTE_TEMPLATE,
    "modified": IssueKind.STRUCTURAL_DRIFT,
    "structural-changes": IssueKind.STRUCTURAL_DRIFT,
    "unused": IssueKind.UNUSED_TEMPLATE,
    "unused-component": IssueKind.UNUSED_TEMPLATE,
    "unused-component-set": IssueKind.UNUSED_TEMPLATE_SET,
}

UNUSED_KINDS = (IssueKind.UNUSED_TEMPLATE, IssueKind.UNUSED_TEMPLATE_SET)


@dataclass(frozen=True)
class IssueRecord:
    """One problem found on one node during a scan."""

    node_id: str
    name: str
    issue_kind: IssueKind
    page_name: str = CURRENT_PAGE
    node_kind: str = "other"
    issue: str = ""
    page_id: Optional[str] = None

    def __post_init__(self):
        if not self.issue:
            object.__setattr__(self, "issue", self.issue_kind.label)

    @property
    def severity(self) -> Severity:
        return self.issue_kind.severity

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the camelCase shape exchanged with the UI."""
        return {
            "nodeId": self.node_id,
            "name": self.name,
            "issueKind": self.issue_kind.value,
            "severity": self.severity.value,
            "pageName": self.page_name,
            "nodeKind": self.node_kind,
            "issue": self.issue,
            "pageId": self.page_id,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "IssueRecord":
        """Build a record from UI node data.

        Accepts the shape written by :meth:`to_dict` and the keys used by the
        legacy plugin panel (``id``, ``type``, ``page``, ``nodeType``).

        Raises:
            ValueError: If the payload has no node id or no recognizable kind.
        """
        if not isinstance(data, Mapping):
            raise ValueError(f"Node data must be a mapping, got {type(data).__name__}")

        node_id = data.get("nodeId", data.get("id"))
        if node_id is None or node_id == "":
            raise ValueError(f"Node data has no id: {dict(data)!r}")

        kind = data.get("issueKind", data.get("type"))
        if kind is None:
            raise ValueError(f"Node data has no issue kind: {dict(data)!r}")

        page_name = data.get("pageName") or data.get("page") or CURRENT_PAGE
        return cls(
            node_id=str(node_id),
            name=str(data.get("name") or "Unnamed"),
            issue_kind=IssueKind.from_value(kind),
            page_name=str(page_name),
            node_kind=str(data.get("nodeKind", data.get("nodeType", "other"))),
            issue=str(data.get("issue") or ""),
            page_id=data.get("pageId"),
        )


@dataclass
class Analysis:
    """Counts derived from a problem set."""

    total: int = 0
    by_severity: Dict[str, int] = field(
        default_factory=lambda: {s.value: 0 for s in Severity}
    )
    by_type: Dict[str, int] = field(default_factory=dict)
    by_page: Dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total": self.total,
            "bySeverity": dict(self.by_severity),
            "byType": dict(self.by_type),
            "byPage": dict(self.by_page),
        }


@dataclass
class ScanProfile:
    """Thresholds and pacing for a component audit."""

    name: str = "Standard"
    drift_override_threshold: int = 10  # Flag drift above this many overrides
    page_interval: int = 100  # Progress interval for selection / current page
    multi_page_interval: int = 200  # Progress interval for all-pages scans
    progress_min_nodes: int = 100  # No progress events below this many nodes
    empty_selection_fallback: bool = True  # Empty selection scans the current page
    select_after_scan: bool = True  # Select current-page problems when done


# --------------------------------------------------------------------------------------------
# Notes
# --------------------------------------------------------------------------------------------
