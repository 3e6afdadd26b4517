# !/usr/bin/python
# coding=utf-8
"""Per-node classification of component integrity problems."""
from __future__ import annotations

from typing import Any, Optional

import pythontk as ptk

# From this package:
from componenttk.env_utils.document import NodeKind
from componenttk.node_utils._node_utils import NodeUtils
from componenttk.core_utils.diagnostics.issues import (
    CURRENT_PAGE,
    IssueKind,
    IssueRecord,
    ScanProfile,
)


class NodeClassifier(ptk.LoggingMixin):
    """Classify a single node into at most one issue.

    Rules are checked in order and the first match wins:
        1. Instance without a resolvable main component -> missing-template
        2. Instance whose main component is remote -> remote-template
        3. Instance that drifted from its main component -> structural-drift
        4. Component with no instances -> unused-template
        5. Component set none of whose variants has instances -> unused-template-set

    Example:
        classifier = NodeClassifier()
        record = classifier.classify(node, page_name="Page 1")
    """

    def __init__(self, profile: ScanProfile = None, log_level: str = "WARNING"):
        super().__init__()
        self.logger.setLevel(log_level)
        self.profile = profile or ScanProfile()

    def classify(
        self,
        node: Any,
        page_name: Optional[str] = None,
        page_id: Optional[str] = None,
    ) -> Optional[IssueRecord]:
        """Return the issue for ``node`` or None. Never raises.

        Parameters:
            node (obj): The host node to inspect.
            page_name (str): Page name stamped on the record.
            page_id (str): Optional page id stamped on the record.

        Returns:
            (IssueRecord/None)
        """
        page_name = page_name or CURRENT_PAGE
        try:
            kind = NodeUtils.get_kind(node)
            issue_kind = self._match_rule(node, kind)
            if issue_kind is None:
                return None
            return IssueRecord(
                node_id=NodeUtils.get_id(node) or "",
                name=NodeUtils.get_name(node, self._default_name(kind)),
                issue_kind=issue_kind,
                page_name=page_name,
                node_kind=kind.value,
                page_id=page_id,
            )
        except Exception as e:
            self.logger.warning(f"Failed to analyze node {self._safe_id(node)}: {e}")
            return IssueRecord(
                node_id=self._safe_id(node),
                name=NodeUtils.describe(node),
                issue_kind=IssueKind.ANALYSIS_ERROR,
                page_name=page_name,
                node_kind=self._safe_kind(node),
                issue=f"{IssueKind.ANALYSIS_ERROR.label}: {e}",
                page_id=page_id,
            )

    def _match_rule(self, node: Any, kind: NodeKind) -> Optional[IssueKind]:
        if kind == NodeKind.INSTANCE:
            main = NodeUtils.get_main_component(node)
            if main is None:
                return IssueKind.MISSING_TEMPLATE
            if NodeUtils.is_remote(main):
                return IssueKind.REMOTE_TEMPLATE
            if self.has_structural_drift(node):
                return IssueKind.STRUCTURAL_DRIFT
            return None

        if kind == NodeKind.COMPONENT:
            if not NodeUtils.get_instances(node):
                return IssueKind.UNUSED_TEMPLATE
            return None

        if kind == NodeKind.COMPONENT_SET:
            if not self._set_has_instances(node):
                return IssueKind.UNUSED_TEMPLATE_SET
            return None

        return None

    def _set_has_instances(self, component_set: Any) -> bool:
        """True if any component variant of the set has instances."""
        for variant in NodeUtils.get_children(component_set) or []:
            try:
                if NodeUtils.get_kind(variant) != NodeKind.COMPONENT:
                    continue
                if NodeUtils.get_instances(variant):
                    return True
            except Exception as e:
                # An unreadable variant counts as having no instances.
                self.logger.debug(f"Skipping unreadable variant: {e}")
        return False

    def has_structural_drift(self, instance: Any) -> bool:
        """Heuristic: has the instance meaningfully diverged from its template?

        True if the child counts differ. Otherwise, if the instance carries
        overrides, True when the number of distinct overridden properties
        exceeds ``profile.drift_override_threshold``. Never raises.
        """
        try:
            main = NodeUtils.get_main_component(instance)
            if main is None:
                return False

            if NodeUtils.child_count(instance) != NodeUtils.child_count(main):
                return True

            overrides = NodeUtils.get_overrides(instance)
            if overrides:
                count = NodeUtils.count_overridden_properties(overrides)
                return count > self.profile.drift_override_threshold
            return False
        except Exception as e:
            self.logger.debug(f"Drift check failed, treating as unchanged: {e}")
            return False

    @staticmethod
    def _default_name(kind: NodeKind) -> str:
        if kind == NodeKind.COMPONENT:
            return "Unnamed Component"
        if kind == NodeKind.COMPONENT_SET:
            return "Unnamed Component Set"
        return "Unnamed"

    @staticmethod
    def _safe_id(node: Any) -> str:
        try:
            return NodeUtils.get_id(node) or ""
        except Exception:
            return ""

    @staticmethod
    def _safe_kind(node: Any) -> str:
        try:
            return NodeUtils.get_kind(node).value
        except Exception:
            return NodeKind.OTHER.value


# --------------------------------------------------------------------------------------------
# Notes
# --------------------------------------------------------------------------------------------
