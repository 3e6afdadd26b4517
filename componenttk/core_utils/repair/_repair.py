# !/usr/bin/python
# coding=utf-8
"""Batch remediation over the current problem set."""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

import pythontk as ptk

# From this package:
from componenttk.env_utils.document import NodeKind
from componenttk.node_utils._node_utils import NodeUtils
from componenttk.core_utils.diagnostics.issues import (
    CURRENT_PAGE,
    SELECTED_PAGE,
    UNUSED_KINDS,
    IssueKind,
    IssueRecord,
)
from componenttk.core_utils.diagnostics.aggregator import Aggregator
from componenttk.core_utils.session import ProblemSession

RecordLike = Union[IssueRecord, Mapping[str, Any]]

# Page names that mean "whatever page is active".
SCOPE_PAGE_NAMES = ("", SELECTED_PAGE, CURRENT_PAGE)


@dataclass
class RemediationResult:
    """Outcome of one remediation action.

    ``stale_ids`` are records whose node is gone or no longer the expected
    kind; ``failed_ids`` are nodes the host refused to mutate.
    """

    action: str
    succeeded_ids: List[str] = field(default_factory=list)
    stale_ids: List[str] = field(default_factory=list)
    failed_ids: List[str] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.succeeded_ids)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "action": self.action,
            "count": self.count,
            "succeeded": list(self.succeeded_ids),
            "stale": list(self.stale_ids),
            "failed": list(self.failed_ids),
        }


class RemediationEngine(ptk.LoggingMixin, ptk.HelpMixin):
    """Apply fixes to the nodes named by issue records.

    Every action works on an explicit record list (records or UI node dicts)
    or, when none is given, on the session's current problem set. A fault on
    one item is logged and the batch continues. After a mutating action the
    session forgets the ids that were fixed or found stale.

    Example:
        engine = RemediationEngine(document, session)
        result = engine.detach_missing()
        print(result.count)
    """

    def __init__(
        self,
        document,
        session: ProblemSession = None,
        aggregator: Aggregator = None,
        log_level: str = "WARNING",
    ):
        super().__init__()
        self.logger.setLevel(log_level)
        self.document = document
        self.session = (
            session if session is not None else ProblemSession(log_level=log_level)
        )
        self.aggregator = (
            aggregator if aggregator is not None else Aggregator(log_level=log_level)
        )

    def _coerce_records(
        self, records: Optional[Iterable[RecordLike]]
    ) -> List[IssueRecord]:
        """Normalize the input to a list of records.

        Raises:
            ValueError: If a node dict cannot be read as a record.
        """
        if records is None:
            return self.session.problems
        return [
            r if isinstance(r, IssueRecord) else IssueRecord.from_dict(r)
            for r in records
        ]

    def _resolve(self, node_id: str, kinds=None) -> Optional[Any]:
        """Look the node up again. None when gone or not one of ``kinds``."""
        node = self.document.get_node_by_id(node_id)
        if node is None or NodeUtils.is_removed(node):
            return None
        if kinds and NodeUtils.get_kind(node) not in kinds:
            return None
        return node

    def _mutate_each(
        self,
        action: str,
        records: List[IssueRecord],
        kinds,
        mutate,
    ) -> RemediationResult:
        result = RemediationResult(action)
        for record in records:
            try:
                node = self._resolve(record.node_id, kinds)
                if node is None:
                    self.logger.debug(f"Skipping stale node '{record.name}'.")
                    result.stale_ids.append(record.node_id)
                    continue
                mutate(node)
                result.succeeded_ids.append(record.node_id)
            except Exception as e:
                self.logger.warning(f"{action}: failed on '{record.name}': {e}")
                result.failed_ids.append(record.node_id)

        self.session.filter_out(result.succeeded_ids + result.stale_ids)
        self.logger.info(
            f"{action}: {result.count} succeeded, {len(result.stale_ids)} stale, "
            f"{len(result.failed_ids)} failed."
        )
        return result

    def detach_missing(
        self, records: Optional[Iterable[RecordLike]] = None
    ) -> RemediationResult:
        """Detach every instance whose main component is missing."""
        targets = [
            r
            for r in self._coerce_records(records)
            if r.issue_kind == IssueKind.MISSING_TEMPLATE
        ]
        return self._mutate_each(
            "detach-missing",
            targets,
            (NodeKind.INSTANCE,),
            self.document.detach_instance,
        )

    def delete_unused(
        self, records: Optional[Iterable[RecordLike]] = None
    ) -> RemediationResult:
        """Delete every component and component set that has no instances."""
        targets = [
            r for r in self._coerce_records(records) if r.issue_kind in UNUSED_KINDS
        ]
        return self._mutate_each(
            "delete-unused",
            targets,
            (NodeKind.COMPONENT, NodeKind.COMPONENT_SET),
            self.document.remove_node,
        )

    def is_on_current_page(self, record: IssueRecord) -> bool:
        """True if the record belongs to the active page (or to a scope sentinel)."""
        if record.page_name in SCOPE_PAGE_NAMES:
            return True
        page = self.document.current_page
        page_id = NodeUtils.get_id(page)
        if record.page_id is not None and page_id is not None:
            return record.page_id == page_id
        return record.page_name == NodeUtils.get_name(page, "")

    def select_all_current(
        self, records: Optional[Iterable[RecordLike]] = None
    ) -> RemediationResult:
        """Select and reveal every resolvable problem node on the active page.

        An empty result is not an error; the host selection is then left
        untouched.
        """
        result = RemediationResult("select-all-current")
        nodes = []
        for record in self._coerce_records(records):
            try:
                if not self.is_on_current_page(record):
                    continue
                node = self._resolve(record.node_id)
                if node is None:
                    result.stale_ids.append(record.node_id)
                    continue
                nodes.append(node)
                result.succeeded_ids.append(record.node_id)
            except Exception as e:
                self.logger.warning(f"Could not resolve '{record.name}': {e}")
                result.failed_ids.append(record.node_id)

        if not nodes:
            self.logger.info("Nothing to select on the current page.")
            return result

        self.document.set_selection(nodes)
        self.document.scroll_into_view(nodes)
        self.logger.info(f"Selected {len(nodes)} problem nodes.")
        return result

    def select_node(self, node_id: str) -> RemediationResult:
        """Select a single node, switching to the page that owns it."""
        result = RemediationResult("select-node")
        try:
            node = self._resolve(node_id)
            if node is None:
                result.stale_ids.append(node_id)
                self.logger.info(f"Node {node_id} no longer exists.")
                return result

            page = NodeUtils.get_page(node)
            if page is not None and page is not self.document.current_page:
                self.document.set_current_page(page)
            self.document.set_selection([node])
            self.document.scroll_into_view([node])
            result.succeeded_ids.append(node_id)
        except Exception as e:
            self.logger.warning(f"Failed to select node {node_id}: {e}")
            result.failed_ids.append(node_id)
        return result

    def detach_node(self, node_id: str) -> RemediationResult:
        """Detach a single instance."""
        record = self._record_for(node_id)
        return self._mutate_each(
            "detach-instance",
            [record],
            (NodeKind.INSTANCE,),
            self.document.detach_instance,
        )

    def delete_node(self, node_id: str) -> RemediationResult:
        """Delete a single node of any kind."""
        record = self._record_for(node_id)
        return self._mutate_each(
            "delete-node", [record], None, self.document.remove_node
        )

    def _record_for(self, node_id: str) -> IssueRecord:
        """The session's record for ``node_id``, or a placeholder for logging."""
        node_id = str(node_id)
        for record in self.session.problems:
            if record.node_id == node_id:
                return record
        return IssueRecord(node_id, node_id, IssueKind.ANALYSIS_ERROR)

    def export_report(
        self,
        records: Optional[Iterable[RecordLike]] = None,
        path: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Build the report, print it to the log and optionally write it as JSON.

        Parameters:
            records (list): Records or node dicts. Defaults to the current set.
            path (str): If given, the report is written to this file.

        Returns:
            (dict) ``{timestamp, fileName, totalProblems, analysis, problems}``
        """
        records = self._coerce_records(records)
        file_name = self.document.file_name
        report = self.aggregator.build_report(records, file_name)
        self.aggregator.print_report(records, file_name, report["timestamp"])

        if path:
            with open(path, "w", encoding="utf-8") as f:
                json.dump(report, f, indent=2, ensure_ascii=False)
            self.logger.info(f"Report written to {path}")
        return report


# --------------------------------------------------------------------------------------------
# Notes
# --------------------------------------------------------------------------------------------
