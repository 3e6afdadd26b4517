# !/usr/bin/python
# coding=utf-8
"""Message-passing boundary between an audit panel and the audit engine.

The panel sends intents (``{"type": "search-page"}``, ...) to
:meth:`ComponentAuditSlots.handle`; results come back as events through the
``emit`` callable as ``{"type", "message", "data"}`` dicts.
"""
from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional

import pythontk as ptk

# From this package:
from componenttk.node_utils._node_utils import NodeUtils
from componenttk.core_utils.diagnostics.issues import IssueRecord, ScanProfile
from componenttk.core_utils.diagnostics.classifier import NodeClassifier
from componenttk.core_utils.diagnostics.walker import ProgressReporter, TreeWalker
from componenttk.core_utils.diagnostics.scope import Scope, ScanTarget, ScopeResolver
from componenttk.core_utils.diagnostics.aggregator import Aggregator
from componenttk.core_utils.session import ProblemSession
from componenttk.core_utils.repair._repair import RemediationEngine, RemediationResult


@dataclass
class AuditEvent:
    """An outbound event for the panel."""

    type: str
    message: str = ""
    data: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "message": self.message, "data": dict(self.data)}


class ComponentAuditController(ptk.LoggingMixin):
    """Runs scans and remediation against a document and reports through events.

    Scans are cooperative: at every progress boundary the synchronous
    :meth:`search` calls ``yield_hook`` (e.g. a Qt ``processEvents``) and
    :meth:`search_async` awaits ``asyncio.sleep(0)``.

    Example:
        controller = ComponentAuditController(document, emit=print)
        controller.search("current-page")
    """

    def __init__(
        self,
        document,
        emit: Callable[[Dict[str, Any]], None] = None,
        profile: ScanProfile = None,
        yield_hook: Callable[[], None] = None,
        close_hook: Callable[[], None] = None,
        log_level: str = "WARNING",
    ):
        super().__init__()
        self.logger.setLevel(log_level)

        self.document = document
        self.emit = emit
        self.profile = profile or ScanProfile()
        self.yield_hook = yield_hook
        self.close_hook = close_hook

        self.session = ProblemSession(log_level=log_level)
        self.aggregator = Aggregator(log_level=log_level)
        self.classifier = NodeClassifier(self.profile, log_level=log_level)
        self.walker = TreeWalker(document, self.classifier, log_level=log_level)
        self.resolver = ScopeResolver(document, self.profile, log_level=log_level)
        self.engine = RemediationEngine(
            document, self.session, self.aggregator, log_level=log_level
        )
        self.logger.debug("ComponentAuditController initialized.")

    def send(self, event_type: str, message: str = "", **data) -> AuditEvent:
        """Build an event and hand it to ``emit``."""
        event = AuditEvent(event_type, message, data)
        if self.emit is not None:
            self.emit(event.to_dict())
        else:
            self.logger.debug(f"[{event_type}] {message}")
        return event

    def problems_payload(self) -> Dict[str, Any]:
        return {
            "problems": [r.to_dict() for r in self.session.problems],
            "analysis": self.session.analysis.to_dict(),
        }

    # ------------------------------------------------------------------ search

    def _accept(self, scope) -> Optional[Scope]:
        """Validate a scan request. None when a pending cancel consumed it."""
        scope = Scope.from_value(scope)
        if self.session.consume_cancel():
            self.logger.info("Search cancelled before it started.")
            self.send("info", "Search cancelled.")
            return None
        return scope

    def _reject_busy(self) -> None:
        self.send("info", "A search is already in progress.")

    def _start(self, scope: Scope) -> ScanTarget:
        target = self.resolver.resolve(scope)
        if target.fell_back:
            self.send("info", "No nodes selected. Scanning the whole current page.")
        self.send("search-start", f"Searching {target.label}...", scope=target.scope.value)
        return target

    def _collect(self, target: ScanTarget, records: List[IssueRecord]):
        """Walk ``target`` into ``records``, yielding at every progress boundary."""
        total = self.resolver.count_nodes(target)
        reporter = ProgressReporter(
            total,
            target.interval,
            self._on_progress,
            self.profile.progress_min_nodes,
        )
        if target.mode == "subtree":
            steps = self.walker.iter_subtrees(
                target.roots, target.page_name, target.page_id
            )
        else:
            steps = self.walker.iter_pages(target.pages)

        for record in steps:
            if record is not None:
                records.append(record)
            if reporter.advance():
                yield

    def _on_progress(self, processed: int, total: int) -> None:
        self.send(
            "search-progress",
            f"Searching... {processed}/{total}",
            progress=min(1.0, processed / total) if total else 0.0,
            processed=processed,
            total=total,
        )

    def _complete(self, target: ScanTarget, records: List[IssueRecord]) -> Dict[str, Any]:
        self.session.replace(records, target.label)
        current_page_count = 0
        if self.profile.select_after_scan and records:
            current_page_count = self._select_current_page_problems()

        message = self.aggregator.summary_text(records, target.label)
        if records:
            self.logger.notice(message)
        else:
            self.logger.success(message)

        data = dict(
            self.problems_payload(),
            scope=target.scope.value,
            currentPageCount=current_page_count,
            fellBack=target.fell_back,
        )
        self.send("search-complete", message, **data)
        return data

    def _select_current_page_problems(self) -> int:
        try:
            return self.engine.select_all_current().count
        except Exception as e:
            self.logger.warning(f"Could not select the current page problems: {e}")
            return 0

    def _fail(self, error: Exception) -> None:
        self.logger.error(f"Search failed: {error}")
        self.send("error", f"Search failed: {error}")

    def search(self, scope) -> Optional[Dict[str, Any]]:
        """Scan ``scope`` and publish the results.

        Parameters:
            scope (str/Scope): "selected", "current-page" or "all-pages".

        Returns:
            (dict/None) The search-complete payload, or None if the scan was
                rejected, cancelled or failed.

        Raises:
            ValueError: If ``scope`` is not a known scope.
        """
        scope = self._accept(scope)
        if scope is None:
            return None
        with self.session.scanning() as acquired:
            if not acquired:
                self._reject_busy()
                return None
            try:
                target = self._start(scope)
                records: List[IssueRecord] = []
                for _ in self._collect(target, records):
                    if self.yield_hook is not None:
                        self.yield_hook()
                return self._complete(target, records)
            except Exception as e:
                self._fail(e)
                return None

    async def search_async(self, scope) -> Optional[Dict[str, Any]]:
        """Asyncio variant of :meth:`search`, yielding to the event loop."""
        scope = self._accept(scope)
        if scope is None:
            return None
        with self.session.scanning() as acquired:
            if not acquired:
                self._reject_busy()
                return None
            try:
                target = self._start(scope)
                records: List[IssueRecord] = []
                for _ in self._collect(target, records):
                    await asyncio.sleep(0)
                return self._complete(target, records)
            except Exception as e:
                self._fail(e)
                return None

    def run_audit(self, scope="current-page", print_report: bool = True) -> List[IssueRecord]:
        """Headless entry point: scan, optionally print the report, return records."""
        self.search(scope)
        records = self.session.problems
        if print_report:
            self.aggregator.print_report(records, self.document.file_name)
        return records

    # ------------------------------------------------------------- remediation

    def _publish(self, result: RemediationResult, message: str) -> RemediationResult:
        self.send("success", message, **result.to_dict())
        self.send("problems-updated", "", **self.problems_payload())
        return result

    def _scan_blocks(self, action: str) -> bool:
        """True (after an info event) when a running scan forbids ``action``."""
        if not self.session.search_in_progress:
            return False
        self.logger.info(f"{action} rejected: a search is in progress.")
        self.send("info", "A search is in progress. Try again when it finishes.")
        return True

    def fix_missing(self, nodes=None) -> RemediationResult:
        if self._scan_blocks("detach-missing"):
            return RemediationResult("detach-missing")
        result = self.engine.detach_missing(nodes)
        return self._publish(result, f"Detached {result.count} instances.")

    def fix_unused(self, nodes=None) -> RemediationResult:
        if self._scan_blocks("delete-unused"):
            return RemediationResult("delete-unused")
        result = self.engine.delete_unused(nodes)
        return self._publish(result, f"Deleted {result.count} components.")

    def select_all_current(self, nodes=None) -> RemediationResult:
        result = self.engine.select_all_current(nodes)
        if result.count:
            self.send("success", f"Selected {result.count} problem nodes.", **result.to_dict())
        else:
            self.send("info", "No nodes to select on the current page.")
        return result

    def select_node(self, node_id: str) -> RemediationResult:
        result = self.engine.select_node(node_id)
        if not result.count:
            self.send("error", f"Node {node_id} could not be selected.")
        return result

    def detach_node(self, node_id: str) -> RemediationResult:
        if self._scan_blocks("detach-instance"):
            return RemediationResult("detach-instance")
        result = self.engine.detach_node(node_id)
        if result.count:
            return self._publish(result, "Instance detached.")
        self.send("error", f"Node {node_id} could not be detached.")
        self.send("problems-updated", "", **self.problems_payload())
        return result

    def delete_node(self, node_id: str) -> RemediationResult:
        if self._scan_blocks("delete-node"):
            return RemediationResult("delete-node")
        result = self.engine.delete_node(node_id)
        if result.count:
            return self._publish(result, "Node deleted.")
        self.send("error", f"Node {node_id} could not be deleted.")
        self.send("problems-updated", "", **self.problems_payload())
        return result

    def export_report(self, nodes=None, path: str = None) -> Dict[str, Any]:
        report = self.engine.export_report(nodes, path)
        self.send("report-ready", "Report exported.", **report)
        return report

    def cancel(self) -> None:
        """Flag a pending scan as cancelled and close the panel."""
        self.session.request_cancel()
        self.logger.debug("Cancel requested.")
        if self.close_hook is not None:
            self.close_hook()


class ComponentAuditSlots(ptk.HelpMixin, ptk.LoggingMixin):
    """Routes panel intents to the :class:`ComponentAuditController`.

    Intents:
        search-selected, search-page, search-all (search-all-pages),
        select-node {nodeId}, detach-instance {nodeId}, delete-node {nodeId},
        select-all-current {nodes?}, fix-missing {nodes?} (detach-missing),
        fix-unused {nodes?} (delete-unused), export-report {nodes?, path?},
        cancel (close)

    The slots hold no audit logic. Any fault raised while handling an intent
    becomes a single ``error`` event.
    """

    def __init__(
        self,
        document,
        emit: Callable[[Dict[str, Any]], None] = None,
        profile: ScanProfile = None,
        yield_hook: Callable[[], None] = None,
        close_hook: Callable[[], None] = None,
        log_level: str = "WARNING",
    ):
        super().__init__()
        self.logger.setLevel(log_level)

        self.document = document
        self.controller = ComponentAuditController(
            document,
            emit=emit,
            profile=profile,
            yield_hook=yield_hook,
            close_hook=close_hook,
            log_level=log_level,
        )
        self._handlers = {
            "search-selected": lambda msg: self.controller.search(Scope.SELECTED),
            "search-page": lambda msg: self.controller.search(Scope.CURRENT_PAGE),
            "search-all": lambda msg: self.controller.search(Scope.ALL_PAGES),
            "select-node": lambda msg: self.controller.select_node(self._node_id(msg)),
            "detach-instance": lambda msg: self.controller.detach_node(
                self._node_id(msg)
            ),
            "delete-node": lambda msg: self.controller.delete_node(self._node_id(msg)),
            "select-all-current": lambda msg: self.controller.select_all_current(
                msg.get("nodes")
            ),
            "fix-missing": lambda msg: self.controller.fix_missing(msg.get("nodes")),
            "fix-unused": lambda msg: self.controller.fix_unused(msg.get("nodes")),
            "export-report": lambda msg: self.controller.export_report(
                msg.get("nodes"), msg.get("path")
            ),
            "cancel": lambda msg: self.controller.cancel(),
        }
        self._aliases = {
            "search-all-pages": "search-all",
            "detach-missing": "fix-missing",
            "delete-unused": "fix-unused",
            "close": "cancel",
        }

    @property
    def session(self) -> ProblemSession:
        return self.controller.session

    def init(self) -> AuditEvent:
        """Announce the document state to the panel."""
        selection = self.document.selection or []
        page_name = NodeUtils.describe(self.document.current_page, "Page")
        return self.controller.send(
            "init",
            f"{len(selection)} nodes selected on '{page_name}'.",
            hasSelection=bool(selection),
            selectionCount=len(selection),
            currentPage=page_name,
            totalPages=len(self.document.pages() or []),
        )

    @staticmethod
    def _node_id(message: Mapping[str, Any]) -> str:
        node_id = message.get("nodeId", message.get("id"))
        if node_id is None:
            raise ValueError("Intent requires a nodeId.")
        return str(node_id)

    def handle(self, message: Mapping[str, Any]) -> Any:
        """Dispatch one intent.

        Parameters:
            message (dict): ``{"type": <intent>, ...}``. A ``pluginMessage``
                envelope is unwrapped.

        Returns:
            The handler's result, or None when the intent failed.
        """
        try:
            if isinstance(message, Mapping) and "pluginMessage" in message:
                message = message["pluginMessage"]
            if not isinstance(message, Mapping):
                raise ValueError(f"Malformed message: {message!r}")

            intent = str(message.get("type", ""))
            intent = self._aliases.get(intent, intent)
            handler = self._handlers.get(intent)
            if handler is None:
                raise ValueError(f"Unknown intent: {intent!r}")

            self.logger.debug(f"Handling intent '{intent}'.")
            return handler(message)
        except Exception as e:
            self.logger.error(f"Failed to handle message: {e}")
            self.controller.send("error", f"An error occurred while processing: {e}")
            return None


# --------------------------------------------------------------------------------------------
# Notes
# --------------------------------------------------------------------------------------------
