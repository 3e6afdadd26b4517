# !/usr/bin/python
# coding=utf-8
"""Tree traversal and progress metering for component audits."""
from __future__ import annotations

from typing import Any, Callable, Iterable, Iterator, List, Optional

import pythontk as ptk

# From this package:
from componenttk.node_utils._node_utils import NodeUtils
from componenttk.core_utils.diagnostics.classifier import NodeClassifier
from componenttk.core_utils.diagnostics.issues import IssueRecord


class ProgressReporter:
    """Emit ``callback(processed, total)`` every ``interval`` processed nodes.

    ``advance`` returns True on each reporting boundary; callers use that as
    the point to hand control back to the host.
    """

    def __init__(
        self,
        total: int,
        interval: int = 100,
        callback: Optional[Callable[[int, int], None]] = None,
        min_nodes: int = 0,
    ):
        self.total = max(0, int(total))
        self.interval = max(1, int(interval))
        self.callback = callback
        self.enabled = self.total > 0 and self.total >= min_nodes
        self.processed = 0

    @property
    def fraction(self) -> float:
        if not self.total:
            return 0.0
        return min(1.0, self.processed / self.total)

    def advance(self, count: int = 1) -> bool:
        """Count processed nodes. Returns True when a progress boundary was crossed."""
        before = self.processed // self.interval
        self.processed += count
        if not self.enabled or self.processed // self.interval == before:
            return False
        if self.callback:
            self.callback(self.processed, self.total)
        return True


class TreeWalker(ptk.LoggingMixin):
    """Walk host nodes and classify each one.

    Two entry points:
        - Subtree mode (``walk``): recurse from explicit roots, pre-order.
        - Flat mode (``walk_pages``): classify each page's host-provided
          descendant enumeration.

    The ``iter_*`` generators yield one step per visited node: the issue
    record, or None when the node is clean.
    """

    def __init__(
        self,
        document: Any = None,
        classifier: NodeClassifier = None,
        log_level: str = "WARNING",
    ):
        super().__init__()
        self.logger.setLevel(log_level)
        self.document = document
        self.classifier = classifier or NodeClassifier(log_level=log_level)

    def iter_subtrees(
        self,
        roots: Iterable[Any],
        page_name: Optional[str] = None,
        page_id: Optional[str] = None,
    ) -> Iterator[Optional[IssueRecord]]:
        """Visit every root and its descendants, node before children.

        Uses an explicit stack, so tree depth is not limited by recursion.
        A node whose children cannot be read is still classified, its subtree
        is skipped with a warning, and the walk continues with its siblings.
        """
        for root in ptk.make_iterable(roots):
            stack = [root]
            while stack:
                node = stack.pop()
                yield self.classifier.classify(node, page_name, page_id)

                try:
                    children = NodeUtils.get_children(node)
                except Exception as e:
                    self.logger.warning(
                        f"Skipping children of {NodeUtils.describe(node)}: {e}"
                    )
                    continue
                if children:
                    stack.extend(reversed(children))

    def iter_pages(self, pages: Iterable[Any]) -> Iterator[Optional[IssueRecord]]:
        """Visit each page's flattened descendants.

        A page whose enumeration fails contributes nothing; the walk moves on
        to the next page.
        """
        for page in ptk.make_iterable(pages):
            page_name = NodeUtils.describe(page, "Page")
            try:
                page_id = NodeUtils.get_id(page)
                nodes = list(self.document.find_all(page))
            except Exception as e:
                self.logger.warning(f"Failed to enumerate page '{page_name}': {e}")
                continue

            self.logger.debug(f"Scanning page '{page_name}' ({len(nodes)} nodes)")
            for node in nodes:
                yield self.classifier.classify(node, page_name, page_id)

    def walk(
        self,
        roots: Iterable[Any],
        page_name: Optional[str] = None,
        page_id: Optional[str] = None,
    ) -> List[IssueRecord]:
        """Collect the issue records of the given subtrees in traversal order."""
        return [r for r in self.iter_subtrees(roots, page_name, page_id) if r]

    def walk_pages(self, pages: Iterable[Any]) -> List[IssueRecord]:
        """Collect the issue records of the given pages in page order."""
        return [r for r in self.iter_pages(pages) if r]


# --------------------------------------------------------------------------------------------
# Notes
# --------------------------------------------------------------------------------------------
