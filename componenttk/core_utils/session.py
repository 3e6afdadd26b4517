# !/usr/bin/python
# coding=utf-8
"""Problem set and scan state for one audit panel."""
from __future__ import annotations

from contextlib import contextmanager
from typing import Callable, Iterable, List

import pythontk as ptk

# From this package:
from componenttk.core_utils.diagnostics.issues import Analysis, IssueRecord
from componenttk.core_utils.diagnostics.aggregator import Aggregator


class ProblemSession(ptk.LoggingMixin):
    """Owns the current problem set and the busy / cancelled flags.

    The problem set is replaced wholesale by each scan and only ever
    filtered afterwards; records are never edited in place.
    """

    def __init__(self, log_level: str = "WARNING"):
        super().__init__()
        self.logger.setLevel(log_level)
        self._problems: List[IssueRecord] = []
        self.scope_label: str = ""
        self.search_in_progress: bool = False
        self.cancelled: bool = False

    @property
    def problems(self) -> List[IssueRecord]:
        """A copy of the current problem set."""
        return list(self._problems)

    @property
    def analysis(self) -> Analysis:
        return Aggregator.analyze(self._problems)

    def __len__(self) -> int:
        return len(self._problems)

    def begin_scan(self) -> bool:
        """Mark a scan as running. Returns False if one already is."""
        if self.search_in_progress:
            self.logger.info("A search is already in progress.")
            return False
        self.search_in_progress = True
        return True

    def end_scan(self) -> None:
        self.search_in_progress = False

    @contextmanager
    def scanning(self):
        """Hold the busy flag for the duration of the block.

        Yields:
            (bool) False when another scan already holds the flag; the block
                should then do nothing. The flag is only released by the
                caller that acquired it.
        """
        acquired = self.begin_scan()
        try:
            yield acquired
        finally:
            if acquired:
                self.end_scan()

    def request_cancel(self) -> None:
        """Flag the next scan to abort before it starts."""
        self.cancelled = True

    def consume_cancel(self) -> bool:
        """Return and clear the cancelled flag."""
        cancelled, self.cancelled = self.cancelled, False
        return cancelled

    def replace(self, records: Iterable[IssueRecord], scope_label: str = "") -> None:
        self._problems = list(records)
        self.scope_label = scope_label
        self.logger.debug(f"Problem set replaced: {len(self._problems)} records.")

    def filter(self, predicate: Callable[[IssueRecord], bool]) -> List[IssueRecord]:
        """Keep only the records for which ``predicate`` is true.

        Returns:
            (list) The records that were dropped.
        """
        kept, dropped = [], []
        for record in self._problems:
            (kept if predicate(record) else dropped).append(record)
        self._problems = kept
        return dropped

    def filter_out(self, node_ids: Iterable[str]) -> List[IssueRecord]:
        """Drop every record whose node id is in ``node_ids``."""
        ids = set(node_ids)
        if not ids:
            return []
        dropped = self.filter(lambda r: r.node_id not in ids)
        if dropped:
            self.logger.debug(f"Dropped {len(dropped)} records from the problem set.")
        return dropped

    def clear(self) -> None:
        self._problems = []
        self.scope_label = ""


# --------------------------------------------------------------------------------------------
# Notes
# --------------------------------------------------------------------------------------------
