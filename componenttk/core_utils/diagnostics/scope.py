# !/usr/bin/python
# coding=utf-8
"""Resolve a requested scan scope into the roots or pages to walk."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional

import pythontk as ptk

# From this package:
from componenttk.node_utils._node_utils import NodeUtils
from componenttk.core_utils.diagnostics.issues import ScanProfile


class Scope(Enum):
    SELECTED = "selected"
    CURRENT_PAGE = "current-page"
    ALL_PAGES = "all-pages"

    @property
    def label(self) -> str:
        return _SCOPE_LABELS[self]

    @classmethod
    def from_value(cls, value) -> "Scope":
        """Resolve a scope from its value or an intent alias.

        Raises:
            ValueError: If the value names no known scope.
        """
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower().replace("_", "-")
        if key.startswith("search-"):
            key = key[len("search-") :]
        scope = _SCOPE_ALIASES.get(key)
        if scope is None:
            raise ValueError(f"Unknown scan scope: {value!r}")
        return scope


_SCOPE_LABELS = {
    Scope.SELECTED: "Selection",
    Scope.CURRENT_PAGE: "Current Page",
    Scope.ALL_PAGES: "All Pages",
}

_SCOPE_ALIASES = {
    "selected": Scope.SELECTED,
    "selection": Scope.SELECTED,
    "current-page": Scope.CURRENT_PAGE,
    "page": Scope.CURRENT_PAGE,
    "all-pages": Scope.ALL_PAGES,
    "all": Scope.ALL_PAGES,
}


@dataclass
class ScanTarget:
    """What a scan walks.

    ``mode`` is "subtree" (walk ``roots`` recursively) or "pages" (classify
    each page's flattened descendants).
    """

    scope: Scope
    mode: str
    roots: List[Any] = field(default_factory=list)
    pages: List[Any] = field(default_factory=list)
    page_name: Optional[str] = None
    page_id: Optional[str] = None
    interval: int = 100
    fell_back: bool = False

    @property
    def label(self) -> str:
        return self.scope.label

    @property
    def is_empty(self) -> bool:
        return not (self.roots if self.mode == "subtree" else self.pages)


class ScopeResolver(ptk.LoggingMixin):
    """Turn a scope request into a :class:`ScanTarget`.

    An empty selection falls back to scanning the current page when
    ``profile.empty_selection_fallback`` is set (the default); otherwise the
    target is an empty subtree scan.
    """

    def __init__(self, document, profile: ScanProfile = None, log_level="WARNING"):
        super().__init__()
        self.logger.setLevel(log_level)
        self.document = document
        self.profile = profile or ScanProfile()

    def resolve(self, scope) -> ScanTarget:
        scope = Scope.from_value(scope)

        if scope == Scope.SELECTED:
            selection = list(self.document.selection or [])
            if selection or not self.profile.empty_selection_fallback:
                page = self.document.current_page
                return ScanTarget(
                    scope=scope,
                    mode="subtree",
                    roots=selection,
                    page_name=NodeUtils.describe(page, "Page"),
                    page_id=NodeUtils.get_id(page),
                    interval=self.profile.page_interval,
                )
            self.logger.info("Selection is empty, scanning the current page instead.")
            target = self.resolve(Scope.CURRENT_PAGE)
            target.fell_back = True
            return target

        if scope == Scope.CURRENT_PAGE:
            return ScanTarget(
                scope=scope,
                mode="pages",
                pages=[self.document.current_page],
                interval=self.profile.page_interval,
            )

        return ScanTarget(
            scope=scope,
            mode="pages",
            pages=list(self.document.pages() or []),
            interval=self.profile.multi_page_interval,
        )

    def count_nodes(self, target: ScanTarget) -> int:
        """Pre-compute how many nodes a scan of ``target`` will visit.

        A root or page that fails to enumerate counts as zero.
        """
        total = 0
        if target.mode == "subtree":
            for root in target.roots:
                try:
                    total += 1 + len(self.document.find_all(root))
                except Exception as e:
                    self.logger.warning(
                        f"Failed to count nodes under {NodeUtils.describe(root)}: {e}"
                    )
                    total += 1
            return total

        for page in target.pages:
            try:
                total += len(self.document.find_all(page))
            except Exception as e:
                self.logger.warning(
                    f"Failed to count nodes on page '{NodeUtils.describe(page, 'Page')}': {e}"
                )
        return total


# --------------------------------------------------------------------------------------------
# Notes
# --------------------------------------------------------------------------------------------
