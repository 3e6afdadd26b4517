# !/usr/bin/python
# coding=utf-8
"""Host document interface consumed by the audit engine.

The engine never stores or creates nodes. It reads them through a
:class:`HostDocument` and issues detach/remove/selection calls back to it.
Nodes are plain host objects; every attribute the engine reads is optional
and goes through :class:`componenttk.node_utils._node_utils.NodeUtils`.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, List, Optional, Sequence


class NodeKind(Enum):
    """Normalized node kinds."""

    INSTANCE = "instance"
    COMPONENT = "component"
    COMPONENT_SET = "component-set"
    CONTAINER = "container"
    OTHER = "other"
    # Structural kinds, only used to find the page that owns a node.
    PAGE = "page"
    DOCUMENT = "document"

    @classmethod
    def from_value(cls, value: Any) -> "NodeKind":
        """Map a raw host type string to a NodeKind.

        Accepts normalized values ("component-set") as well as host spellings
        ("COMPONENT_SET", "FRAME", "CANVAS"). Anything unknown maps to OTHER.
        """
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return cls.OTHER
        key = value.strip().lower().replace("_", "-")
        return _KIND_ALIASES.get(key, cls.OTHER)


_KIND_ALIASES = {
    "instance": NodeKind.INSTANCE,
    "component": NodeKind.COMPONENT,
    "component-set": NodeKind.COMPONENT_SET,
    "componentset": NodeKind.COMPONENT_SET,
    "container": NodeKind.CONTAINER,
    "frame": NodeKind.CONTAINER,
    "group": NodeKind.CONTAINER,
    "section": NodeKind.CONTAINER,
    "other": NodeKind.OTHER,
    "page": NodeKind.PAGE,
    "canvas": NodeKind.PAGE,
    "document": NodeKind.DOCUMENT,
}


class HostDocument(ABC):
    """Capability contract for the host document model.

    Query methods return ``None`` or empty sequences for absent data instead
    of raising. Mutation methods may raise; callers treat a raise as a
    per-item failure.
    """

    # ------------------------------------------------------------------ query

    @property
    @abstractmethod
    def file_name(self) -> str:
        """Name of the open document."""

    @abstractmethod
    def get_node_by_id(self, node_id: str) -> Optional[Any]:
        """Return the node with the given id, or None when it no longer exists."""

    @abstractmethod
    def find_all(self, root: Any) -> List[Any]:
        """Return every descendant of ``root`` in pre-order (``root`` excluded)."""

    @abstractmethod
    def pages(self) -> List[Any]:
        """Return the document pages in order."""

    @property
    @abstractmethod
    def current_page(self) -> Any:
        """The active page."""

    @property
    @abstractmethod
    def selection(self) -> List[Any]:
        """Nodes selected on the active page."""

    # ----------------------------------------------------------------- mutate

    @abstractmethod
    def detach_instance(self, node: Any) -> None:
        """Convert an instance into a plain container. No-op for other kinds."""

    @abstractmethod
    def remove_node(self, node: Any) -> None:
        """Delete a node and its subtree."""

    @abstractmethod
    def set_selection(self, nodes: Sequence[Any]) -> None:
        """Replace the selection on the active page."""

    @abstractmethod
    def scroll_into_view(self, nodes: Sequence[Any]) -> None:
        """Bring the given nodes into the viewport."""

    @abstractmethod
    def set_current_page(self, page: Any) -> None:
        """Switch the active page."""


# --------------------------------------------------------------------------------------------
# Notes
# --------------------------------------------------------------------------------------------
