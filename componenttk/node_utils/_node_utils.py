# !/usr/bin/python
# coding=utf-8
from typing import Any, Iterable, List, Mapping, Optional

import pythontk as ptk

# From this package:
from componenttk.env_utils.document import NodeKind


_MISSING = object()


class NodeUtils(ptk.HelpMixin):
    """Guarded read access to host nodes.

    Host nodes are duck-typed objects (or plain mappings) with any subset of
    ``id, name, type/kind, children, parent, main_component/mainComponent,
    remote, overrides, instances, removed``. Absent attributes read as None;
    faults raised by the host while reading are not swallowed here.
    """

    @staticmethod
    def _read(node: Any, *names: str, default: Any = None) -> Any:
        """Return the first present attribute (or mapping key) among ``names``."""
        if node is None:
            return default
        for name in names:
            if isinstance(node, Mapping):
                value = node.get(name, _MISSING)
            else:
                value = getattr(node, name, _MISSING)
            if value is not _MISSING:
                return value
        return default

    @classmethod
    def get_id(cls, node: Any) -> Optional[str]:
        """Get the node id as a string, or None."""
        node_id = cls._read(node, "id")
        return None if node_id is None else str(node_id)

    @classmethod
    def get_name(cls, node: Any, default: str = "Unnamed") -> str:
        """Get the display name of a node.

        Parameters:
            node (obj): The node to query.
            default (str): Returned when the node has no (or an empty) name.

        Returns:
            (str)
        """
        name = cls._read(node, "name")
        return str(name) if name else default

    @classmethod
    def describe(cls, node: Any, default: str = "Unnamed") -> str:
        """Name for log messages. Never raises."""
        try:
            return cls.get_name(node, default)
        except Exception:
            return default

    @classmethod
    def get_kind(cls, node: Any) -> NodeKind:
        """Get the normalized kind of a node (OTHER when unknown)."""
        return NodeKind.from_value(cls._read(node, "kind", "type"))

    @classmethod
    def get_children(cls, node: Any) -> Optional[List[Any]]:
        """Get the child nodes.

        Returns:
            (list/None) None when the node has no children concept (a leaf).
        """
        children = cls._read(node, "children")
        if children is None:
            return None
        return list(children)

    @classmethod
    def child_count(cls, node: Any) -> int:
        """Number of children, 0 for leaves."""
        children = cls.get_children(node)
        return len(children) if children else 0

    @classmethod
    def get_parent(cls, node: Any) -> Optional[Any]:
        return cls._read(node, "parent")

    @classmethod
    def get_main_component(cls, node: Any) -> Optional[Any]:
        """Get the template an instance points at, or None when unresolvable."""
        return cls._read(node, "main_component", "mainComponent")

    @classmethod
    def is_remote(cls, component: Any) -> bool:
        """True when the template is defined outside the current document."""
        return bool(cls._read(component, "remote", default=False))

    @classmethod
    def get_overrides(cls, node: Any) -> Optional[Any]:
        return cls._read(node, "overrides")

    @classmethod
    def get_instances(cls, component: Any) -> List[Any]:
        """Get the instances of a template. Absent reads as empty."""
        instances = cls._read(component, "instances")
        return list(instances) if instances else []

    @classmethod
    def count_overridden_properties(cls, overrides: Any) -> int:
        """Count the distinct overridden properties of an override map.

        Parameters:
            overrides (dict/list): Either a mapping of property -> value, or a host
                list of ``{"id": <layer id>, "overriddenFields": [...]}`` entries.

        Returns:
            (int) Distinct keys for a mapping; distinct (layer id, field) pairs for
                an entry list; 0 for anything else.
        """
        if not overrides:
            return 0
        if isinstance(overrides, Mapping):
            return len(overrides)
        if isinstance(overrides, (str, bytes)) or not isinstance(overrides, Iterable):
            return 0

        distinct = set()
        for entry in overrides:
            fields = cls._read(entry, "overriddenFields", "overridden_fields")
            if fields is None:
                distinct.add((None, str(entry)))
                continue
            layer_id = cls._read(entry, "id")
            for field in ptk.make_iterable(fields):
                distinct.add((layer_id, field))
        return len(distinct)

    @classmethod
    def is_removed(cls, node: Any) -> bool:
        """True when the node is absent or the host flagged it as deleted."""
        if node is None:
            return True
        return bool(cls._read(node, "removed", default=False))

    @classmethod
    def get_page(cls, node: Any) -> Optional[Any]:
        """Walk up the parent chain to the page that owns ``node``."""
        current = node
        while current is not None:
            if cls.get_kind(current) == NodeKind.PAGE:
                return current
            current = cls.get_parent(current)
        return None


# --------------------------------------------------------------------------------------------
# Notes
# --------------------------------------------------------------------------------------------
