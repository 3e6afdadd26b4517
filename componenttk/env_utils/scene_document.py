# !/usr/bin/python
# coding=utf-8
"""In-memory host document.

Builds a document of pages, components, component sets, instances and
containers either programmatically or from a nested dict / JSON file, and
implements the :class:`HostDocument` contract over it.
"""
from __future__ import annotations

import json
import os
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

# From this package:
from componenttk.env_utils.document import HostDocument, NodeKind

# Kinds that own a child list even when empty.
_BRANCH_KINDS = (
    NodeKind.PAGE,
    NodeKind.CONTAINER,
    NodeKind.COMPONENT,
    NodeKind.COMPONENT_SET,
    NodeKind.INSTANCE,
)


class SceneNode:
    """A node in a :class:`SceneDocument`.

    Attributes:
        id (str): Unique id within the document.
        name (str): Display name.
        kind (NodeKind): Normalized node kind.
        children (list/None): Child nodes, None for leaves.
        parent (SceneNode/None): Owning node; None for pages and detached nodes.
        main_component (SceneNode/None): Template of an instance.
        remote (bool): True for templates that live in another file.
        overrides (dict/list/None): Instance overrides.
        instances (list): Reverse references from a template to its instances.
        removed (bool): Set once the node has been deleted.
    """

    def __init__(
        self,
        node_id: str,
        name: str,
        kind: NodeKind = NodeKind.OTHER,
        main_component: "SceneNode" = None,
        remote: bool = False,
        overrides: Any = None,
    ):
        self.id = node_id
        self.name = name
        self.kind = NodeKind.from_value(kind)
        self.children: Optional[List[SceneNode]] = (
            [] if self.kind in _BRANCH_KINDS else None
        )
        self.parent: Optional[SceneNode] = None
        self.main_component = main_component
        self.remote = remote
        self.overrides = overrides
        self.instances: List[SceneNode] = []
        self.removed = False

    def __repr__(self):
        return f"<SceneNode {self.kind.value} {self.id} {self.name!r}>"


class SceneDocument(HostDocument):
    """A complete in-memory document.

    Example:
        doc = SceneDocument("Library.fig")
        page = doc.add_page("Page 1")
        button = doc.add_component(page, "Button")
        doc.add_instance(page, button)
    """

    def __init__(self, file_name: str = "Untitled"):
        self._file_name = file_name
        self._nodes: Dict[str, SceneNode] = {}
        self._pages: List[SceneNode] = []
        self._current_page: Optional[SceneNode] = None
        self._selection: List[SceneNode] = []
        self._counter = 0
        # Templates defined outside this document, keyed by id.
        self.library: Dict[str, SceneNode] = {}
        # Nodes passed to the last scroll_into_view call.
        self.viewport: List[SceneNode] = []

    # ---------------------------------------------------------------- builders

    def _new_id(self) -> str:
        while True:
            self._counter += 1
            node_id = f"0:{self._counter}"
            if node_id not in self._nodes and node_id not in self.library:
                return node_id

    def _register(self, node: SceneNode, parent: Optional[SceneNode]) -> SceneNode:
        if node.id in self._nodes:
            raise ValueError(f"Duplicate node id: {node.id}")
        self._nodes[node.id] = node
        if parent is not None:
            if parent.children is None:
                raise ValueError(f"{parent!r} cannot have children.")
            parent.children.append(node)
            node.parent = parent
        return node

    def add_page(self, name: str = None, node_id: str = None) -> SceneNode:
        """Add a page. The first page added becomes the current page."""
        node_id = node_id or self._new_id()
        page = self._register(
            SceneNode(node_id, name or f"Page {len(self._pages) + 1}", NodeKind.PAGE),
            None,
        )
        self._pages.append(page)
        if self._current_page is None:
            self._current_page = page
        return page

    def add_node(
        self,
        parent: SceneNode,
        name: str = None,
        kind=NodeKind.OTHER,
        node_id: str = None,
    ) -> SceneNode:
        """Add a plain node of any kind under ``parent``."""
        kind = NodeKind.from_value(kind)
        node = SceneNode(node_id or self._new_id(), name or kind.value.title(), kind)
        return self._register(node, parent)

    def add_container(
        self, parent: SceneNode, name: str = "Frame", node_id: str = None
    ) -> SceneNode:
        return self.add_node(parent, name, NodeKind.CONTAINER, node_id)

    def add_component(
        self,
        parent: SceneNode,
        name: str = "Component",
        children: Iterable[str] = (),
        node_id: str = None,
    ) -> SceneNode:
        """Add a component with one leaf child per name in ``children``."""
        component = self.add_node(parent, name, NodeKind.COMPONENT, node_id)
        for child_name in children:
            self.add_node(component, child_name)
        return component

    def add_component_set(
        self,
        parent: SceneNode,
        name: str = "Component Set",
        variants: Iterable[str] = (),
        node_id: str = None,
    ) -> SceneNode:
        """Add a component set, with one component per name in ``variants``."""
        component_set = self.add_node(parent, name, NodeKind.COMPONENT_SET, node_id)
        for variant in variants:
            self.add_component(component_set, variant)
        return component_set

    def add_remote_component(
        self, name: str = "Remote Component", children: int = 0, node_id: str = None
    ) -> SceneNode:
        """Create a template stub that lives in another file."""
        component = SceneNode(
            node_id or self._new_id(), name, NodeKind.COMPONENT, remote=True
        )
        for i in range(children):
            component.children.append(SceneNode(f"{component.id};{i}", f"Layer {i}"))
        self.library[component.id] = component
        return component

    def add_instance(
        self,
        parent: SceneNode,
        component: Optional[SceneNode],
        name: str = None,
        overrides: Any = None,
        node_id: str = None,
        mirror_children: bool = True,
    ) -> SceneNode:
        """Add an instance of ``component`` under ``parent``.

        Parameters:
            component (SceneNode/None): The template. None builds an instance
                whose main component is missing.
            overrides (dict/list): Optional override map.
            mirror_children (bool): Copy one leaf per template child so the
                instance starts structurally identical.
        """
        name = name or (component.name if component is not None else "Instance")
        instance = self.add_node(parent, name, NodeKind.INSTANCE, node_id)
        instance.main_component = component
        instance.overrides = overrides
        if component is not None:
            component.instances.append(instance)
            if mirror_children:
                for child in component.children or []:
                    self.add_node(instance, child.name)
        return instance

    # ------------------------------------------------------------------- query

    @property
    def file_name(self) -> str:
        return self._file_name

    def get_node_by_id(self, node_id: str) -> Optional[SceneNode]:
        node = self._nodes.get(str(node_id))
        if node is None or node.removed:
            return None
        return node

    def find_all(self, root: SceneNode) -> List[SceneNode]:
        found = []
        stack = list(reversed(root.children or []))
        while stack:
            node = stack.pop()
            found.append(node)
            stack.extend(reversed(node.children or []))
        return found

    def pages(self) -> List[SceneNode]:
        return list(self._pages)

    @property
    def current_page(self) -> Optional[SceneNode]:
        return self._current_page

    @property
    def selection(self) -> List[SceneNode]:
        return list(self._selection)

    # ------------------------------------------------------------------ mutate

    def set_current_page(self, page: SceneNode) -> None:
        if page not in self._pages:
            raise ValueError(f"{page!r} is not a page of this document.")
        if page is not self._current_page:
            self._current_page = page
            self._selection = []

    def set_selection(self, nodes: Sequence[SceneNode]) -> None:
        self._selection = [n for n in nodes if not n.removed]

    def scroll_into_view(self, nodes: Sequence[SceneNode]) -> None:
        self.viewport = list(nodes)

    def detach_instance(self, node: SceneNode) -> None:
        """Turn an instance into a plain container, keeping its children."""
        if node.kind != NodeKind.INSTANCE:
            return
        main = node.main_component
        if main is not None and node in main.instances:
            main.instances.remove(node)
        node.kind = NodeKind.CONTAINER
        node.main_component = None
        node.overrides = None

    def remove_node(self, node: SceneNode) -> None:
        """Delete ``node`` and its subtree.

        Instances of a deleted template keep existing with a missing main
        component.

        Raises:
            ValueError: If ``node`` is a page or already removed.
        """
        if node.kind == NodeKind.PAGE:
            raise ValueError("Pages cannot be removed.")
        if node.removed:
            raise ValueError(f"{node!r} has already been removed.")

        subtree = [node] + self.find_all(node)
        for n in subtree:
            main = n.main_component
            if main is not None and n in main.instances:
                main.instances.remove(n)
        for n in subtree:
            for instance in n.instances:
                instance.main_component = None
            n.instances = []
            n.removed = True
            self._nodes.pop(n.id, None)

        if node.parent is not None:
            node.parent.children.remove(node)
            node.parent = None
        self._selection = [n for n in self._selection if not n.removed]

    # ----------------------------------------------------------------- loading

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], file_name: str = None) -> "SceneDocument":
        """Build a document from nested node data.

        Layout::

            {
                "name": "Library.fig",
                "components": {"lib:1": {"name": "Button", "remote": true}},
                "pages": [
                    {"id": "1:0", "name": "Page 1", "children": [
                        {"id": "1:1", "type": "COMPONENT", "name": "Card", "children": []},
                        {"id": "1:2", "type": "INSTANCE", "componentId": "1:1"},
                    ]},
                ],
                "currentPage": "1:0",
                "selection": ["1:2"],
            }

        Instances resolve ``componentId`` against the document first, then the
        ``components`` table, where only entries marked ``remote`` become
        templates. Anything else leaves the main component missing.

        Raises:
            ValueError: If the data is not a mapping or holds duplicate ids.
        """
        if not isinstance(data, Mapping):
            raise ValueError(f"Document data must be a mapping, got {type(data).__name__}")

        doc = cls(file_name or data.get("name") or "Untitled")
        pending = []  # (instance, component id)

        def build(parent: SceneNode, node_data: Mapping[str, Any]) -> None:
            kind = NodeKind.from_value(node_data.get("type", node_data.get("kind")))
            node = doc.add_node(
                parent, node_data.get("name"), kind, _str_or_none(node_data.get("id"))
            )
            if node_data.get("remote"):
                node.remote = True
            if kind == NodeKind.INSTANCE:
                node.overrides = node_data.get("overrides")
                component_id = node_data.get("componentId")
                if component_id is not None:
                    pending.append((node, str(component_id)))
            children = node_data.get("children")
            if children is not None and node.children is None:
                node.children = []
            for child in children or []:
                build(node, child)

        for page_data in data.get("pages") or []:
            page = doc.add_page(page_data.get("name"), _str_or_none(page_data.get("id")))
            for child in page_data.get("children") or []:
                build(page, child)

        library = data.get("components") or {}
        for instance, component_id in pending:
            component = doc._nodes.get(component_id)
            if component is None:
                entry = library.get(component_id)
                if entry and entry.get("remote"):
                    component = doc.library.get(component_id) or doc.add_remote_component(
                        entry.get("name") or component_id,
                        int(entry.get("childCount", 0)),
                        component_id,
                    )
            if component is not None and component.kind == NodeKind.COMPONENT:
                instance.main_component = component
                component.instances.append(instance)

        current = data.get("currentPage")
        if current is not None:
            for page in doc._pages:
                if str(current) in (page.id, page.name):
                    doc._current_page = page
                    break

        doc._selection = [
            n for n in (doc.get_node_by_id(i) for i in data.get("selection") or []) if n
        ]
        return doc

    @classmethod
    def load(cls, path: str) -> "SceneDocument":
        """Read a document from a JSON file (see :meth:`from_dict`)."""
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        name = None if isinstance(data, Mapping) and data.get("name") else os.path.basename(path)
        return cls.from_dict(data, name)


def _str_or_none(value: Any) -> Optional[str]:
    return None if value is None else str(value)


# --------------------------------------------------------------------------------------------
# Notes
# --------------------------------------------------------------------------------------------
