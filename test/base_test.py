# !/usr/bin/python
# coding=utf-8
"""
Base Test Class for ComponentTk Tests

Provides common functionality for all componenttk test cases including
document fixtures built on the in-memory SceneDocument and event capture.
"""
import os
import sys
import unittest
from unittest.mock import MagicMock

# Ensure componenttk is in path
repo_dir = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if repo_dir not in sys.path:
    sys.path.insert(0, repo_dir)

from componenttk.env_utils.scene_document import SceneDocument


class RaisingNode:
    """A host node whose listed attributes raise when read."""

    def __init__(self, node_id="bad:1", name="Broken", kind="instance", fail=()):
        self._values = {"id": node_id, "name": name, "kind": kind, "children": None}
        self._fail = set(fail)

    def __getattr__(self, attr):
        if attr.startswith("_"):
            raise AttributeError(attr)
        if attr in self._fail:
            raise RuntimeError(f"host fault reading '{attr}'")
        if attr in self._values:
            return self._values[attr]
        raise AttributeError(attr)


class ComponentTkTestCase(unittest.TestCase):
    """Base class for all componenttk test cases."""

    def setUp(self):
        self.doc = SceneDocument("Test.fig")
        self.page = self.doc.add_page("Page 1")
        self.events = []

    def emit(self, event):
        self.events.append(event)

    def events_of(self, event_type: str):
        """All captured events of ``event_type``."""
        return [e for e in self.events if e["type"] == event_type]

    def last_event(self, event_type: str):
        events = self.events_of(event_type)
        if not events:
            raise AssertionError(f"No '{event_type}' event was emitted")
        return events[-1]

    def build_scenario(self, page=None):
        """Missing instance + matching instance + unused component.

        Returns:
            (dict) The created nodes by role.
        """
        page = page or self.page
        card = self.doc.add_component(page, "Card", children=["Title", "Body"])
        matching = self.doc.add_instance(page, card, "Card Instance")
        missing = self.doc.add_instance(page, None, "Orphan")
        unused = self.doc.add_component(page, "Unused Button")
        return {"card": card, "matching": matching, "missing": missing, "unused": unused}

    def build_flat_page(self, count: int, page=None):
        """A page of ``count`` plain leaf nodes."""
        page = page or self.page
        return [self.doc.add_node(page, f"Node {i}") for i in range(count)]

    def failing_document(self, fail_on_page):
        """Wrap ``self.doc`` so enumerating ``fail_on_page`` raises."""
        doc = self.doc
        proxy = MagicMock(wraps=doc)
        proxy.file_name = doc.file_name
        proxy.current_page = doc.current_page
        proxy.selection = doc.selection

        def find_all(root):
            if root is fail_on_page:
                raise RuntimeError("page enumeration failed")
            return doc.find_all(root)

        proxy.find_all.side_effect = find_all
        return proxy

    def assertRecordKinds(self, records, expected, msg: str = None):
        """Assert the multiset of issue kind values in ``records``."""
        actual = sorted(r.issue_kind.value for r in records)
        self.assertEqual(actual, sorted(expected), msg)


# --------------------------------------------------------------------------------------------
# Notes
# --------------------------------------------------------------------------------------------
