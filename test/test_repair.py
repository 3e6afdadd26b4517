# !/usr/bin/python
# coding=utf-8
import json
import os
import tempfile
import unittest
from unittest.mock import MagicMock

from base_test import ComponentTkTestCase
from componenttk.env_utils.document import NodeKind
from componenttk.core_utils.diagnostics.issues import IssueKind, IssueRecord
from componenttk.core_utils.diagnostics.walker import TreeWalker
from componenttk.core_utils.repair._repair import RemediationEngine
from componenttk.core_utils.session import ProblemSession


class TestRemediationEngine(ComponentTkTestCase):
    def setUp(self):
        super().setUp()
        self.session = ProblemSession()
        self.engine = RemediationEngine(self.doc, self.session)

    def scan(self):
        records = TreeWalker(self.doc).walk_pages(self.doc.pages())
        self.session.replace(records, "Current Page")
        return records

    def test_keeps_given_empty_session(self):
        self.assertEqual(len(self.session), 0)
        self.assertIs(self.engine.session, self.session)

    def test_detach_missing_converges(self):
        orphans = [self.doc.add_instance(self.page, None, f"Orphan {i}") for i in range(3)]
        self.doc.add_component(self.page, "Unused")
        self.scan()

        result = self.engine.detach_missing()

        self.assertEqual(result.count, 3)
        self.assertTrue(all(o.kind == NodeKind.CONTAINER for o in orphans))
        remaining = [r.issue_kind for r in self.session.problems]
        self.assertEqual(remaining, [IssueKind.UNUSED_TEMPLATE])
        # A rescan finds no missing-template records.
        self.assertNotIn(
            IssueKind.MISSING_TEMPLATE, [r.issue_kind for r in self.scan()]
        )

    def test_partial_failure_counts_only_resolvable(self):
        live = [self.doc.add_instance(self.page, None, f"Live {i}") for i in range(2)]
        records = [
            IssueRecord(n.id, n.name, IssueKind.MISSING_TEMPLATE) for n in live
        ] + [
            IssueRecord("gone:1", "Gone", IssueKind.MISSING_TEMPLATE),
            IssueRecord("gone:2", "Gone too", IssueKind.MISSING_TEMPLATE),
        ]
        self.session.replace(records)

        result = self.engine.detach_missing()

        self.assertEqual(result.count, 2)
        self.assertEqual(sorted(result.stale_ids), ["gone:1", "gone:2"])
        self.assertEqual(self.session.problems, [])

    def test_host_fault_keeps_record(self):
        orphan = self.doc.add_instance(self.page, None, "Orphan")
        self.doc.add_instance(self.page, None, "Other")
        self.scan()

        document = MagicMock(wraps=self.doc)
        document.detach_instance.side_effect = [RuntimeError("locked"), None]
        engine = RemediationEngine(document, self.session)
        result = engine.detach_missing()

        self.assertEqual(result.count, 1)
        self.assertEqual(result.failed_ids, [orphan.id])
        self.assertEqual([r.node_id for r in self.session.problems], [orphan.id])

    def test_wrong_kind_is_stale(self):
        frame = self.doc.add_container(self.page, "Frame")
        records = [IssueRecord(frame.id, "Frame", IssueKind.MISSING_TEMPLATE)]
        result = self.engine.detach_missing(records)

        self.assertEqual(result.count, 0)
        self.assertEqual(result.stale_ids, [frame.id])
        self.assertEqual(frame.kind, NodeKind.CONTAINER)

    def test_delete_unused(self):
        component = self.doc.add_component(self.page, "Unused")
        component_set = self.doc.add_component_set(self.page, "Set", ["A"])
        self.scan()

        result = self.engine.delete_unused()

        self.assertEqual(result.count, 2)
        self.assertIsNone(self.doc.get_node_by_id(component.id))
        self.assertIsNone(self.doc.get_node_by_id(component_set.id))
        self.assertEqual(self.session.problems, [])

    def test_delete_unused_from_legacy_node_data(self):
        component = self.doc.add_component(self.page, "Unused")
        nodes = [
            {"id": component.id, "name": "Unused", "type": "unused-component"},
            {"id": "1:99", "name": "Gone", "type": "unused-component-set"},
        ]
        result = self.engine.delete_unused(nodes)
        self.assertEqual(result.count, 1)
        self.assertEqual(result.stale_ids, ["1:99"])

    def test_bad_node_data_raises(self):
        with self.assertRaises(ValueError):
            self.engine.detach_missing([{"name": "no id"}])

    def test_select_all_current(self):
        second = self.doc.add_page("Page 2")
        here = self.doc.add_instance(self.page, None, "Here")
        self.doc.add_instance(second, None, "There")
        self.scan()

        result = self.engine.select_all_current()

        self.assertEqual(result.succeeded_ids, [here.id])
        self.assertEqual(self.doc.selection, [here])
        self.assertEqual(self.doc.viewport, [here])

    def test_select_all_current_accepts_scope_sentinels(self):
        here = self.doc.add_instance(self.page, None, "Here")
        records = [IssueRecord(here.id, "Here", IssueKind.MISSING_TEMPLATE, "Selected")]
        self.assertEqual(self.engine.select_all_current(records).count, 1)

    def test_select_all_current_nothing_to_select(self):
        self.session.replace([IssueRecord("gone", "Gone", IssueKind.MISSING_TEMPLATE)])
        result = self.engine.select_all_current()

        self.assertEqual(result.count, 0)
        self.assertEqual(self.doc.selection, [])

    def test_select_node_switches_page(self):
        second = self.doc.add_page("Page 2")
        frame = self.doc.add_container(second, "Frame")
        node = self.doc.add_instance(frame, None, "Deep")

        result = self.engine.select_node(node.id)

        self.assertEqual(result.count, 1)
        self.assertIs(self.doc.current_page, second)
        self.assertEqual(self.doc.selection, [node])

    def test_detach_and_delete_single_nodes(self):
        orphan = self.doc.add_instance(self.page, None, "Orphan")
        unused = self.doc.add_component(self.page, "Unused")
        self.scan()

        self.assertEqual(self.engine.detach_node(orphan.id).count, 1)
        self.assertEqual(self.engine.delete_node(unused.id).count, 1)
        self.assertEqual(self.session.problems, [])
        self.assertEqual(self.engine.delete_node(unused.id).stale_ids, [unused.id])

    def test_export_report(self):
        self.build_scenario()
        self.scan()

        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "report.json")
            report = self.engine.export_report(path=path)
            with open(path, "r", encoding="utf-8") as f:
                written = json.load(f)

        self.assertEqual(report["fileName"], "Test.fig")
        self.assertEqual(report["totalProblems"], 2)
        self.assertEqual(written["analysis"]["bySeverity"], {"high": 1, "medium": 0, "low": 1})
        # Exporting does not touch the problem set.
        self.assertEqual(len(self.session), 2)


if __name__ == "__main__":
    unittest.main()

# --------------------------------------------------------------------------------------------
# Notes
# --------------------------------------------------------------------------------------------
