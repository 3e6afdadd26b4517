# !/usr/bin/python
# coding=utf-8
import unittest

from base_test import ComponentTkTestCase
from componenttk.env_utils.document import NodeKind
from componenttk.node_utils._node_utils import NodeUtils
from componenttk.core_utils.diagnostics.issues import (
    CURRENT_PAGE,
    IssueKind,
    IssueRecord,
    Severity,
)


class TestIssueRecord(unittest.TestCase):
    def test_severity_follows_kind(self):
        expected = {
            IssueKind.MISSING_TEMPLATE: Severity.HIGH,
            IssueKind.REMOTE_TEMPLATE: Severity.MEDIUM,
            IssueKind.STRUCTURAL_DRIFT: Severity.MEDIUM,
            IssueKind.UNUSED_TEMPLATE: Severity.LOW,
            IssueKind.UNUSED_TEMPLATE_SET: Severity.LOW,
            IssueKind.ANALYSIS_ERROR: Severity.LOW,
        }
        for kind, severity in expected.items():
            self.assertEqual(IssueRecord("1", "n", kind).severity, severity)

    def test_to_dict(self):
        record = IssueRecord("1:2", "Card", IssueKind.REMOTE_TEMPLATE, "Page 1", "instance")
        self.assertEqual(
            record.to_dict(),
            {
                "nodeId": "1:2",
                "name": "Card",
                "issueKind": "remote-template",
                "severity": "medium",
                "pageName": "Page 1",
                "nodeKind": "instance",
                "issue": "Remote component",
                "pageId": None,
            },
        )

    def test_from_dict_legacy_keys(self):
        record = IssueRecord.from_dict(
            {"id": 12, "name": "Old", "type": "modified", "page": "Page 3"}
        )
        self.assertEqual(record.node_id, "12")
        self.assertEqual(record.issue_kind, IssueKind.STRUCTURAL_DRIFT)
        self.assertEqual(record.page_name, "Page 3")

        record = IssueRecord.from_dict({"id": "1", "type": "unused-component-set"})
        self.assertEqual(record.issue_kind, IssueKind.UNUSED_TEMPLATE_SET)
        self.assertEqual(record.page_name, CURRENT_PAGE)

    def test_from_dict_rejects_bad_payloads(self):
        for payload in ({"type": "missing"}, {"id": "1"}, {"id": "1", "type": "?"}, []):
            with self.assertRaises(ValueError):
                IssueRecord.from_dict(payload)


class TestNodeUtils(ComponentTkTestCase):
    def test_kind_spellings(self):
        self.assertEqual(NodeKind.from_value("COMPONENT_SET"), NodeKind.COMPONENT_SET)
        self.assertEqual(NodeKind.from_value("FRAME"), NodeKind.CONTAINER)
        self.assertEqual(NodeKind.from_value("CANVAS"), NodeKind.PAGE)
        self.assertEqual(NodeKind.from_value("VECTOR"), NodeKind.OTHER)
        self.assertEqual(NodeKind.from_value(None), NodeKind.OTHER)

    def test_absent_fields_read_as_none(self):
        node = {"id": 5}
        self.assertEqual(NodeUtils.get_id(node), "5")
        self.assertEqual(NodeUtils.get_name(node), "Unnamed")
        self.assertIsNone(NodeUtils.get_children(node))
        self.assertEqual(NodeUtils.get_instances(node), [])
        self.assertFalse(NodeUtils.is_remote(node))

    def test_count_overridden_properties(self):
        self.assertEqual(NodeUtils.count_overridden_properties({"a": 1, "b": 2}), 2)
        self.assertEqual(
            NodeUtils.count_overridden_properties(
                [
                    {"id": "1", "overriddenFields": ["fills", "fills", "text"]},
                    {"id": "2", "overriddenFields": ["fills"]},
                ]
            ),
            3,
        )
        self.assertEqual(NodeUtils.count_overridden_properties(None), 0)
        self.assertEqual(NodeUtils.count_overridden_properties("fills"), 0)

    def test_get_page(self):
        frame = self.doc.add_container(self.page, "Frame")
        leaf = self.doc.add_node(frame, "Leaf")
        self.assertIs(NodeUtils.get_page(leaf), self.page)
        self.assertFalse(NodeUtils.is_removed(leaf))
        self.assertFalse(NodeUtils.is_removed(self.page))


if __name__ == "__main__":
    unittest.main()

# --------------------------------------------------------------------------------------------
# Notes
# --------------------------------------------------------------------------------------------
