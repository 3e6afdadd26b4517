# !/usr/bin/python
# coding=utf-8
import unittest

from base_test import ComponentTkTestCase
from componenttk.core_utils.session import ProblemSession
from componenttk.core_utils.diagnostics.issues import IssueKind, IssueRecord


class TestProblemSession(ComponentTkTestCase):
    def setUp(self):
        super().setUp()
        self.session = ProblemSession()
        self.records = [
            IssueRecord("1", "A", IssueKind.MISSING_TEMPLATE),
            IssueRecord("2", "B", IssueKind.UNUSED_TEMPLATE),
            IssueRecord("3", "C", IssueKind.MISSING_TEMPLATE),
        ]

    def test_replace_and_copy(self):
        self.session.replace(self.records, "Current Page")
        problems = self.session.problems
        problems.clear()

        self.assertEqual(len(self.session), 3)
        self.assertEqual(self.session.scope_label, "Current Page")
        self.assertEqual(self.session.analysis.total, 3)

    def test_filter_out_keeps_order(self):
        self.session.replace(self.records)
        dropped = self.session.filter_out(["2", "missing"])

        self.assertEqual([r.node_id for r in dropped], ["2"])
        self.assertEqual([r.node_id for r in self.session.problems], ["1", "3"])

    def test_busy_flag(self):
        self.assertTrue(self.session.begin_scan())
        self.assertFalse(self.session.begin_scan())
        self.session.end_scan()
        self.assertFalse(self.session.search_in_progress)

    def test_scanning_releases_only_its_own_flag(self):
        with self.session.scanning() as acquired:
            self.assertTrue(acquired)
            with self.session.scanning() as nested:
                self.assertFalse(nested)
            self.assertTrue(self.session.search_in_progress)
        self.assertFalse(self.session.search_in_progress)

    def test_scanning_clears_flag_on_error(self):
        with self.assertRaises(RuntimeError):
            with self.session.scanning():
                raise RuntimeError("boom")
        self.assertFalse(self.session.search_in_progress)

    def test_cancel_is_consumed_once(self):
        self.session.request_cancel()
        self.assertTrue(self.session.consume_cancel())
        self.assertFalse(self.session.consume_cancel())


if __name__ == "__main__":
    unittest.main()

# --------------------------------------------------------------------------------------------
# Notes
# --------------------------------------------------------------------------------------------
