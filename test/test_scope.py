# !/usr/bin/python
# coding=utf-8
import unittest

from base_test import ComponentTkTestCase
from componenttk.core_utils.diagnostics.issues import ScanProfile
from componenttk.core_utils.diagnostics.scope import Scope, ScopeResolver


class TestScope(unittest.TestCase):
    def test_from_value_aliases(self):
        self.assertEqual(Scope.from_value("search-selected"), Scope.SELECTED)
        self.assertEqual(Scope.from_value("search-page"), Scope.CURRENT_PAGE)
        self.assertEqual(Scope.from_value("search-all"), Scope.ALL_PAGES)
        self.assertEqual(Scope.from_value("search-all-pages"), Scope.ALL_PAGES)
        self.assertEqual(Scope.from_value("current_page"), Scope.CURRENT_PAGE)
        self.assertEqual(Scope.from_value(Scope.SELECTED), Scope.SELECTED)

    def test_unknown_scope(self):
        with self.assertRaises(ValueError):
            Scope.from_value("everything")


class TestScopeResolver(ComponentTkTestCase):
    def setUp(self):
        super().setUp()
        self.resolver = ScopeResolver(self.doc)

    def test_selection(self):
        frame = self.doc.add_container(self.page, "Frame")
        self.build_flat_page(3, page=frame)
        self.doc.set_selection([frame])

        target = self.resolver.resolve("selected")
        self.assertEqual(target.mode, "subtree")
        self.assertEqual(target.roots, [frame])
        self.assertEqual(target.page_name, "Page 1")
        self.assertEqual(target.interval, 100)
        self.assertFalse(target.fell_back)
        self.assertEqual(self.resolver.count_nodes(target), 4)

    def test_empty_selection_falls_back_to_page(self):
        self.build_flat_page(2)
        target = self.resolver.resolve(Scope.SELECTED)

        self.assertTrue(target.fell_back)
        self.assertEqual(target.scope, Scope.CURRENT_PAGE)
        self.assertEqual(target.pages, [self.page])
        self.assertEqual(self.resolver.count_nodes(target), 2)

    def test_empty_selection_without_fallback(self):
        resolver = ScopeResolver(self.doc, ScanProfile(empty_selection_fallback=False))
        target = resolver.resolve(Scope.SELECTED)

        self.assertEqual(target.mode, "subtree")
        self.assertTrue(target.is_empty)
        self.assertEqual(resolver.count_nodes(target), 0)

    def test_all_pages(self):
        second = self.doc.add_page("Page 2")
        self.build_flat_page(2)
        self.build_flat_page(3, page=second)

        target = self.resolver.resolve("all-pages")
        self.assertEqual(target.pages, [self.page, second])
        self.assertEqual(target.interval, 200)
        self.assertEqual(target.label, "All Pages")
        self.assertEqual(self.resolver.count_nodes(target), 5)

    def test_failing_page_counts_zero(self):
        second = self.doc.add_page("Page 2")
        self.build_flat_page(2)
        self.build_flat_page(3, page=second)

        resolver = ScopeResolver(self.failing_document(second))
        target = resolver.resolve(Scope.ALL_PAGES)
        self.assertEqual(resolver.count_nodes(target), 2)


if __name__ == "__main__":
    unittest.main()

# --------------------------------------------------------------------------------------------
# Notes
# --------------------------------------------------------------------------------------------
