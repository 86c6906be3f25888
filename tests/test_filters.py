import unittest

from sqlalchemy import select
from sqlalchemy.orm import aliased

from modelscopes.services.filters import (
    filter_by_like_values,
    filter_by_strict_values,
    normalize_filter_array,
)
from tests.base import ScopesDbTestCase
from tests.scope_models import Article


class StrictValuesFilterTests(ScopesDbTestCase):
    def test_empty_list_leaves_query_unchanged(self):
        base = self.base_query()
        q = self.scopes.filter_by_strict_values(base, "status", [])
        self.assertEqual(str(q), str(base))
        self.assertEqual(self.id_set(q), {1, 2, 3, 4, 5, 6})

    def test_value_and_null_are_or_ed(self):
        q = self.scopes.filter_by_strict_values(self.base_query(), "status", [1, None])
        sql = str(q)
        self.assertIn("articles.status IS NULL", sql)
        self.assertIn(" OR ", sql)
        self.assertEqual(self.id_set(q), {1, 3, 4})

    def test_scalar_is_wrapped(self):
        q = self.scopes.filter_by_strict_values(self.base_query(), "status", 2)
        self.assertEqual(self.id_set(q), {2, 6})

    def test_none_scalar_matches_null(self):
        q = self.scopes.filter_by_strict_values(self.base_query(), "status", None)
        self.assertEqual(self.id_set(q), {3})

    def test_is_and_ed_onto_existing_conditions(self):
        q = self.base_query().filter(Article.active.is_(True))
        q = self.scopes.filter_by_strict_values(q, "status", [1, 3])
        self.assertEqual(self.id_set(q), {1, 4})

    def test_table_alias(self):
        article = aliased(Article, name="a")
        q = self.db.query(article)
        q = self.scopes.filter_by_strict_values(q, "status", [2], alias="a")
        self.assertIn("a.status", str(q))
        self.assertEqual({row.id for row in q.all()}, {2, 6})

    def test_works_with_select_statements(self):
        stmt = filter_by_strict_values(select(Article.id), Article, "status", [3])
        self.assertEqual(self.db.execute(stmt).scalars().all(), [5])

    def test_repeated_call_gives_equivalent_query(self):
        first = self.scopes.filter_by_strict_values(self.base_query(), "status", [1, None])
        second = self.scopes.filter_by_strict_values(self.base_query(), "status", [1, None])
        self.assertEqual(str(first), str(second))


class LikeValuesFilterTests(ScopesDbTestCase):
    def test_pattern_uses_like(self):
        q = self.scopes.filter_by_like_values(self.base_query(), "title", ["%ta%"])
        self.assertIn("LIKE", str(q))
        self.assertEqual(self.id_set(q), {2, 4, 6})

    def test_trailing_wildcard(self):
        q = self.scopes.filter_by_like_values(self.base_query(), "title", "Gam%")
        self.assertEqual(self.id_set(q), {3})

    def test_plain_string_uses_equality(self):
        q = self.scopes.filter_by_like_values(self.base_query(), "title", ["ab"])
        self.assertNotIn("LIKE", str(q))
        self.assertIn("articles.title = ", str(q))
        self.assertEqual(self.id_set(q), set())

    def test_plain_string_matches_exactly(self):
        q = self.scopes.filter_by_like_values(self.base_query(), "title", ["beta", "%ray"])
        self.assertEqual(self.id_set(q), {2, 3})

    def test_short_value_adds_no_predicate(self):
        base = self.base_query()
        q = self.scopes.filter_by_like_values(base, "title", ["a"])
        self.assertEqual(str(q), str(base))

    def test_non_string_values_are_skipped(self):
        base = self.base_query()
        q = self.scopes.filter_by_like_values(base, "title", [5, 3.5])
        self.assertEqual(str(q), str(base))

    def test_short_values_skipped_next_to_valid_ones(self):
        q = self.scopes.filter_by_like_values(self.base_query(), "title", ["%", "x", "delta"])
        self.assertEqual(self.id_set(q), {4})

    def test_null_matches_is_null(self):
        q = self.scopes.filter_by_like_values(self.base_query(), "status", [None])
        self.assertEqual(self.id_set(q), {3})

    def test_empty_list_leaves_query_unchanged(self):
        base = self.base_query()
        self.assertEqual(str(self.scopes.filter_by_like_values(base, "title", [])), str(base))

    def test_min_length_override(self):
        q = self.scopes.filter_by_like_values(self.base_query(), "title", ["beta"], min_length=5)
        self.assertEqual(self.id_set(q), {1, 2, 3, 4, 5, 6})

    def test_bytes_values_are_decoded(self):
        q = filter_by_like_values(self.base_query(), Article, "title", [b"delta"])
        self.assertEqual(self.id_set(q), {4})


class ActiveScopeTests(ScopesDbTestCase):
    def test_active_and_inactive(self):
        self.assertEqual(self.id_set(self.scopes.active(self.base_query())), {1, 2, 4, 6})
        self.assertEqual(self.id_set(self.scopes.inactive(self.base_query())), {3, 5})


class NormalizeFilterArrayTests(unittest.TestCase):
    def test_keeps_unique_strings_of_min_length(self):
        self.assertEqual(normalize_filter_array(["ab", "a", "ab", 3, None, "abc"]), ["ab", "abc"])

    def test_string_is_wrapped(self):
        self.assertEqual(normalize_filter_array("hello"), ["hello"])

    def test_lowercase_deduplicates_after_lowering(self):
        self.assertEqual(normalize_filter_array(["Foo", "FOO", "Bar"], to_lowercase=True), ["foo", "bar"])

    def test_zero_min_length_keeps_everything_textual(self):
        self.assertEqual(normalize_filter_array(["", "a"], min_length=0), ["", "a"])

    def test_multibyte_strings_count_characters(self):
        self.assertEqual(normalize_filter_array(["Ёж", "я"]), ["Ёж"])
        self.assertEqual(normalize_filter_array(["ПРИВЕТ"], to_lowercase=True), ["привет"])

    def test_empty_input(self):
        self.assertEqual(normalize_filter_array([]), [])
        self.assertEqual(normalize_filter_array(None), [])
