"""Unit tests for the public and valuation tag namespaces."""

import itertools

import pytest

from budget_review import BudgetClosed, Group, Heading, Investment, ReviewSettings, TagNamespace, ValidationError
from budget_review.tags import parse_labels


class TestParseLabels:
    def test_trims_and_drops_empties(self):
        assert parse_labels(" Park ,, Trees , ") == ("Park", "Trees")

    def test_case_sensitive_dedup_keeps_first(self):
        assert parse_labels("Park, park, Park, Trees") == ("Park", "park", "Trees")

    def test_iterable_input(self):
        assert parse_labels(["Education", " Health ", "Education"]) == ("Education", "Health")

    def test_custom_delimiter(self):
        assert parse_labels("Park; Trees", delimiter=";") == ("Park", "Trees")


class TestReplaceTags:
    def test_replace_public(self, tags, make_investment):
        investment = make_investment()
        tags.replace_tags(investment, "public", "Park, Trees")
        assert tags.tags_of(investment, "public") == ("Park", "Trees")

    def test_replace_is_full_replacement(self, tags, make_investment):
        investment = make_investment()
        tags.replace_tags(investment, "valuation", "Education, Health")
        tags.replace_tags(investment, "valuation", "Environment")
        assert tags.tags_of(investment, "valuation") == ("Environment",)

    def test_unknown_namespace_rejected(self, tags, make_investment):
        with pytest.raises(ValidationError, match="Unknown tag namespace"):
            tags.replace_tags(make_investment(), "private", "Secret")

    def test_uses_configured_delimiter(self, make_investment):
        tags = TagNamespace(settings=ReviewSettings(tag_delimiter=";"))
        investment = make_investment()
        tags.replace_tags(investment, "public", "Park, Trees; Lakes")
        assert tags.tags_of(investment, "public") == ("Park, Trees", "Lakes")

    def test_finished_budget_rejected(self, tags, finished_budget):
        heading = Heading(id=10, name="Old town", group=Group(id=10, name="Districts", budget=finished_budget))
        investment = finished_budget.add_investment(Investment(id=100, title="Closed", heading=heading))
        with pytest.raises(BudgetClosed):
            tags.replace_tags(investment, "public", "Park")
        assert tags.tags_of(investment, "public") == ()


class TestNamespaceIsolation:
    def test_valuation_tags_keep_public_tags(self, tags, make_investment):
        investment = make_investment()
        tags.replace_tags(investment, "public", "Park")
        tags.replace_tags(investment, "valuation", "Refugees, Solidarity")
        assert tags.tags_of(investment, "public") == ("Park",)
        assert tags.tags_of(investment, "valuation") == ("Refugees", "Solidarity")

    def test_any_interleaving_keeps_namespaces_apart(self, tags, make_investment):
        calls = [
            ("public", "Park, Trees"),
            ("valuation", "Education, Environment"),
            ("public", "Lakes"),
            ("valuation", ""),
        ]
        for ordering in itertools.permutations(calls):
            investment = make_investment()
            expected = {"public": (), "valuation": ()}
            for namespace, labels in ordering:
                tags.replace_tags(investment, namespace, labels)
                expected[namespace] = parse_labels(labels)
                assert tags.tags_of(investment, "public") == expected["public"]
                assert tags.tags_of(investment, "valuation") == expected["valuation"]


class TestDistinctValuationTags:
    def test_sorted_union_of_valuation_tags_only(self, tags, budget, make_investment):
        first, second = make_investment(), make_investment()
        tags.replace_tags(first, "public", "Education")
        tags.replace_tags(second, "public", "Health")
        tags.replace_tags(first, "valuation", "Teachers")
        tags.replace_tags(second, "valuation", "Hospitals, Teachers")
        assert tags.distinct_valuation_tags(budget) == ["Hospitals", "Teachers"]

    def test_is_a_pure_read(self, tags, budget, make_investment):
        investment = make_investment()
        tags.replace_tags(investment, "valuation", "Teachers")
        before = investment.tags
        tags.distinct_valuation_tags(budget)
        assert investment.tags is before

    def test_empty_budget(self, tags, budget):
        assert tags.distinct_valuation_tags(budget) == []
