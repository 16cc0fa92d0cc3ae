"""Tests for the keyword relevance filter."""
import pytest

from finassist.assistant import catalog
from finassist.assistant.relevance import detect_domains, relevant_functions


class TestDetectDomains:
    """Prompt to domain classification."""

    def test_spending_question(self):
        assert detect_domains("How much did I spend on groceries? Show me spending") == [
            "entries", "categories", "utility",
        ]

    def test_budget_question(self):
        assert detect_domains("Am I over budget on dining out?") == ["budget", "categories", "utility"]

    def test_budget_and_spending(self):
        assert detect_domains("Compare my spending against my budget") == [
            "entries", "budget", "categories", "utility",
        ]

    def test_add_expense_is_an_action(self):
        assert detect_domains("Add an expense of 40 for groceries") == [
            "entries", "categories", "actions", "utility",
        ]

    def test_set_budget_is_an_action(self):
        assert detect_domains("Set a monthly budget of 300 for groceries") == [
            "budget", "categories", "actions", "utility",
        ]

    def test_inflected_set_is_an_action(self):
        assert detect_domains("Setting a monthly budget of 300 for groceries") == [
            "budget", "categories", "actions", "utility",
        ]

    @pytest.mark.parametrize("prompt", [
        "I'm adding an expense of 40 for groceries",
        "I added an expense of 40 for groceries yesterday",
        "Recording an expense of 40 for groceries",
    ])
    def test_inflected_add_is_an_action(self, prompt):
        assert detect_domains(prompt) == ["entries", "categories", "actions", "utility"]

    def test_new_category_is_an_action(self):
        assert detect_domains("Create a new category called pets") == [
            "categories", "actions", "utility",
        ]

    def test_unmatched_prompt_falls_back_to_reads(self):
        assert detect_domains("hello there") == ["entries", "budget", "categories", "utility"]

    def test_bare_verb_falls_back_to_reads(self):
        assert detect_domains("please make it quick") == ["entries", "budget", "categories", "utility"]

    def test_case_insensitive(self):
        assert "budget" in detect_domains("BUDGET STATUS please")

    @pytest.mark.parametrize("prompt", ["the netherlands", "topology notes", "minimalism"])
    def test_keywords_match_whole_words_only(self, prompt):
        # Substrings such as "net" in "netherlands" must not count as a hit
        assert detect_domains(prompt) == ["entries", "budget", "categories", "utility"]

    def test_empty_prompt(self):
        assert detect_domains("") == ["entries", "budget", "categories", "utility"]


class TestRelevantFunctions:
    """Catalog subsets sent upstream."""

    def test_budget_prompt_excludes_actions(self):
        names = {f["name"] for f in relevant_functions("is my budget on track")}

        assert "getBudgetStatus" in names
        assert "getAllCategories" in names
        assert "getUserInfo" in names
        assert "addEntry" not in names
        assert "getTotalSpending" not in names

    def test_items_are_public_and_unique(self):
        functions = relevant_functions("add an expense and set a budget")
        names = [f["name"] for f in functions]

        assert len(names) == len(set(names))
        assert all(set(f) == {"name", "description", "parameters"} for f in functions)
        assert {"addEntry", "setBudget", "getTotalBudget", "getTotalSpending"} <= set(names)

    def test_inflected_verbs_offer_mutations(self):
        names = {f["name"] for f in relevant_functions("Setting a budget and adding an expense")}
        assert {"setBudget", "addEntry"} <= names

    def test_fallback_offers_every_read_function(self):
        functions = relevant_functions("hi")
        expected = len(catalog.FUNCTION_CATALOG) - len(catalog.by_domain("actions"))
        assert len(functions) == expected
