"""Tests for the function catalog."""
import pytest
from pydantic import ValidationError as PydanticValidationError

from finassist.assistant import catalog
from finassist.assistant.catalog import DOMAINS, FUNCTION_CATALOG, FunctionDescriptor
from finassist.data.schemas import BUDGET_TYPES, ENTRY_TYPES


class TestCatalogContents:
    """The closed set of callable functions."""

    def test_names_are_unique(self):
        names = catalog.function_names()
        assert len(names) == len(set(names)) == 32

    def test_every_domain_is_populated(self):
        counts = {domain: len(catalog.by_domain(domain)) for domain in DOMAINS}
        assert counts == {"entries": 16, "budget": 10, "categories": 2, "actions": 3, "utility": 1}

    def test_required_params_are_declared(self):
        for descriptor in FUNCTION_CATALOG:
            for param in descriptor.required:
                assert param in descriptor.properties, f"{descriptor.name}.{param}"

    def test_entry_type_enum_everywhere(self):
        for descriptor in FUNCTION_CATALOG:
            if descriptor.name == "setBudget":
                continue
            type_schema = descriptor.properties.get("type")
            if type_schema is not None:
                assert type_schema["enum"] == ENTRY_TYPES

    def test_set_budget_excludes_income(self):
        type_schema = catalog.find("setBudget").properties["type"]
        assert type_schema["enum"] == BUDGET_TYPES
        assert "income" not in type_schema["enum"]

    def test_add_entry_schema(self):
        add_entry = catalog.find("addEntry")
        assert add_entry.required == ["type", "category", "amount", "date"]
        assert add_entry.properties["amount"]["minimum"] == 0.01
        assert add_entry.properties["date"]["format"] == "date"

    def test_find_unknown(self):
        assert catalog.find("deleteEverything") is None


class TestDescriptor:
    """Descriptor shape and immutability."""

    def test_public_strips_internal_fields(self):
        public = catalog.find("getTotalSpending").public()
        assert set(public) == {"name", "description", "parameters"}
        assert set(public["parameters"]["properties"]) == {"startDate", "endDate"}

    def test_as_tool_wraps_public(self):
        public = catalog.find("getUserInfo").public()
        tool = catalog.as_tool(public)
        assert tool == {"type": "function", "function": public}

    def test_descriptor_is_frozen(self):
        descriptor = catalog.find("getTotalSpending")
        with pytest.raises(PydanticValidationError):
            descriptor.name = "renamed"

    def test_unknown_domain_rejected(self):
        with pytest.raises(PydanticValidationError):
            FunctionDescriptor(name="x", description="x", domain="reports", parameters={})

    def test_all_functions_returns_copy(self):
        functions = catalog.all_functions()
        functions.clear()
        assert len(catalog.all_functions()) == 32
