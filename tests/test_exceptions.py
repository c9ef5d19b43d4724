"""
Tests for the exception hierarchy
"""

from unittest import TestCase

from entity_model.exceptions import (
    ConfigurationError,
    EntityModelError,
    FactsValidationError,
    SchemaValidationError,
    TableNotFoundError,
    UnresolvedReferenceError,
)


class TestEntityModelError(TestCase):
    """Test cases for the base exception"""

    def test_str_renders_context_and_suggestions(self):
        """Test the formatted message"""
        error = EntityModelError(
            "Something failed",
            context={"table": "users", "column": "email"},
            suggestions=["Try again"],
            error_code="E1",
        )
        assert str(error).splitlines() == [
            "Something failed",
            "[E1] table=users, column=email",
            "  hint: Try again",
        ]

    def test_plain_message(self):
        """Test a bare error is just its message"""
        assert str(EntityModelError("Plain")) == "Plain"
        assert EntityModelError("Plain").error_code == "ENTITY_MODEL_ERROR"

    def test_to_dict(self):
        """Test the report shape and the table shortcut"""
        error = SchemaValidationError("Bad column", table="users", column="email", suggestions=["Fix it"])
        assert error.table == "users"
        assert error.to_dict() == {
            'error_code': "SCHEMA_VALIDATION_ERROR",
            'message': "Bad column",
            'context': {"table": "users", "column": "email"},
            'suggestions': ["Fix it"],
        }

    def test_hierarchy(self):
        """Test every error derives from the base"""
        for cls in (ConfigurationError, SchemaValidationError, UnresolvedReferenceError,
                    TableNotFoundError, FactsValidationError):
            assert issubclass(cls, EntityModelError)


class TestSpecificErrors(TestCase):
    """Test cases for the concrete errors"""

    def test_unresolved_reference(self):
        """Test attributes and default message"""
        error = UnresolvedReferenceError(table="products", column="category_id", referenced_table="categories")
        assert error.message == (
            "Foreign key 'category_id' on table 'products' references non-existent table 'categories'"
        )
        assert error.context == {"table": "products", "column": "category_id", "referenced_table": "categories"}
        assert error.error_code == "UNRESOLVED_REFERENCE"
        assert any("categories" in suggestion for suggestion in error.suggestions)

    def test_table_not_found_is_key_error(self):
        """Test lookups can be caught as KeyError"""
        error = TableNotFoundError("orders")
        assert isinstance(error, KeyError)
        assert error.table_name == "orders"
        assert "orders" in str(error)

    def test_schema_validation_context(self):
        """Test table and column land in the context"""
        error = SchemaValidationError("Bad column", table="users", column="email")
        assert error.context == {"table": "users", "column": "email"}
        assert error.error_code == "SCHEMA_VALIDATION_ERROR"

    def test_configuration_error(self):
        """Test the config file lands in the context"""
        error = ConfigurationError("Bad option", config_file="entity_model.yaml")
        assert error.context["config_file"] == "entity_model.yaml"
        assert error.suggestions

    def test_facts_validation_errors(self):
        """Test pydantic-style errors are listed in the context"""
        error = FactsValidationError(
            "Invalid schema facts",
            errors=[{"loc": ("tables", 0, "name"), "msg": "Field required"}, {"msg": "bad"}],
        )
        assert error.context["error_1"] == "tables -> 0 -> name: Field required"
        assert error.context["error_2"] == "root: bad"
        assert len(error.errors) == 2

    def test_table_not_found_default_suggestion(self):
        """Test the lookup error points at the non-raising lookup"""
        assert any("table_by_name" in suggestion for suggestion in TableNotFoundError("orders").suggestions)
