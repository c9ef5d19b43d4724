"""
Tests for naming conventions

Entity, module, variable and field names feed every generated file, so the
documented mappings below must stay stable.
"""

from unittest import TestCase

import pytest

from entity_model.domain import naming
from entity_model.domain.naming import (
    NamingConventions,
    english_singular,
    entity_name,
    entity_variable_name,
    field_name,
    is_valid_python_identifier,
    module_name,
    plural_entity_name,
    pluralize,
    python_identifier,
    relationship_field_name,
    singularize,
    to_camel_case,
    to_kebab_case,
    to_pascal_case,
    to_snake_case,
)


class TestEntityName(TestCase):
    """Test cases for entity_name"""

    def test_documented_mappings(self):
        """Test the mappings generated class names rely on"""
        assert entity_name("classes") == "Class"
        assert entity_name("categories") == "Category"
        assert entity_name("boxes") == "Box"
        assert entity_name("addresses") == "Address"
        assert entity_name("statuses") == "Status"
        assert entity_name("order_items") == "OrderItem"
        assert entity_name("user_roles") == "UserRole"

    def test_only_last_segment_is_singularized(self):
        """Test that leading segments keep their plural"""
        assert entity_name("news_items") == "NewsItem"
        assert entity_name("products") == "Product"

    def test_upper_case_table_name(self):
        """Test that casing of the table name does not matter"""
        assert entity_name("ORDER_ITEMS") == "OrderItem"

    def test_already_singular(self):
        """Test singular names pass through"""
        assert entity_name("person") == "Person"
        assert entity_name("address") == "Address"

    def test_irregular_plural_is_not_rewritten(self):
        """Test that names only use suffix rules"""
        assert entity_name("people") == "People"


class TestSingularizePluralize(TestCase):
    """Test cases for singularize and pluralize"""

    def test_singularize_rules(self):
        """Test each suffix rule"""
        assert singularize("categories") == "category"
        assert singularize("classes") == "class"
        assert singularize("boxes") == "box"
        assert singularize("matches") == "match"
        assert singularize("dishes") == "dish"
        assert singularize("statuses") == "status"
        assert singularize("buses") == "bus"
        assert singularize("users") == "user"

    def test_zes_keeps_the_e(self):
        """Test there is no zes rule, only the trailing s is dropped"""
        assert singularize("quizzes") == "quizze"
        assert entity_name("quizzes") == "Quizze"

    def test_singularize_keeps_double_s(self):
        """Test that words ending in ss are left alone"""
        assert singularize("class") == "class"
        assert singularize("address") == "address"

    def test_singularize_unchanged(self):
        """Test words without a plural suffix"""
        assert singularize("data") == "data"
        assert singularize("") == ""

    def test_pluralize_rules(self):
        """Test each plural rule"""
        assert pluralize("Category") == "Categories"
        assert pluralize("Status") == "Statuses"
        assert pluralize("Box") == "Boxes"
        assert pluralize("Match") == "Matches"
        assert pluralize("Dish") == "Dishes"
        assert pluralize("Day") == "Days"
        assert pluralize("User") == "Users"

    def test_pluralize_reverses_singularize(self):
        """Test round-trips for regular nouns"""
        for plural in ("categories", "boxes", "statuses", "users", "matches", "addresses"):
            assert pluralize(singularize(plural)) == plural


class TestDerivedNames(TestCase):
    """Test cases for module, variable and plural entity names"""

    def test_module_name(self):
        """Test underscores are removed and case lowered"""
        assert module_name("order_items") == "orderitems"
        assert module_name("User_Roles") == "userroles"

    def test_entity_variable_name(self):
        """Test the first letter is lowered"""
        assert entity_variable_name("order_items") == "orderItem"
        assert entity_variable_name("categories") == "category"

    def test_plural_entity_name(self):
        """Test plural form of the entity name"""
        assert plural_entity_name("categories") == "Categories"
        assert plural_entity_name("order_items") == "OrderItems"

    def test_collection_name(self):
        """Test camelCase plural variable name"""
        assert NamingConventions.collection_name("order_items") == "orderItems"
        assert NamingConventions.collection_name("categories") == "categories"


class TestFieldNames(TestCase):
    """Test cases for field and relationship names"""

    def test_field_name(self):
        """Test camelCase conversion of column names"""
        assert field_name("created_at") == "createdAt"
        assert field_name("ID") == "id"
        assert field_name("UPPER_CASE") == "upperCase"
        assert field_name("user__id") == "userId"
        assert field_name("name") == "name"

    def test_relationship_field_name(self):
        """Test foreign key columns lose their _id suffix"""
        assert relationship_field_name("category_id") == "category"
        assert relationship_field_name("parent_category_id") == "parentCategory"
        assert relationship_field_name("CATEGORY_ID") == "category"

    def test_relationship_field_name_without_suffix(self):
        """Test columns that are not named *_id"""
        assert relationship_field_name("owner") == "owner"
        assert relationship_field_name("_id") == "id"


class TestCaseConversions(TestCase):
    """Test cases for case helpers"""

    def test_to_snake_case(self):
        """Test snake_case conversion"""
        assert to_snake_case("UserAccount") == "user_account"
        assert to_snake_case("XMLHttpRequest") == "xml_http_request"
        assert to_snake_case("order-items") == "order_items"
        assert to_snake_case("already_snake") == "already_snake"

    def test_to_snake_case_rejects_non_strings(self):
        """Test type errors for non-string input"""
        with pytest.raises(TypeError):
            to_snake_case(42)

    def test_to_pascal_case(self):
        """Test PascalCase conversion"""
        assert to_pascal_case("order_item") == "OrderItem"
        assert to_pascal_case("ORDER_ITEM") == "OrderItem"
        assert to_pascal_case("order-item") == "OrderItem"

    def test_to_camel_case(self):
        """Test camelCase conversion"""
        assert to_camel_case("order_item") == "orderItem"
        assert to_camel_case("___") == ""

    def test_to_kebab_case(self):
        """Test kebab-case conversion"""
        assert to_kebab_case("OrderItem") == "order-item"
        assert to_kebab_case("order_item") == "order-item"


class TestPythonIdentifiers(TestCase):
    """Test cases for Python identifier helpers"""

    def test_keywords_get_suffix(self):
        """Test that keywords are made safe"""
        assert python_identifier("class") == "class_"
        assert python_identifier("from") == "from_"

    def test_leading_digit(self):
        """Test names starting with a digit"""
        assert python_identifier("123invalid") == "_123invalid"

    def test_invalid_characters(self):
        """Test that invalid characters are dropped"""
        assert python_identifier("price$") == "price"
        assert python_identifier("$$") == "_field"

    def test_camel_case_input(self):
        """Test camelCase columns become snake_case"""
        assert python_identifier("createdAt") == "created_at"

    def test_is_valid_python_identifier(self):
        """Test identifier validation"""
        assert is_valid_python_identifier("name")
        assert not is_valid_python_identifier("class")
        assert not is_valid_python_identifier("1name")
        assert not is_valid_python_identifier("")
        assert not is_valid_python_identifier(None)


class TestEnglishSingular(TestCase):
    """Test cases for the dictionary-backed singular"""

    def test_irregular_plural(self):
        """Test that irregular plurals are recognised"""
        assert english_singular("people") == "person"

    def test_regular_plural(self):
        """Test a regular plural"""
        assert english_singular("products") == "product"


@pytest.mark.parametrize("func", [
    naming.singularize,
    naming.pluralize,
    naming.to_snake_case,
    naming.to_pascal_case,
    naming.to_camel_case,
    naming.to_kebab_case,
    naming.entity_name,
    naming.plural_entity_name,
    naming.module_name,
    naming.entity_variable_name,
    naming.field_name,
    naming.relationship_field_name,
    naming.python_identifier,
    naming.english_singular,
    NamingConventions.table_to_entity,
    NamingConventions.table_to_module,
    NamingConventions.table_to_variable,
    NamingConventions.column_to_field,
    NamingConventions.column_to_python_field,
    NamingConventions.foreign_key_to_relationship,
    NamingConventions.collection_name,
])
def test_none_propagates(func):
    """Every naming function returns None for None"""
    assert func(None) is None
