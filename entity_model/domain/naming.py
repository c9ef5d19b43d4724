"""
Naming convention utilities for the entity model.

This module converts between SQL identifier casing (snake_case, plural table
names) and the conventions used by code generators (PascalCase entity names,
camelCase field names, singular/plural forms).

Every public function is pure and returns None for None input, so callers
can probe optional names before validating their presence.
"""

import re
from typing import Optional

import inflect

from ..constants import (
    ImplicitKey,
    PLURAL_ES_ENDINGS,
    PYTHON_KEYWORDS,
    SINGULAR_SUFFIX_RULES,
    VOWELS,
)


# Initialize inflect engine, only used for advisory English forms
p = inflect.engine()


def singularize(word: Optional[str]) -> Optional[str]:
    """
    Convert a plural word to its singular form with suffix stripping.

    Generated class and package names depend on these rules, so they must
    stay stable.

    Example:
        >>> singularize("categories")
        'category'
        >>> singularize("classes")
        'class'
        >>> singularize("boxes")
        'box'
    """
    if word is None:
        return None

    for suffix, strip, replacement in SINGULAR_SUFFIX_RULES:
        if word.endswith(suffix):
            return word[:-strip] + replacement

    if word.endswith("s") and not word.endswith("ss"):
        return word[:-1]
    return word


def pluralize(word: Optional[str]) -> Optional[str]:
    """
    Convert a singular word to its plural form.

    Inverse of ``singularize`` for regular nouns.

    Example:
        >>> pluralize("Category")
        'Categories'
        >>> pluralize("Status")
        'Statuses'
    """
    if not word:
        return word

    if word.endswith(("y", "Y")) and len(word) > 1 and word[-2] not in VOWELS:
        return word[:-1] + "ies"
    if word.lower().endswith(PLURAL_ES_ENDINGS):
        return word + "es"
    return word + "s"


def to_snake_case(name: Optional[str]) -> Optional[str]:
    """
    Convert CamelCase, PascalCase or kebab-case to snake_case.

    Example:
        >>> to_snake_case("UserAccount")
        'user_account'
        >>> to_snake_case("XMLHttpRequest")
        'xml_http_request'
    """
    if name is None:
        return None
    if not isinstance(name, str):
        raise TypeError(f"Expected string, got {type(name).__name__}")

    name = re.sub(r"[\s\-]+", "_", name)
    name = re.sub("(.)([A-Z][a-z]+)", r"\1_\2", name)
    name = re.sub("__([A-Z])", r"_\1", name)
    name = re.sub("([a-z0-9])([A-Z])", r"\1_\2", name)
    return name.lower()


def to_pascal_case(name: Optional[str]) -> Optional[str]:
    """
    Convert snake_case or kebab-case to PascalCase.

    Each segment is capitalized and the rest of it lower-cased, so
    ``ORDER_ITEM`` and ``order_item`` both become ``OrderItem``.
    """
    if name is None:
        return None
    segments = [segment for segment in re.split(r"[_\-]+", name) if segment]
    return "".join(segment[0].upper() + segment[1:].lower() for segment in segments)


def to_camel_case(name: Optional[str]) -> Optional[str]:
    """
    Convert snake_case to camelCase.

    Matching is case-insensitive and consecutive underscores collapse.

    Example:
        >>> to_camel_case("UPPER_CASE")
        'upperCase'
        >>> to_camel_case("user__id")
        'userId'
    """
    if name is None:
        return None
    segments = [segment for segment in name.lower().split("_") if segment]
    if not segments:
        return ""
    return segments[0] + "".join(segment[0].upper() + segment[1:] for segment in segments[1:])


def to_kebab_case(name: Optional[str]) -> Optional[str]:
    """Convert PascalCase, camelCase or snake_case to kebab-case."""
    snake = to_snake_case(name)
    if snake is None:
        return None
    return snake.replace("_", "-")


def entity_name(table_name: Optional[str]) -> Optional[str]:
    """
    Generate the PascalCase, singular entity name for a table.

    Only the final segment is singularized: ``order_items`` becomes
    ``OrderItem``.
    """
    if table_name is None:
        return None

    segments = [segment for segment in table_name.lower().split("_") if segment]
    if not segments:
        return ""
    segments[-1] = singularize(segments[-1])
    return "".join(segment[:1].upper() + segment[1:] for segment in segments)


def plural_entity_name(table_name: Optional[str]) -> Optional[str]:
    """Plural PascalCase name of a table's entity (``categories`` -> ``Categories``)."""
    return pluralize(entity_name(table_name))


def module_name(table_name: Optional[str]) -> Optional[str]:
    """Package/folder segment for a table: lower-cased with underscores removed."""
    if table_name is None:
        return None
    return table_name.lower().replace("_", "")


def entity_variable_name(table_name: Optional[str]) -> Optional[str]:
    """camelCase singular variable name for a table's entity."""
    name = entity_name(table_name)
    if not name:
        return name
    return name[0].lower() + name[1:]


def field_name(column_name: Optional[str]) -> Optional[str]:
    """
    Generate the camelCase field name for a column.

    Example:
        >>> field_name("created_at")
        'createdAt'
        >>> field_name("ID")
        'id'
    """
    return to_camel_case(column_name)


def relationship_field_name(column_name: Optional[str]) -> Optional[str]:
    """
    Generate a relationship field name from a foreign key column.

    Example:
        >>> relationship_field_name("parent_category_id")
        'parentCategory'
    """
    if column_name is None:
        return None
    if column_name.lower().endswith(ImplicitKey.FK_SUFFIX) and len(column_name) > len(ImplicitKey.FK_SUFFIX):
        column_name = column_name[:-len(ImplicitKey.FK_SUFFIX)]
    return to_camel_case(column_name)


def python_identifier(name: Optional[str]) -> Optional[str]:
    """
    Ensure a name is a valid snake_case Python identifier.

    This function:
    1. Converts to snake_case
    2. Removes invalid characters
    3. Ensures it starts with a letter or underscore
    4. Handles Python keywords by appending an underscore

    Example:
        >>> python_identifier("class")
        'class_'
        >>> python_identifier("123invalid")
        '_123invalid'
    """
    if name is None:
        return None

    name = to_snake_case(name)
    name = re.sub(r"[^a-zA-Z0-9_]", "", name)
    if name and not name[0].isalpha() and name[0] != "_":
        name = "_" + name

    if name in PYTHON_KEYWORDS:
        name += "_"

    return name if name else "_field"


def is_valid_python_identifier(name: Optional[str]) -> bool:
    """Check if a string is a valid Python identifier and not a keyword."""
    if not name:
        return False
    return name.isidentifier() and name not in PYTHON_KEYWORDS


def english_singular(table_name: Optional[str]) -> Optional[str]:
    """
    Dictionary-backed singular form of a table name's final segment.

    Used to flag tables whose generated entity name reads oddly
    (``people`` -> ``People``). It never feeds generated names.
    """
    if table_name is None:
        return None

    segments = [segment for segment in table_name.lower().split("_") if segment]
    if not segments:
        return ""
    singular = p.singular_noun(segments[-1])
    # inflect returns False when the word is already singular
    if singular:
        segments[-1] = singular
    return "_".join(segments)


class NamingConventions:
    """
    Centralized naming convention utilities.

    This class gives generators one consistent entry point for names.
    """

    @staticmethod
    def table_to_entity(table_name: Optional[str]) -> Optional[str]:
        """Convert table name to entity class name."""
        return entity_name(table_name)

    @staticmethod
    def table_to_module(table_name: Optional[str]) -> Optional[str]:
        """Convert table name to package/folder segment."""
        return module_name(table_name)

    @staticmethod
    def table_to_variable(table_name: Optional[str]) -> Optional[str]:
        """Convert table name to entity variable name."""
        return entity_variable_name(table_name)

    @staticmethod
    def column_to_field(column_name: Optional[str]) -> Optional[str]:
        """Convert column name to camelCase field name."""
        return field_name(column_name)

    @staticmethod
    def column_to_python_field(column_name: Optional[str]) -> Optional[str]:
        """Convert column name to snake_case Python attribute name."""
        return python_identifier(column_name)

    @staticmethod
    def foreign_key_to_relationship(column_name: Optional[str]) -> Optional[str]:
        """Convert foreign key column to relationship field name."""
        return relationship_field_name(column_name)

    @staticmethod
    def collection_name(table_name: Optional[str]) -> Optional[str]:
        """camelCase plural name for a collection of a table's entities."""
        variable = entity_variable_name(table_name)
        return pluralize(variable)

    @staticmethod
    def is_valid_identifier(name: Optional[str]) -> bool:
        """Check if name is valid Python identifier."""
        return is_valid_python_identifier(name)
