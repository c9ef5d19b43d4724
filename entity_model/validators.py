"""
Validation utilities for the entity model.

This module checks schema facts before (and after) a model is built.
Structural problems that would make relationship resolution fail are
reported as errors; naming oddities that only affect generated code are
reported as warnings.
"""

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Sequence

from .domain import naming
from .domain.models import Table
from .exceptions import SchemaValidationError


@dataclass
class ValidationResult:
    """Result of a validation operation."""

    is_valid: bool = True
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def __post_init__(self):
        """Ensure consistency."""
        if self.errors and self.is_valid:
            self.is_valid = False

    def add_error(self, error: str) -> None:
        """Add an error."""
        self.errors.append(error)
        self.is_valid = False

    def add_warning(self, warning: str) -> None:
        """Add a warning."""
        self.warnings.append(warning)

    def merge(self, other: "ValidationResult") -> "ValidationResult":
        """Fold another result into this one."""
        for error in other.errors:
            self.add_error(error)
        self.warnings.extend(other.warnings)
        return self

    def raise_if_invalid(self) -> None:
        """Raise SchemaValidationError if invalid."""
        if not self.is_valid:
            raise SchemaValidationError(
                f"Validation failed: {'; '.join(self.errors)}",
                context={"errors": self.errors, "warnings": self.warnings}
            )


def _name_key(name: str, case_insensitive: bool) -> str:
    if name is None:
        return name
    return name.lower() if case_insensitive else name


class SchemaValidator:
    """Validates schema facts and the names generated from them."""

    @staticmethod
    def validate_table_names(tables: Sequence[Table], case_insensitive: bool = True) -> ValidationResult:
        """Every table needs a name, unique within the schema."""
        result = ValidationResult()
        seen: Dict[str, str] = {}

        for table in tables:
            if not table.name:
                result.add_error("Table name is required")
                continue
            key = _name_key(table.name, case_insensitive)
            if key in seen:
                result.add_error(f"Duplicate table name '{table.name}' (conflicts with '{seen[key]}')")
            else:
                seen[key] = table.name

        return result

    @staticmethod
    def validate_primary_keys(tables: Iterable[Table]) -> ValidationResult:
        """Tables without a primary key still build, but generators need one."""
        result = ValidationResult()
        for table in tables:
            if not table.has_primary_key:
                result.add_warning(f"Table '{table.name}' has no primary key")
        return result

    @staticmethod
    def validate_foreign_keys(tables: Sequence[Table], case_insensitive: bool = True) -> ValidationResult:
        """
        Check that every foreign key names a declared column and an existing table.

        Catches before the build what SchemaModel would otherwise raise as
        SchemaValidationError or UnresolvedReferenceError.
        """
        result = ValidationResult()
        known_tables = {_name_key(table.name, case_insensitive) for table in tables if table.name}

        for table in tables:
            for fk in table.foreign_keys:
                if not fk.column_name:
                    result.add_error(f"Foreign key on table '{table.name}' has no column")
                elif table.column_by_name(fk.column_name) is None:
                    result.add_error(
                        f"Foreign key column '{fk.column_name}' is not declared on table '{table.name}'"
                    )

                if _name_key(fk.referenced_table, case_insensitive) not in known_tables:
                    result.add_error(
                        f"Foreign key '{fk.column_name}' on table '{table.name}' "
                        f"references non-existent table '{fk.referenced_table}'"
                    )

        return result

    @staticmethod
    def validate_entity_names(tables: Iterable[Table]) -> ValidationResult:
        """
        Warn about generated names that collide or read oddly.

        Two tables mapping to one entity name (``category`` and
        ``categories``) would generate clashing classes. Irregular plurals
        (``people``) keep their table spelling since generated names only use
        suffix rules; those get an advisory.
        """
        result = ValidationResult()
        by_entity: Dict[str, List[str]] = defaultdict(list)

        for table in tables:
            entity = table.entity_name
            if not entity:
                continue
            by_entity[entity].append(table.name)

            english = naming.to_pascal_case(naming.english_singular(table.name))
            if english and english != entity:
                result.add_warning(
                    f"Table '{table.name}' generates entity '{entity}', "
                    f"English singular suggests '{english}'"
                )

            if not naming.is_valid_python_identifier(naming.python_identifier(table.name)):
                result.add_warning(f"Table '{table.name}' does not map to a valid identifier")

        for entity, names in by_entity.items():
            if len(names) > 1:
                result.add_warning(
                    f"Tables {', '.join(repr(name) for name in names)} all generate entity '{entity}'"
                )

        return result

    @classmethod
    def validate_schema(cls, tables: Iterable[Table], case_insensitive: bool = True) -> ValidationResult:
        """Run every check on a set of tables before building a model."""
        tables = tuple(tables)
        result = ValidationResult()
        result.merge(cls.validate_table_names(tables, case_insensitive))
        result.merge(cls.validate_foreign_keys(tables, case_insensitive))
        result.merge(cls.validate_primary_keys(tables))
        result.merge(cls.validate_entity_names(tables))
        return result
