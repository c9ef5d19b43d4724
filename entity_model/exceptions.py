"""
Custom exception hierarchy for the entity model.

Every error carries structured context and recovery suggestions so the
caller one level up can produce an actionable diagnostic before any code
is generated.
"""

from typing import Dict, Any, Optional, List


class EntityModelError(Exception):
    """
    Base exception for all entity model errors.

    ``context`` names the table, column or file involved and ``suggestions``
    lists fixes a caller can show next to the message. ``to_dict()`` gives
    the same data in a shape a generator can embed in its own report.
    """

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        suggestions: Optional[List[str]] = None,
        error_code: Optional[str] = None
    ):
        super().__init__(message)
        self.message = message
        self.context = dict(context or {})
        self.suggestions = list(suggestions or [])
        self.error_code = error_code or "ENTITY_MODEL_ERROR"

    @property
    def table(self) -> Optional[str]:
        """The table the error is about, if any."""
        return self.context.get('table')

    def to_dict(self) -> Dict[str, Any]:
        return {
            'error_code': self.error_code,
            'message': self.message,
            'context': dict(self.context),
            'suggestions': list(self.suggestions),
        }

    def __str__(self) -> str:
        lines = [self.message]
        if self.context:
            details = ", ".join(f"{key}={value}" for key, value in self.context.items())
            lines.append(f"[{self.error_code}] {details}")
        for suggestion in self.suggestions:
            lines.append(f"  hint: {suggestion}")
        return "\n".join(lines)


class ConfigurationError(EntityModelError):
    """Raised when model settings are invalid or cannot be read."""

    def __init__(self, message: str, config_file: str = None, **kwargs):
        context = kwargs.get('context', {})
        if config_file:
            context['config_file'] = config_file

        suggestions = kwargs.get('suggestions', [])
        if not suggestions:
            suggestions = [
                "Check the YAML syntax of the settings file",
                "Known options: case_insensitive_names, exclude_audit_tables, audit_table_suffixes, audit_table_names, require_foreign_key_columns",
                "Boolean options take true or false, name lists take a list of strings"
            ]

        super().__init__(
            message,
            context=context,
            suggestions=suggestions,
            error_code="CONFIG_ERROR"
        )


class SchemaValidationError(EntityModelError):
    """Raised when schema facts violate a structural invariant."""

    def __init__(self, message: str, table: str = None, column: str = None, **kwargs):
        context = kwargs.get('context', {})
        if table:
            context['table'] = table
        if column:
            context['column'] = column

        suggestions = kwargs.get('suggestions', [])
        if not suggestions:
            suggestions = [
                "Table names must be unique, ignoring case unless case_insensitive_names is off",
                "Declare every foreign key column on its table, or set require_foreign_key_columns to false"
            ]

        super().__init__(
            message,
            context=context,
            suggestions=suggestions,
            error_code="SCHEMA_VALIDATION_ERROR"
        )


class UnresolvedReferenceError(EntityModelError):
    """Raised when a foreign key references a table missing from the schema."""

    def __init__(
        self,
        message: str = None,
        table: str = None,
        column: str = None,
        referenced_table: str = None,
        **kwargs
    ):
        self.column = column
        self.referenced_table = referenced_table

        if message is None:
            message = (
                f"Foreign key '{column}' on table '{table}' references "
                f"non-existent table '{referenced_table}'"
            )

        context = kwargs.get('context', {})
        context['table'] = table
        context['column'] = column
        context['referenced_table'] = referenced_table

        suggestions = kwargs.get('suggestions', [])
        if not suggestions:
            suggestions = [
                f"Include table '{referenced_table}' in the schema",
                "Check the spelling of the referenced table name",
                "Drop the foreign key from the facts if its target lives in another database"
            ]

        super().__init__(
            message,
            context=context,
            suggestions=suggestions,
            error_code="UNRESOLVED_REFERENCE"
        )


class TableNotFoundError(EntityModelError, KeyError):
    """Raised when a lookup names a table that is not part of the model."""

    def __init__(self, table_name: str, **kwargs):
        self.table_name = table_name
        super().__init__(
            f"Table '{table_name}' is not part of the schema model",
            context={'table': table_name},
            suggestions=kwargs.get('suggestions') or ["Use table_by_name() to test membership without raising"],
            error_code="TABLE_NOT_FOUND"
        )


class FactsValidationError(EntityModelError):
    """Raised when upstream schema facts do not match the expected shape."""

    def __init__(self, message: str, errors: Optional[List[Dict[str, Any]]] = None, **kwargs):
        self.errors = errors or []

        context = kwargs.get('context', {})
        for index, error in enumerate(self.errors):
            location = " -> ".join(str(part) for part in error.get("loc", ())) or "root"
            context[f"error_{index + 1}"] = f"{location}: {error.get('msg', 'invalid value')}"

        suggestions = kwargs.get('suggestions', [])
        if not suggestions:
            suggestions = [
                "Check the field names produced by the upstream parser",
                "Both snake_case and camelCase keys are accepted"
            ]

        super().__init__(
            message,
            context=context,
            suggestions=suggestions,
            error_code="FACTS_VALIDATION_ERROR"
        )
