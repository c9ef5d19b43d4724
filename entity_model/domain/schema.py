"""
The schema model aggregate.

A SchemaModel owns every table of a parsed schema and exposes the resolved
relationship graph. It is built once: all structural checks, relationship
resolution and per-table views happen in the constructor, so every query
afterwards is a lookup into immutable data and the model can be shared
between concurrent generators without locking.
"""

import logging
from collections import OrderedDict
from typing import Any, Dict, Iterable, Optional, Tuple, Union

from ..colored_logging import log_progress, log_section, log_success
from ..config import ModelSettings
from ..exceptions import SchemaValidationError, TableNotFoundError
from ..validators import SchemaValidator, ValidationResult
from .models import ManyToManyRelation, RelationshipView, Table, TableRelationship
from .relationships import RelationshipResolver


logger = logging.getLogger(__name__)

TableRef = Union[Table, str]


class SchemaModel:
    """
    Read-only entity-relationship model of a schema.

    Junction tables are kept for relationship resolution but hidden from
    ``all_tables()``, the view of tables generators emit entities for.

    Raises (at construction):
        SchemaValidationError: On duplicate table names, or a foreign key
            naming a column its table does not declare
        UnresolvedReferenceError: If a foreign key references a missing table
    """

    def __init__(self, tables: Iterable[Table], settings: Optional[ModelSettings] = None):
        self.settings = settings if settings is not None else ModelSettings()
        self._tables: Tuple[Table, ...] = tuple(tables)
        self._resolver = RelationshipResolver()

        log_section(logger, "Building schema model")
        log_progress(logger, f"Indexing {len(self._tables)} tables")
        self._index = self._build_index()
        if self.settings.require_foreign_key_columns:
            self._check_foreign_key_columns()

        log_progress(logger, "Resolving relationships")
        resolved = self._resolver.resolve(self._tables, self.table_by_name)
        self._direct = resolved.direct
        self._relationships = resolved.all
        self._junction_tables = resolved.junction_tables
        junction_names = {table.name for table in self._junction_tables}

        self._entity_tables = tuple(
            table for table in self._tables
            if table.name not in junction_names
            and not (self.settings.exclude_audit_tables and self.settings.is_audit_table(table.name))
        )

        self._views: Dict[str, RelationshipView] = {}
        self._many_to_many: Dict[str, Tuple[ManyToManyRelation, ...]] = {}
        for table in self._tables:
            self._views[table.name] = self._build_view(table)
            self._many_to_many[table.name] = self._resolver.many_to_many_relations(
                table, resolved.many_to_many
            )

        log_success(
            logger,
            f"Schema model ready: {len(self._entity_tables)} entity tables, "
            f"{len(self._junction_tables)} junction tables, "
            f"{len(self._relationships)} relationships"
        )

    # --- Construction ---

    def _key(self, name: str) -> str:
        return name.lower() if self.settings.case_insensitive_names else name

    def _build_index(self) -> Dict[str, Table]:
        index: Dict[str, Table] = {}
        for table in self._tables:
            if not table.name:
                raise SchemaValidationError("Table name is required")
            key = self._key(table.name)
            if key in index:
                raise SchemaValidationError(
                    f"Duplicate table name '{table.name}' (conflicts with '{index[key].name}')",
                    table=table.name,
                )
            index[key] = table
        return index

    def _check_foreign_key_columns(self) -> None:
        for table in self._tables:
            for fk in table.foreign_keys:
                if table.column_by_name(fk.column_name) is None:
                    raise SchemaValidationError(
                        f"Foreign key column '{fk.column_name}' is not declared on table '{table.name}'",
                        table=table.name,
                        column=fk.column_name,
                    )

    def _build_view(self, table: Table) -> RelationshipView:
        outgoing = tuple(rel for rel in self._direct if rel.source_table.name == table.name)
        incoming = self._resolver.find_inverse_relationships(table, self._direct)
        many_to_many = tuple(
            rel for rel in self._relationships
            if rel.is_many_to_many
            and (rel.source_table.name == table.name or rel.target_table.name == table.name)
        )
        return RelationshipView(outgoing=outgoing, incoming=incoming, many_to_many=many_to_many)

    # --- Tables ---

    def all_tables(self) -> Tuple[Table, ...]:
        """Entity tables: everything except junction (and, if configured, audit) tables."""
        return self._entity_tables

    def tables(self) -> Tuple[Table, ...]:
        """Every table, junction tables included, in declaration order."""
        return self._tables

    def junction_tables(self) -> Tuple[Table, ...]:
        return self._junction_tables

    def table_by_name(self, name: Optional[str]) -> Optional[Table]:
        """Get a table by name, or None if it is not part of the model."""
        if name is None:
            return None
        return self._index.get(self._key(name))

    def require_table(self, name: str) -> Table:
        """
        Get a table by name.

        Raises:
            TableNotFoundError: If the table is not part of the model
        """
        table = self.table_by_name(name)
        if table is None:
            raise TableNotFoundError(name)
        return table

    def tables_by_module(self) -> "OrderedDict[str, Tuple[Table, ...]]":
        """Entity tables grouped by generated module name."""
        grouped: Dict[str, list] = OrderedDict()
        for table in self._entity_tables:
            grouped.setdefault(table.module_name, []).append(table)
        return OrderedDict((module, tuple(tables)) for module, tables in grouped.items())

    # --- Relationships ---

    def all_relationships(self) -> Tuple[TableRelationship, ...]:
        """Direct edges followed by synthesized many-to-many edges."""
        return self._relationships

    def _resolve_ref(self, table: TableRef) -> Table:
        name = table.name if isinstance(table, Table) else table
        return self.require_table(name)

    def relationships_for_table(self, table: TableRef) -> RelationshipView:
        """
        The relationships generators render for one table.

        Args:
            table: A table of this model, or its name

        Returns:
            Outgoing direct edges, incoming inverse edges and many-to-many edges

        Raises:
            TableNotFoundError: If the table is not part of the model
        """
        return self._views[self._resolve_ref(table).name]

    def find_inverse_relationships(self, table: TableRef) -> Tuple[TableRelationship, ...]:
        return self.relationships_for_table(table).incoming

    def many_to_many_relations(self, table: TableRef) -> Tuple[ManyToManyRelation, ...]:
        return self._many_to_many[self._resolve_ref(table).name]

    # --- Reporting ---

    def validate(self) -> ValidationResult:
        """
        Report non-fatal problems of a built model.

        Anything fatal was already raised during construction, so the result
        only carries warnings.
        """
        result = ValidationResult()
        result.merge(SchemaValidator.validate_primary_keys(self._tables))
        result.merge(SchemaValidator.validate_entity_names(self._entity_tables))
        for warning in result.warnings:
            logger.warning(warning)
        return result

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            'tables': [table.to_dict() for table in self._entity_tables],
            'junction_tables': [table.name for table in self._junction_tables],
            'relationships': [rel.to_dict() for rel in self._relationships],
            'views': {name: view.to_dict() for name, view in self._views.items()},
        }

    def __len__(self) -> int:
        return len(self._tables)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.table_by_name(name) is not None

    def __repr__(self) -> str:
        return (
            f"SchemaModel(tables={len(self._tables)}, "
            f"junction_tables={len(self._junction_tables)}, "
            f"relationships={len(self._relationships)})"
        )
