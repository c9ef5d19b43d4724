"""
Relationship analysis domain logic for the entity model.

This module infers the cardinality of every foreign key, detects junction
tables and folds them into many-to-many edges, and derives the inverse
(collection-valued) edges generators render on referenced tables.

Cardinality is decided from structural facts only (primary key shape,
foreign key columns, uniqueness), never from naming conventions.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Tuple

from ..colored_logging import log_highlight
from ..exceptions import UnresolvedReferenceError
from .models import (
    ForeignKey,
    ManyToManyRelation,
    RelationType,
    Table,
    TableRelationship,
)


logger = logging.getLogger(__name__)

TableLookup = Callable[[str], Optional[Table]]


@dataclass(frozen=True)
class ResolvedRelationships:
    """Output of a full resolution pass over a schema."""

    direct: Tuple[TableRelationship, ...] = ()
    many_to_many: Tuple[TableRelationship, ...] = ()
    junction_tables: Tuple[Table, ...] = ()

    @property
    def all(self) -> Tuple[TableRelationship, ...]:
        return self.direct + self.many_to_many


class RelationshipResolver:
    """
    Resolves foreign keys into typed relationship edges.

    Resolution is an explicit two-pass algorithm: the first pass classifies
    every table (junction or entity), the second emits direct edges for
    entity tables and one synthesized many-to-many edge per junction table.
    The relationship graph is at most entity-junction-entity deep, so no
    graph traversal is needed and self-referencing schemas cannot loop.
    """

    @staticmethod
    def is_junction_table(table: Table) -> bool:
        """
        Check if a table only links two other tables.

        Exactly two foreign keys, a composite primary key, and the foreign
        key columns equal the primary key columns (as a set, not in order).
        """
        return table.is_junction_table()

    def infer_relation_type(
        self,
        foreign_key: ForeignKey,
        owning_table: Table,
        referenced_table: Table,
    ) -> RelationType:
        """
        Infer the cardinality of a foreign key.

        Evaluated in order:
        1. The owning table is a junction table and the key is one of its
           two foreign keys: MANY_TO_MANY
        2. The key column is unique: ONE_TO_ONE
        3. Otherwise: MANY_TO_ONE

        Args:
            foreign_key: Foreign key declared on ``owning_table``
            owning_table: Table holding the foreign key column
            referenced_table: Table the key points at

        Returns:
            The inferred relation type
        """
        if self.is_junction_table(owning_table) and \
                foreign_key.column_name in owning_table.foreign_key_column_names:
            return RelationType.MANY_TO_MANY

        if foreign_key.column_name and owning_table.is_unique_column(foreign_key.column_name):
            return RelationType.ONE_TO_ONE

        return RelationType.MANY_TO_ONE

    def resolve_reference(self, table: Table, foreign_key: ForeignKey, lookup: TableLookup) -> Table:
        """
        Find the table a foreign key references.

        Raises:
            UnresolvedReferenceError: If the referenced table is not in the schema
        """
        target = lookup(foreign_key.referenced_table) if foreign_key.referenced_table else None
        if target is None:
            logger.error(
                f"Foreign key '{foreign_key.column_name}' on table '{table.name}' "
                f"references missing table '{foreign_key.referenced_table}'"
            )
            raise UnresolvedReferenceError(
                table=table.name,
                column=foreign_key.column_name,
                referenced_table=foreign_key.referenced_table,
            )
        return target

    def resolve(self, tables: Iterable[Table], lookup: TableLookup) -> ResolvedRelationships:
        """
        Resolve every relationship in a schema.

        Args:
            tables: All tables of the schema, junction tables included
            lookup: Finds a table by referenced name, None when absent

        Returns:
            Direct edges, synthesized many-to-many edges and junction tables

        Raises:
            UnresolvedReferenceError: If any foreign key cannot be resolved
        """
        tables = tuple(tables)

        # Pass 1: classify
        junction_tables = tuple(table for table in tables if self.is_junction_table(table))
        junction_names = {table.name for table in junction_tables}
        for table in junction_tables:
            log_highlight(logger, f"Detected junction table '{table.name}'")

        # Pass 2: emit edges
        direct: List[TableRelationship] = []
        many_to_many: List[TableRelationship] = []

        for table in tables:
            if table.name in junction_names:
                many_to_many.append(self.synthesize_many_to_many(table, lookup))
                continue

            for fk in table.foreign_keys:
                target = self.resolve_reference(table, fk, lookup)
                direct.append(TableRelationship(
                    source_table=table,
                    target_table=target,
                    foreign_key=fk,
                    relation_type=self.infer_relation_type(fk, table, target),
                ))

        logger.debug(
            f"Resolved {len(direct)} direct and {len(many_to_many)} many-to-many relationships"
        )
        return ResolvedRelationships(
            direct=tuple(direct),
            many_to_many=tuple(many_to_many),
            junction_tables=junction_tables,
        )

    def synthesize_many_to_many(self, junction_table: Table, lookup: TableLookup) -> TableRelationship:
        """
        Fold a junction table into a single many-to-many edge.

        The edge connects the tables referenced by the first and second
        foreign key (declaration order). When both keys reference the same
        table the edge is self-referential; it is still emitted once.
        """
        fk1, fk2 = junction_table.foreign_keys
        source = self.resolve_reference(junction_table, fk1, lookup)
        target = self.resolve_reference(junction_table, fk2, lookup)

        if source.name == target.name:
            log_highlight(logger, f"Self-referential many-to-many on '{source.name}' via '{junction_table.name}'")

        return TableRelationship(
            source_table=source,
            target_table=target,
            foreign_key=fk1,
            relation_type=RelationType.MANY_TO_MANY,
            junction_table=junction_table,
            inverse_foreign_key=fk2,
        )

    def find_inverse_relationships(
        self,
        table: Table,
        relationships: Iterable[TableRelationship],
    ) -> Tuple[TableRelationship, ...]:
        """
        Edges other tables hold towards ``table``, seen from ``table``.

        Only direct edges owned by non-junction tables contribute; junction
        tables are covered by many-to-many synthesis instead. Self-references
        are included so hierarchies get a children collection.
        """
        inverse = []
        for rel in relationships:
            if rel.is_many_to_many or rel.is_inverse:
                continue
            if rel.target_table.name != table.name:
                continue
            if self.is_junction_table(rel.source_table):
                continue
            inverse.append(TableRelationship(
                source_table=rel.source_table,
                target_table=rel.target_table,
                foreign_key=rel.foreign_key,
                relation_type=rel.relation_type.inverse(),
                is_inverse=True,
            ))
        return tuple(inverse)

    def many_to_many_relations(
        self,
        table: Table,
        relationships: Iterable[TableRelationship],
    ) -> Tuple[ManyToManyRelation, ...]:
        """
        Synthesized many-to-many edges involving ``table``, seen from it.

        A self-referential edge yields a single relation joining through the
        first foreign key.
        """
        relations = []
        for rel in relationships:
            if not rel.is_many_to_many or rel.junction_table is None:
                continue
            if rel.source_table.name == table.name:
                relations.append(ManyToManyRelation(
                    junction_table=rel.junction_table,
                    join_column=rel.source_join_column,
                    inverse_join_column=rel.target_join_column,
                    target_table=rel.target_table,
                ))
            elif rel.target_table.name == table.name:
                relations.append(ManyToManyRelation(
                    junction_table=rel.junction_table,
                    join_column=rel.target_join_column,
                    inverse_join_column=rel.source_join_column,
                    target_table=rel.source_table,
                ))
        return tuple(relations)
