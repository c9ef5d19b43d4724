"""
Core domain models for the entity model.

These models represent parsed schema facts (tables, columns, foreign keys,
indexes) and the relationship edges resolved between tables. They are
immutable once constructed: sequences are stored as tuples and derived
names are computed on access, never stored.
"""

from collections import Counter
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Tuple, Union

from ..constants import ImplicitKey
from ..exceptions import SchemaValidationError
from . import columns as column_rules
from . import naming
from .columns import ColumnPartition, ValidationHint
from .type_mapping import SemanticType, infer_semantic_type, parse_semantic_type


class ReferentialAction(Enum):
    """Actions taken on referencing rows when a referenced row changes."""

    CASCADE = "cascade"
    SET_NULL = "set_null"
    SET_DEFAULT = "set_default"
    RESTRICT = "restrict"
    NO_ACTION = "no_action"

    @classmethod
    def parse(cls, value: Union["ReferentialAction", str, None]) -> "ReferentialAction":
        """
        Parse an action from SQL or code spelling.

        Accepts ``SET NULL``, ``set_null``, ``set-null`` and ``SetNull``.
        None means NO ACTION, the SQL default.
        """
        if value is None:
            return cls.NO_ACTION
        if isinstance(value, cls):
            return value
        normalized = naming.to_snake_case(str(value).strip())
        normalized = "_".join(part for part in normalized.split("_") if part)
        try:
            return cls(normalized)
        except ValueError:
            raise ValueError(
                f"Unknown referential action '{value}'. "
                f"Expected one of: {', '.join(action.name for action in cls)}"
            ) from None


class IndexType(Enum):
    """Index access methods."""

    BTREE = "btree"
    HASH = "hash"
    GIN = "gin"
    GIST = "gist"
    BRIN = "brin"

    @classmethod
    def parse(cls, value: Union["IndexType", str, None]) -> "IndexType":
        if value is None:
            return cls.BTREE
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(
                f"Unknown index type '{value}'. "
                f"Expected one of: {', '.join(kind.name for kind in cls)}"
            ) from None


class RelationType(Enum):
    """Cardinality of a relationship edge."""

    MANY_TO_ONE = "many_to_one"
    ONE_TO_ONE = "one_to_one"
    MANY_TO_MANY = "many_to_many"
    # Only used on inverse edges, seen from the referenced table
    ONE_TO_MANY = "one_to_many"

    def inverse(self) -> "RelationType":
        """Cardinality of the same edge seen from the other end."""
        return _INVERSE_RELATION_TYPES[self]


_INVERSE_RELATION_TYPES = {
    RelationType.MANY_TO_ONE: RelationType.ONE_TO_MANY,
    RelationType.ONE_TO_MANY: RelationType.MANY_TO_ONE,
    RelationType.ONE_TO_ONE: RelationType.ONE_TO_ONE,
    RelationType.MANY_TO_MANY: RelationType.MANY_TO_MANY,
}


@dataclass(frozen=True)
class Column:
    """
    A table column with all its properties.

    The semantic type is inferred from ``sql_type`` when not given.
    """

    name: str
    sql_type: Optional[str] = None
    semantic_type: Optional[SemanticType] = None
    nullable: bool = True
    primary_key: bool = False
    unique: bool = False
    auto_increment: bool = False
    length: Optional[int] = None
    precision: Optional[int] = None
    scale: Optional[int] = None
    default_value: Optional[str] = None
    check_constraint: Optional[str] = None
    comment: Optional[str] = None

    def __post_init__(self):
        if self.primary_key and self.nullable:
            # Primary keys can never be null
            object.__setattr__(self, 'nullable', False)

        if self.semantic_type is None:
            object.__setattr__(self, 'semantic_type', infer_semantic_type(self.sql_type))
        elif isinstance(self.semantic_type, str):
            object.__setattr__(self, 'semantic_type', parse_semantic_type(self.semantic_type))

    @property
    def field_name(self) -> Optional[str]:
        """camelCase field name."""
        return naming.field_name(self.name)

    @property
    def python_name(self) -> Optional[str]:
        """snake_case, keyword-safe attribute name."""
        return naming.python_identifier(self.name)

    @property
    def is_string(self) -> bool:
        return self.semantic_type == SemanticType.STRING

    @property
    def is_required(self) -> bool:
        """Not nullable and no default value."""
        return not self.nullable and self.default_value is None

    @property
    def validation_hints(self) -> Tuple[ValidationHint, ...]:
        return column_rules.validation_hints(self)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            'name': self.name,
            'sql_type': self.sql_type,
            'semantic_type': self.semantic_type.value,
            'nullable': self.nullable,
            'primary_key': self.primary_key,
            'unique': self.unique,
            'auto_increment': self.auto_increment,
            'length': self.length,
            'precision': self.precision,
            'scale': self.scale,
            'default_value': self.default_value,
            'check_constraint': self.check_constraint,
            'comment': self.comment,
            'field_name': self.field_name,
            'validation_hints': [hint.to_dict() for hint in self.validation_hints],
        }


@dataclass(frozen=True)
class ForeignKey:
    """A foreign key from a column of the owning table to another table."""

    column_name: str
    referenced_table: str
    referenced_column: str = ImplicitKey.REFERENCED_COLUMN
    name: Optional[str] = None
    on_delete: ReferentialAction = ReferentialAction.NO_ACTION
    on_update: ReferentialAction = ReferentialAction.NO_ACTION

    def __post_init__(self):
        object.__setattr__(self, 'on_delete', ReferentialAction.parse(self.on_delete))
        object.__setattr__(self, 'on_update', ReferentialAction.parse(self.on_update))

    @property
    def field_name(self) -> Optional[str]:
        """Relationship field name (``category_id`` -> ``category``)."""
        return naming.relationship_field_name(self.column_name)

    @property
    def referenced_entity_name(self) -> Optional[str]:
        return naming.entity_name(self.referenced_table)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            'name': self.name,
            'column_name': self.column_name,
            'referenced_table': self.referenced_table,
            'referenced_column': self.referenced_column,
            'on_delete': self.on_delete.value,
            'on_update': self.on_update.value,
            'field_name': self.field_name,
        }


@dataclass(frozen=True)
class Index:
    """A table index; column order is significant."""

    name: str
    table_name: str
    columns: Tuple[str, ...]
    unique: bool = False
    index_type: IndexType = IndexType.BTREE
    condition: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, 'columns', tuple(self.columns or ()))
        object.__setattr__(self, 'index_type', IndexType.parse(self.index_type))
        if not self.columns:
            raise SchemaValidationError(
                f"Index '{self.name}' must cover at least one column",
                table=self.table_name,
            )

    @property
    def is_partial(self) -> bool:
        return bool(self.condition)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            'name': self.name,
            'table_name': self.table_name,
            'columns': list(self.columns),
            'unique': self.unique,
            'index_type': self.index_type.value,
            'condition': self.condition,
        }


@dataclass(frozen=True)
class UniqueConstraint:
    """A (possibly multi-column) unique constraint."""

    columns: Tuple[str, ...]
    name: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, 'columns', tuple(self.columns or ()))

    def to_dict(self) -> Dict[str, Any]:
        return {'name': self.name, 'columns': list(self.columns)}


@dataclass(frozen=True)
class CheckConstraint:
    """A table-level check constraint."""

    expression: str
    name: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {'name': self.name, 'expression': self.expression}


@dataclass(frozen=True)
class Table:
    """
    A table with its columns, foreign keys, indexes and constraints.

    Names used by generators (entity, module, variable) are derived from
    the table name on access. A table holds no reference to a schema; it
    joins one only when inserted into a SchemaModel.
    """

    name: str
    columns: Tuple[Column, ...] = ()
    foreign_keys: Tuple[ForeignKey, ...] = ()
    indexes: Tuple[Index, ...] = ()
    primary_key_columns: Tuple[str, ...] = ()
    unique_constraints: Tuple[UniqueConstraint, ...] = ()
    check_constraints: Tuple[CheckConstraint, ...] = ()
    schema: Optional[str] = None
    comment: Optional[str] = None

    def __post_init__(self):
        for attr in ('columns', 'foreign_keys', 'indexes', 'primary_key_columns',
                     'unique_constraints', 'check_constraints'):
            object.__setattr__(self, attr, tuple(getattr(self, attr) or ()))

        seen = set()
        for col in self.columns:
            key = col.name.lower() if col.name else col.name
            if key in seen:
                raise SchemaValidationError(
                    f"Duplicate column '{col.name}' in table '{self.name}'",
                    table=self.name,
                    column=col.name,
                )
            seen.add(key)

        if not self.primary_key_columns:
            derived = tuple(col.name for col in self.columns if col.primary_key)
            object.__setattr__(self, 'primary_key_columns', derived)

    # --- Derived names ---

    @property
    def entity_name(self) -> Optional[str]:
        return naming.entity_name(self.name)

    @property
    def plural_entity_name(self) -> Optional[str]:
        return naming.plural_entity_name(self.name)

    @property
    def module_name(self) -> Optional[str]:
        return naming.module_name(self.name)

    @property
    def entity_variable_name(self) -> Optional[str]:
        return naming.entity_variable_name(self.name)

    # --- Column classification ---

    @property
    def business_columns(self) -> Tuple[Column, ...]:
        return column_rules.business_columns(self)

    @property
    def extends_audit_base(self) -> bool:
        return column_rules.extends_audit_base(self)

    @property
    def column_partition(self) -> ColumnPartition:
        return column_rules.classify(self)

    # --- Keys ---

    @property
    def has_primary_key(self) -> bool:
        return bool(self.primary_key_columns)

    @property
    def has_composite_primary_key(self) -> bool:
        return len(self.primary_key_columns) > 1

    @property
    def foreign_key_column_names(self) -> Tuple[str, ...]:
        return tuple(fk.column_name for fk in self.foreign_keys)

    def is_junction_table(self) -> bool:
        """
        Check if this table only links two other tables (many-to-many).

        True iff the table has exactly two foreign keys, a composite primary
        key, and the foreign key columns are exactly the primary key columns.
        """
        if len(self.foreign_keys) != 2:
            return False
        if len(self.primary_key_columns) < 2:
            return False
        fk_columns = Counter(name.lower() for name in self.foreign_key_column_names)
        return fk_columns == Counter(name.lower() for name in self.primary_key_columns)

    def is_unique_column(self, column_name: str) -> bool:
        """
        Check if a single column is constrained to unique values.

        Looks at the column flag, single-column unique constraints and
        single-column unique indexes.
        """
        if column_name is None:
            return False

        col = self.column_by_name(column_name)
        if col is not None and col.unique:
            return True

        lowered = column_name.lower()
        for constraint in self.unique_constraints:
            if len(constraint.columns) == 1 and constraint.columns[0].lower() == lowered:
                return True
        for index in self.indexes:
            if index.unique and not index.is_partial and len(index.columns) == 1 \
                    and index.columns[0].lower() == lowered:
                return True
        return False

    # --- Lookups ---

    def column_by_name(self, column_name: Optional[str]) -> Optional[Column]:
        """Get a column by name (case-insensitive)."""
        if column_name is None:
            return None
        lowered = column_name.lower()
        for col in self.columns:
            if col.name and col.name.lower() == lowered:
                return col
        return None

    def foreign_key_for_column(self, column_name: Optional[str]) -> Optional[ForeignKey]:
        """Get the foreign key declared on a column, if any."""
        if column_name is None:
            return None
        lowered = column_name.lower()
        for fk in self.foreign_keys:
            if fk.column_name and fk.column_name.lower() == lowered:
                return fk
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            'name': self.name,
            'schema': self.schema,
            'comment': self.comment,
            'entity_name': self.entity_name,
            'module_name': self.module_name,
            'entity_variable_name': self.entity_variable_name,
            'columns': [col.to_dict() for col in self.columns],
            'foreign_keys': [fk.to_dict() for fk in self.foreign_keys],
            'indexes': [index.to_dict() for index in self.indexes],
            'primary_key_columns': list(self.primary_key_columns),
            'unique_constraints': [uc.to_dict() for uc in self.unique_constraints],
            'check_constraints': [cc.to_dict() for cc in self.check_constraints],
            'business_columns': [col.name for col in self.business_columns],
            'extends_audit_base': self.extends_audit_base,
            'is_junction_table': self.is_junction_table(),
        }


@dataclass(frozen=True)
class TableRelationship:
    """
    A resolved relationship edge between two tables.

    For direct edges ``source_table`` owns the foreign key. Synthesized
    many-to-many edges connect the two entity tables of a junction table,
    which is kept as metadata along with both of its foreign keys.
    Inverse edges (``is_inverse``) are the direct edge seen from the
    referenced table.
    """

    source_table: Table
    target_table: Table
    foreign_key: ForeignKey
    relation_type: RelationType
    junction_table: Optional[Table] = None
    inverse_foreign_key: Optional[ForeignKey] = None
    is_inverse: bool = False

    @property
    def is_many_to_many(self) -> bool:
        return self.relation_type == RelationType.MANY_TO_MANY

    @property
    def is_self_referential(self) -> bool:
        return self.source_table.name == self.target_table.name

    @property
    def junction_table_name(self) -> Optional[str]:
        return self.junction_table.name if self.junction_table is not None else None

    @property
    def source_join_column(self) -> Optional[str]:
        """Junction column referencing the source table (many-to-many only)."""
        return self.foreign_key.column_name if self.is_many_to_many else None

    @property
    def target_join_column(self) -> Optional[str]:
        """Junction column referencing the target table (many-to-many only)."""
        if self.is_many_to_many and self.inverse_foreign_key is not None:
            return self.inverse_foreign_key.column_name
        return None

    @property
    def field_name(self) -> Optional[str]:
        """Name of the field a generator renders for this edge."""
        if self.is_many_to_many:
            return naming.NamingConventions.collection_name(self.target_table.name)
        if self.is_inverse:
            if self.relation_type == RelationType.ONE_TO_ONE:
                return self.source_table.entity_variable_name
            return naming.NamingConventions.collection_name(self.source_table.name)
        return self.foreign_key.field_name

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            'source_table': self.source_table.name,
            'target_table': self.target_table.name,
            'relation_type': self.relation_type.value,
            'foreign_key': self.foreign_key.to_dict(),
            'junction_table': self.junction_table_name,
            'source_join_column': self.source_join_column,
            'target_join_column': self.target_join_column,
            'is_inverse': self.is_inverse,
            'is_self_referential': self.is_self_referential,
            'field_name': self.field_name,
        }


@dataclass(frozen=True)
class ManyToManyRelation:
    """A synthesized many-to-many edge seen from one participating table."""

    junction_table: Table
    join_column: str
    inverse_join_column: str
    target_table: Table

    @property
    def field_name(self) -> Optional[str]:
        return naming.NamingConventions.collection_name(self.target_table.name)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'junction_table': self.junction_table.name,
            'join_column': self.join_column,
            'inverse_join_column': self.inverse_join_column,
            'target_table': self.target_table.name,
            'field_name': self.field_name,
        }


@dataclass(frozen=True)
class RelationshipView:
    """The relationships of one table, as consumed by code generators."""

    outgoing: Tuple[TableRelationship, ...] = ()
    incoming: Tuple[TableRelationship, ...] = ()
    many_to_many: Tuple[TableRelationship, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not (self.outgoing or self.incoming or self.many_to_many)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'outgoing': [rel.to_dict() for rel in self.outgoing],
            'incoming': [rel.to_dict() for rel in self.incoming],
            'many_to_many': [rel.to_dict() for rel in self.many_to_many],
        }
