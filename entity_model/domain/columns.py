"""
Column classification for templating.

Partitions a table's columns into primary-key, foreign-key, audit and
business columns, and derives validation hints for single columns. Nothing
here mutates a table or raises: unknown types fall back to the most
permissive classification so code generation is never blocked.
"""

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, Optional, Set, Tuple

from ..constants import AuditColumns
from .type_mapping import SemanticType

if TYPE_CHECKING:
    from .models import Column, Table


class HintKind(Enum):
    """Kinds of validation constraints generators render."""

    NOT_BLANK = "not_blank"
    NOT_NULL = "not_null"
    MAX_LENGTH = "max_length"
    UNIQUE = "unique"


@dataclass(frozen=True)
class ValidationHint:
    """A single validation constraint descriptor for a column."""

    kind: HintKind
    value: Optional[int] = None

    @property
    def is_advisory(self) -> bool:
        """Advisory hints cannot be enforced on a single value (uniqueness)."""
        return self.kind == HintKind.UNIQUE

    def to_dict(self) -> Dict[str, Any]:
        return {'kind': self.kind.value, 'value': self.value}


@dataclass(frozen=True)
class ColumnPartition:
    """A table's columns split into disjoint categories, declared order kept."""

    primary_key: Tuple["Column", ...] = ()
    foreign_key: Tuple["Column", ...] = ()
    audit: Tuple["Column", ...] = ()
    business: Tuple["Column", ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            'primary_key': [col.name for col in self.primary_key],
            'foreign_key': [col.name for col in self.foreign_key],
            'audit': [col.name for col in self.audit],
            'business': [col.name for col in self.business],
        }


def _foreign_key_column_names(table: "Table") -> Set[str]:
    return {fk.column_name.lower() for fk in table.foreign_keys if fk.column_name}


def _is_primary_key(column: "Column", table: "Table") -> bool:
    if column.primary_key:
        return True
    return (column.name or "").lower() in {name.lower() for name in table.primary_key_columns}


def is_audit_column(column_name: Optional[str]) -> bool:
    """Check if a column name is managed by the shared audit base."""
    if column_name is None:
        return False
    return column_name.lower() in AuditColumns.EXCLUDED


def business_columns(table: "Table") -> Tuple["Column", ...]:
    """
    Columns a generator renders as plain entity fields.

    Excludes primary-key columns, foreign-key columns and audit columns.
    """
    fk_columns = _foreign_key_column_names(table)
    return tuple(
        col for col in table.columns
        if not _is_primary_key(col, table)
        and (col.name or "").lower() not in fk_columns
        and not is_audit_column(col.name)
    )


def extends_audit_base(table: "Table") -> bool:
    """Check if a table uses the shared base-entity contract."""
    return any(
        col.name is not None and col.name.lower() in AuditColumns.BASE_MARKERS
        for col in table.columns
    )


def validation_hints(column: "Column") -> Tuple[ValidationHint, ...]:
    """
    Validation constraints for a column.

    Primary keys are system-assigned and get no hints; neither do columns of
    an unknown semantic type.
    """
    if column.primary_key:
        return ()

    semantic_type = column.semantic_type
    if semantic_type is None or semantic_type == SemanticType.UNKNOWN:
        return ()

    is_string = semantic_type == SemanticType.STRING
    hints = []

    if not column.nullable:
        hints.append(ValidationHint(HintKind.NOT_BLANK if is_string else HintKind.NOT_NULL))

    if is_string and column.length:
        hints.append(ValidationHint(HintKind.MAX_LENGTH, column.length))

    if column.unique:
        hints.append(ValidationHint(HintKind.UNIQUE))

    return tuple(hints)


def classify(table: "Table") -> ColumnPartition:
    """Split a table's columns; precedence is PK, then FK, then audit."""
    fk_columns = _foreign_key_column_names(table)
    primary_key, foreign_key, audit, business = [], [], [], []

    for col in table.columns:
        if _is_primary_key(col, table):
            primary_key.append(col)
        elif (col.name or "").lower() in fk_columns:
            foreign_key.append(col)
        elif is_audit_column(col.name):
            audit.append(col)
        else:
            business.append(col)

    return ColumnPartition(
        primary_key=tuple(primary_key),
        foreign_key=tuple(foreign_key),
        audit=tuple(audit),
        business=tuple(business),
    )


class ColumnClassifier:
    """
    Classifies table columns for templating.

    Thin facade over the module functions so generators can depend on a
    single object.
    """

    @staticmethod
    def business_columns(table: "Table") -> Tuple["Column", ...]:
        return business_columns(table)

    @staticmethod
    def extends_audit_base(table: "Table") -> bool:
        return extends_audit_base(table)

    @staticmethod
    def validation_hints(column: "Column") -> Tuple[ValidationHint, ...]:
        return validation_hints(column)

    @staticmethod
    def classify(table: "Table") -> ColumnPartition:
        return classify(table)

    @staticmethod
    def is_audit_column(column_name: Optional[str]) -> bool:
        return is_audit_column(column_name)
