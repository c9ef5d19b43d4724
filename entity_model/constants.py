"""
Centralized constants for the entity model.

This module contains the fixed lookup tables used while classifying columns,
detecting audit tables and inferring semantic types. All collections are
immutable so they can be shared freely between threads.
"""

import keyword
from typing import Dict, FrozenSet, Tuple


# =============================================================================
# COLUMN CLASSIFICATION
# =============================================================================

class AuditColumns:
    """Column names managed by the shared base entity rather than user code."""

    # Excluded from business columns (case-insensitive)
    EXCLUDED: FrozenSet[str] = frozenset({
        "id",
        "activo",
        "created_at",
        "updated_at",
        "created_by",
        "updated_by",
        "deleted_at",
        "deleted_by",
    })

    # Presence of any of these marks a table as extending the audit base.
    # Differs from EXCLUDED ("estado" vs "activo").
    BASE_MARKERS: FrozenSet[str] = frozenset({"estado", "created_at"})


class AuditTables:
    """Defaults for history tables that never become entities."""

    SUFFIXES: Tuple[str, ...] = ("_aud", "_audit")
    NAMES: Tuple[str, ...] = ("revision_info",)


class ImplicitKey:
    """Key naming conventions of upstream schemas."""

    REFERENCED_COLUMN = "id"
    FK_SUFFIX = "_id"


# =============================================================================
# NAMING
# =============================================================================

PYTHON_KEYWORDS: FrozenSet[str] = frozenset(keyword.kwlist) | frozenset({"self", "cls"})

# Checked in order, first match wins
SINGULAR_SUFFIX_RULES: Tuple[Tuple[str, int, str], ...] = (
    # (suffix, characters to strip, replacement)
    ("ies", 3, "y"),
    ("sses", 2, ""),
    ("xes", 2, ""),
    ("ches", 2, ""),
    ("shes", 2, ""),
    ("uses", 2, ""),
    ("ases", 2, ""),
    ("ises", 2, ""),
    ("oses", 2, ""),
)

PLURAL_ES_ENDINGS: Tuple[str, ...] = ("s", "x", "z", "ch", "sh")

VOWELS = "aeiouAEIOU"


# =============================================================================
# SQL TYPE MAPPINGS
# =============================================================================

# Upper-cased SQL type names (arguments stripped) to SemanticType values
SQL_TYPE_MAP: Dict[str, str] = {
    # Integers
    "INTEGER": "integer",
    "INT": "integer",
    "INT4": "integer",
    "MEDIUMINT": "integer",
    "SERIAL": "integer",
    "SERIAL4": "integer",
    "BIGINT": "long",
    "INT8": "long",
    "BIGSERIAL": "long",
    "SERIAL8": "long",
    "SMALLINT": "short",
    "INT2": "short",
    "SMALLSERIAL": "short",
    "SERIAL2": "short",
    "TINYINT": "byte",

    # Fixed and floating point
    "DECIMAL": "decimal",
    "NUMERIC": "decimal",
    "NUMBER": "decimal",
    "MONEY": "decimal",
    "REAL": "float",
    "FLOAT4": "float",
    "DOUBLE": "double",
    "FLOAT8": "double",
    "DOUBLE PRECISION": "double",
    "FLOAT": "double",

    # Booleans
    "BOOLEAN": "boolean",
    "BOOL": "boolean",
    "BIT": "boolean",

    # Strings
    "VARCHAR": "string",
    "CHARACTER VARYING": "string",
    "NVARCHAR": "string",
    "CHAR": "string",
    "CHARACTER": "string",
    "NCHAR": "string",
    "BPCHAR": "string",
    "TEXT": "string",
    "TINYTEXT": "string",
    "MEDIUMTEXT": "string",
    "LONGTEXT": "string",
    "CLOB": "string",
    "CITEXT": "string",
    "ENUM": "string",
    "INET": "string",
    "CIDR": "string",
    "MACADDR": "string",

    # Temporal
    "DATE": "date",
    "TIME": "time",
    "TIMETZ": "time",
    "TIME WITH TIME ZONE": "time",
    "TIME WITHOUT TIME ZONE": "time",
    "TIMESTAMP": "datetime",
    "TIMESTAMPTZ": "datetime",
    "TIMESTAMP WITH TIME ZONE": "datetime",
    "TIMESTAMP WITHOUT TIME ZONE": "datetime",
    "DATETIME": "datetime",
    "INTERVAL": "duration",

    # Other
    "UUID": "uuid",
    "UNIQUEIDENTIFIER": "uuid",
    "JSON": "json",
    "JSONB": "json",
    "BYTEA": "binary",
    "BLOB": "binary",
    "BINARY": "binary",
    "VARBINARY": "binary",
    "LONGVARBINARY": "binary",
    "ARRAY": "array",
}

ARRAY_TYPE_SUFFIX = "[]"
