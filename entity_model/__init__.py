"""
Schema relationship model for code generators.

Turns parsed SQL schema facts into a typed, immutable entity-relationship
model: canonical names, column partitions, relationship cardinalities and
many-to-many edges folded from junction tables.
"""

from .domain import (
    Column,
    ForeignKey,
    Index,
    RelationType,
    SchemaModel,
    Table,
    TableRelationship,
)
from .config import ModelSettings, load_settings
from .exceptions import (
    EntityModelError,
    ConfigurationError,
    SchemaValidationError,
    UnresolvedReferenceError,
    TableNotFoundError,
    FactsValidationError,
)
from .loader import build_tables, load_schema, load_schema_yaml, load_schema_file

__version__ = "0.1.0"

__all__ = [
    'Column',
    'ForeignKey',
    'Index',
    'RelationType',
    'SchemaModel',
    'Table',
    'TableRelationship',
    'ModelSettings',
    'load_settings',
    'EntityModelError',
    'ConfigurationError',
    'SchemaValidationError',
    'UnresolvedReferenceError',
    'TableNotFoundError',
    'FactsValidationError',
    'build_tables',
    'load_schema',
    'load_schema_yaml',
    'load_schema_file',
]
