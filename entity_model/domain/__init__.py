"""
Domain module for the entity model.

This module contains the schema relationship model: naming conventions,
column classification, relationship resolution and the SchemaModel
aggregate generators consume.
"""

from .type_mapping import (
    SemanticType,
    infer_semantic_type,
    parse_semantic_type,
    parse_type_arguments
)

from .naming import (
    NamingConventions,
    singularize,
    pluralize,
    entity_name,
    module_name,
    entity_variable_name,
    field_name,
    relationship_field_name,
    to_snake_case,
    to_pascal_case,
    to_camel_case
)

from .columns import (
    ColumnClassifier,
    ColumnPartition,
    HintKind,
    ValidationHint
)

from .models import (
    Column,
    ForeignKey,
    Index,
    IndexType,
    ReferentialAction,
    UniqueConstraint,
    CheckConstraint,
    Table,
    RelationType,
    TableRelationship,
    ManyToManyRelation,
    RelationshipView
)

from .relationships import (
    RelationshipResolver,
    ResolvedRelationships
)

from .schema import SchemaModel

__all__ = [
    # Types
    'SemanticType',
    'infer_semantic_type',
    'parse_semantic_type',
    'parse_type_arguments',

    # Naming
    'NamingConventions',
    'singularize',
    'pluralize',
    'entity_name',
    'module_name',
    'entity_variable_name',
    'field_name',
    'relationship_field_name',
    'to_snake_case',
    'to_pascal_case',
    'to_camel_case',

    # Columns
    'ColumnClassifier',
    'ColumnPartition',
    'HintKind',
    'ValidationHint',

    # Core models
    'Column',
    'ForeignKey',
    'Index',
    'IndexType',
    'ReferentialAction',
    'UniqueConstraint',
    'CheckConstraint',
    'Table',
    'RelationType',
    'TableRelationship',
    'ManyToManyRelation',
    'RelationshipView',

    # Relationships
    'RelationshipResolver',
    'ResolvedRelationships',

    # Schema
    'SchemaModel'
]
