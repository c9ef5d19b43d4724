"""
Loading upstream schema facts into the entity model.

Parsers upstream of this library describe tables as plain mappings, in
either snake_case (``column_name``) or camelCase (``columnName``). The
pydantic models below validate that shape; ``build_tables`` then turns it
into immutable domain objects and ``load_schema`` into a SchemaModel.

Foreign keys and indexes may be nested under their table, or listed at
schema level with the owning table named in ``table`` / ``tableName``.
"""

import logging
from collections import defaultdict
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

import yaml
from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from .config import ModelSettings, validate_settings
from .constants import ImplicitKey
from .domain.models import (
    CheckConstraint,
    Column,
    ForeignKey,
    Index,
    IndexType,
    ReferentialAction,
    Table,
    UniqueConstraint,
)
from .domain.schema import SchemaModel
from .domain.type_mapping import SemanticType, parse_semantic_type, parse_type_arguments
from .exceptions import FactsValidationError


logger = logging.getLogger(__name__)

SchemaFactsInput = Union["SchemaFacts", Dict[str, Any], Sequence[Dict[str, Any]]]
SettingsInput = Optional[Union[ModelSettings, Dict[str, Any]]]


# --- Pydantic Models for Schema Facts ---


class _Facts(BaseModel):
    """Accepts both snake_case and camelCase keys, ignores unknown keys."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class ColumnFacts(_Facts):
    name: str = Field(..., min_length=1)
    sql_type: Optional[str] = Field(
        None, validation_alias=AliasChoices("sql_type", "sqlType", "type", "dataType")
    )
    semantic_type: Optional[SemanticType] = None
    nullable: bool = True
    primary_key: bool = False
    unique: bool = False
    auto_increment: bool = False
    length: Optional[int] = None
    precision: Optional[int] = None
    scale: Optional[int] = None
    default_value: Optional[Union[bool, int, float, str]] = Field(
        None, validation_alias=AliasChoices("default_value", "defaultValue", "default")
    )
    check_constraint: Optional[str] = None
    comment: Optional[str] = None

    @field_validator("semantic_type", mode="before")
    @classmethod
    def coerce_semantic_type(cls, v: Any) -> Any:
        return parse_semantic_type(v) if isinstance(v, str) else v


class ForeignKeyFacts(_Facts):
    column_name: str = Field(
        ..., min_length=1, validation_alias=AliasChoices("column_name", "columnName", "column")
    )
    referenced_table: str = Field(
        ..., min_length=1,
        validation_alias=AliasChoices("referenced_table", "referencedTable", "references"),
    )
    referenced_column: str = ImplicitKey.REFERENCED_COLUMN
    name: Optional[str] = None
    on_delete: ReferentialAction = ReferentialAction.NO_ACTION
    on_update: ReferentialAction = ReferentialAction.NO_ACTION
    # Owning table, only needed at schema level
    table: Optional[str] = Field(
        None, validation_alias=AliasChoices("table", "tableName", "table_name")
    )

    @field_validator("on_delete", "on_update", mode="before")
    @classmethod
    def parse_action(cls, v: Any) -> ReferentialAction:
        """Accept ``CASCADE``, ``SET NULL``, ``set_null`` or ``SetNull``."""
        return ReferentialAction.parse(v)


class IndexFacts(_Facts):
    name: str = Field(..., min_length=1)
    columns: List[str] = Field(..., min_length=1)
    unique: bool = False
    index_type: IndexType = Field(
        IndexType.BTREE, validation_alias=AliasChoices("index_type", "indexType", "method")
    )
    condition: Optional[str] = Field(
        None, validation_alias=AliasChoices("condition", "where")
    )
    table: Optional[str] = Field(
        None, validation_alias=AliasChoices("table", "tableName", "table_name")
    )

    @field_validator("columns", mode="before")
    @classmethod
    def single_column(cls, v: Any) -> Any:
        return [v] if isinstance(v, str) else v

    @field_validator("index_type", mode="before")
    @classmethod
    def parse_index_type(cls, v: Any) -> IndexType:
        return IndexType.parse(v)


class UniqueConstraintFacts(_Facts):
    columns: List[str] = Field(..., min_length=1)
    name: Optional[str] = None

    @field_validator("columns", mode="before")
    @classmethod
    def single_column(cls, v: Any) -> Any:
        return [v] if isinstance(v, str) else v


class CheckConstraintFacts(_Facts):
    expression: str = Field(..., min_length=1)
    name: Optional[str] = None


class TableFacts(_Facts):
    name: str = Field(
        ..., min_length=1, validation_alias=AliasChoices("name", "table_name", "tableName")
    )
    columns: List[ColumnFacts] = Field(default_factory=list)
    foreign_keys: List[ForeignKeyFacts] = Field(default_factory=list)
    indexes: List[IndexFacts] = Field(default_factory=list)
    primary_key_columns: List[str] = Field(default_factory=list)
    unique_constraints: List[UniqueConstraintFacts] = Field(default_factory=list)
    check_constraints: List[CheckConstraintFacts] = Field(default_factory=list)
    schema_name: Optional[str] = Field(
        None, validation_alias=AliasChoices("schema", "schema_name", "schemaName")
    )
    comment: Optional[str] = None

    @field_validator("check_constraints", mode="before")
    @classmethod
    def expression_strings(cls, v: Any) -> Any:
        """Check constraints may be given as bare expression strings."""
        if not isinstance(v, list):
            return v
        return [{"expression": item} if isinstance(item, str) else item for item in v]


class SchemaFacts(_Facts):
    tables: List[TableFacts] = Field(default_factory=list)
    foreign_keys: List[ForeignKeyFacts] = Field(default_factory=list)
    indexes: List[IndexFacts] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_owning_tables(self) -> "SchemaFacts":
        """Schema-level foreign keys and indexes must name their table."""
        for index, fk in enumerate(self.foreign_keys):
            if not fk.table:
                raise ValueError(
                    f"Schema-level foreign key #{index + 1} ('{fk.column_name}') must name its table"
                )
        for index, idx in enumerate(self.indexes):
            if not idx.table:
                raise ValueError(
                    f"Schema-level index #{index + 1} ('{idx.name}') must name its table"
                )
        return self


# --- Building domain objects ---


def parse_facts(facts: SchemaFactsInput) -> SchemaFacts:
    """
    Validate raw schema facts.

    A bare list is read as the list of tables.

    Raises:
        FactsValidationError: If the facts do not match the expected shape
    """
    if isinstance(facts, SchemaFacts):
        return facts
    if isinstance(facts, (list, tuple)):
        facts = {"tables": list(facts)}
    if not isinstance(facts, dict):
        raise FactsValidationError(
            f"Schema facts must be a mapping or a list of tables, got {type(facts).__name__}"
        )

    try:
        return SchemaFacts.model_validate(facts)
    except ValidationError as e:
        errors = e.errors()
        logger.error(f"Schema facts validation failed with {len(errors)} error(s)")
        raise FactsValidationError("Invalid schema facts", errors=errors) from e


def _build_column(facts: ColumnFacts) -> Column:
    length, precision, scale = parse_type_arguments(facts.sql_type)
    default_value = facts.default_value
    if default_value is not None and not isinstance(default_value, str):
        default_value = str(default_value)

    return Column(
        name=facts.name,
        sql_type=facts.sql_type,
        semantic_type=facts.semantic_type,
        nullable=facts.nullable,
        primary_key=facts.primary_key,
        unique=facts.unique,
        auto_increment=facts.auto_increment,
        length=facts.length if facts.length is not None else length,
        precision=facts.precision if facts.precision is not None else precision,
        scale=facts.scale if facts.scale is not None else scale,
        default_value=default_value,
        check_constraint=facts.check_constraint,
        comment=facts.comment,
    )


def _build_foreign_key(facts: ForeignKeyFacts) -> ForeignKey:
    return ForeignKey(
        column_name=facts.column_name,
        referenced_table=facts.referenced_table,
        referenced_column=facts.referenced_column,
        name=facts.name,
        on_delete=facts.on_delete,
        on_update=facts.on_update,
    )


def _build_index(facts: IndexFacts, table_name: str) -> Index:
    return Index(
        name=facts.name,
        table_name=table_name,
        columns=tuple(facts.columns),
        unique=facts.unique,
        index_type=facts.index_type,
        condition=facts.condition,
    )


def _build_table(
    facts: TableFacts,
    extra_foreign_keys: List[ForeignKeyFacts],
    extra_indexes: List[IndexFacts],
) -> Table:
    return Table(
        name=facts.name,
        columns=tuple(_build_column(col) for col in facts.columns),
        foreign_keys=tuple(_build_foreign_key(fk) for fk in facts.foreign_keys + extra_foreign_keys),
        indexes=tuple(_build_index(idx, facts.name) for idx in facts.indexes + extra_indexes),
        primary_key_columns=tuple(facts.primary_key_columns),
        unique_constraints=tuple(
            UniqueConstraint(columns=tuple(uc.columns), name=uc.name)
            for uc in facts.unique_constraints
        ),
        check_constraints=tuple(
            CheckConstraint(expression=cc.expression, name=cc.name)
            for cc in facts.check_constraints
        ),
        schema=facts.schema_name,
        comment=facts.comment,
    )


def build_tables(facts: SchemaFactsInput) -> Tuple[Table, ...]:
    """
    Turn schema facts into immutable Table objects, declaration order kept.

    Raises:
        FactsValidationError: If the facts are malformed, or a schema-level
            foreign key or index names a table that is not listed
        SchemaValidationError: If a table repeats a column name
    """
    schema_facts = parse_facts(facts)

    table_keys = {table.name.lower() for table in schema_facts.tables}
    foreign_keys: Dict[str, List[ForeignKeyFacts]] = defaultdict(list)
    indexes: Dict[str, List[IndexFacts]] = defaultdict(list)
    errors = []

    for position, fk in enumerate(schema_facts.foreign_keys):
        if fk.table.lower() not in table_keys:
            errors.append({
                "loc": ("foreign_keys", position, "table"),
                "msg": f"Unknown table '{fk.table}'",
            })
        foreign_keys[fk.table.lower()].append(fk)

    for position, idx in enumerate(schema_facts.indexes):
        if idx.table.lower() not in table_keys:
            errors.append({
                "loc": ("indexes", position, "table"),
                "msg": f"Unknown table '{idx.table}'",
            })
        indexes[idx.table.lower()].append(idx)

    if errors:
        raise FactsValidationError("Schema-level entries reference unknown tables", errors=errors)

    tables = tuple(
        _build_table(table, foreign_keys[table.name.lower()], indexes[table.name.lower()])
        for table in schema_facts.tables
    )
    logger.debug(f"Built {len(tables)} tables from schema facts")
    return tables


def _settings(settings: SettingsInput) -> Optional[ModelSettings]:
    if settings is None or isinstance(settings, ModelSettings):
        return settings
    return validate_settings(settings)


def load_schema(facts: SchemaFactsInput, settings: SettingsInput = None) -> SchemaModel:
    """
    Build a SchemaModel from schema facts.

    Args:
        facts: A mapping with ``tables`` (and optionally schema-level
            ``foreignKeys``/``indexes``), or a list of tables
        settings: ModelSettings, or a raw mapping validated into one
    """
    return SchemaModel(build_tables(facts), settings=_settings(settings))


def load_schema_yaml(text: str, settings: SettingsInput = None) -> SchemaModel:
    """
    Build a SchemaModel from a YAML (or JSON) document.

    Raises:
        FactsValidationError: If the document cannot be parsed or is malformed
    """
    try:
        facts = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise FactsValidationError(f"Error parsing schema document: {e}") from e

    if facts is None:
        facts = {}
    return load_schema(facts, settings=settings)


def load_schema_file(path: Union[str, Path], settings: SettingsInput = None) -> SchemaModel:
    """
    Build a SchemaModel from a YAML or JSON file.

    Raises:
        FactsValidationError: If the file cannot be read or its content is malformed
    """
    schema_file = Path(path)
    try:
        text = schema_file.read_text(encoding="utf-8")
    except OSError as e:
        raise FactsValidationError(
            f"Error reading schema file: {e}", context={"schema_file": str(schema_file)}
        ) from e

    logger.debug(f"Loading schema facts from {schema_file}")
    return load_schema_yaml(text, settings=settings)
