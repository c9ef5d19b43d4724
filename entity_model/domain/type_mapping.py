"""
SQL type to semantic type mapping.

Semantic types are the language-neutral categories generators map to their
own type systems (``DECIMAL(10,2)`` -> ``SemanticType.DECIMAL`` ->
``BigDecimal``/``Decimal``/``decimal``). Unmapped SQL types degrade to
``SemanticType.UNKNOWN`` instead of failing.
"""

import logging
import re
from enum import Enum
from typing import Optional, Tuple, Union

from ..constants import ARRAY_TYPE_SUFFIX, SQL_TYPE_MAP


logger = logging.getLogger(__name__)

_TYPE_ARGUMENTS = re.compile(r"\(\s*([^)]*)\s*\)")


class SemanticType(Enum):
    """Language-neutral categories of column types."""

    STRING = "string"
    INTEGER = "integer"
    LONG = "long"
    SHORT = "short"
    BYTE = "byte"
    DOUBLE = "double"
    FLOAT = "float"
    BOOLEAN = "boolean"
    DECIMAL = "decimal"
    DATE = "date"
    DATETIME = "datetime"
    TIME = "time"
    UUID = "uuid"
    BINARY = "binary"
    JSON = "json"
    DURATION = "duration"
    ARRAY = "array"
    UNKNOWN = "unknown"

    @property
    def is_numeric(self) -> bool:
        return self in _NUMERIC_TYPES

    @property
    def is_temporal(self) -> bool:
        return self in (SemanticType.DATE, SemanticType.DATETIME, SemanticType.TIME)


_NUMERIC_TYPES = frozenset({
    SemanticType.INTEGER,
    SemanticType.LONG,
    SemanticType.SHORT,
    SemanticType.BYTE,
    SemanticType.DOUBLE,
    SemanticType.FLOAT,
    SemanticType.DECIMAL,
})


def normalize_sql_type(sql_type: Optional[str]) -> str:
    """Upper-case a SQL type, strip its arguments and collapse whitespace."""
    if not sql_type:
        return ""
    cleaned = _TYPE_ARGUMENTS.sub("", sql_type)
    return " ".join(cleaned.split()).upper()


def infer_semantic_type(sql_type: Optional[str]) -> SemanticType:
    """
    Infer the semantic type of a SQL column type.

    Args:
        sql_type: Raw SQL type such as ``VARCHAR(255)`` or ``integer[]``

    Returns:
        The matching SemanticType, or UNKNOWN when the type is not mapped
    """
    normalized = normalize_sql_type(sql_type)
    if not normalized:
        return SemanticType.UNKNOWN

    if normalized.endswith(ARRAY_TYPE_SUFFIX):
        return SemanticType.ARRAY

    mapped = SQL_TYPE_MAP.get(normalized)
    if mapped is None:
        # e.g. "VARCHAR2" or "UNSIGNED BIGINT": retry with the first word
        mapped = SQL_TYPE_MAP.get(normalized.split(" ")[0])
    if mapped is None:
        logger.debug(f"Unmapped SQL type '{sql_type}', treating as unknown")
        return SemanticType.UNKNOWN

    return SemanticType(mapped)


def parse_semantic_type(value: Union[SemanticType, str, None]) -> Optional[SemanticType]:
    """
    Convert a semantic type name to a SemanticType.

    Names are case-insensitive. A name the enum does not define degrades to
    UNKNOWN, the most permissive classification.
    """
    if value is None or isinstance(value, SemanticType):
        return value
    try:
        return SemanticType(str(value).strip().lower())
    except ValueError:
        logger.debug(f"Unknown semantic type '{value}', treating as unknown")
        return SemanticType.UNKNOWN


def parse_type_arguments(sql_type: Optional[str]) -> Tuple[Optional[int], Optional[int], Optional[int]]:
    """
    Extract (length, precision, scale) from a SQL type's arguments.

    Example:
        >>> parse_type_arguments("VARCHAR(255)")
        (255, None, None)
        >>> parse_type_arguments("DECIMAL(10,2)")
        (None, 10, 2)
    """
    if not sql_type:
        return None, None, None

    match = _TYPE_ARGUMENTS.search(sql_type)
    if not match:
        return None, None, None

    parts = [part.strip() for part in match.group(1).split(",")]
    if not all(part.isdigit() for part in parts):
        return None, None, None

    numbers = [int(part) for part in parts]
    semantic_type = infer_semantic_type(sql_type)

    if semantic_type in (SemanticType.DECIMAL, SemanticType.DOUBLE, SemanticType.FLOAT):
        precision = numbers[0]
        scale = numbers[1] if len(numbers) > 1 else None
        return None, precision, scale

    if len(numbers) == 1:
        return numbers[0], None, None

    return None, None, None
