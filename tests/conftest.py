# File: tests/conftest.py
# Contains pytest fixtures with small, realistic schemas shared by the tests.

import logging
from typing import Any, Dict, List, Tuple

import pytest

from entity_model.domain.models import (
    Column,
    ForeignKey,
    Index,
    Table,
)


# --- Table fixtures ---

def _id_column(name: str = "id") -> Column:
    return Column(name=name, sql_type="BIGINT", primary_key=True, nullable=False, auto_increment=True)


@pytest.fixture
def users_roles_tables() -> Tuple[Table, ...]:
    """users, roles and the user_roles junction table between them."""
    users = Table(
        name="users",
        columns=(_id_column(), Column(name="email", sql_type="VARCHAR(255)", nullable=False, unique=True)),
    )
    roles = Table(
        name="roles",
        columns=(_id_column(), Column(name="name", sql_type="VARCHAR(50)", nullable=False)),
    )
    user_roles = Table(
        name="user_roles",
        columns=(
            Column(name="user_id", sql_type="BIGINT", primary_key=True),
            Column(name="role_id", sql_type="BIGINT", primary_key=True),
        ),
        foreign_keys=(
            ForeignKey(column_name="user_id", referenced_table="users", on_delete="CASCADE"),
            ForeignKey(column_name="role_id", referenced_table="roles", on_delete="CASCADE"),
        ),
    )
    return users, roles, user_roles


@pytest.fixture
def shop_tables() -> Tuple[Table, ...]:
    """
    A small shop: categories (self-referencing tree), products in a category,
    users with a one-to-one profile, and an audit history table.
    """
    categories = Table(
        name="categories",
        columns=(
            _id_column(),
            Column(name="name", sql_type="VARCHAR(100)", nullable=False),
            Column(name="parent_category_id", sql_type="BIGINT"),
            Column(name="created_at", sql_type="TIMESTAMP"),
        ),
        foreign_keys=(ForeignKey(column_name="parent_category_id", referenced_table="categories"),),
    )
    products = Table(
        name="products",
        columns=(
            _id_column(),
            Column(name="category_id", sql_type="BIGINT", nullable=False),
            Column(name="name", sql_type="VARCHAR(200)", nullable=False),
            Column(name="price", sql_type="DECIMAL(10,2)", nullable=False),
            Column(name="created_at", sql_type="TIMESTAMP"),
        ),
        foreign_keys=(
            ForeignKey(column_name="category_id", referenced_table="categories", on_delete="RESTRICT"),
        ),
        indexes=(Index(name="idx_products_category", table_name="products", columns=("category_id",)),),
    )
    profiles = Table(
        name="profiles",
        columns=(_id_column(), Column(name="bio", sql_type="TEXT")),
    )
    users = Table(
        name="users",
        columns=(
            _id_column(),
            Column(name="profile_id", sql_type="BIGINT", unique=True),
            Column(name="email", sql_type="VARCHAR(255)", nullable=False),
        ),
        foreign_keys=(ForeignKey(column_name="profile_id", referenced_table="profiles"),),
    )
    products_aud = Table(
        name="products_aud",
        columns=(_id_column(), Column(name="rev", sql_type="INTEGER", primary_key=True)),
        primary_key_columns=("id", "rev"),
    )
    return categories, products, profiles, users, products_aud


# --- Raw facts fixtures ---

@pytest.fixture
def camel_case_facts() -> Dict[str, Any]:
    """Facts as a camelCase-emitting parser would produce them."""
    return {
        "tables": [
            {
                "name": "authors",
                "columns": [
                    {"name": "id", "sqlType": "BIGSERIAL", "primaryKey": True, "nullable": False},
                    {"name": "full_name", "sqlType": "VARCHAR(120)", "nullable": False},
                ],
            },
            {
                "tableName": "books",
                "columns": [
                    {"name": "id", "sqlType": "BIGSERIAL", "primaryKey": True, "nullable": False},
                    {"name": "author_id", "sqlType": "BIGINT", "nullable": False},
                    {"name": "title", "sqlType": "VARCHAR(200)", "nullable": False},
                    {"name": "price", "sqlType": "NUMERIC(8,2)"},
                ],
                "foreignKeys": [
                    {"columnName": "author_id", "referencedTable": "authors", "onDelete": "SET NULL"},
                ],
                "checkConstraints": ["price >= 0"],
            },
        ],
    }


@pytest.fixture
def schema_level_facts() -> Dict[str, Any]:
    """Facts with foreign keys and indexes listed beside the tables."""
    tables: List[Dict[str, Any]] = [
        {
            "name": "students",
            "columns": [{"name": "id", "sql_type": "INTEGER", "primary_key": True}],
        },
        {
            "name": "courses",
            "columns": [{"name": "id", "sql_type": "INTEGER", "primary_key": True}],
        },
        {
            "name": "enrollments",
            "columns": [
                {"name": "student_id", "sql_type": "INTEGER", "primary_key": True},
                {"name": "course_id", "sql_type": "INTEGER", "primary_key": True},
            ],
        },
    ]
    return {
        "tables": tables,
        "foreign_keys": [
            {"table": "enrollments", "column_name": "student_id", "referenced_table": "students"},
            {"tableName": "enrollments", "columnName": "course_id", "referencedTable": "courses"},
        ],
        "indexes": [
            {"table": "enrollments", "name": "idx_enrollments_course", "columns": ["course_id"]},
        ],
    }


# --- Logging ---

@pytest.fixture
def entity_model_logs(caplog):
    """Capture records of the package loggers at DEBUG level."""
    caplog.set_level(logging.DEBUG, logger="entity_model")
    return caplog

