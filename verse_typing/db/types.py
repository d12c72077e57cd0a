"""Custom database column types for cross-database compatibility."""
from __future__ import annotations

import json
from typing import Any

from sqlalchemy import any_, case, func, literal
from sqlalchemy.dialects.postgresql import ARRAY as PG_ARRAY
from sqlalchemy.sql.elements import ColumnElement
from sqlalchemy.types import Text, TypeDecorator


class StringList(TypeDecorator):
    """Persist an ordered list of strings across PostgreSQL and SQLite.

    PostgreSQL stores a native ``TEXT[]``; every other backend stores compact
    JSON text so that SQLite's JSON functions can operate on it in place.
    """

    impl = Text
    cache_ok = True

    def load_dialect_impl(self, dialect):  # type: ignore[override]
        if dialect.name == "postgresql":
            return dialect.type_descriptor(PG_ARRAY(Text))
        return dialect.type_descriptor(Text())

    def process_bind_param(self, value: Any, dialect):  # type: ignore[override]
        if value is None:
            return None
        if dialect.name == "postgresql":
            return list(value)
        return json.dumps(list(value), ensure_ascii=False, separators=(",", ":"))

    def process_result_value(self, value: Any, dialect):  # type: ignore[override]
        if value is None:
            return []
        if dialect.name == "postgresql":
            return list(value)
        return json.loads(value)


def append_unique(column: Any, item: str, dialect_name: str) -> ColumnElement:
    """Return a SQL expression appending ``item`` to a :class:`StringList` column.

    The current value is returned unchanged when ``item`` is already present,
    so the list keeps set semantics while preserving insertion order. The
    expression is evaluated by the database against the committed row.
    """

    if dialect_name == "postgresql":
        value = literal(item, Text)
        return case(
            (value == any_(column), column),
            else_=func.array_append(column, value),
        )
    if dialect_name == "sqlite":
        return case(
            (func.instr(column, func.json_quote(item)) > 0, column),
            else_=func.json_insert(column, "$[#]", item),
        )
    raise NotImplementedError(f"Unsupported dialect for list append: {dialect_name}")
