"""
Record loaders.

Each factory returns a `resolve_models(ids)` callable that performs one
batched lookup. ORM loaders yield rich objects; row and in-memory loaders
yield plain mappings.
"""

from typing import Any, Callable, Dict, Hashable, Iterable, List

from sqlalchemy import select

from .records import shape_of

Loader = Callable[[List[Hashable]], List[Any]]


def orm_loader(session, model, key_field: str = "id") -> Loader:
    """
    Load ORM instances whose key column is in the requested ids.

    Args:
        session: SQLAlchemy session
        model: Declarative model class
        key_field: Mapped attribute holding the identifier

    Returns:
        Loader returning model instances
    """
    column = getattr(model, key_field)

    def load(ids: List[Hashable]) -> List[Any]:
        if not ids:
            return []
        return session.query(model).filter(column.in_(ids)).all()

    return load


def row_loader(session, model_or_table, key_field: str = "id") -> Loader:
    """
    Load table rows as plain dicts whose key column is in the requested ids.

    Args:
        session: SQLAlchemy session or connection
        model_or_table: Declarative model class or Table
        key_field: Column holding the identifier

    Returns:
        Loader returning dicts keyed by column name
    """
    table = getattr(model_or_table, "__table__", model_or_table)
    column = table.c[key_field]

    def load(ids: List[Hashable]) -> List[Dict[str, Any]]:
        if not ids:
            return []
        result = session.execute(select(table).where(column.in_(ids)))
        return [dict(row._mapping) for row in result]

    return load


def memory_loader(records: Iterable[Any], key_field: str = "id") -> Loader:
    """Loader over an in-memory collection, returned in storage order."""
    stored = list(records)

    def load(ids: List[Hashable]) -> List[Any]:
        wanted = set(ids)
        return [
            record for record in stored
            if shape_of(record).identifier(record, key_field) in wanted
        ]

    return load
