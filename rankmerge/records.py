"""
Record shapes.

A loader returns records in one of two shapes: rich objects (ORM instances,
dataclasses, anything with attributes) or plain mappings. Each shape knows how
to read an identifier field and how to attach score fields, so the resolver
never inspects record types itself beyond picking the shape once.
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any, Dict

from sqlalchemy import inspect
from sqlalchemy.orm import InstanceState
from sqlalchemy.orm.attributes import set_committed_value


class RecordShapeError(TypeError):
    """Raised when a loader mixes record shapes in one result."""
    pass


class RecordShape(ABC):
    """Base for the two record shapes."""

    name = "record"

    @abstractmethod
    def matches(self, record: Any) -> bool:
        """True if the record has this shape."""

    @abstractmethod
    def identifier(self, record: Any, field: str) -> Any:
        """Read the identifier field, or None when absent."""

    @abstractmethod
    def attach(self, record: Any, fields: Dict[str, Any]) -> Any:
        """Return the record with score fields attached."""

    def check(self, record: Any) -> None:
        if not self.matches(record):
            raise RecordShapeError(
                f"Loader mixed record shapes: expected {self.name}, "
                f"got {type(record).__name__}"
            )

    def __repr__(self) -> str:
        return f"<{type(self).__name__}>"


class ObjectShape(RecordShape):
    """Rich objects: identifier read as an attribute, score fields set in place."""

    name = "object"

    def matches(self, record: Any) -> bool:
        return not isinstance(record, Mapping)

    def identifier(self, record: Any, field: str) -> Any:
        return getattr(record, field, None)

    def attach(self, record: Any, fields: Dict[str, Any]) -> Any:
        # Mapped ORM attributes are set without history so a flush never persists them
        state = inspect(record, raiseerr=False)
        mapped = state.mapper.attrs if isinstance(state, InstanceState) else {}
        for key, value in fields.items():
            if key in mapped:
                set_committed_value(record, key, value)
            else:
                setattr(record, key, value)
        return record


class MappingShape(RecordShape):
    """Plain mappings: identifier read by key, score fields merged into a new dict.

    Score fields overwrite record fields of the same name in the returned
    dict. The loader's mapping is never mutated.
    """

    name = "mapping"

    def matches(self, record: Any) -> bool:
        return isinstance(record, Mapping)

    def identifier(self, record: Any, field: str) -> Any:
        return record.get(field)

    def attach(self, record: Any, fields: Dict[str, Any]) -> Dict[str, Any]:
        return {**record, **fields}


OBJECT = ObjectShape()
MAPPING = MappingShape()


def shape_of(record: Any) -> RecordShape:
    """Pick the shape for a record: mappings by key, everything else by attribute."""
    return MAPPING if isinstance(record, Mapping) else OBJECT
