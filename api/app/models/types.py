"""Column types and timestamp helpers shared by the models."""

from datetime import datetime, timezone

from sqlalchemy import JSON, Uuid, exists, func, or_, select, type_coerce
from sqlalchemy.dialects.postgresql import JSONB

GUID = Uuid(as_uuid=True)

# JSONB on Postgres, plain JSON elsewhere (tests run on SQLite)
JSONType = JSON().with_variant(JSONB(), "postgresql")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime | None) -> datetime | None:
    """Attach UTC to naive datetimes read back from drivers that drop the offset."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def isoformat(value: datetime | None) -> str | None:
    value = as_utc(value)
    return value.isoformat() if value else None


def json_array_contains(column, value: str, dialect_name: str):
    """
    SQL condition true when a JSON array column holds a string element.

    Postgres uses JSONB containment; SQLite expands the array with json_each.
    """
    if dialect_name == "postgresql":
        return type_coerce(column, JSONB).contains([value])
    elements = func.json_each(column).table_valued("value")
    return exists(select(elements.c.value).where(elements.c.value == value))


def json_array_overlaps(column, values: list[str], dialect_name: str):
    """SQL condition true when a JSON array column holds any of the given strings."""
    if dialect_name == "postgresql":
        return or_(*(type_coerce(column, JSONB).contains([value]) for value in values))
    elements = func.json_each(column).table_valued("value")
    return exists(select(elements.c.value).where(elements.c.value.in_(values)))
