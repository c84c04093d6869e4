from datetime import datetime, timezone
from sqlalchemy import BigInteger, DateTime, Integer, TypeDecorator
from sqlmodel import SQLModel

# SQLite only auto-increments INTEGER PRIMARY KEY columns
BigIntegerPK = BigInteger().with_variant(Integer, "sqlite")


def utcnow() -> datetime:
    """Current time as a timezone-aware UTC datetime"""
    return datetime.now(timezone.utc)


class UTCDateTime(TypeDecorator):
    """
    Cross-database timezone-aware timestamp

    Stored as TIMESTAMP WITH TIME ZONE where supported. SQLite drops the
    offset, so values are written in UTC and read back as UTC.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return value
        if value.tzinfo is None:
            raise ValueError(f"Naive datetime {value!r} cannot be stored, use utcnow()")
        return value.astimezone(timezone.utc)

    def process_result_value(self, value, dialect):
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class BaseModel(SQLModel):
    """Base class for all table models"""
    pass
