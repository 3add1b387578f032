"""Portable column types shared by the models."""
from sqlalchemy import JSON, Uuid
from sqlalchemy.dialects.postgresql import JSONB


def GUID():
    """UUID column: native on PostgreSQL, CHAR(32) on SQLite."""
    return Uuid(as_uuid=True)


def JSONBType():
    """JSONB on PostgreSQL, plain JSON elsewhere."""
    return JSON().with_variant(JSONB(), "postgresql")
