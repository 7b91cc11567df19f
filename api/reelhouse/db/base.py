"""SQLAlchemy declarative base for the SQL document backend."""

from sqlalchemy import MetaData
from sqlalchemy.orm import DeclarativeBase

NAMING_CONVENTION = {
    "ix": "ix_%(table_name)s_%(column_0_N_name)s",
    "uq": "uq_%(table_name)s_%(column_0_N_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
    """Declarative base; models set ``__tablename__`` explicitly."""
    metadata = MetaData(naming_convention=NAMING_CONVENTION)
