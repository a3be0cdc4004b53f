"""Declarative base shared by all ORM models."""

from sqlalchemy import BigInteger, Integer
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    # Models annotate plain Column() attributes rather than Mapped[]
    __allow_unmapped__ = True


# BIGINT in PostgreSQL; SQLite only autoincrements INTEGER primary keys
BigId = BigInteger().with_variant(Integer, "sqlite")
