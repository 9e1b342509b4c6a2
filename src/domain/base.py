"""Shared base for domain entities"""

from sqlalchemy import BigInteger, Integer
from sqlmodel import SQLModel

# SQLite only auto-increments INTEGER PRIMARY KEY columns
IdType = BigInteger().with_variant(Integer(), "sqlite")


class BaseModel(SQLModel):
    """Base class for all SQLModel domain entities"""
    pass
