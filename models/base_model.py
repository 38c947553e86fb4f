#!/usr/bin/env python3
"""
Shared SQLAlchemy base and mixin for the GitHub Search API.

- Integer auto-increment primary key
- created_at / updated_at / deleted_at audit timestamps
- save() that uses the DBStorage singleton
- to_dict() that formats timestamps and never exposes the password hash

Notes:
- Timestamps use Python-side defaults so they are populated on the instance
  right after commit (sessions are created with expire_on_commit=False).
- deleted_at is the soft-delete marker; nothing in the API sets it yet.
"""

from __future__ import annotations

from datetime import datetime, timezone

# Importing 'models' gives access to the global 'storage' instance (DBStorage)
# defined in models/__init__.py.
import models

from sqlalchemy import Column, Integer, DateTime
from sqlalchemy.orm import declarative_base

TIME_FMT = "%Y-%m-%dT%H:%M:%S.%f"

# Declarative base for all models
Base = declarative_base()

# Columns that must never leave the service layer
SENSITIVE_FIELDS = ("password_hash",)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class BaseModel:
    """
    Base mixin for all persistent models: id, audit timestamps, save(), to_dict().
    """

    id = Column(Integer, primary_key=True, autoincrement=True, index=True)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=True)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=True)
    deleted_at = Column(DateTime(timezone=True), nullable=True)

    def __init__(self, *args, **kwargs):
        """Allow attribute initialization via kwargs without requiring a session here."""
        for key, value in kwargs.items():
            if key != "__class__":
                setattr(self, key, value)

    def __str__(self) -> str:
        """Human-friendly representation including id and fields."""
        return f"[{self.__class__.__name__}] ({self.id}) {self.to_dict()}"

    def save(self):
        """Stamp updated_at and persist the instance using DBStorage."""
        self.updated_at = _utcnow()
        models.storage.new(self)
        models.storage.save()

    def to_dict(self) -> dict:
        """
        Return a dictionary of column values suitable for API responses:
        - Formats datetime columns to TIME_FMT
        - Drops sensitive fields (the password hash)
        """
        d = {}
        for column in self.__table__.columns:
            if column.key in SENSITIVE_FIELDS:
                continue
            value = getattr(self, column.key)
            if isinstance(value, datetime):
                value = value.strftime(TIME_FMT)
            d[column.key] = value
        return d
