# app/models/__init__.py
"""
Database models module initialization.
Defines the declarative Base shared by all SQLAlchemy models and exports the
models for convenient imports throughout the application.

Models exported:
- User: User account and authentication model
"""
from sqlalchemy.orm import declarative_base

Base = declarative_base()

from .user import User  # noqa: E402

__all__ = ["Base", "User"]
