# app/models/user.py
"""
Database model for users.
Represents a user account: a unique login name and a bcrypt password hash.
"""
from sqlalchemy import Column, Integer, String

from . import Base


class User(Base):
    """
    User database model.

    Security:
    - Password is stored as a hash (never store plain text passwords)
    - Username must be unique across all users (UNIQUE constraint, not just a pre-check)
    - Rows are never updated or deleted by the API
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)  # Server-assigned identity
    username = Column(String(255), unique=True, index=True, nullable=False)  # Login name
    password_hash = Column(String(255), nullable=False)  # bcrypt hash, never plain text

    def to_public(self) -> dict:
        """Fields that are safe to return to clients."""
        return {"id": self.id, "username": self.username}
