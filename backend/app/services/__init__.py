"""
Services Module

Business logic behind the HTTP routes:
- credentials: user registration, login verification and user listing
"""
from . import credentials

__all__ = ["credentials"]
