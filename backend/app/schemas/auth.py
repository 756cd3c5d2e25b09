# app/schemas/auth.py
"""
Pydantic schemas for authentication endpoints.
Defines request/response models for register, login and user listing.
"""
from typing import Optional

from pydantic import BaseModel


class CredentialsIn(BaseModel):
    """
    Request body for /register and /login.
    Both fields are optional at the schema level so that missing values become
    a 400 "required" error instead of a framework validation error.
    """
    username: Optional[str] = None  # User login name
    password: Optional[str] = None  # Plain text password (hashed server-side)


class UserOut(BaseModel):
    """
    Public user information.
    Never contains the password or its hash.
    """
    id: int  # Server-assigned user id
    username: str  # User login name


class RegisterResponse(BaseModel):
    message: str = "User registered successfully"
    user: UserOut


class LoginResponse(BaseModel):
    """
    Response for a successful login.
    No session or token is issued, token is always null.
    """
    message: str = "Login successful"
    user: UserOut
    token: None = None
