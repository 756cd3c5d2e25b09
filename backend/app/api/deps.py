# app/api/deps.py
from fastapi import Request
from pydantic import ValidationError as PydanticValidationError

from app.core.errors import ValidationError
from app.schemas.auth import CredentialsIn

_FORM_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


async def read_credentials(request: Request) -> CredentialsIn:
    """
    FastAPI dependency that reads {username, password} from the request body.

    Accepts either a JSON object or form data (Unity's WWWForm posts forms).
    Empty or malformed bodies, and non-string values, are reported as missing
    fields so the caller always gets the same 400 message.

    Raises:
        ValidationError (400): body cannot be read as credentials
    """
    content_type = request.headers.get("content-type", "").lower()
    try:
        if content_type.startswith(_FORM_TYPES):
            form = await request.form()
            data = {key: form.get(key) for key in ("username", "password")}
        else:
            data = await request.json()
        return CredentialsIn.model_validate(data)
    except (ValueError, PydanticValidationError):
        # json.JSONDecodeError and UnicodeDecodeError are ValueErrors
        raise ValidationError("Username and password are required")
