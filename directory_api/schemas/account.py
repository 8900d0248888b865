"""Account Schemas — credentials in, account identity out.

Invariants:
    - RegisterRequest.email_address must be a syntactically valid email
    - LoginRequest only requires non-empty strings (lookup decides validity)
"""

from pydantic import EmailStr, Field

from directory_api.schemas.base import CamelModel


class RegisterRequest(CamelModel):
    email_address: EmailStr
    password: str = Field(min_length=1)


class LoginRequest(CamelModel):
    email_address: str = Field(min_length=1)
    password: str = Field(min_length=1)


class AccountResponse(CamelModel):
    """Body returned by /register, /login and /cookieLogin."""
    id: int
    email_address: str
