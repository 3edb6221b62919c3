"""Pydantic request/response schemas for dt_gateway.

All responses are wrapped in ApiResponse at the router layer.
"""

from pydantic import BaseModel, EmailStr, Field, field_validator


class RegisterRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=500)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Name must not be blank")
        return v


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class RegisterResponse(BaseModel):
    message: str = "User created successfully"


class LoginResponse(BaseModel):
    token: str
    email: str
    user: str  # display name
    token_type: str = "Bearer"
    expires_in: int = 3600  # seconds
