from typing import Optional
from pydantic import BaseModel, Field, field_validator


class RegisterRequest(BaseModel):
    username: str = Field(min_length=3, max_length=50)
    email: str = Field(max_length=255)
    password: str = Field(min_length=6, max_length=100)

    @field_validator("email")
    @classmethod
    def check_email(cls, value: str) -> str:
        local, _, domain = value.partition("@")
        if not local or not domain:
            raise ValueError("Email format is invalid")
        return value

class LoginRequest(BaseModel):
    username: str
    password: str

class RegisterResponse(BaseModel):
    success: bool
    message: str
    username: Optional[str] = None

class LoginResponse(BaseModel):
    success: bool
    message: str
    username: str
    userId: int
    token: str

class AuthFailure(BaseModel):
    success: bool = False
    message: str
