from __future__ import annotations

from pydantic import BaseModel, Field


class RegisterRequestDTO(BaseModel):
    name: str = Field("", max_length=128)
    # Presence of email/password is enforced by the registration flow.
    email: str | None = Field(None, max_length=254)
    password: str | None = Field(None, max_length=128)


class SignInRequestDTO(BaseModel):
    email: str | None = Field(None, max_length=254)
    password: str | None = Field(None, max_length=128)


class ChangePasswordRequestDTO(BaseModel):
    password: str | None = Field(None, max_length=128)


class UserPublicDTO(BaseModel):
    id: int
    name: str
    email: str


class TokenDTO(BaseModel):
    token: str


class OkDTO(BaseModel):
    ok: bool = True
