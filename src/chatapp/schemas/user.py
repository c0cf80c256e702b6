"""User-related Pydantic schemas."""

from typing import Any

from pydantic import BaseModel, ConfigDict, EmailStr, Field, model_validator

from .common import ImageFile


class RegisterRequest(BaseModel):
    """Schema for account registration (multipart form)."""

    name: str = Field(..., min_length=2, max_length=30)
    username: str = Field(..., min_length=3, max_length=30)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=72)
    profile_picture: ImageFile = None


class LoginRequest(BaseModel):
    """Schema for login submissions. Username wins when both are given."""

    username: str | None = Field(None, min_length=3, max_length=30)
    email: EmailStr | None = None
    password: str = Field(..., min_length=6, max_length=72)

    @model_validator(mode="after")
    def require_identifier(self) -> "LoginRequest":
        if not self.username and not self.email:
            raise ValueError("Either username or email must be provided")
        return self


class UpdateUserRequest(BaseModel):
    """Schema for partial profile updates; at least one field is required."""

    name: str | None = Field(None, min_length=2, max_length=30)
    username: str | None = Field(None, min_length=3, max_length=30)
    email: EmailStr | None = None
    profile_picture: ImageFile = None

    @model_validator(mode="after")
    def require_any_field(self) -> "UpdateUserRequest":
        if not (self.name or self.username or self.email or self.profile_picture):
            raise ValueError("At least one field must be provided.")
        return self

    def changes(self) -> dict[str, Any]:
        """Return the plain column updates (the picture is uploaded separately)."""
        return {
            key: value
            for key, value in (
                ("name", self.name),
                ("username", self.username),
                ("email", self.email),
            )
            if value
        }


class RegisterData(BaseModel):
    id: str


class RegisterResponse(BaseModel):
    """Registration response carrying only the new user id."""

    success: bool = True
    message: str = "User registered successfully."
    data: RegisterData


class LoginResponse(BaseModel):
    """Response returned after successful login; the token travels as a cookie."""

    status: bool = True
    message: str = "Login successful."

    model_config = ConfigDict(from_attributes=True)


__all__ = [
    "LoginRequest",
    "LoginResponse",
    "RegisterData",
    "RegisterRequest",
    "RegisterResponse",
    "UpdateUserRequest",
]
