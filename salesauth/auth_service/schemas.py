from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from typing import Optional


# Request fields are optional so that missing values reach the service
# and come back as a 400 with the usual error body.
class UserCreate(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    role: Optional[str] = None


class UserLogin(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class RefreshRequest(BaseModel):
    refresh_token: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("refreshToken", "refresh_token"),
    )


class UserResponse(BaseModel):
    id: str
    name: str
    email: str
    role: str

    model_config = ConfigDict(from_attributes=True)


class AuthResponse(BaseModel):
    success: bool = True
    token: str
    refresh_token: str = Field(serialization_alias="refreshToken")
    user: UserResponse


class RefreshResponse(BaseModel):
    success: bool = True
    token: str


class CurrentUserResponse(BaseModel):
    success: bool = True
    user: UserResponse


class ErrorResponse(BaseModel):
    success: bool = False
    message: str
