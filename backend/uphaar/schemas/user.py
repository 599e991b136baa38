"""Request bodies for the user and auth routes."""

from typing import Optional

from pydantic import Field

from uphaar.schemas.item import CamelModel


class ProfileUpdate(CamelModel):
    """Body of PUT /users/profile; only fields present in the body are written."""

    display_name: Optional[str] = Field(default=None, max_length=100)
    photo_url: Optional[str] = Field(default=None, alias="photoURL", max_length=2000)
    phone: Optional[str] = Field(default=None, max_length=50)
    address: Optional[str] = Field(default=None, max_length=500)
    bio: Optional[str] = Field(default=None, max_length=1000)
    location: Optional[str] = Field(default=None, max_length=200)


class TokenVerifyRequest(CamelModel):
    """Body of POST /auth/verify."""

    id_token: str = Field(min_length=1)
