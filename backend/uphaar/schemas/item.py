"""
Uphaar Backend: Item Request Schemas
====================================

What:  Pydantic models validating item request bodies.
How:   Python attribute names are snake_case; the wire names are the camelCase
       fields the web client sends (imageUrls, isFree, contactPhone, ...).
       Unknown fields are ignored, so a client cannot set server-owned fields
       such as userId, claimCount or createdAt through the body.
Who:   ItemHandlers via routes.common.parse_body(); ItemService receives the
       validated model and writes model_dump(by_alias=True) to the store.
"""

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

ItemCondition = Literal["new", "like-new", "good", "fair", "poor"]


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        str_strip_whitespace=True,
        allow_inf_nan=False,
    )


class ItemCreate(CamelModel):
    """Body of POST /items."""

    title: str = Field(min_length=1, max_length=200)
    description: str = Field(min_length=1, max_length=5000)
    category: str = Field(min_length=1, max_length=100)
    condition: ItemCondition
    location: str = Field(min_length=1, max_length=200)
    image_urls: List[str] = Field(default_factory=list, max_length=10)
    is_free: bool = True
    price: float = Field(default=0, ge=0)
    contact_phone: Optional[str] = Field(default=None, max_length=50)
    contact_email: Optional[str] = Field(default=None, max_length=200)


class ItemUpdate(CamelModel):
    """
    Body of PUT /items/:id.

    Every field is optional; only the fields present in the body are written
    (model_dump(exclude_unset=True)).
    """

    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, min_length=1, max_length=5000)
    category: Optional[str] = Field(default=None, min_length=1, max_length=100)
    condition: Optional[ItemCondition] = None
    location: Optional[str] = Field(default=None, min_length=1, max_length=200)
    image_urls: Optional[List[str]] = Field(default=None, max_length=10)
    is_free: Optional[bool] = None
    price: Optional[float] = Field(default=None, ge=0)
    contact_phone: Optional[str] = Field(default=None, max_length=50)
    contact_email: Optional[str] = Field(default=None, max_length=200)
    is_available: Optional[bool] = None


class CompleteItemRequest(CamelModel):
    """Optional body of POST /items/:id/complete naming who received the item."""

    claimed_by_user_id: Optional[str] = None
