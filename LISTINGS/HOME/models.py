from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator, model_serializer

from LISTINGS.core.errors import FieldError


class Category(str, Enum):
    food = "food"
    house = "house"
    market = "market"


# ---------------------------
# Listing document (one shape for all categories)
# ---------------------------
class Listing(BaseModel):
    id: Optional[str] = None  # Firestore document ID
    category: Category
    title: str
    image: str = ""
    location: str

    # House only
    rent: Optional[float] = None
    # Market only
    price: Optional[float] = None

    # Kept as submitted; validated as parseable floats
    latitude: str
    longitude: str
    description: str

    created_at: Optional[datetime] = None

    class Config:
        extra = "ignore"

    @field_validator("latitude", "longitude", mode="before")
    def coordinates_as_text(cls, v):
        # older documents may hold plain numbers
        if isinstance(v, (int, float)):
            return str(v)
        return v

    @model_serializer(mode="wrap")
    def only_category_fields(self, handler):
        # rent belongs to houses, price to markets
        data = handler(self)
        if self.category != Category.house:
            data.pop("rent", None)
        if self.category != Category.market:
            data.pop("price", None)
        return data

    def to_document(self) -> dict:
        """Fields written to the store for this listing's category."""
        return self.model_dump(exclude={"id", "category", "created_at"})


# ---------------------------
# Responses
# ---------------------------
class SearchPage(BaseModel):
    cards: List[Listing]
    query: str
    selectedType: Category
    searchAction: str
    imagepath: str
    domain: Optional[str] = None


class FormPage(BaseModel):
    routeName: Category
    fields: List[str]
    errors: List[FieldError] = Field(default_factory=list)


class LandingPage(BaseModel):
    searchAction: str
    selectedType: str
    query: str
    categories: List[Category]
