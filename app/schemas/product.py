"""Product schemas for API requests and responses."""
from datetime import datetime
from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class ProductBase(BaseModel):
    """Fields a client sends when creating or replacing a product."""

    name: str = Field(
        ..., min_length=1, max_length=255, description="The Product name",
        examples=["Monitor Curvo 49 pulgadas"],
    )
    price: float = Field(
        ..., gt=0, allow_inf_nan=False, description="The Product price",
        examples=[300],
    )
    availability: bool = Field(
        ..., description="The Product availability", examples=[True]
    )

    @field_validator("price", mode="before")
    @classmethod
    def price_not_boolean(cls, value):
        # Lax float parsing turns true into 1.0
        if isinstance(value, bool):
            raise ValueError("price must be a number")
        return value


class ProductCreate(ProductBase):
    """Schema for creating a new product."""

    pass


class ProductUpdate(ProductBase):
    """Schema for replacing a product's fields (same contract as create)."""

    pass


class ProductSummary(ProductBase):
    """Product as returned by read endpoints, without ``updatedAt``."""

    model_config = ConfigDict(
        from_attributes=True, alias_generator=to_camel, populate_by_name=True
    )

    id: int = Field(..., description="The Product ID", examples=[1])
    created_at: datetime


class ProductResponse(ProductSummary):
    """Full product record."""

    updated_at: datetime


class ProductListResponse(BaseModel):
    data: List[ProductSummary]


class ProductDataResponse(BaseModel):
    data: ProductResponse


class ProductSummaryDataResponse(BaseModel):
    data: ProductSummary


class ProductMessageResponse(BaseModel):
    msg: str
    data: ProductResponse
