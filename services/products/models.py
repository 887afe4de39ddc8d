"""
Product models.
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class ProductInput(BaseModel):
    """Body of POST /products."""

    name: str
    description: Optional[str] = None
    price: float = Field(default=0.0, ge=0)
    category: Optional[str] = None

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Product name cannot be blank")
        return value


class Product(ProductInput):
    id: str
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> dict:
        data = {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "price": self.price,
            "category": self.category,
            "createdAt": self.created_at.isoformat(),
        }
        return {k: v for k, v in data.items() if v is not None}
