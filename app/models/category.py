"""
Suggestion categories and subcategories.
Both are soft-deleted through ``is_active``.
"""

from datetime import datetime
from typing import List, Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, Relationship, SQLModel

from app.models.base import utc_now


class Category(SQLModel, table=True):
    __tablename__ = "categories"  # type: ignore

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(unique=True, index=True, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    icon: Optional[str] = Field(default=None, max_length=50)
    color: str = Field(default="ghost", max_length=20)
    is_active: bool = Field(default=True, index=True)
    order: int = Field(default=0)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    subcategories: List["Subcategory"] = Relationship(back_populates="category")


class Subcategory(SQLModel, table=True):
    """Subcategory names are unique within their category only."""

    __tablename__ = "subcategories"  # type: ignore
    __table_args__ = (UniqueConstraint("category_id", "name", name="uq_subcategory_name"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(index=True, max_length=100)
    category_id: int = Field(foreign_key="categories.id", index=True)
    description: Optional[str] = Field(default=None, max_length=500)
    is_active: bool = Field(default=True, index=True)
    order: int = Field(default=0)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    category: Optional[Category] = Relationship(back_populates="subcategories")
