"""Category data models."""
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class CategoryCreate(BaseModel):
    """Payload sent when creating or updating a category."""
    
    name: str = Field(..., min_length=1, description="Category name")
    description: Optional[str] = Field(None, description="Optional description")


class Category(CategoryCreate):
    """Category record as returned by the API."""
    
    model_config = ConfigDict(extra="allow")
    
    id: int
