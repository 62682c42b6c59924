from pydantic import BaseModel, Field
from typing import List, Optional


# ---------- Categories ----------
class CategoryCreate(BaseModel):
    name: str = Field(..., min_length=1)
    icon: Optional[str] = None
    description: Optional[str] = None
    sort_order: Optional[int] = None


class CategoryUpdate(BaseModel):
    name: Optional[str] = None
    icon: Optional[str] = None
    description: Optional[str] = None
    sort_order: Optional[int] = None
    is_active: Optional[bool] = None


class ReorderRequest(BaseModel):
    order: List[int]


# ---------- Items ----------
class ItemBase(BaseModel):
    description: Optional[str] = None
    price: Optional[float] = None
    original_price: Optional[float] = None
    image: Optional[str] = None
    calories: Optional[int] = None
    is_vegan: bool = False
    is_vegetarian: bool = False
    is_gluten_free: bool = False
    is_spicy: bool = False
    is_bestseller: bool = False
    is_popular: bool = False
    is_new: bool = False
    is_available: bool = True
    sort_order: Optional[int] = None


class ItemCreate(ItemBase):
    name: str = Field(..., min_length=1)


class ItemUpdate(BaseModel):
    category_id: Optional[int] = None
    name: Optional[str] = None
    description: Optional[str] = None
    price: Optional[float] = None
    original_price: Optional[float] = None
    image: Optional[str] = None
    calories: Optional[int] = None
    is_vegan: Optional[bool] = None
    is_vegetarian: Optional[bool] = None
    is_gluten_free: Optional[bool] = None
    is_spicy: Optional[bool] = None
    is_bestseller: Optional[bool] = None
    is_popular: Optional[bool] = None
    is_new: Optional[bool] = None
    is_available: Optional[bool] = None
    sort_order: Optional[int] = None


class BulkItemsRequest(BaseModel):
    categoryId: int
    items: List[ItemCreate]
