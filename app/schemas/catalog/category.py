from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Any, List, Optional
from datetime import datetime
from app.core.config import settings

def normalize_parent_id(value: Any) -> Any:
    """Map the "no parent" spellings sent by the dashboard to None"""
    if value is None:
        return None
    if isinstance(value, str):
        stripped = value.strip()
        if stripped == "" or stripped.lower() in (settings.CATEGORY_PARENT_NONE_SENTINEL, "null"):
            return None
        return stripped
    return value

class CategoryBase(BaseModel):
    name: str
    description: Optional[str] = None
    parent_id: Optional[int] = None
    image: Optional[str] = None
    is_active: bool = True

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("Category name is required")
        return v

    @field_validator("parent_id", mode="before")
    @classmethod
    def parent_sentinel(cls, v):
        return normalize_parent_id(v)

class CategoryCreate(CategoryBase):
    pass

class CategoryUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    parent_id: Optional[int] = None
    image: Optional[str] = None
    is_active: Optional[bool] = None

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v):
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("Category name cannot be empty")
        return v

    @field_validator("parent_id", mode="before")
    @classmethod
    def parent_sentinel(cls, v):
        return normalize_parent_id(v)

class Category(BaseModel):
    id: int
    name: str
    slug: str
    description: Optional[str] = None
    image: Optional[str] = None
    parent_id: Optional[int] = None
    children: List[int] = Field(default_factory=list)
    is_active: bool = True
    is_main_category: bool = True
    version: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    created_by: Optional[int] = None
    updated_by: Optional[int] = None

    model_config = ConfigDict(from_attributes=True)

class CategoryTableRow(Category):
    subcategories_count: int = 0
    products_count: int = 0

class CategoryTree(BaseModel):
    categories: List[Category]
    total: int

class CategoryDeleteResponse(BaseModel):
    message: str
    deleted_count: int
    deleted_ids: List[int]
    unassigned_products: int = 0

class MirrorMismatch(BaseModel):
    category_id: int
    stored_children: List[int]
    expected_children: List[int]

class HierarchyIntegrityReport(BaseModel):
    consistent: bool
    mismatches: List[MirrorMismatch] = Field(default_factory=list)
    dangling_parent_ids: List[int] = Field(default_factory=list)

class HierarchyRepairResult(BaseModel):
    repaired_count: int
    report: HierarchyIntegrityReport
