from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import List, Optional
from datetime import datetime
from urllib.parse import urlparse

class BrandLogo(BaseModel):
    url: str
    alt: Optional[str] = None

def _validate_website(v: Optional[str]) -> Optional[str]:
    if not v:
        return None
    parsed = urlparse(v)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValueError("Invalid website URL (example: https://example.com)")
    return v

class BrandBase(BaseModel):
    name: str
    description: Optional[str] = None
    logo: Optional[BrandLogo] = None
    website: Optional[str] = None
    countries: List[str]
    status: bool = True
    order: int = 0

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("Brand name is required")
        return v

    @field_validator("website")
    @classmethod
    def website_url(cls, v):
        return _validate_website(v)

    @field_validator("countries")
    @classmethod
    def at_least_one_country(cls, v):
        if not v:
            raise ValueError("At least one country must be selected")
        return v

class BrandCreate(BrandBase):
    pass

class BrandUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    logo: Optional[BrandLogo] = None
    website: Optional[str] = None
    countries: Optional[List[str]] = None
    status: Optional[bool] = None
    order: Optional[int] = None

    @field_validator("website")
    @classmethod
    def website_url(cls, v):
        return _validate_website(v)

    @field_validator("countries")
    @classmethod
    def at_least_one_country(cls, v):
        if v is not None and not v:
            raise ValueError("At least one country must be selected")
        return v

class Brand(BaseModel):
    id: int
    name: str
    slug: str
    description: Optional[str] = None
    logo: Optional[BrandLogo] = None
    website: Optional[str] = None
    countries: List[str] = Field(default_factory=list)
    status: bool = True
    order: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
