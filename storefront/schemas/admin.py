"""
Pydantic schemas for admin configuration and themes
"""
from pydantic import BaseModel, Field, ConfigDict
from typing import Optional, Dict, Union
from datetime import datetime

from storefront.schemas.common import RequestModel


class ConfigEntry(BaseModel):
    """One server setting"""
    value: str
    description: Optional[str] = None
    type: str


class ConfigResponse(BaseModel):
    """Server settings keyed by name"""
    config: Dict[str, ConfigEntry]


class ConfigUpdate(RequestModel):
    """Schema for updating server settings"""
    configs: Dict[str, Union[str, int, float, bool]] = Field(..., description="key -> new value")


class ThemeCreate(RequestModel):
    """Schema for creating a theme"""
    name: str = Field(..., min_length=1, max_length=100)
    slug: str = Field(..., min_length=1, max_length=100, pattern=r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
    description: Optional[str] = None
    css_variables: Dict[str, str] = Field(..., min_length=1, description="CSS custom property -> value")
    is_active: bool = True


class ThemeUpdate(RequestModel):
    """Schema for updating a theme (all fields optional)"""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    slug: Optional[str] = Field(None, min_length=1, max_length=100, pattern=r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
    description: Optional[str] = None
    css_variables: Optional[Dict[str, str]] = None
    is_active: Optional[bool] = None


class ThemeResponse(BaseModel):
    """Schema for theme response"""
    id: int
    name: str
    slug: str
    description: Optional[str]
    css_variables: Dict[str, str]
    is_active: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ThemeListResponse(BaseModel):
    """Schema for list of themes response"""
    themes: list[ThemeResponse]
