# ============================================================================
# FILE: vibeshare/schemas/common.py
# ============================================================================
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import Generic, Optional, TypeVar

T = TypeVar("T")

class CamelModel(BaseModel):
    """Base schema: snake_case in Python, camelCase on the wire"""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

class Pagination(CamelModel):
    page: int
    limit: int
    total: int
    pages: int
    
    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "Pagination":
        return cls(page=page, limit=limit, total=total, pages=(total + limit - 1) // limit)

class ApiResponse(CamelModel, Generic[T]):
    """Envelope shared by every endpoint"""
    success: bool = True
    data: Optional[T] = None
    message: Optional[str] = None
