"""
Setlist Studio Common Schemas
공통 스키마
"""

from typing import Optional
from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """에러 응답 (FastAPI HTTPException detail 형식)"""
    detail: Optional[str] = None
