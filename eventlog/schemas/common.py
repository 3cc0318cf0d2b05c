"""
Common Pydantic schemas
"""

from typing import Any, Optional
from pydantic import BaseModel

class Notification(BaseModel):
    """User-visible outcome of a screen action"""
    success: bool
    message: str
    error_code: Optional[str] = None
    details: Optional[Any] = None
