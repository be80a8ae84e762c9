"""
Shared response envelopes.
Every failure from this API is wrapped in ErrorResponse.
"""

from __future__ import annotations

from typing import Optional
from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Standard error envelope."""
    status: str = "error"
    message: str
    detail: Optional[str] = None
