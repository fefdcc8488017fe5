"""
Shared result shapes returned across the service boundary.
"""
from typing import Optional
from pydantic import BaseModel


class OperationResult(BaseModel):
    """Outcome of a mutating call. Failures carry a user-facing message."""
    success: bool
    error: Optional[str] = None

    @classmethod
    def failure(cls, error: str):
        return cls(success=False, error=error)
