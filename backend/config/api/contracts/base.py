"""
Shared API contracts.
"""
from typing import Any, Dict, Optional

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Body of every non-2xx response."""
    error: str
    code: str
    details: Optional[Dict[str, Any]] = None
