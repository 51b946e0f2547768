"""
Pydantic request bodies for the HTTP API.
"""

from pydantic import BaseModel
from typing import Optional


class ClassifyRequest(BaseModel):
    """Email fields needed for classification."""
    sender: Optional[str] = None
    subject: Optional[str] = None
    body: str = ""
