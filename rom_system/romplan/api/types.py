"""
API request and response schemas.
What it defines:
- Input payloads
- Response formats
- Validation rules

And, the main purpose:
Ensure structured communication between client and server.
"""


from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class CreatePlanRequest(BaseModel):
    user_id: str = Field(..., description="Your app user identifier")
    need: str
    file_url: Optional[str] = None


class UpdatePlanRequest(BaseModel):
    user_id: str
    plan: Dict[str, Any]
