from pydantic import BaseModel, Field
from typing import List


class ValidationReport(BaseModel):
    """Completeness report for a person or card"""
    has_photo: bool
    has_name: bool
    has_valid_id: bool
    has_valid_expiry: bool
    has_department: bool
    is_complete: bool = Field(..., description="True when there are no errors; warnings do not count")
    errors: List[str] = Field(default_factory=list, description="Blocking problems")
    warnings: List[str] = Field(default_factory=list, description="Non-blocking notes")
