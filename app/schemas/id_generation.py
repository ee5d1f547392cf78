from pydantic import BaseModel, Field
from typing import Optional
from app.models.person import PersonType


class GenerateIdRequest(BaseModel):
    """Schema for requesting a new university ID"""
    type: PersonType = Field(..., description="student, staff or visitor")
    college_code: Optional[str] = Field(None, max_length=20, description="College code, used as prefix for students")


class GenerateIdResponse(BaseModel):
    university_id: str = Field(..., description="Generated ID, e.g. ENG-2024-00001")
