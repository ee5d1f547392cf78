from pydantic import BaseModel, EmailStr, Field, ConfigDict, field_validator
from typing import Optional
from datetime import datetime
from app.models.person import PersonType, PersonStatus


class PersonBase(BaseModel):
    """Base schema for Person with common fields"""
    type: PersonType = Field(..., description="student, staff or visitor")
    full_name_en: str = Field(..., min_length=1, max_length=255, description="Full name in English")
    full_name_ar: Optional[str] = Field(None, max_length=255, description="Full name in Arabic")
    national_id: Optional[str] = Field(None, max_length=50)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=30)
    college_id: Optional[int] = None
    department_id: Optional[int] = None
    program_id: Optional[int] = None
    level_id: Optional[int] = None
    position: Optional[str] = Field(None, max_length=255, description="Job title (staff)")
    photo_url: Optional[str] = Field(None, max_length=1000)
    status: PersonStatus = Field(default=PersonStatus.ACTIVE)


class PersonCreate(PersonBase):
    """Schema for creating a person; university_id is generated when omitted"""
    university_id: Optional[str] = Field(None, max_length=50, description="University ID, auto-generated if empty")


class PersonBulkItem(PersonBase):
    """Schema for one row of a bulk import; rows must carry their own ID"""
    university_id: str = Field(..., min_length=1, max_length=50)


class PersonUpdate(BaseModel):
    """Schema for partially updating a person"""
    type: Optional[PersonType] = None
    university_id: Optional[str] = Field(None, min_length=1, max_length=50)
    full_name_en: Optional[str] = Field(None, min_length=1, max_length=255)
    full_name_ar: Optional[str] = Field(None, max_length=255)
    national_id: Optional[str] = Field(None, max_length=50)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=30)
    college_id: Optional[int] = None
    department_id: Optional[int] = None
    program_id: Optional[int] = None
    level_id: Optional[int] = None
    position: Optional[str] = Field(None, max_length=255)
    photo_url: Optional[str] = Field(None, max_length=1000)
    status: Optional[PersonStatus] = None

    @field_validator('type', 'university_id', 'full_name_en', 'status')
    @classmethod
    def reject_null(cls, v):
        # Omit a field to leave it unchanged; these columns cannot be cleared
        if v is None:
            raise ValueError("Field cannot be null")
        return v


class PersonResponse(PersonBase):
    """Schema for person response"""
    id: int
    university_id: str
    email: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
