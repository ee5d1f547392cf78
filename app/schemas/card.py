from pydantic import BaseModel, EmailStr, Field, ConfigDict, field_validator
from typing import Optional
from datetime import date, datetime
from app.models.card import CardStatus
from app.models.person import PersonType


class CardBase(BaseModel):
    """Base schema for Card with common fields"""
    person_id: Optional[int] = Field(None, description="Person the card is issued to")
    card_number: Optional[str] = Field(None, max_length=100)
    issue_date: Optional[date] = None
    expiry_date: Optional[date] = None
    status: CardStatus = Field(default=CardStatus.ACTIVE)

    name: str = Field(..., min_length=1, max_length=255, description="Name printed on the card")
    id_number: str = Field(..., min_length=1, max_length=50, description="Unique ID number printed on the card")
    type: PersonType = Field(..., description="student, staff or visitor")
    department: str = Field(..., max_length=255)
    program: Optional[str] = Field(None, max_length=255)
    year: Optional[str] = Field(None, max_length=20)
    photo_url: Optional[str] = Field(None, max_length=1000)
    email: Optional[EmailStr] = None


class CardCreate(CardBase):
    """Schema for creating a new card"""
    pass


class CardUpdate(BaseModel):
    """Schema for updating card information"""
    person_id: Optional[int] = None
    card_number: Optional[str] = Field(None, max_length=100)
    issue_date: Optional[date] = None
    expiry_date: Optional[date] = None
    status: Optional[CardStatus] = None
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    id_number: Optional[str] = Field(None, min_length=1, max_length=50)
    type: Optional[PersonType] = None
    department: Optional[str] = Field(None, max_length=255)
    program: Optional[str] = Field(None, max_length=255)
    year: Optional[str] = Field(None, max_length=20)
    photo_url: Optional[str] = Field(None, max_length=1000)
    email: Optional[EmailStr] = None

    @field_validator('status', 'name', 'id_number', 'type', 'department')
    @classmethod
    def reject_null(cls, v):
        # Omit a field to leave it unchanged; these columns cannot be cleared
        if v is None:
            raise ValueError("Field cannot be null")
        return v


class CardResponse(CardBase):
    """Schema for card response"""
    id: int
    email: Optional[str] = None
    print_count: int
    last_printed_at: Optional[datetime] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
