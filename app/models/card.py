from sqlalchemy import Column, Integer, String, Date, DateTime, ForeignKey, Enum as SQLEnum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.core.database import Base
from app.models.person import PersonType
import enum


class CardStatus(str, enum.Enum):
    """Enum for card lifecycle status"""
    ACTIVE = "active"
    EXPIRED = "expired"
    SUSPENDED = "suspended"
    REVOKED = "revoked"


class Card(Base):
    """
    Card model for issued ID badges.

    A card may be linked to a Person but also carries its own printable fields
    (name, id_number, department, ...) so it can be issued standalone, e.g. from
    a bulk CSV import.
    """
    __tablename__ = "cards"

    id = Column(Integer, primary_key=True, index=True)
    person_id = Column(Integer, ForeignKey("persons.id", ondelete="CASCADE"), nullable=True, index=True)
    card_number = Column(String(100), nullable=True)
    issue_date = Column(Date, nullable=True)
    expiry_date = Column(Date, nullable=True)
    status = Column(SQLEnum(CardStatus, values_callable=lambda e: [m.value for m in e], native_enum=False), default=CardStatus.ACTIVE, nullable=False)
    print_count = Column(Integer, default=0, nullable=False)
    last_printed_at = Column(DateTime(timezone=True), nullable=True)

    # Printable fields
    name = Column(String(255), nullable=False)
    id_number = Column(String(50), unique=True, index=True, nullable=False)
    type = Column(SQLEnum(PersonType, values_callable=lambda e: [m.value for m in e], native_enum=False), nullable=False, index=True)
    department = Column(String(255), nullable=False)
    program = Column(String(255), nullable=True)
    year = Column(String(20), nullable=True)
    photo_url = Column(String(1000), nullable=True)
    email = Column(String(255), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    person = relationship("Person", back_populates="cards")

    def __repr__(self):
        return f"<Card(id={self.id}, id_number='{self.id_number}', status='{self.status}')>"
