from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Enum as SQLEnum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.core.database import Base
import enum


class PersonType(str, enum.Enum):
    """Kind of person a card can be issued to"""
    STUDENT = "student"
    STAFF = "staff"
    VISITOR = "visitor"


class PersonStatus(str, enum.Enum):
    """Enum for person status"""
    ACTIVE = "active"
    SUSPENDED = "suspended"
    EXPIRED = "expired"


class Person(Base):
    """
    Person model for students, staff members and visitors.
    """
    __tablename__ = "persons"

    id = Column(Integer, primary_key=True, index=True)
    type = Column(SQLEnum(PersonType, values_callable=lambda e: [m.value for m in e], native_enum=False), nullable=False, index=True)
    university_id = Column(String(50), unique=True, index=True, nullable=False)
    national_id = Column(String(50), nullable=True)
    full_name_en = Column(String(255), nullable=False, index=True)
    full_name_ar = Column(String(255), nullable=True)
    email = Column(String(255), nullable=True)
    phone = Column(String(30), nullable=True)

    # Organizational links
    college_id = Column(Integer, ForeignKey("colleges.id"), nullable=True, index=True)
    department_id = Column(Integer, ForeignKey("departments.id"), nullable=True, index=True)
    program_id = Column(Integer, ForeignKey("programs.id"), nullable=True)
    level_id = Column(Integer, ForeignKey("levels.id"), nullable=True)

    position = Column(String(255), nullable=True)  # Staff job title
    photo_url = Column(String(1000), nullable=True)
    status = Column(SQLEnum(PersonStatus, values_callable=lambda e: [m.value for m in e], native_enum=False), default=PersonStatus.ACTIVE, nullable=False)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    cards = relationship("Card", back_populates="person", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Person(id={self.id}, university_id='{self.university_id}', type='{self.type}')>"
