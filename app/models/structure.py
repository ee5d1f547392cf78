"""
University structure models: colleges, departments, programs and levels.
"""
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.core.database import Base


class College(Base):
    __tablename__ = "colleges"

    id = Column(Integer, primary_key=True, index=True)
    name_en = Column(String(255), nullable=False)
    name_ar = Column(String(255), nullable=False)
    code = Column(String(20), unique=True, index=True, nullable=False)  # Also used as the student ID prefix
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    departments = relationship("Department", back_populates="college")

    def __repr__(self):
        return f"<College(id={self.id}, code='{self.code}')>"


class Department(Base):
    __tablename__ = "departments"

    id = Column(Integer, primary_key=True, index=True)
    college_id = Column(Integer, ForeignKey("colleges.id"), nullable=False, index=True)
    name_en = Column(String(255), nullable=False)
    name_ar = Column(String(255), nullable=False)
    code = Column(String(20), unique=True, index=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    college = relationship("College", back_populates="departments")
    programs = relationship("Program", back_populates="department")

    def __repr__(self):
        return f"<Department(id={self.id}, code='{self.code}', college_id={self.college_id})>"


class Program(Base):
    __tablename__ = "programs"

    id = Column(Integer, primary_key=True, index=True)
    department_id = Column(Integer, ForeignKey("departments.id"), nullable=False, index=True)
    name_en = Column(String(255), nullable=False)
    name_ar = Column(String(255), nullable=False)
    code = Column(String(20), unique=True, index=True, nullable=False)
    duration_years = Column(Integer, default=4, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    department = relationship("Department", back_populates="programs")

    def __repr__(self):
        return f"<Program(id={self.id}, code='{self.code}', department_id={self.department_id})>"


class Level(Base):
    __tablename__ = "levels"

    id = Column(Integer, primary_key=True, index=True)
    name_en = Column(String(255), nullable=False)
    name_ar = Column(String(255), nullable=False)
    order = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<Level(id={self.id}, order={self.order})>"
